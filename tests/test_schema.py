"""
Tests for schema loading, generic YAML parsing and source locations
"""

import json
from pathlib import Path

import pytest

from check_catalogue.exceptions import MalformedDocumentError
from check_catalogue.file_io.source_location import SourceLocation, format_source, lookup_source
from check_catalogue.models.json_schema_loader import DEFAULT_SCHEMA_PATH, SchemaDocument
from check_catalogue.models.parsing.yaml_parser import yaml_parser

from conftest import TEMPLATE_YAML, WORKFLOW_YAML


class TestSchemaDocument:

    def test_bundled_schema_is_loaded(self, schema):
        assert schema.source == str(DEFAULT_SCHEMA_PATH)
        assert schema.schema["required"] == ["id", "info"]

    def test_schema_document_is_read_only(self, schema):
        with pytest.raises(TypeError):
            schema.schema["required"] = []

    def test_caller_mutation_does_not_leak_into_document(self):
        raw = {"type": "object", "required": ["id"]}
        document = SchemaDocument(schema=raw)

        raw["required"].append("info")

        assert document.schema["required"] == ["id"]
        assert document.validate({"id": "x"}) == []

    def test_valid_documents_have_no_issues(self, schema):
        assert schema.validate(yaml_parser.parse(TEMPLATE_YAML)) == []
        assert schema.validate(yaml_parser.parse(WORKFLOW_YAML)) == []

    def test_issue_paths_are_json_pointers(self, schema):
        data = yaml_parser.parse(TEMPLATE_YAML.replace("- 200", "- ok"))

        issues = schema.validate(data)

        assert [i.yaml_path for i in issues] == ["/http/0/matchers/0/status/0"]

    def test_missing_schema_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SchemaDocument.load(tmp_path / "missing.json")

    def test_invalid_json_schema_file(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            SchemaDocument.load(path)

    def test_invalid_schema_is_rejected(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"type": "no-such-type"}), encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid definition schema"):
            SchemaDocument.load(path)


class TestYamlParser:

    def test_parse_bytes(self):
        assert yaml_parser.parse(b"id: t1\n") == {"id": "t1"}

    def test_parse_error(self):
        with pytest.raises(MalformedDocumentError, match="broken.yaml"):
            yaml_parser.parse("a: [1, 2", source="broken.yaml")

    def test_deep_nesting_is_a_malformed_document(self):
        content = "a: " + "[" * 3000 + "]" * 3000 + "\n"

        with pytest.raises(MalformedDocumentError, match="nesting is too deep"):
            yaml_parser.parse(content, source="deep.yaml")
        assert yaml_parser.build_source_map(content) == {}

    def test_source_map_lines(self):
        _, source_map = yaml_parser.parse_with_source(TEMPLATE_YAML)

        assert source_map["/id"] == {"line": 1, "column": 5}
        assert source_map["/info/severity"]["line"] == 5
        assert source_map["/http/0/matchers/0/status/0"]["line"] == 14

    def test_source_map_escapes_keys(self):
        source_map = yaml_parser.build_source_map("a/b:\n  c~d: 1\n")

        assert "/a~1b/c~0d" in source_map


class TestSourceLocation:

    def test_lookup_falls_back_to_parent(self):
        source_map = {"/info": {"line": 2, "column": 1}}

        loc = lookup_source(source_map, "/info/author")

        assert loc.line == 2
        assert loc.yaml_path == "/info/author"

    def test_lookup_without_map(self):
        assert lookup_source(None, "/id") == SourceLocation(yaml_path="/id")

    def test_format_source(self):
        loc = SourceLocation(file_path=Path("/nowhere/t1.yaml"), yaml_path="/id", line=1, column=5)

        assert format_source(loc) == " (source= /nowhere/t1.yaml:1:5  yaml_path=/id)"
        assert format_source(None) == ""
