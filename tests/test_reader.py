"""
Tests for reading and schema validation of definition files
"""

import pytest
from jsonschema import Draft7Validator

from check_catalogue.catalogue.reader import read_input, read_input_from_string
from check_catalogue.exceptions import DecodeError, MalformedDocumentError, SchemaValidationError
from check_catalogue.models.input import Input
from check_catalogue.models.json_schema_loader import SchemaDocument
from check_catalogue.models.parsing.yaml_parser import yaml_parser

from conftest import TEMPLATE_YAML, WORKFLOW_YAML


INVALID_YAML = """\
id: 12
info:
  name: x
severity: high
http:
  - method: GET
    path: ["/"]
"""


class TestReadInput:

    def test_reads_template_definition(self, schema, write_definition):
        path = write_definition("t1.yaml", TEMPLATE_YAML)

        definition = read_input(path, schema)

        assert isinstance(definition, Input)
        assert definition.id == "t1"
        assert definition.info.name == "x"
        assert definition.info.author == "y"
        assert definition.info.severity == "info"
        assert len(definition.template.http) == 1
        request = definition.template.http[0]
        assert request.method == "GET"
        assert request.path == ("{{BaseURL}}/",)
        assert request.matchers[0].status == (200,)
        assert definition.workflow.is_empty()

    def test_reads_workflow_definition(self, schema, write_definition):
        path = write_definition("w1.yaml", WORKFLOW_YAML)

        definition = read_input(path, schema)

        assert definition.id == "w1"
        assert definition.template.is_empty()
        assert [step.template for step in definition.workflow.logic] == ["t1.yaml"]

    def test_missing_file_raises_os_error(self, schema, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_input(tmp_path / "missing.yaml", schema)

    def test_directory_raises_os_error(self, schema, tmp_path):
        with pytest.raises(OSError):
            read_input(tmp_path, schema)

    def test_malformed_yaml_fails_before_schema_check(self, schema, write_definition):
        path = write_definition("broken.yaml", "id: [unclosed\ninfo: {")

        with pytest.raises(MalformedDocumentError) as exc:
            read_input(path, schema)

        assert exc.value.__cause__ is not None

    def test_schema_violations_report_count_and_first_message(self, schema, write_definition):
        path = write_definition("invalid.yaml", INVALID_YAML)

        with pytest.raises(SchemaValidationError) as exc:
            read_input(path, schema)

        data = yaml_parser.parse(INVALID_YAML)
        expected = list(Draft7Validator(dict(schema.schema)).iter_errors(data))

        error = exc.value
        assert error.error_count == len(expected) == 4
        assert error.first_issue.message == expected[0].message
        assert str(error).startswith("4 errors in definition")
        assert expected[0].message in str(error)
        assert "'severity' was unexpected" in error.first_issue.message

    def test_schema_violation_carries_source_location(self, schema, write_definition):
        content = TEMPLATE_YAML.replace("severity: info", "severity: urgent")
        path = write_definition("bad_severity.yaml", content)

        with pytest.raises(SchemaValidationError) as exc:
            read_input(path, schema)

        issue = exc.value.first_issue
        assert exc.value.error_count == 1
        assert issue.yaml_path == "/info/severity"
        assert issue.line == 5

    def test_empty_document_is_a_schema_violation(self, schema, write_definition):
        path = write_definition("empty.yaml", "")

        with pytest.raises(SchemaValidationError) as exc:
            read_input(path, schema)

        assert exc.value.error_count == 1
        assert "is not of type 'object'" in exc.value.first_issue.message

    def test_definition_without_requests_or_logic_fails_schema(self, schema):
        content = "id: t1\ninfo:\n  name: x\n  author: y\n  severity: info\nhttp: []\n"

        with pytest.raises(SchemaValidationError):
            read_input_from_string(content, schema)

    def test_decode_failure_after_permissive_schema(self):
        permissive = SchemaDocument(schema={})
        content = TEMPLATE_YAML.replace("method: GET", "method: 5")

        with pytest.raises(DecodeError) as exc:
            read_input_from_string(content, permissive)

        assert exc.value.yaml_path == "/http/0/method"

    def test_tags_accept_comma_separated_string(self, schema):
        content = TEMPLATE_YAML.replace("severity: info", "severity: info\n  tags: dns, cve")

        definition = read_input_from_string(content, schema)

        assert definition.info.tags == ("dns", "cve")

    def test_reading_twice_returns_independent_inputs(self, schema, write_definition):
        path = write_definition("t1.yaml", TEMPLATE_YAML)

        first = read_input(path, schema)
        second = read_input(path, schema)

        assert first == second
        assert first is not second
