"""
Tests for the filesystem catalogue collaborator
"""

import logging
import threading

import pytest

from check_catalogue.catalogue.catalogue import Catalogue
from check_catalogue.exceptions import (
    MalformedDocumentError,
    ResolutionError,
    SchemaValidationError,
    WorkflowCompilationError,
)
from check_catalogue.models.input import InputType

from conftest import TEMPLATE_YAML, WORKFLOW_YAML


@pytest.fixture
def catalogue(schema, tmp_path):
    return Catalogue(tmp_path, schema)


class TestResolvePath:

    def test_relative_to_referring_file(self, catalogue, write_definition, tmp_path):
        target = write_definition("workflows/t1.yaml", TEMPLATE_YAML)

        resolved = catalogue.resolve_path("t1.yaml", str(tmp_path / "workflows" / "w1.yaml"))

        assert resolved == str(target)

    def test_falls_back_to_catalogue_directory(self, catalogue, write_definition, tmp_path):
        target = write_definition("t1.yaml", TEMPLATE_YAML)

        resolved = catalogue.resolve_path("t1.yaml", str(tmp_path / "workflows" / "w1.yaml"))

        assert resolved == str(target)

    def test_absolute_path(self, catalogue, write_definition):
        target = write_definition("t1.yaml", TEMPLATE_YAML)

        assert catalogue.resolve_path(str(target), "") == str(target)

    def test_unresolvable_reference(self, catalogue, tmp_path):
        with pytest.raises(ResolutionError, match="Could not resolve 'nope.yaml'"):
            catalogue.resolve_path("nope.yaml", str(tmp_path / "w1.yaml"))

    def test_missing_absolute_reference(self, catalogue, tmp_path):
        with pytest.raises(ResolutionError):
            catalogue.resolve_path(str(tmp_path / "nope.yaml"), "")


class TestCompile:

    def test_compile_template(self, catalogue, write_definition):
        path = write_definition("t1.yaml", TEMPLATE_YAML)

        compiled = catalogue.compile(str(path))

        assert compiled.type is InputType.TEMPLATE
        assert compiled.workflow is None

    def test_compile_workflow_with_relative_step(self, catalogue, write_definition):
        template_path = write_definition("t1.yaml", TEMPLATE_YAML)
        path = write_definition("w1.yaml", WORKFLOW_YAML)

        compiled = catalogue.compile(str(path))

        assert compiled.type is InputType.WORKFLOW
        assert compiled.template is None
        step = compiled.workflow.steps[0]
        assert step.template_path == str(template_path)
        assert step.compiled.template.id == "t1"

    def test_self_referencing_workflow_is_a_cycle(self, catalogue, write_definition):
        path = write_definition("loop.yaml", WORKFLOW_YAML.replace("t1.yaml", "loop.yaml"))

        with pytest.raises(WorkflowCompilationError) as exc:
            catalogue.compile(str(path))

        assert isinstance(exc.value.__cause__, ResolutionError)
        assert "Cyclic reference" in str(exc.value)

    def test_repeated_compile_is_not_a_cycle(self, catalogue, write_definition):
        path = write_definition("t1.yaml", TEMPLATE_YAML)

        catalogue.compile(str(path))
        compiled = catalogue.compile(str(path))

        assert compiled.type is InputType.TEMPLATE

    def test_compiling_twice_gives_independent_results(self, catalogue, write_definition):
        path = write_definition("t1.yaml", TEMPLATE_YAML)

        first = catalogue.compile(str(path))
        second = catalogue.compile(str(path))

        assert first is not second
        assert first.template is not second.template
        assert first == second

    def test_concurrent_compiles_share_schema(self, catalogue, write_definition):
        path = write_definition("t1.yaml", TEMPLATE_YAML)
        results = []
        errors = []

        def worker():
            try:
                results.append(catalogue.compile(str(path)))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(results) == 8
        assert all(r.type is InputType.TEMPLATE for r in results)


class TestCompileAll:

    def test_bad_files_are_skipped_and_reported(self, catalogue, write_definition, caplog):
        write_definition("t1.yaml", TEMPLATE_YAML)
        write_definition("w1.yaml", WORKFLOW_YAML)
        bad = write_definition("bad.yaml", "id: bad\ninfo:\n  name: x\n")
        write_definition("notes.txt", "not a definition")

        with caplog.at_level(logging.WARNING, logger="check_catalogue"):
            report = catalogue.compile_all(["."])

        assert not report.ok
        assert sorted(p.rsplit("/", 1)[-1] for p in report.compiled) == ["t1.yaml", "w1.yaml"]
        assert list(report.errors) == [str(bad)]
        assert isinstance(report.errors[str(bad)], SchemaValidationError)
        assert "Skipping definition" in caplog.text

    def test_deeply_nested_file_does_not_stop_the_batch(self, catalogue, write_definition):
        deep = write_definition("a_deep.yaml", TEMPLATE_YAML + "x: " + "[" * 3000 + "]" * 3000 + "\n")
        ok = write_definition("b_ok.yaml", TEMPLATE_YAML)

        report = catalogue.compile_all(["."])

        assert list(report.compiled) == [str(ok)]
        assert isinstance(report.errors[str(deep)], MalformedDocumentError)
        assert isinstance(report.errors[str(deep)].__cause__, RecursionError)

    def test_definition_paths_are_sorted_and_unique(self, catalogue, write_definition, tmp_path):
        a = write_definition("a.yml", TEMPLATE_YAML)
        b = write_definition("sub/b.yaml", TEMPLATE_YAML)

        paths = catalogue.get_definition_paths([tmp_path, a])

        assert paths == sorted([a, b])

    def test_missing_target_is_logged(self, catalogue, caplog):
        with caplog.at_level(logging.WARNING, logger="check_catalogue"):
            paths = catalogue.get_definition_paths(["does-not-exist"])

        assert paths == []
        assert "Path does not exist" in caplog.text
