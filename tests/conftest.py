import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from check_catalogue.models.info import Info
from check_catalogue.models.input import Input
from check_catalogue.models.json_schema_loader import SchemaDocument
from check_catalogue.models.templates import HTTPRequest, Matcher, Template
from check_catalogue.models.workflows import Workflow, WorkflowStep


TEMPLATE_YAML = """\
id: t1
info:
  name: x
  author: y
  severity: info
http:
  - method: GET
    path:
      - "{{BaseURL}}/"
    matchers:
      - type: status
        name: ok
        status:
          - 200
"""

WORKFLOW_YAML = """\
id: w1
info:
  name: x
  author: y
  severity: info
workflows:
  - template: t1.yaml
"""


@pytest.fixture(scope="session")
def schema() -> SchemaDocument:
    return SchemaDocument.load()


@pytest.fixture
def write_definition(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a YAML definition below tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


class NoopResolver:
    """Resolver returning references unchanged."""

    def __init__(self):
        self.calls = []

    def resolve_path(self, name: str, second_path: str) -> str:
        self.calls.append((name, second_path))
        return name


class MappingResolver:
    """Resolver backed by a fixed name -> path mapping."""

    def __init__(self, mapping: Dict[str, str]):
        self.mapping = mapping

    def resolve_path(self, name: str, second_path: str) -> str:
        return self.mapping[name]


class FakeCompiler:
    """Compiler returning pre-built compiled inputs by path."""

    def __init__(self, compiled: Dict[str, object]):
        self.compiled = compiled
        self.calls = []

    def compile(self, path: str):
        self.calls.append(path)
        return self.compiled[path]


def make_info() -> Info:
    return Info(name="x", author="y", severity="info")


def make_template_input(identifier: str = "t1", **request_fields) -> Input:
    fields = {
        "path": ("{{BaseURL}}/",),
        "matchers": (Matcher(type="status", name="ok", status=(200,)),),
    }
    fields.update(request_fields)
    return Input(id=identifier, info=make_info(), template=Template(http=(HTTPRequest(**fields),)))


def make_workflow_input(identifier: str = "w1", *steps) -> Input:
    logic = steps or (WorkflowStep(template="t1.yaml"),)
    return Input(id=identifier, info=make_info(), workflow=Workflow(logic=tuple(logic)))
