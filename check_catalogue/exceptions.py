# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Custom exceptions for the check catalogue."""

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from .models.json_schema_loader import SchemaIssue


class CatalogueError(Exception):
    """Base exception for catalogue related errors."""
    pass


class MalformedDocumentError(CatalogueError):
    """Exception raised when a definition file is not parseable YAML."""
    pass


class SchemaValidationError(CatalogueError):
    """Exception raised when a definition violates the definition schema.

    Only the first violation is summarized in the message; all of them are
    available through ``issues``.
    """

    def __init__(self, source: str, issues: Sequence["SchemaIssue"]):
        self.source = source
        self.issues: List["SchemaIssue"] = list(issues)
        first = self.issues[0].message if self.issues else "unknown violation"
        super().__init__(f"{len(self.issues)} errors in definition {source}: {first}, skipping")

    @property
    def error_count(self) -> int:
        return len(self.issues)

    @property
    def first_issue(self) -> Optional["SchemaIssue"]:
        return self.issues[0] if self.issues else None


class DecodeError(CatalogueError):
    """Exception raised when a schema-valid document does not fit the typed model."""

    def __init__(self, message: str, yaml_path: str = ""):
        self.yaml_path = yaml_path
        if yaml_path:
            message = f"{message} (yaml_path={yaml_path})"
        super().__init__(message)


class ClassificationError(CatalogueError):
    """Exception raised when a definition is neither a template nor a workflow."""
    pass


class AmbiguousDefinitionError(ClassificationError):
    """Exception raised when a definition populates both template and workflow fields."""
    pass


class CompilationError(CatalogueError):
    """Exception raised when a classified definition fails to compile."""
    pass


class TemplateCompilationError(CompilationError):
    """Exception raised by the dispatcher for template compile failures."""
    pass


class WorkflowCompilationError(CompilationError):
    """Exception raised by the dispatcher for workflow compile failures."""
    pass


class TemplateError(CatalogueError):
    """Exception raised for invalid template content."""
    pass


class WorkflowError(CatalogueError):
    """Exception raised for invalid workflow content."""
    pass


class ResolutionError(CatalogueError):
    """Exception raised when a referenced definition path cannot be resolved."""
    pass
