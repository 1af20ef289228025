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

"""JSON Schema loading and validation for check definitions.

The schema is read once at startup into a :class:`SchemaDocument` and then
passed by reference to every reader. The document never changes after
construction, so it can be shared between threads without locking.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from ..file_io.source_location import SourceMap, lookup_source

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent.parent / "schema" / "definition.json"


@dataclass(frozen=True)
class SchemaIssue:
    message: str
    yaml_path: str = ""
    line: Optional[int] = None
    column: Optional[int] = None


def _json_pointer(parts) -> str:
    return "".join("/" + str(p).replace("~", "~0").replace("/", "~1") for p in parts)


@dataclass(frozen=True)
class SchemaDocument:
    """An immutable, pre-checked definition schema."""

    schema: Mapping[str, Any]
    source: str = "<memory>"
    _validator: Draft7Validator = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        owned = copy.deepcopy(dict(self.schema))
        try:
            Draft7Validator.check_schema(owned)
        except SchemaError as e:
            raise ValueError(f"Invalid definition schema {self.source}: {e.message}") from e
        object.__setattr__(self, "schema", MappingProxyType(copy.deepcopy(owned)))
        object.__setattr__(self, "_validator", Draft7Validator(owned))

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "SchemaDocument":
        """Load a definition schema from a JSON file.

        Args:
            path: Schema file; the bundled schema when omitted

        Returns:
            The loaded schema document

        Raises:
            FileNotFoundError: If the schema file doesn't exist
            json.JSONDecodeError: If the schema file is invalid JSON
            ValueError: If the file is not a valid Draft 7 schema
        """
        schema_path = Path(path) if path is not None else DEFAULT_SCHEMA_PATH
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                schema = json.load(f)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(
                f"Invalid JSON in schema file {schema_path}: {e.msg}",
                e.doc,
                e.pos,
            ) from e

        logger.debug(f"Loaded definition schema: {schema_path}")
        return cls(schema=schema, source=str(schema_path))

    def validate(self, data: Any, source_map: Optional[SourceMap] = None) -> List[SchemaIssue]:
        """Validate a generic document tree.

        Issues are returned in the order the validator discovers them.
        """
        issues: List[SchemaIssue] = []
        for error in self._validator.iter_errors(data):
            yaml_path = _json_pointer(error.absolute_path)
            loc = lookup_source(source_map, yaml_path)
            issues.append(
                SchemaIssue(
                    message=error.message,
                    yaml_path=yaml_path,
                    line=loc.line,
                    column=loc.column,
                )
            )
        return issues
