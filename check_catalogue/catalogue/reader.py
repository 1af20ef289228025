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

"""Reading and schema validation of definition files."""

import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import SchemaValidationError
from ..file_io.source_location import format_source, lookup_source
from ..models.input import Input
from ..models.json_schema_loader import SchemaDocument
from ..models.parsing.decoder import decode_input
from ..models.parsing.yaml_parser import yaml_parser

logger = logging.getLogger(__name__)


def _read_content(content: Union[str, bytes], schema: SchemaDocument, source: str, file_path: Optional[Path] = None) -> Input:
    data, source_map = yaml_parser.parse_with_source(content, source)

    issues = schema.validate(data, source_map)
    if issues:
        first = issues[0]
        loc = lookup_source(source_map, first.yaml_path, file_path)
        logger.debug(f"{len(issues)} schema violations in {source}{format_source(loc)}")
        raise SchemaValidationError(source, issues)

    return decode_input(data)


def read_input(path: Union[str, Path], schema: SchemaDocument) -> Input:
    """Read a definition file and return its validated, typed form.

    The document is first validated as a generic YAML tree against
    ``schema`` and only then decoded into an :class:`Input`, so violations
    are reported against the document's own shape.

    Args:
        path: Definition file to read
        schema: Shared definition schema

    Returns:
        The decoded definition

    Raises:
        OSError: If the file cannot be opened or read
        MalformedDocumentError: If the file is not valid YAML
        SchemaValidationError: If the document violates the schema
        DecodeError: If a schema-valid document does not fit the typed model
    """
    file_path = Path(path)
    logger.debug(f"Reading definition file: {file_path}")
    with open(file_path, "rb") as stream:
        content = stream.read()
    return _read_content(content, schema, str(file_path), file_path)


def read_input_from_string(content: Union[str, bytes], schema: SchemaDocument, source: str = "<string>") -> Input:
    """Same as :func:`read_input`, for in-memory content."""
    return _read_content(content, schema, source)
