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

"""Generic YAML parsing of definition documents."""

import logging
from typing import Any, Dict, Tuple, Union

import yaml

from ...exceptions import MalformedDocumentError
from ...file_io.source_location import SourceMap

logger = logging.getLogger(__name__)


class YamlParser:
    """Schema-agnostic YAML parser.

    Produces the plain mapping/sequence/scalar tree that the schema validator
    works on, together with a source map for diagnostics.
    """

    @staticmethod
    def _json_pointer_escape(token: str) -> str:
        # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
        return token.replace("~", "~0").replace("/", "~1")

    @classmethod
    def build_source_map(cls, content: Union[str, bytes]) -> SourceMap:
        """Build a mapping from JSON-pointer paths to 1-based line/column.

        This uses PyYAML's node tree (yaml.compose) so locations can be tracked
        without changing the data shapes returned by safe_load.
        """
        source_map: SourceMap = {}

        try:
            root = yaml.compose(content, Loader=yaml.SafeLoader)
        except (yaml.YAMLError, RecursionError):
            # Parse errors are reported by parse(); an empty map is enough here.
            return source_map

        if root is None:
            return source_map

        def _record(path: str, node: yaml.Node) -> None:
            mark = node.start_mark
            # PyYAML uses 0-based line/column
            source_map[path] = {"line": mark.line + 1, "column": mark.column + 1}

        def _walk(node: yaml.Node, path: str) -> None:
            _record(path, node)

            if isinstance(node, yaml.MappingNode):
                for key_node, value_node in node.value:
                    key = getattr(key_node, "value", None)
                    if key is None:
                        continue
                    _walk(value_node, f"{path}/{cls._json_pointer_escape(str(key))}")
            elif isinstance(node, yaml.SequenceNode):
                for idx, item_node in enumerate(node.value):
                    _walk(item_node, f"{path}/{idx}")

        try:
            _walk(root, "")
        except RecursionError:
            return {}
        return source_map

    def parse(self, content: Union[str, bytes], source: str = "<string>") -> Any:
        """Parse YAML content into a generic tree.

        Args:
            content: Raw document bytes or text
            source: Name of the document, used in error messages

        Returns:
            The parsed tree; None for an empty document

        Raises:
            MalformedDocumentError: If the content is not valid YAML
        """
        try:
            return yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise MalformedDocumentError(f"Failed to parse YAML document {source}: {exc}") from exc
        except RecursionError as exc:
            raise MalformedDocumentError(f"Failed to parse YAML document {source}: nesting is too deep") from exc

    def parse_with_source(
        self, content: Union[str, bytes], source: str = "<string>"
    ) -> Tuple[Any, Dict[str, Dict[str, int]]]:
        """Parse YAML content and return (data, source_map)."""
        data = self.parse(content, source)
        logger.debug(f"Parsed YAML document: {source}")
        return data, self.build_source_map(content)


# Global parser instance
yaml_parser = YamlParser()
