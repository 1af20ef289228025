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

"""Filesystem catalogue of check definitions."""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Set, Union

from ..exceptions import CatalogueError, ResolutionError
from ..file_io.source_location import SourceLocation, format_source
from ..models.input import CompiledInput
from ..models.json_schema_loader import SchemaDocument
from .dispatcher import compile_input
from .reader import read_input

logger = logging.getLogger(__name__)

DEFINITION_EXTENSIONS = (".yaml", ".yml")


@dataclass
class CatalogueReport:
    """Outcome of compiling a batch of definition files."""

    compiled: Dict[str, CompiledInput] = field(default_factory=dict)
    errors: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


class Catalogue:
    """Definition files below a directory.

    Acts as both the resolver and the compiler collaborator of the
    dispatcher, so workflows can refer to templates by relative path.
    """

    def __init__(self, directory: Union[str, Path], schema: SchemaDocument):
        self.directory = Path(directory)
        self.schema = schema
        self._local = threading.local()

    def _active_paths(self) -> Set[str]:
        # per thread: paths currently being compiled, for cycle detection
        if not hasattr(self._local, "paths"):
            self._local.paths = set()
        return self._local.paths

    def resolve_path(self, name: str, second_path: str) -> str:
        """Resolve a reference relative to the referring file, then to the catalogue.

        Args:
            name: Referenced path, absolute or relative
            second_path: Path of the referring definition file

        Returns:
            Path of an existing file

        Raises:
            ResolutionError: If no candidate exists
        """
        reference = Path(name)
        if reference.is_absolute():
            if reference.is_file():
                return str(reference)
            raise ResolutionError(f"Referenced file not found: {name}")

        base = Path(second_path) if second_path else self.directory
        if not base.is_dir():
            base = base.parent

        candidates = [base / reference, self.directory / reference]
        for candidate in candidates:
            if candidate.is_file():
                logger.debug(f"Resolved '{name}' to {candidate}")
                return str(candidate)

        tried = ", ".join(str(c) for c in candidates)
        raise ResolutionError(f"Could not resolve '{name}' referenced from {second_path} (tried: {tried})")

    def compile(self, path: str) -> CompiledInput:
        """Read, validate and compile one definition file.

        Raises:
            ResolutionError: If the file is already being compiled further up
                the same reference chain
        """
        key = str(Path(path).resolve())
        active = self._active_paths()
        if key in active:
            raise ResolutionError(f"Cyclic reference to {path}")

        active.add(key)
        try:
            definition = read_input(path, self.schema)
            return compile_input(definition, str(path), self, self)
        finally:
            active.discard(key)

    def get_definition_paths(self, targets: Iterable[Union[str, Path]]) -> List[Path]:
        """Expand files and directories into definition file paths.

        Relative targets are looked up in the catalogue directory first.
        """
        paths = []
        for target in targets:
            path = Path(target)
            if not path.is_absolute() and (self.directory / path).exists():
                path = self.directory / path

            if path.is_file():
                paths.append(path)
            elif path.is_dir():
                for ext in DEFINITION_EXTENSIONS:
                    paths.extend(path.rglob(f"*{ext}"))
            else:
                logger.warning(f"Path does not exist: {target}")

        return sorted(set(paths))

    def compile_all(self, targets: Iterable[Union[str, Path]]) -> CatalogueReport:
        """Compile every definition found in ``targets``.

        A file that fails to read or compile is logged and skipped; it never
        stops the rest of the batch.
        """
        report = CatalogueReport()
        for path in self.get_definition_paths(targets):
            try:
                report.compiled[str(path)] = self.compile(str(path))
            except (OSError, CatalogueError) as e:
                src = SourceLocation(file_path=path)
                logger.warning(f"Skipping definition: {e}{format_source(src)}")
                report.errors[str(path)] = e

        logger.info(f"Compiled {len(report.compiled)} definitions, skipped {len(report.errors)}")
        return report
