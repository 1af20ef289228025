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

"""Configuration management for the check catalogue."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .catalogue.catalogue import Catalogue
from .models.json_schema_loader import SchemaDocument
from .utils.logging_utils import DEFAULT_LOG_FORMAT, configure_split_stream_logging

ENV_PREFIX = "CHECK_CATALOGUE_"


@dataclass
class CatalogueConfig:
    """Configuration class for loading and compiling check definitions."""
    log_level: str = "INFO"
    print_level: str = "ERROR"

    # paths
    schema_path: Optional[str] = None
    templates_directory: str = "."

    @classmethod
    def from_env(cls) -> 'CatalogueConfig':
        """Create configuration from environment variables."""
        return cls(
            log_level=os.getenv(f'{ENV_PREFIX}LOG_LEVEL', 'INFO'),
            print_level=os.getenv(f'{ENV_PREFIX}PRINT_LEVEL', 'ERROR'),
            schema_path=os.getenv(f'{ENV_PREFIX}SCHEMA_PATH') or None,
            templates_directory=os.getenv(f'{ENV_PREFIX}TEMPLATES_DIRECTORY', '.'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter(DEFAULT_LOG_FORMAT)
        configure_split_stream_logging(level=level, stderr_level=stderr_level, formatter=formatter)

        return logging.getLogger('check_catalogue')

    def load_schema(self) -> SchemaDocument:
        """Load the definition schema; call once at startup and share the result."""
        return SchemaDocument.load(self.schema_path)

    def create_catalogue(self, schema: Optional[SchemaDocument] = None) -> Catalogue:
        return Catalogue(self.templates_directory, schema or self.load_schema())
