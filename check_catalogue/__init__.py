"""Classification and compilation of declarative security-check definitions."""

__version__ = "0.1.0"

from .catalogue import (
    Catalogue,
    CatalogueReport,
    Compiler,
    Resolver,
    classify_input,
    compile_input,
    read_input,
    read_input_from_string,
)
from .config import CatalogueConfig
from .models import CompiledInput, Input, InputType
from .models.json_schema_loader import SchemaDocument, SchemaIssue
