"""Classification and compilation pipeline for check definitions."""

from .catalogue import Catalogue, CatalogueReport
from .classifier import classify_input
from .dispatcher import compile_input
from .interfaces import Compiler, Resolver
from .reader import read_input, read_input_from_string

__all__ = [
    "Catalogue",
    "CatalogueReport",
    "Compiler",
    "Resolver",
    "classify_input",
    "compile_input",
    "read_input",
    "read_input_from_string",
]
