"""Collaborator capabilities consumed by the sub-compilers.

A template only needs a :class:`Resolver`. A workflow also needs a
:class:`Compiler` to compile the templates its steps refer to.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..models.input import CompiledInput


@runtime_checkable
class Resolver(Protocol):
    def resolve_path(self, name: str, second_path: str) -> str:
        """Resolve ``name`` referenced from the definition at ``second_path``.

        Raises:
            ResolutionError: If the reference cannot be located
        """
        ...


@runtime_checkable
class Compiler(Protocol):
    def compile(self, path: str) -> "CompiledInput":
        """Read, classify and compile the definition at ``path``."""
        ...
