from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple

SEVERITIES = ("info", "low", "medium", "high", "critical", "unknown")


@dataclass(frozen=True)
class Info:
    """Descriptive metadata of a definition."""

    name: str
    author: str
    severity: str
    description: str = ""
    reference: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
