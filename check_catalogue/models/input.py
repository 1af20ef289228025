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

"""Typed definition input and its compiled form."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .info import Info
from .templates import CompiledTemplate, Template
from .workflows import CompiledWorkflow, Workflow

if TYPE_CHECKING:
    from ..catalogue.interfaces import Compiler, Resolver


class InputType(Enum):
    """Kind of a definition."""

    TEMPLATE = "template"
    WORKFLOW = "workflow"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Input:
    """A decoded definition.

    Both payload shapes are always present; the one the file does not use is
    empty. Which one is meaningful is decided by the classifier, never by
    the caller inspecting the payloads.
    """

    id: str
    info: Info
    template: Template = field(default_factory=Template)
    workflow: Workflow = field(default_factory=Workflow)

    def compile(
        self,
        path: str,
        resolver: Optional["Resolver"] = None,
        compiler: Optional["Compiler"] = None,
    ) -> "CompiledInput":
        from ..catalogue.dispatcher import compile_input

        return compile_input(self, path, resolver, compiler)


@dataclass(frozen=True)
class CompiledInput:
    """Compiled definition, tagged with the kind that was compiled.

    Exactly the payload matching ``type`` is set. Branch on ``type``.
    """

    type: InputType
    template: Optional[CompiledTemplate] = None
    workflow: Optional[CompiledWorkflow] = None

    def __post_init__(self) -> None:
        if self.type is InputType.TEMPLATE:
            if self.template is None or self.workflow is not None:
                raise ValueError("template input must carry only a compiled template")
        elif self.type is InputType.WORKFLOW:
            if self.workflow is None or self.template is not None:
                raise ValueError("workflow input must carry only a compiled workflow")
        else:
            raise ValueError(f"Unknown input type: {self.type!r}")

    @property
    def id(self) -> str:
        if self.type is InputType.TEMPLATE:
            return self.template.id
        return self.workflow.id
