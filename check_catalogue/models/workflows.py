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

"""Workflow payload: ordered, conditional composition of templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from .info import Info

if TYPE_CHECKING:
    from .input import CompiledInput


@dataclass(frozen=True)
class WorkflowMatcher:
    """Run ``subtemplates`` only when the named matcher of the parent template fires."""

    name: str
    subtemplates: Tuple["WorkflowStep", ...] = ()


@dataclass(frozen=True)
class WorkflowStep:
    template: str
    subtemplates: Tuple["WorkflowStep", ...] = ()
    matchers: Tuple[WorkflowMatcher, ...] = ()


@dataclass(frozen=True)
class Workflow:
    logic: Tuple[WorkflowStep, ...] = ()

    def is_empty(self) -> bool:
        return not self.logic


@dataclass(frozen=True)
class CompiledWorkflowMatcher:
    name: str
    subtemplates: Tuple["CompiledStep", ...] = ()


@dataclass(frozen=True)
class CompiledStep:
    template_path: str
    compiled: "CompiledInput"
    subtemplates: Tuple["CompiledStep", ...] = ()
    matchers: Tuple[CompiledWorkflowMatcher, ...] = ()


@dataclass(frozen=True)
class CompiledWorkflow:
    id: str
    info: Info
    path: str
    steps: Tuple[CompiledStep, ...]
