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

"""Compilation of workflow payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ..exceptions import WorkflowError
from ..models.info import Info
from ..models.input import InputType
from ..models.workflows import (
    CompiledStep,
    CompiledWorkflow,
    CompiledWorkflowMatcher,
    Workflow,
    WorkflowStep,
)

if TYPE_CHECKING:
    from ..catalogue.interfaces import Compiler, Resolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowCompileOptions:
    id: str
    info: Info
    path: str
    resolver: Optional["Resolver"] = None
    compiler: Optional["Compiler"] = None


def _compile_steps(steps: Tuple[WorkflowStep, ...], options: WorkflowCompileOptions) -> Tuple[CompiledStep, ...]:
    return tuple(compile_step(step, options) for step in steps)


def compile_step(step: WorkflowStep, options: WorkflowCompileOptions) -> CompiledStep:
    """Resolve and compile the template a step refers to, then its children."""
    resolved = options.resolver.resolve_path(step.template, options.path)
    compiled = options.compiler.compile(resolved)

    if compiled.type is not InputType.TEMPLATE:
        raise WorkflowError(
            f"Step '{step.template}' in workflow '{options.id}' refers to a {compiled.type}; "
            "only templates can be workflow steps"
        )

    matchers = []
    for matcher in step.matchers:
        if compiled.template.find_matcher(matcher.name) is None:
            raise WorkflowError(
                f"Matcher '{matcher.name}' not found in template '{compiled.template.id}' ({resolved})"
            )
        matchers.append(
            CompiledWorkflowMatcher(
                name=matcher.name,
                subtemplates=_compile_steps(matcher.subtemplates, options),
            )
        )

    return CompiledStep(
        template_path=resolved,
        compiled=compiled,
        subtemplates=_compile_steps(step.subtemplates, options),
        matchers=tuple(matchers),
    )


def compile_workflow(workflow: Workflow, options: WorkflowCompileOptions) -> CompiledWorkflow:
    """Compile every step of a workflow.

    Steps refer to other definition files: each reference is located with
    the resolver and compiled with the compiler.

    Raises:
        WorkflowError: If a collaborator is missing, the workflow is empty,
            a step is not a template or a step matcher is unknown
    """
    if options.resolver is None:
        raise WorkflowError(f"Workflow '{options.id}' cannot be compiled without a resolver")
    if options.compiler is None:
        raise WorkflowError(f"Workflow '{options.id}' cannot be compiled without a compiler")
    if workflow.is_empty():
        raise WorkflowError(f"Workflow '{options.id}' has no steps")

    steps = _compile_steps(workflow.logic, options)
    logger.debug(f"Workflow '{options.id}' compiled with {len(steps)} steps")
    return CompiledWorkflow(
        id=options.id,
        info=options.info,
        path=options.path,
        steps=steps,
    )
