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

"""Dispatch of classified definitions to the kind-specific compilers."""

import logging
from typing import Optional

from ..compilers.template_compiler import TemplateCompileOptions, compile_template
from ..compilers.workflow_compiler import WorkflowCompileOptions, compile_workflow
from ..exceptions import TemplateCompilationError, WorkflowCompilationError
from ..models.input import CompiledInput, Input, InputType
from .classifier import classify_input
from .interfaces import Compiler, Resolver

logger = logging.getLogger(__name__)


def compile_input(
    definition: Input,
    path: str,
    resolver: Optional[Resolver] = None,
    compiler: Optional[Compiler] = None,
) -> CompiledInput:
    """Compile a decoded definition.

    Templates are compiled with the resolver only; workflows get both the
    resolver and the compiler, since their steps refer to other definitions.

    Args:
        definition: Decoded definition
        path: Path of the definition file, used to resolve relative references
        resolver: Locates referenced files
        compiler: Compiles definitions referenced by workflow steps

    Returns:
        The compiled definition, tagged with its kind

    Raises:
        ClassificationError: If the definition is neither a template nor a workflow
        TemplateCompilationError: If the template sub-compiler fails
        WorkflowCompilationError: If the workflow sub-compiler fails
    """
    kind = classify_input(definition)

    if kind is InputType.TEMPLATE:
        options = TemplateCompileOptions(
            id=definition.id,
            info=definition.info,
            path=str(path),
            resolver=resolver,
        )
        try:
            compiled_template = compile_template(definition.template, options)
        except Exception as e:
            raise TemplateCompilationError(f"could not compile template: {e}") from e
        logger.debug(f"Compiled template '{definition.id}' from {path}")
        return CompiledInput(type=kind, template=compiled_template)

    options = WorkflowCompileOptions(
        id=definition.id,
        info=definition.info,
        path=str(path),
        resolver=resolver,
        compiler=compiler,
    )
    try:
        compiled_workflow = compile_workflow(definition.workflow, options)
    except Exception as e:
        raise WorkflowCompilationError(f"could not compile workflow: {e}") from e
    logger.debug(f"Compiled workflow '{definition.id}' from {path}")
    return CompiledInput(type=kind, workflow=compiled_workflow)
