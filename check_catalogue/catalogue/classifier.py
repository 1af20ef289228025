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

import logging

from ..exceptions import AmbiguousDefinitionError, ClassificationError
from ..models.input import Input, InputType

logger = logging.getLogger(__name__)


def classify_input(definition: Input) -> InputType:
    """Decide whether a decoded definition is a template or a workflow.

    A definition populating any of ``dns``, ``http`` or ``requests`` is a
    template; one populating ``workflows`` is a workflow.

    Raises:
        AmbiguousDefinitionError: If both shapes are populated
        ClassificationError: If neither shape is populated
    """
    is_template = not definition.template.is_empty()
    is_workflow = not definition.workflow.is_empty()

    if is_template and is_workflow:
        raise AmbiguousDefinitionError(
            f"Definition '{definition.id}' has both template requests and workflow logic"
        )
    if is_template:
        kind = InputType.TEMPLATE
    elif is_workflow:
        kind = InputType.WORKFLOW
    else:
        raise ClassificationError(
            f"Unrecognized definition shape for '{definition.id}': "
            "expected template requests (dns/http/requests) or workflow logic (workflows)"
        )

    logger.debug(f"Classified '{definition.id}' as {kind}")
    return kind
