"""Typed definition models and their compiled counterparts."""

from .info import Info
from .input import CompiledInput, Input, InputType
from .templates import (
    CompiledExtractor,
    CompiledMatcher,
    CompiledRequest,
    CompiledTemplate,
    DNSRequest,
    Extractor,
    HTTPRequest,
    Matcher,
    Template,
)
from .workflows import (
    CompiledStep,
    CompiledWorkflow,
    CompiledWorkflowMatcher,
    Workflow,
    WorkflowMatcher,
    WorkflowStep,
)
