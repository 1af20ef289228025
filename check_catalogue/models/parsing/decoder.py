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

"""Strict decoding of schema-valid document trees into typed definitions.

The decoder runs only after schema validation has passed, so every failure
here means the schema and the typed model disagree. It never substitutes a
default for a value of the wrong type.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Tuple, TypeVar

from ...exceptions import DecodeError
from ..info import Info
from ..input import Input
from ..templates import DNSRequest, Extractor, HTTPRequest, Matcher, Template
from ..workflows import Workflow, WorkflowMatcher, WorkflowStep

T = TypeVar("T")

_MISSING = object()

_ROOT_KEYS = ("id", "info", "dns", "http", "requests", "workflows")
_INFO_KEYS = ("name", "author", "severity", "description", "reference", "tags", "metadata")
_MATCHER_KEYS = ("type", "name", "part", "condition", "negative", "words", "regex", "binary", "dsl", "status", "size")
_EXTRACTOR_KEYS = ("type", "name", "part", "regex", "kval")
_HTTP_KEYS = (
    "method", "path", "raw", "headers", "body", "redirects", "max-redirects",
    "payloads", "attack", "matchers-condition", "matchers", "extractors",
)
_DNS_KEYS = ("name", "type", "class", "recursion", "retries", "matchers-condition", "matchers", "extractors")
_STEP_KEYS = ("template", "subtemplates", "matchers")
_WORKFLOW_MATCHER_KEYS = ("name", "subtemplates")


def _child(path: str, token: Any) -> str:
    return f"{path}/{str(token).replace('~', '~0').replace('/', '~1')}"


def _type_label(value: Any) -> str:
    return type(value).__name__


def _mapping(value: Any, path: str, allowed: Iterable[str]) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected a mapping, got {_type_label(value)}", path)
    unknown = sorted(str(k) for k in value if k not in allowed)
    if unknown:
        raise DecodeError(f"Unknown fields: {', '.join(unknown)}", path)
    return value


def _str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"Expected a string, got {_type_label(value)}", path)
    return value


def _bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"Expected a boolean, got {_type_label(value)}", path)
    return value


def _int(value: Any, path: str) -> int:
    # bool is a subclass of int, but never a valid integer field
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"Expected an integer, got {_type_label(value)}", path)
    return value


def _list(value: Any, path: str, item: Callable[[Any, str], T]) -> Tuple[T, ...]:
    if not isinstance(value, list):
        raise DecodeError(f"Expected a list, got {_type_label(value)}", path)
    return tuple(item(v, _child(path, idx)) for idx, v in enumerate(value))


def _str_or_list(value: Any, path: str) -> Tuple[str, ...]:
    """Accept ``"a, b"`` as well as ``[a, b]``."""
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return _list(value, path, _str)


def _get(data: Dict[str, Any], key: str, path: str, convert: Callable[[Any, str], T], default: Any = _MISSING) -> T:
    if key not in data:
        if default is _MISSING:
            raise DecodeError(f"Missing required field '{key}'", path)
        return default
    return convert(data[key], _child(path, key))


def _free_mapping(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected a mapping, got {_type_label(value)}", path)
    return value


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def decode_info(value: Any, path: str = "/info") -> Info:
    data = _mapping(value, path, _INFO_KEYS)
    metadata = _get(data, "metadata", path, _free_mapping, {})
    return Info(
        name=_get(data, "name", path, _str),
        author=_get(data, "author", path, _str),
        severity=_get(data, "severity", path, _str),
        description=_get(data, "description", path, _str, ""),
        reference=_get(data, "reference", path, _str_or_list, ()),
        tags=_get(data, "tags", path, _str_or_list, ()),
        metadata=_freeze(metadata),
    )


def decode_matcher(value: Any, path: str) -> Matcher:
    data = _mapping(value, path, _MATCHER_KEYS)
    str_list = lambda v, p: _list(v, p, _str)  # noqa: E731
    int_list = lambda v, p: _list(v, p, _int)  # noqa: E731
    return Matcher(
        type=_get(data, "type", path, _str),
        name=_get(data, "name", path, _str, ""),
        part=_get(data, "part", path, _str, "body"),
        condition=_get(data, "condition", path, _str, "or"),
        negative=_get(data, "negative", path, _bool, False),
        words=_get(data, "words", path, str_list, ()),
        regex=_get(data, "regex", path, str_list, ()),
        binary=_get(data, "binary", path, str_list, ()),
        dsl=_get(data, "dsl", path, str_list, ()),
        status=_get(data, "status", path, int_list, ()),
        size=_get(data, "size", path, int_list, ()),
    )


def decode_extractor(value: Any, path: str) -> Extractor:
    data = _mapping(value, path, _EXTRACTOR_KEYS)
    str_list = lambda v, p: _list(v, p, _str)  # noqa: E731
    return Extractor(
        type=_get(data, "type", path, _str),
        name=_get(data, "name", path, _str, ""),
        part=_get(data, "part", path, _str, "body"),
        regex=_get(data, "regex", path, str_list, ()),
        kval=_get(data, "kval", path, str_list, ()),
    )


def _payload_value(value: Any, path: str):
    if isinstance(value, str):
        return value
    if not isinstance(value, list):
        raise DecodeError(f"Expected a payload file or list, got {_type_label(value)}", path)
    items = []
    for idx, item in enumerate(value):
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            raise DecodeError(f"Expected a scalar payload, got {_type_label(item)}", _child(path, idx))
        items.append(str(item))
    return tuple(items)


def _payloads(value: Any, path: str) -> MappingProxyType:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected a mapping, got {_type_label(value)}", path)
    return MappingProxyType({_str(k, path): _payload_value(v, _child(path, k)) for k, v in value.items()})


def _headers(value: Any, path: str) -> MappingProxyType:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected a mapping, got {_type_label(value)}", path)
    return MappingProxyType({_str(k, path): _str(v, _child(path, k)) for k, v in value.items()})


def decode_http_request(value: Any, path: str) -> HTTPRequest:
    data = _mapping(value, path, _HTTP_KEYS)
    str_list = lambda v, p: _list(v, p, _str)  # noqa: E731
    return HTTPRequest(
        method=_get(data, "method", path, _str, "GET"),
        path=_get(data, "path", path, str_list, ()),
        raw=_get(data, "raw", path, str_list, ()),
        headers=_get(data, "headers", path, _headers, MappingProxyType({})),
        body=_get(data, "body", path, _str, ""),
        redirects=_get(data, "redirects", path, _bool, False),
        max_redirects=_get(data, "max-redirects", path, _int, 0),
        payloads=_get(data, "payloads", path, _payloads, MappingProxyType({})),
        attack=_get(data, "attack", path, _str, "sniper"),
        matchers_condition=_get(data, "matchers-condition", path, _str, "or"),
        matchers=_get(data, "matchers", path, lambda v, p: _list(v, p, decode_matcher), ()),
        extractors=_get(data, "extractors", path, lambda v, p: _list(v, p, decode_extractor), ()),
    )


def decode_dns_request(value: Any, path: str) -> DNSRequest:
    data = _mapping(value, path, _DNS_KEYS)
    return DNSRequest(
        name=_get(data, "name", path, _str),
        type=_get(data, "type", path, _str, "A"),
        dns_class=_get(data, "class", path, _str, "INET"),
        recursion=_get(data, "recursion", path, _bool, True),
        retries=_get(data, "retries", path, _int, 1),
        matchers_condition=_get(data, "matchers-condition", path, _str, "or"),
        matchers=_get(data, "matchers", path, lambda v, p: _list(v, p, decode_matcher), ()),
        extractors=_get(data, "extractors", path, lambda v, p: _list(v, p, decode_extractor), ()),
    )


def _steps(value: Any, path: str) -> Tuple[WorkflowStep, ...]:
    return _list(value, path, decode_workflow_step)


def decode_workflow_matcher(value: Any, path: str) -> WorkflowMatcher:
    data = _mapping(value, path, _WORKFLOW_MATCHER_KEYS)
    return WorkflowMatcher(
        name=_get(data, "name", path, _str),
        subtemplates=_get(data, "subtemplates", path, _steps, ()),
    )


def decode_workflow_step(value: Any, path: str) -> WorkflowStep:
    data = _mapping(value, path, _STEP_KEYS)
    return WorkflowStep(
        template=_get(data, "template", path, _str),
        subtemplates=_get(data, "subtemplates", path, _steps, ()),
        matchers=_get(data, "matchers", path, lambda v, p: _list(v, p, decode_workflow_matcher), ()),
    )


def decode_input(data: Any) -> Input:
    """Decode a generic document tree into an :class:`Input`.

    Raises:
        DecodeError: If the tree does not fit the typed model
    """
    root = _mapping(data, "", _ROOT_KEYS)
    identifier = _get(root, "id", "", _str)
    if not identifier:
        raise DecodeError("Field 'id' must not be empty", "/id")

    template = Template(
        dns=_get(root, "dns", "", lambda v, p: _list(v, p, decode_dns_request), ()),
        http=_get(root, "http", "", lambda v, p: _list(v, p, decode_http_request), ()),
        requests=_get(root, "requests", "", lambda v, p: _list(v, p, decode_http_request), ()),
    )
    workflow = Workflow(logic=_get(root, "workflows", "", _steps, ()))

    return Input(
        id=identifier,
        info=_get(root, "info", "", decode_info),
        template=template,
        workflow=workflow,
    )
