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

"""Compilation of template payloads.

Compiling a template checks what the schema cannot express (regular
expressions, hex patterns, payload combinations) and resolves payload files
through the resolver. Nothing is sent over the network here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from ..exceptions import TemplateError
from ..models.info import Info
from ..models.templates import (
    CompiledExtractor,
    CompiledMatcher,
    CompiledRequest,
    CompiledTemplate,
    DNSRequest,
    Extractor,
    HTTPRequest,
    Matcher,
    PayloadValue,
    Template,
)

if TYPE_CHECKING:
    from ..catalogue.interfaces import Resolver

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE", "CONNECT", "OPTIONS", "TRACE", "PATCH")
DNS_TYPES = ("A", "NS", "CNAME", "SOA", "PTR", "MX", "TXT", "AAAA")
DNS_CLASSES = ("INET", "CSNET", "CHAOS", "HESIOD", "NONE", "ANY")
ATTACK_TYPES = ("sniper", "pitchfork", "clusterbomb")
CONDITIONS = ("and", "or")

# matcher type -> Matcher attribute holding its values
_MATCHER_VALUES = {
    "status": "status",
    "size": "size",
    "word": "words",
    "regex": "regex",
    "binary": "binary",
    "dsl": "dsl",
}

_EXTRACTOR_VALUES = {
    "regex": "regex",
    "kval": "kval",
}


@dataclass(frozen=True)
class TemplateCompileOptions:
    id: str
    info: Info
    path: str
    resolver: Optional["Resolver"] = None


def _compile_regexes(expressions: Tuple[str, ...], where: str) -> Tuple[re.Pattern, ...]:
    patterns = []
    for expression in expressions:
        try:
            patterns.append(re.compile(expression))
        except re.error as e:
            raise TemplateError(f"Invalid regex '{expression}' in {where}: {e}") from e
    return tuple(patterns)


def _check_condition(condition: str, where: str) -> None:
    if condition not in CONDITIONS:
        raise TemplateError(f"Invalid condition '{condition}' in {where}, expected one of {CONDITIONS}")


def compile_matcher(matcher: Matcher, where: str) -> CompiledMatcher:
    attribute = _MATCHER_VALUES.get(matcher.type)
    if attribute is None:
        raise TemplateError(f"Unknown matcher type '{matcher.type}' in {where}")
    _check_condition(matcher.condition, where)
    if not getattr(matcher, attribute):
        raise TemplateError(f"Matcher of type '{matcher.type}' in {where} requires '{attribute}'")

    patterns: Tuple[re.Pattern, ...] = ()
    binary: Tuple[bytes, ...] = ()
    if matcher.type == "regex":
        patterns = _compile_regexes(matcher.regex, where)
    elif matcher.type == "binary":
        try:
            binary = tuple(bytes.fromhex(value) for value in matcher.binary)
        except ValueError as e:
            raise TemplateError(f"Invalid hex pattern in {where}: {e}") from e

    return CompiledMatcher(matcher=matcher, patterns=patterns, binary=binary)


def compile_extractor(extractor: Extractor, where: str) -> CompiledExtractor:
    attribute = _EXTRACTOR_VALUES.get(extractor.type)
    if attribute is None:
        raise TemplateError(f"Unknown extractor type '{extractor.type}' in {where}")
    if not getattr(extractor, attribute):
        raise TemplateError(f"Extractor of type '{extractor.type}' in {where} requires '{attribute}'")

    patterns: Tuple[re.Pattern, ...] = ()
    if extractor.type == "regex":
        patterns = _compile_regexes(extractor.regex, where)
    return CompiledExtractor(extractor=extractor, patterns=patterns)


def _compile_operators(request, where: str) -> Tuple[Tuple[CompiledMatcher, ...], Tuple[CompiledExtractor, ...]]:
    _check_condition(request.matchers_condition, where)
    matchers = tuple(
        compile_matcher(m, f"{where}.matchers[{idx}]") for idx, m in enumerate(request.matchers)
    )
    extractors = tuple(
        compile_extractor(e, f"{where}.extractors[{idx}]") for idx, e in enumerate(request.extractors)
    )
    return matchers, extractors


def _load_payload_file(name: str, reference: str, options: TemplateCompileOptions) -> Tuple[str, ...]:
    if options.resolver is None:
        raise TemplateError(f"Payload '{name}' refers to file '{reference}' but no resolver is available")

    resolved = options.resolver.resolve_path(reference, options.path)
    try:
        with open(resolved, "r", encoding="utf-8") as f:
            values = tuple(line.strip() for line in f if line.strip())
    except OSError as e:
        raise TemplateError(f"Could not read payload file '{resolved}' for '{name}': {e}") from e

    logger.debug(f"Loaded {len(values)} values for payload '{name}' from {resolved}")
    return values


def _resolve_payloads(
    payloads: Dict[str, PayloadValue], options: TemplateCompileOptions
) -> Dict[str, Tuple[str, ...]]:
    resolved: Dict[str, Tuple[str, ...]] = {}
    for name, value in payloads.items():
        if isinstance(value, str):
            resolved[name] = _load_payload_file(name, value, options)
        else:
            resolved[name] = tuple(value)
    return resolved


def compile_http_request(request: HTTPRequest, where: str, options: TemplateCompileOptions) -> CompiledRequest:
    if request.method not in HTTP_METHODS:
        raise TemplateError(f"Unsupported HTTP method '{request.method}' in {where}")
    if not request.path and not request.raw:
        raise TemplateError(f"HTTP request {where} needs either 'path' or 'raw'")
    if request.max_redirects < 0:
        raise TemplateError(f"'max-redirects' must not be negative in {where}")
    if request.attack not in ATTACK_TYPES:
        raise TemplateError(f"Unknown attack type '{request.attack}' in {where}")

    payloads = _resolve_payloads(dict(request.payloads), options)
    if request.attack != "sniper" and not payloads:
        raise TemplateError(f"Attack type '{request.attack}' in {where} requires payloads")
    if request.attack == "pitchfork" and len({len(v) for v in payloads.values()}) > 1:
        raise TemplateError(f"Pitchfork payloads in {where} must have the same number of values")

    matchers, extractors = _compile_operators(request, where)
    return CompiledRequest(
        protocol="http",
        request=request,
        matchers=matchers,
        matchers_condition=request.matchers_condition,
        extractors=extractors,
        payloads=MappingProxyType(payloads),
    )


def compile_dns_request(request: DNSRequest, where: str) -> CompiledRequest:
    if not request.name:
        raise TemplateError(f"DNS request {where} requires a 'name'")
    if request.type not in DNS_TYPES:
        raise TemplateError(f"Unsupported DNS record type '{request.type}' in {where}")
    if request.dns_class not in DNS_CLASSES:
        raise TemplateError(f"Unsupported DNS class '{request.dns_class}' in {where}")
    if request.retries < 0:
        raise TemplateError(f"'retries' must not be negative in {where}")

    matchers, extractors = _compile_operators(request, where)
    return CompiledRequest(
        protocol="dns",
        request=request,
        matchers=matchers,
        matchers_condition=request.matchers_condition,
        extractors=extractors,
    )


def compile_template(template: Template, options: TemplateCompileOptions) -> CompiledTemplate:
    """Compile the requests of a template.

    Requests are compiled in the order ``dns``, ``http``, ``requests``.

    Raises:
        TemplateError: If the template has no requests or any request is invalid
        ResolutionError: If a payload file cannot be resolved
    """
    if template.is_empty():
        raise TemplateError(f"Template '{options.id}' has no requests")

    compiled: List[CompiledRequest] = []
    for idx, request in enumerate(template.dns):
        compiled.append(compile_dns_request(request, f"dns[{idx}]"))
    for field_name in ("http", "requests"):
        for idx, request in enumerate(getattr(template, field_name)):
            compiled.append(compile_http_request(request, f"{field_name}[{idx}]", options))

    seen = set()
    for request in compiled:
        for matcher in request.matchers:
            if not matcher.name:
                continue
            if matcher.name in seen:
                raise TemplateError(f"Duplicate matcher name '{matcher.name}' in template '{options.id}'")
            seen.add(matcher.name)

    logger.debug(f"Template '{options.id}' compiled with {len(compiled)} requests")
    return CompiledTemplate(
        id=options.id,
        info=options.info,
        path=options.path,
        requests=tuple(compiled),
    )
