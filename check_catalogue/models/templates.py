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

"""Template payload: protocol requests with their matchers and extractors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from .info import Info

PayloadValue = Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class Matcher:
    type: str
    name: str = ""
    part: str = "body"
    condition: str = "or"
    negative: bool = False
    words: Tuple[str, ...] = ()
    regex: Tuple[str, ...] = ()
    binary: Tuple[str, ...] = ()
    dsl: Tuple[str, ...] = ()
    status: Tuple[int, ...] = ()
    size: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Extractor:
    type: str
    name: str = ""
    part: str = "body"
    regex: Tuple[str, ...] = ()
    kval: Tuple[str, ...] = ()


@dataclass(frozen=True)
class HTTPRequest:
    method: str = "GET"
    path: Tuple[str, ...] = ()
    raw: Tuple[str, ...] = ()
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    body: str = ""
    redirects: bool = False
    max_redirects: int = 0
    # A str value names a payload file, a tuple holds inline values.
    payloads: Mapping[str, PayloadValue] = field(default_factory=lambda: MappingProxyType({}))
    attack: str = "sniper"
    matchers_condition: str = "or"
    matchers: Tuple[Matcher, ...] = ()
    extractors: Tuple[Extractor, ...] = ()


@dataclass(frozen=True)
class DNSRequest:
    name: str
    type: str = "A"
    dns_class: str = "INET"
    recursion: bool = True
    retries: int = 1
    matchers_condition: str = "or"
    matchers: Tuple[Matcher, ...] = ()
    extractors: Tuple[Extractor, ...] = ()


@dataclass(frozen=True)
class Template:
    """The template-shaped part of a definition.

    ``requests`` is the legacy spelling of ``http`` and is compiled the same way.
    """

    dns: Tuple[DNSRequest, ...] = ()
    http: Tuple[HTTPRequest, ...] = ()
    requests: Tuple[HTTPRequest, ...] = ()

    def is_empty(self) -> bool:
        return not (self.dns or self.http or self.requests)


@dataclass(frozen=True)
class CompiledMatcher:
    matcher: Matcher
    patterns: Tuple[re.Pattern, ...] = ()
    binary: Tuple[bytes, ...] = ()

    @property
    def name(self) -> str:
        return self.matcher.name


@dataclass(frozen=True)
class CompiledExtractor:
    extractor: Extractor
    patterns: Tuple[re.Pattern, ...] = ()


@dataclass(frozen=True)
class CompiledRequest:
    protocol: str
    request: Union[DNSRequest, HTTPRequest]
    matchers: Tuple[CompiledMatcher, ...] = ()
    matchers_condition: str = "or"
    extractors: Tuple[CompiledExtractor, ...] = ()
    payloads: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class CompiledTemplate:
    id: str
    info: Info
    path: str
    requests: Tuple[CompiledRequest, ...]

    def matcher_names(self) -> Tuple[str, ...]:
        """Names of all named matchers, in declaration order."""
        return tuple(m.name for r in self.requests for m in r.matchers if m.name)

    def find_matcher(self, name: str) -> Optional[CompiledMatcher]:
        for request in self.requests:
            for matcher in request.matchers:
                if matcher.name == name:
                    return matcher
        return None
