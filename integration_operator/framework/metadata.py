"""Source metadata extraction: which components a set of route sources uses."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

from traitkit import parse_bool

from integration_operator.framework.models import SourceSpec

_FROM_RE = re.compile(r"""\bfrom\s*\(\s*["']([a-zA-Z][\w+.-]*):[^"']*["']""")
_TO_RE = re.compile(
    r"""\b(?:to|toD|toF|enrich|pollEnrich|wireTap)\s*\(\s*["']([a-zA-Z][\w+.-]*):[^"']*["']"""
)
# `- from: "scheme:..."` on one line.
_YAML_FROM_RE = re.compile(r"""^[ \t]*-?[ \t]*from:[ \t]*["']?([a-zA-Z][\w+.-]*):""", re.MULTILINE)
# `- from:` followed by an indented block holding `uri: "scheme:..."`.
_YAML_NESTED_FROM_RE = re.compile(
    r"""^[ \t]*-?[ \t]*from:[ \t]*\r?\n(?:[ \t]+[^\n]*\n)*?[ \t]+uri:[ \t]*["']?([a-zA-Z][\w+.-]*):""",
    re.MULTILINE,
)
_YAML_TO_RE = re.compile(r"""^[ \t]*-?[ \t]*(?:to|uri):[ \t]*["']?([a-zA-Z][\w+.-]*):""", re.MULTILINE)
_XML_FROM_RE = re.compile(r"""<from\b[^>]*?\buri\s*=\s*["']([a-zA-Z][\w+.-]*):""")
_XML_TO_RE = re.compile(r"""<to\b[^>]*?\buri\s*=\s*["']([a-zA-Z][\w+.-]*):""")
_REST_RE = re.compile(r"""\brest\s*\(|<rest\b|^\s*-?\s*rest:""", re.MULTILINE)


@dataclass(frozen=True)
class ComponentInfo:
    scheme: str
    artifact: str
    http: bool = False


_DEFAULT_COMPONENTS: tuple[ComponentInfo, ...] = (
    ComponentInfo("timer", "camel-timer"),
    ComponentInfo("log", "camel-log"),
    ComponentInfo("direct", "camel-direct"),
    ComponentInfo("seda", "camel-seda"),
    ComponentInfo("file", "camel-file"),
    ComponentInfo("kafka", "camel-kafka"),
    ComponentInfo("knative", "camel-knative"),
    ComponentInfo("http", "camel-http"),
    ComponentInfo("https", "camel-http"),
    ComponentInfo("undertow", "camel-undertow", http=True),
    ComponentInfo("servlet", "camel-servlet", http=True),
    ComponentInfo("jetty", "camel-jetty", http=True),
    ComponentInfo("netty-http", "camel-netty-http", http=True),
    ComponentInfo("platform-http", "camel-platform-http", http=True),
    ComponentInfo("rest", "camel-rest", http=True),
)


@dataclass(frozen=True)
class RuntimeCatalog:
    """Component scheme -> capability description for one runtime version."""

    components: Mapping[str, ComponentInfo]
    rest_artifact: str = "camel-rest"

    @classmethod
    def default(cls) -> "RuntimeCatalog":
        return cls(components={c.scheme: c for c in _DEFAULT_COMPONENTS})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuntimeCatalog":
        components: dict[str, ComponentInfo] = {}
        for scheme, raw in data.items():
            if not isinstance(raw, Mapping):
                raise TypeError(f"catalog.{scheme} must be a mapping (type={type(raw).__name__})")
            components[str(scheme)] = ComponentInfo(
                scheme=str(scheme),
                artifact=str(raw.get("artifact") or f"camel-{scheme}"),
                http=parse_bool(raw.get("http", False), f"catalog.{scheme}.http"),
            )
        return cls(components=components)

    def get(self, scheme: str) -> ComponentInfo | None:
        return self.components.get(scheme)


@dataclass(frozen=True)
class SourceMetadata:
    from_schemes: tuple[str, ...] = ()
    to_schemes: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    requires_http_service: bool = False


@dataclass
class _Accumulator:
    from_schemes: list[str] = field(default_factory=list)
    to_schemes: list[str] = field(default_factory=list)
    uses_rest: bool = False


def _scan(source: SourceSpec, acc: _Accumulator) -> None:
    content = source.content or ""
    # A nested `uri:` under `from:` also matches the `to` pattern; its offset marks it as a consumer.
    from_offsets: set[int] = set()
    for pattern in (_FROM_RE, _YAML_FROM_RE, _YAML_NESTED_FROM_RE, _XML_FROM_RE):
        for match in pattern.finditer(content):
            acc.from_schemes.append(match.group(1))
            from_offsets.add(match.start(1))
    for pattern in (_TO_RE, _YAML_TO_RE, _XML_TO_RE):
        for match in pattern.finditer(content):
            if match.start(1) not in from_offsets:
                acc.to_schemes.append(match.group(1))
    if _REST_RE.search(content):
        acc.uses_rest = True


def extract_all(catalog: RuntimeCatalog, sources: Iterable[SourceSpec]) -> SourceMetadata:
    acc = _Accumulator()
    for source in sources:
        _scan(source, acc)

    dependencies: set[str] = set()
    requires_http = acc.uses_rest
    if acc.uses_rest:
        dependencies.add(f"camel:{catalog.rest_artifact.removeprefix('camel-')}")

    for scheme in [*acc.from_schemes, *acc.to_schemes]:
        info = catalog.get(scheme)
        if info is None:
            continue
        dependencies.add(f"camel:{info.artifact.removeprefix('camel-')}")

    # Only consumers expose an endpoint.
    for scheme in acc.from_schemes:
        info = catalog.get(scheme)
        if info is not None and info.http:
            requires_http = True

    return SourceMetadata(
        from_schemes=tuple(dict.fromkeys(acc.from_schemes)),
        to_schemes=tuple(dict.fromkeys(acc.to_schemes)),
        dependencies=tuple(sorted(dependencies)),
        requires_http_service=requires_http,
    )
