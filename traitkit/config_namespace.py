"""String-valued trait configuration namespace and three-level resolver."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

logger = logging.getLogger(__name__)

PropertyKind = Literal["bool", "int", "str", "list"]
ALLOWED_PROPERTY_KINDS: tuple[str, ...] = ("bool", "int", "str", "list")

# Resolution order: least specific first.
CONFIG_LEVELS: tuple[str, ...] = ("platform", "kit", "integration")

_TRUE_VALUES = frozenset({"true", "1", "yes"})
_FALSE_VALUES = frozenset({"false", "0", "no"})


class TraitDecodeError(ValueError):
    """Raised when a configuration option cannot be parsed for a known trait field."""

    def __init__(self, message: str, *, trait_id: str, level: str, key: str) -> None:
        super().__init__(message)
        self.trait_id = trait_id
        self.level = level
        self.key = key


def _join_path(parent: str, key: str) -> str:
    if not parent:
        return key
    return f"{parent}.{key}"


def parse_bool(value: str, path: str) -> bool:
    """
    Strict boolean parsing to avoid bool('false') footguns.

    Accepts true/false/1/0/yes/no (case-insensitive, surrounding whitespace ignored).
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
    raise ValueError(f"Invalid boolean for {path}: {value!r}")


def parse_int(value: str, path: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid config type for {path}: expected int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise ValueError(f"Invalid config value for {path}: must be an int")
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid config value for {path}: must be an int (got {value!r})") from exc
    raise ValueError(f"Invalid config type for {path}: expected int")


def parse_list_str(value: str, path: str, *, delimiter: str = ",") -> list[str]:
    if isinstance(value, (list, tuple)):
        raw_items = [str(item) for item in value]
    elif isinstance(value, str):
        raw_items = value.split(delimiter)
    else:
        raise ValueError(f"Invalid config type for {path}: expected list[str]")
    return [item.strip() for item in raw_items if item.strip()]


def trait_property(
    name: str,
    kind: PropertyKind,
    *,
    default: Any = None,
    delimiter: str = ",",
) -> Any:
    """Declare a dataclass field that is populated from a trait configuration option."""

    if kind not in ALLOWED_PROPERTY_KINDS:
        raise ValueError(f"Invalid trait property kind: {kind}")
    if not isinstance(name, str) or not name.strip():
        raise TypeError("Trait property name must be a non-empty string")
    metadata = {"property": name.strip(), "kind": kind, "delimiter": delimiter}
    if isinstance(default, (list, dict, set)):
        factory_value = default
        return field(default_factory=lambda: type(factory_value)(factory_value), metadata=metadata)
    return field(default=default, metadata=metadata)


@dataclass(frozen=True)
class PropertySpec:
    attr: str
    name: str
    kind: PropertyKind
    delimiter: str = ","


def property_specs(target: Any) -> tuple[PropertySpec, ...]:
    if not dataclasses.is_dataclass(target):
        raise TypeError(f"Trait configuration target must be a dataclass (type={type(target).__name__})")
    specs: list[PropertySpec] = []
    for item in dataclasses.fields(target):
        name = item.metadata.get("property")
        if not name:
            continue
        specs.append(
            PropertySpec(
                attr=item.name,
                name=name,
                kind=item.metadata["kind"],
                delimiter=item.metadata.get("delimiter", ","),
            )
        )
    return tuple(specs)


@dataclass
class ConfigNamespace:
    """One configuration level for one trait: option name -> raw string value."""

    data: Mapping[str, str]
    path: str
    _consumed: set[str] = field(default_factory=set, init=False, repr=False)

    @classmethod
    def empty(cls, *, path: str) -> "ConfigNamespace":
        return cls({}, path=path)

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def _consume(self, key: str) -> None:
        self._consumed.add(key)

    def consumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._consumed))

    def unconsumed_keys(self) -> tuple[str, ...]:
        return tuple(sorted(k for k in self.data.keys() if k not in self._consumed))

    def _get_raw(self, key: str) -> Any:
        if not isinstance(key, str) or not key.strip():
            raise TypeError("ConfigNamespace key must be a non-empty string")
        normalized = key.strip()
        self._consume(normalized)
        return self.data.get(normalized)

    def get_bool(self, key: str) -> bool:
        return parse_bool(self._get_raw(key), _join_path(self.path, key.strip()))

    def get_int(self, key: str) -> int:
        return parse_int(self._get_raw(key), _join_path(self.path, key.strip()))

    def get_str(self, key: str) -> str:
        raw = self._get_raw(key)
        if not isinstance(raw, str):
            raise ValueError(
                f"{_join_path(self.path, key.strip())} must be a string (type={type(raw).__name__})"
            )
        return raw.strip()

    def get_list_str(self, key: str, *, delimiter: str = ",") -> list[str]:
        return parse_list_str(
            self._get_raw(key), _join_path(self.path, key.strip()), delimiter=delimiter
        )

    def decode_onto(self, target: Any, *, trait_id: str, level: str) -> list[str]:
        """Assign every present option with a matching field; return the assigned attr names."""

        assigned: list[str] = []
        for spec in property_specs(target):
            if spec.name not in self.data:
                continue
            try:
                if spec.kind == "bool":
                    value: Any = self.get_bool(spec.name)
                elif spec.kind == "int":
                    value = self.get_int(spec.name)
                elif spec.kind == "list":
                    value = self.get_list_str(spec.name, delimiter=spec.delimiter)
                else:
                    value = self.get_str(spec.name)
            except ValueError as exc:
                raise TraitDecodeError(
                    f"Cannot decode trait {trait_id} ({level} level): {exc}",
                    trait_id=trait_id,
                    level=level,
                    key=spec.name,
                ) from exc
            setattr(target, spec.attr, value)
            assigned.append(spec.attr)
        return assigned


def resolve(
    trait_id: str,
    platform: Mapping[str, Mapping[str, str]] | None,
    kit: Mapping[str, Mapping[str, str]] | None,
    integration: Mapping[str, Mapping[str, str]] | None,
    target: Any,
) -> Any:
    """Decode Platform, then Kit, then Integration options for `trait_id` onto `target`.

    Each level maps trait id -> option name -> string value. Options without a
    matching field are ignored.
    """

    for level, source in zip(CONFIG_LEVELS, (platform, kit, integration)):
        if not source:
            continue
        options = source.get(trait_id)
        if not options:
            continue
        ns = ConfigNamespace(dict(options), path=f"{level}.traits.{trait_id}")
        ns.decode_onto(target, trait_id=trait_id, level=level)
        ignored = ns.unconsumed_keys()
        if ignored:
            logger.debug("Ignoring unknown options under %s: %s", ns.path, ", ".join(ignored))
    return target
