from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class Trait(Protocol):
    """Two-phase contract: `configure` decides applicability, `apply` mutates the environment."""

    enabled: bool | None

    @property
    def id(self) -> str: ...

    @property
    def order(self) -> int: ...

    def is_allowed_in_profile(self, profile: str) -> bool: ...

    def influences_kit(self) -> bool: ...

    def is_platform_trait(self) -> bool: ...

    def requires_integration_platform(self) -> bool: ...

    def configure(self, env: Any) -> bool: ...

    def apply(self, env: Any) -> None: ...


TraitFactory = Callable[[], Trait]


@dataclass(frozen=True)
class TraitRef:
    id: str
    factory: TraitFactory
    doc: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise TypeError("TraitRef.id must be a non-empty string")
        object.__setattr__(self, "id", self.id.strip())

        if not callable(self.factory):
            raise TypeError(f"TraitRef.factory must be callable (type={type(self.factory).__name__})")
        if self.doc is not None and (not isinstance(self.doc, str) or not self.doc.strip()):
            raise TypeError("TraitRef.doc must be a non-empty string or None")

        if self.tags:
            object.__setattr__(
                self, "tags", tuple(str(tag).strip() for tag in self.tags if str(tag).strip())
            )

    def create(self) -> Trait:
        trait = self.factory()
        if not isinstance(trait, Trait):
            raise TypeError(
                f"Trait factory returned an object without the trait contract (trait={self.id}, type={type(trait).__name__})"
            )
        if trait.id != self.id:
            raise ValueError(
                f"Trait factory returned mismatched id: expected={self.id} got={trait.id}"
            )
        return trait
