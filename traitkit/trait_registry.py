from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Any, Iterable

from traitkit.trait_types import Trait, TraitRef


@dataclass(frozen=True)
class TraitRegistry:
    _by_id: dict[str, TraitRef]

    @classmethod
    def from_refs(cls, refs: Iterable[TraitRef]) -> "TraitRegistry":
        entries: dict[str, TraitRef] = {}
        for ref in refs:
            if ref.id in entries:
                raise ValueError(f"Duplicate trait id: {ref.id}")
            entries[ref.id] = ref
        return cls(_by_id=entries)

    def available(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_id.keys()))

    def refs(self) -> tuple[TraitRef, ...]:
        return tuple(self._by_id[key] for key in self.available())

    def create_all(self) -> list[Trait]:
        return [ref.create() for ref in self.refs()]

    def describe(self) -> tuple[dict[str, Any], ...]:
        rows: list[dict[str, Any]] = []
        for ref in self.refs():
            trait = ref.create()
            rows.append(
                {
                    "trait_id": ref.id,
                    "order": trait.order,
                    "doc": ref.doc,
                    "tags": list(ref.tags),
                    "influences_kit": trait.influences_kit(),
                    "platform_trait": trait.is_platform_trait(),
                    "requires_platform": trait.requires_integration_platform(),
                }
            )
        return tuple(rows)

    def get(self, trait_id: str) -> TraitRef:
        ref = self._by_id.get((trait_id or "").strip())
        if ref is None:
            available = ", ".join(self.available()) or "<none>"
            suggestions = self.suggest(trait_id)
            hint = f"; did you mean: {', '.join(suggestions)}" if suggestions else ""
            raise ValueError(f"Unknown trait id: {trait_id} (available: {available}{hint})")
        return ref

    def suggest(self, trait_id: str, *, limit: int = 3) -> tuple[str, ...]:
        key = (trait_id or "").strip()
        if not key:
            return ()
        return tuple(difflib.get_close_matches(key, list(self.available()), n=limit))

    def __contains__(self, trait_id: str) -> bool:
        return (trait_id or "").strip() in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)
