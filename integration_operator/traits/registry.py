from __future__ import annotations

from functools import lru_cache

from traitkit import TraitRef, TraitRegistry

from integration_operator.traits import (
    builder,
    classpath,
    container,
    deployment,
    knative_service,
    owner,
    platform,
    quarkus,
    route,
    service,
)

_TRAIT_MODULES = (
    platform,
    builder,
    quarkus,
    deployment,
    knative_service,
    service,
    container,
    route,
    owner,
    classpath,
)


def builtin_trait_refs() -> tuple[TraitRef, ...]:
    return tuple(module.TRAIT for module in _TRAIT_MODULES)


@lru_cache(maxsize=1)
def get_trait_registry() -> TraitRegistry:
    return TraitRegistry.from_refs(builtin_trait_refs())
