from __future__ import annotations

from dataclasses import dataclass, replace

from traitkit import TraitRef, trait_property

from integration_operator.framework.cluster import NotFoundError
from integration_operator.framework.environment import Environment
from integration_operator.framework.errors import SourceResolutionError
from integration_operator.framework.kube import ConfigMap, ObjectMeta, Service
from integration_operator.framework.metadata import extract_all
from integration_operator.framework.models import (
    CONDITION_SERVICE_AVAILABLE,
    CONDITION_SERVICE_NOT_AVAILABLE_REASON,
    PROFILE_KUBERNETES,
    PROFILE_OPENSHIFT,
    SourceSpec,
)
from integration_operator.traits._shared import (
    DEFAULT_CONTENT_KEY,
    integration_labels,
    is_deploying_or_running,
    require_integration,
)
from integration_operator.traits.base import BaseTrait


def resolve_sources(env: Environment, trait_id: str) -> list[SourceSpec]:
    """Sources with referenced ConfigMap content inlined.

    Looks in the resources assembled so far first, then asks the cluster client.
    """

    integration = require_integration(env, trait_id)
    resolved: list[SourceSpec] = []
    for source in integration.spec.sources:
        if not source.content_ref:
            resolved.append(source)
            continue
        key = source.content_key or DEFAULT_CONTENT_KEY
        cm = env.resources.find_by_key(ConfigMap.kind, source.content_ref)
        if cm is None and env.client is not None:
            try:
                cm = env.client.get(ConfigMap.kind, integration.namespace, source.content_ref)
            except NotFoundError:
                cm = None
        if cm is None:
            raise SourceResolutionError(
                f"Source {source.name} references missing config map {source.content_ref}",
                trait_id=trait_id,
            )
        if key not in cm.data:
            raise SourceResolutionError(
                f"Config map {source.content_ref} has no key {key!r} for source {source.name}",
                trait_id=trait_id,
            )
        resolved.append(replace(source, content=cm.data[key]))
    return resolved


@dataclass
class ServiceTrait(BaseTrait):
    """Exposes the integration through a cluster Service when its sources serve HTTP."""

    auto: bool | None = trait_property("auto", "bool")

    ID = "service"
    ORDER = 1500
    PROFILES = (PROFILE_KUBERNETES, PROFILE_OPENSHIFT)

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            env.set_integration_condition(
                CONDITION_SERVICE_AVAILABLE,
                "False",
                CONDITION_SERVICE_NOT_AVAILABLE_REASON,
                "explicitly disabled",
            )
            return False

        if not is_deploying_or_running(env):
            return False

        if self.auto is None or self.auto:
            try:
                sources = resolve_sources(env, self.id)
            except SourceResolutionError as exc:
                env.set_integration_condition(
                    CONDITION_SERVICE_AVAILABLE,
                    "False",
                    CONDITION_SERVICE_NOT_AVAILABLE_REASON,
                    str(exc),
                )
                raise
            meta = extract_all(env.runtime_catalog, sources)
            if not meta.requires_http_service:
                env.set_integration_condition(
                    CONDITION_SERVICE_AVAILABLE,
                    "False",
                    CONDITION_SERVICE_NOT_AVAILABLE_REASON,
                    "no http service required",
                )
                return False

        return True

    def apply(self, env: Environment) -> None:
        integration = require_integration(env, self.id)
        if env.resources.get_service_for_integration(integration) is not None:
            return

        labels = integration_labels(integration)
        env.resources.add(
            Service(
                metadata=ObjectMeta(
                    name=integration.name,
                    namespace=integration.namespace,
                    labels=dict(labels),
                ),
                selector=dict(labels),
                ports=[],
            )
        )
        env.set_integration_condition(CONDITION_SERVICE_AVAILABLE, "True", "ServiceCreated", integration.name)


TRAIT = TraitRef(
    id=ServiceTrait.ID,
    factory=ServiceTrait,
    doc="Creates a Service selecting the integration pods when HTTP consumers are detected.",
    tags=("network",),
)
