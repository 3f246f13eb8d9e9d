from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from traitkit import Step, Trait

from integration_operator.framework.cluster import ClusterClient
from integration_operator.framework.kube import EnvVar
from integration_operator.framework.metadata import RuntimeCatalog
from integration_operator.framework.models import (
    CLUSTER_OPENSHIFT,
    PROFILE_KUBERNETES,
    PROFILE_OPENSHIFT,
    Integration,
    IntegrationKit,
    IntegrationPlatform,
    trait_configurations,
)
from integration_operator.framework.resources import ResourceCollection

if TYPE_CHECKING:
    from integration_operator.framework.catalog import TraitCatalog


@dataclass
class Environment:
    """Mutable state shared by every trait during one reconciliation pass.

    Created fresh for each pass and discarded afterwards; never shared across passes.
    """

    logger: logging.Logger
    integration: Integration | None = None
    integration_kit: IntegrationKit | None = None
    platform: IntegrationPlatform | None = None
    client: ClusterClient | None = None
    runtime_catalog: RuntimeCatalog = field(default_factory=RuntimeCatalog.default)
    catalog: "TraitCatalog | None" = None

    resources: ResourceCollection = field(default_factory=ResourceCollection)
    classpath: set[str] = field(default_factory=set)
    env_vars: list[EnvVar] = field(default_factory=list)
    executed_traits: list[Trait] = field(default_factory=list)
    build_steps: list[Step] = field(default_factory=list)

    def get_trait(self, trait_id: str) -> Trait | None:
        """Trait instance that executed in this pass, if any."""
        for trait in self.executed_traits:
            if trait.id == trait_id:
                return trait
        return None

    def executed_trait_ids(self) -> list[str]:
        return [trait.id for trait in self.executed_traits]

    def sorted_classpath(self) -> list[str]:
        return sorted(self.classpath)

    def determine_profile(self) -> str:
        if self.integration is not None and self.integration.spec.profile:
            return self.integration.spec.profile
        if self.integration_kit is not None and self.integration_kit.spec.profile:
            return self.integration_kit.spec.profile
        if self.platform is not None:
            if self.platform.spec.profile:
                return self.platform.spec.profile
            if self.platform.spec.cluster == CLUSTER_OPENSHIFT:
                return PROFILE_OPENSHIFT
        return PROFILE_KUBERNETES

    def integration_in_phase(self, *phases: str) -> bool:
        return self.integration is not None and self.integration.status.phase in phases

    def integration_kit_in_phase(self, *phases: str) -> bool:
        return self.integration_kit is not None and self.integration_kit.status.phase in phases

    def in_phase(self, kit_phase: str, integration_phase: str) -> bool:
        return self.integration_kit_in_phase(kit_phase) and self.integration_in_phase(integration_phase)

    def set_integration_condition(self, condition_type: str, status: str, reason: str, message: str) -> None:
        if self.integration is None:
            return
        self.integration.set_condition(condition_type, status, reason, message)

    def trait_levels(self) -> tuple[dict[str, dict[str, str]], dict[str, dict[str, str]], dict[str, dict[str, str]]]:
        """Platform, kit and integration trait options, least specific first."""
        platform = trait_configurations(self.platform.spec.traits if self.platform else None)
        kit = trait_configurations(self.integration_kit.spec.traits if self.integration_kit else None)
        integration = trait_configurations(self.integration.spec.traits if self.integration else None)
        return platform, kit, integration

    def summary(self) -> dict[str, Any]:
        return {
            "integration": self.integration.name if self.integration else None,
            "kit": self.integration_kit.name if self.integration_kit else None,
            "platform": self.platform.name if self.platform else None,
            "profile": self.determine_profile(),
            "executed_traits": self.executed_trait_ids(),
            "classpath": self.sorted_classpath(),
            "resources": [f"{obj.kind}/{obj.name}" for obj in self.resources],
        }
