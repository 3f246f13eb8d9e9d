from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef, trait_property

from integration_operator.framework.cluster import NotFoundError
from integration_operator.framework.environment import Environment
from integration_operator.framework.models import (
    CLUSTER_KUBERNETES,
    CLUSTER_OPENSHIFT,
    PLATFORM_PHASE_CREATING,
    IntegrationPlatform,
    PlatformSpec,
)
from integration_operator.traits.base import BaseTrait

DEFAULT_PLATFORM_NAME = "camel-k"


@dataclass
class PlatformTrait(BaseTrait):
    """Establishes a default IntegrationPlatform when none is resolved.

    The only trait that runs without a platform, so later traits can rely on one.
    """

    create_default: bool | None = trait_property("create-default", "bool")
    cluster: str | None = trait_property("cluster", "str")

    ID = "platform"
    ORDER = 100
    PLATFORM_TRAIT = True
    REQUIRES_PLATFORM = False

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        if env.platform is not None:
            return False
        if self.create_default is False:
            return False
        if self.cluster is not None and self.cluster not in (CLUSTER_KUBERNETES, CLUSTER_OPENSHIFT):
            raise ValueError(
                f"platform.cluster must be one of: {CLUSTER_KUBERNETES}, {CLUSTER_OPENSHIFT} (got {self.cluster!r})"
            )
        return True

    def apply(self, env: Environment) -> None:
        if env.integration is not None:
            namespace = env.integration.namespace
        elif env.integration_kit is not None:
            namespace = env.integration_kit.namespace
        else:
            namespace = "default"

        if env.client is not None:
            try:
                env.platform = env.client.get(IntegrationPlatform.kind, namespace, DEFAULT_PLATFORM_NAME)
                env.logger.info("Using existing platform %s/%s", namespace, DEFAULT_PLATFORM_NAME)
                return
            except NotFoundError:
                pass

        platform = IntegrationPlatform(
            name=DEFAULT_PLATFORM_NAME,
            namespace=namespace,
            spec=PlatformSpec(cluster=self.cluster or CLUSTER_KUBERNETES),
            phase=PLATFORM_PHASE_CREATING,
        )
        if env.client is not None:
            env.client.create(platform)
        env.logger.info("Created default platform %s/%s", namespace, platform.name)
        env.platform = platform


TRAIT = TraitRef(
    id=PlatformTrait.ID,
    factory=PlatformTrait,
    doc="Creates the default integration platform when the namespace has none.",
    tags=("platform",),
)
