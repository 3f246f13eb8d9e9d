from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef

from integration_operator.framework.cluster import NotFoundError
from integration_operator.framework.environment import Environment
from integration_operator.framework.errors import TraitApplyError
from integration_operator.framework.kube import Container, Deployment, KnativeService, set_env_var
from integration_operator.framework.models import (
    INTEGRATION_PHASE_DEPLOYING,
    KIT_PHASE_READY,
    KIT_TYPE_EXTERNAL,
    IntegrationKit,
)
from integration_operator.traits._shared import RESOURCES_MOUNT
from integration_operator.traits.base import BaseTrait

CLASSPATH_ENV = "JAVA_CLASSPATH"
EXTERNAL_DEPENDENCIES = "/deployments/dependencies/*"


def container_classpath(base: set[str], container: Container) -> str:
    entries = set(base)
    entries.update(mount.mount_path for mount in container.volume_mounts)
    return ":".join(sorted(entries))


@dataclass
class ClasspathTrait(BaseTrait):
    """Computes the JVM classpath of every integration container."""

    ID = "classpath"
    ORDER = 3000
    PLATFORM_TRAIT = True

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        return env.in_phase(KIT_PHASE_READY, INTEGRATION_PHASE_DEPLOYING)

    def _resolve_kit(self, env: Environment) -> IntegrationKit:
        if env.integration_kit is not None:
            return env.integration_kit
        integration = env.integration
        if integration is None or not integration.status.kit:
            raise TraitApplyError("No integration kit available for classpath computation", trait_id=self.id)
        if env.client is None:
            raise TraitApplyError(
                f"Cannot fetch integration kit {integration.status.kit} without a cluster client",
                trait_id=self.id,
            )
        try:
            kit = env.client.get(IntegrationKit.kind, integration.namespace, integration.status.kit)
        except NotFoundError as exc:
            raise TraitApplyError(
                f"Unable to find integration kit {integration.namespace}/{integration.status.kit}",
                trait_id=self.id,
            ) from exc
        env.integration_kit = kit
        return kit

    def apply(self, env: Environment) -> None:
        kit = self._resolve_kit(env)

        env.classpath.update((RESOURCES_MOUNT, "./resources"))
        env.classpath.update(artifact.target for artifact in kit.status.artifacts)
        if kit.kit_type == KIT_TYPE_EXTERNAL:
            env.classpath.add(EXTERNAL_DEPENDENCIES)

        def visit(obj: Deployment | KnativeService) -> None:
            for container in obj.containers:
                set_env_var(container.env, CLASSPATH_ENV, container_classpath(env.classpath, container))

        env.resources.visit_deployments(visit)
        env.resources.visit_knative_services(visit)


TRAIT = TraitRef(
    id=ClasspathTrait.ID,
    factory=ClasspathTrait,
    doc="Sets JAVA_CLASSPATH on integration containers from kit artifacts and mounts.",
    tags=("runtime",),
)
