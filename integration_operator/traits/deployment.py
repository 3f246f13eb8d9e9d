from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef

from integration_operator.framework.environment import Environment
from integration_operator.framework.kube import Deployment, ObjectMeta
from integration_operator.framework.models import PROFILE_KUBERNETES, PROFILE_OPENSHIFT
from integration_operator.traits._shared import (
    add_config_maps,
    build_pod_template,
    integration_container,
    integration_labels,
    is_deploying_or_running,
    require_integration,
)
from integration_operator.traits.base import BaseTrait


@dataclass
class DeploymentTrait(BaseTrait):
    ID = "deployment"
    ORDER = 1100
    PROFILES = (PROFILE_KUBERNETES, PROFILE_OPENSHIFT)
    PLATFORM_TRAIT = True

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        return is_deploying_or_running(env)

    def apply(self, env: Environment) -> None:
        integration = require_integration(env, self.id)
        template = build_pod_template(env, self.id)
        add_config_maps(env, template.config_maps)

        if env.resources.get_deployment_for_integration(integration) is not None:
            return

        labels = integration_labels(integration)
        env.resources.add(
            Deployment(
                metadata=ObjectMeta(
                    name=integration.name,
                    namespace=integration.namespace,
                    labels=dict(labels),
                ),
                replicas=integration.spec.replicas,
                selector=dict(labels),
                containers=[integration_container(env, template)],
                volumes=list(template.volumes),
            )
        )


TRAIT = TraitRef(
    id=DeploymentTrait.ID,
    factory=DeploymentTrait,
    doc="Runs the integration as a Deployment with sources, resources and configuration mounted.",
    tags=("workload",),
)
