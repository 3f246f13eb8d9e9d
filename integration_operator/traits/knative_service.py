from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef, trait_property

from integration_operator.framework.environment import Environment
from integration_operator.framework.errors import TraitApplyError
from integration_operator.framework.kube import KnativeService, ObjectMeta
from integration_operator.framework.models import PROFILE_KNATIVE
from integration_operator.traits._shared import (
    add_config_maps,
    build_pod_template,
    integration_container,
    integration_labels,
    is_deploying_or_running,
    require_integration,
)
from integration_operator.traits.base import BaseTrait

AUTOSCALING_CLASS_ANNOTATION = "autoscaling.knative.dev/class"
AUTOSCALING_TARGET_ANNOTATION = "autoscaling.knative.dev/target"
MIN_SCALE_ANNOTATION = "autoscaling.knative.dev/minScale"
MAX_SCALE_ANNOTATION = "autoscaling.knative.dev/maxScale"


@dataclass
class KnativeServiceTrait(BaseTrait):
    """Runs the integration as a Knative Service with autoscaling annotations."""

    autoscaling_class: str | None = trait_property("autoscaling-class", "str")
    autoscaling_target: int | None = trait_property("autoscaling-target", "int")
    min_scale: int | None = trait_property("min-scale", "int")
    max_scale: int | None = trait_property("max-scale", "int")

    ID = "knative-service"
    ORDER = 1400
    PROFILES = (PROFILE_KNATIVE,)

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        if not is_deploying_or_running(env):
            return False
        if self.min_scale is not None and self.max_scale is not None and self.min_scale > self.max_scale:
            raise TraitApplyError(
                f"min-scale ({self.min_scale}) cannot exceed max-scale ({self.max_scale})",
                trait_id=self.id,
            )
        return True

    def annotations(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.autoscaling_class:
            out[AUTOSCALING_CLASS_ANNOTATION] = self.autoscaling_class
        if self.autoscaling_target is not None:
            out[AUTOSCALING_TARGET_ANNOTATION] = str(self.autoscaling_target)
        if self.min_scale is not None:
            out[MIN_SCALE_ANNOTATION] = str(self.min_scale)
        if self.max_scale is not None:
            out[MAX_SCALE_ANNOTATION] = str(self.max_scale)
        return out

    def apply(self, env: Environment) -> None:
        integration = require_integration(env, self.id)
        template = build_pod_template(env, self.id)
        add_config_maps(env, template.config_maps)

        if env.resources.get_knative_service(lambda s: s.name == integration.name) is not None:
            return

        labels = integration_labels(integration)
        env.resources.add(
            KnativeService(
                metadata=ObjectMeta(
                    name=integration.name,
                    namespace=integration.namespace,
                    labels=dict(labels),
                ),
                template_annotations=self.annotations(),
                template_labels=dict(labels),
                containers=[integration_container(env, template)],
                volumes=list(template.volumes),
            )
        )


TRAIT = TraitRef(
    id=KnativeServiceTrait.ID,
    factory=KnativeServiceTrait,
    doc="Runs the integration as a Knative Service; min-scale, max-scale and autoscaling-* tune scaling.",
    tags=("workload", "knative"),
)
