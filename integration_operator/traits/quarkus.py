from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef

from integration_operator.builder.quarkus import quarkus_steps
from integration_operator.framework.environment import Environment
from integration_operator.framework.models import KIT_PHASE_BUILD_SUBMITTED
from integration_operator.traits.base import BaseTrait


@dataclass
class QuarkusTrait(BaseTrait):
    """Opt-in: builds the kit on the Quarkus runtime instead of the plain one."""

    ID = "quarkus"
    ORDER = 700
    INFLUENCES_KIT = True

    def configure(self, env: Environment) -> bool:
        if self.enabled is not True:
            return False
        return env.integration_kit_in_phase(KIT_PHASE_BUILD_SUBMITTED)

    def apply(self, env: Environment) -> None:
        env.build_steps = quarkus_steps()
        if env.integration_kit is not None:
            env.integration_kit.labels["camel.apache.org/runtime.provider"] = "quarkus"


TRAIT = TraitRef(
    id=QuarkusTrait.ID,
    factory=QuarkusTrait,
    doc="Replaces the scheduled build steps with the Quarkus variant (enable with enabled=true).",
    tags=("build", "runtime"),
)
