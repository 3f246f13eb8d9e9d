from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef

from integration_operator.builder.steps import default_steps
from integration_operator.framework.environment import Environment
from integration_operator.framework.models import KIT_PHASE_BUILD_SUBMITTED
from integration_operator.traits.base import BaseTrait


@dataclass
class BuilderTrait(BaseTrait):
    """Schedules the default Maven build for a submitted kit."""

    ID = "builder"
    ORDER = 600
    INFLUENCES_KIT = True
    PLATFORM_TRAIT = True

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        return env.integration_kit_in_phase(KIT_PHASE_BUILD_SUBMITTED)

    def apply(self, env: Environment) -> None:
        env.build_steps = default_steps()


TRAIT = TraitRef(
    id=BuilderTrait.ID,
    factory=BuilderTrait,
    doc="Schedules the build steps that package a kit.",
    tags=("build",),
)
