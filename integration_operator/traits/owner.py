from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef, trait_property

from integration_operator.framework.environment import Environment
from integration_operator.framework.models import API_VERSION, INTEGRATION_LABEL, Integration
from integration_operator.traits._shared import is_deploying_or_running, require_integration
from integration_operator.traits.base import BaseTrait


def owner_reference(integration: Integration) -> dict[str, object]:
    return {
        "apiVersion": API_VERSION,
        "kind": Integration.kind,
        "name": integration.name,
        "uid": integration.uid,
        "controller": True,
        "blockOwnerDeletion": True,
    }


@dataclass
class OwnerTrait(BaseTrait):
    """Marks every generated object as owned by the integration."""

    target_labels: list[str] = trait_property("target-labels", "list", default=[])
    target_annotations: list[str] = trait_property("target-annotations", "list", default=[])

    ID = "owner"
    ORDER = 2500
    PLATFORM_TRAIT = True

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        return is_deploying_or_running(env)

    def apply(self, env: Environment) -> None:
        integration = require_integration(env, self.id)
        reference = owner_reference(integration)

        for obj in env.resources:
            meta = obj.metadata
            meta.labels[INTEGRATION_LABEL] = integration.name
            for key in self.target_labels:
                if key in integration.labels:
                    meta.labels[key] = integration.labels[key]
            for key in self.target_annotations:
                if key in integration.annotations:
                    meta.annotations[key] = integration.annotations[key]
            meta.owner_references = [ref for ref in meta.owner_references if ref.get("kind") != Integration.kind]
            meta.owner_references.append(dict(reference))


TRAIT = TraitRef(
    id=OwnerTrait.ID,
    factory=OwnerTrait,
    doc="Labels generated objects and sets the integration as their owner.",
    tags=("metadata",),
)
