from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef, trait_property

from integration_operator.framework.environment import Environment
from integration_operator.framework.errors import TraitApplyError
from integration_operator.framework.kube import ObjectMeta, Route
from integration_operator.framework.models import PROFILE_OPENSHIFT
from integration_operator.traits._shared import (
    integration_labels,
    is_deploying_or_running,
    require_integration,
)
from integration_operator.traits.base import BaseTrait

TLS_TERMINATIONS = ("edge", "passthrough", "reencrypt")


@dataclass
class RouteTrait(BaseTrait):
    host: str | None = trait_property("host", "str")
    tls_termination: str | None = trait_property("tls-termination", "str")

    ID = "route"
    ORDER = 2200
    PROFILES = (PROFILE_OPENSHIFT,)

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        if not is_deploying_or_running(env):
            return False
        if self.tls_termination and self.tls_termination not in TLS_TERMINATIONS:
            raise TraitApplyError(
                f"Invalid tls-termination {self.tls_termination!r} (expected one of: {', '.join(TLS_TERMINATIONS)})",
                trait_id=self.id,
            )
        integration = require_integration(env, self.id)
        # Nothing to route without a Service for the integration.
        return env.resources.get_service_for_integration(integration) is not None

    def apply(self, env: Environment) -> None:
        integration = require_integration(env, self.id)
        service = env.resources.get_service_for_integration(integration)
        if service is None:
            raise TraitApplyError(f"No service found for integration {integration.name}", trait_id=self.id)
        if env.resources.get_route(lambda r: r.name == integration.name) is not None:
            return

        target_port = service.ports[0].name if service.ports else "http"
        env.resources.add(
            Route(
                metadata=ObjectMeta(
                    name=integration.name,
                    namespace=integration.namespace,
                    labels=integration_labels(integration),
                ),
                service_name=service.name,
                target_port=target_port,
                host=self.host,
                tls_termination=self.tls_termination,
            )
        )


TRAIT = TraitRef(
    id=RouteTrait.ID,
    factory=RouteTrait,
    doc="Exposes the integration Service through an OpenShift Route.",
    tags=("network", "openshift"),
)
