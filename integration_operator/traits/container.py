from __future__ import annotations

from dataclasses import dataclass

from traitkit import TraitRef, trait_property

from integration_operator.framework.environment import Environment
from integration_operator.framework.kube import Container, ContainerPort, ServicePort
from integration_operator.traits._shared import (
    DEFAULT_CONTAINER_NAME,
    is_deploying_or_running,
    require_integration,
)
from integration_operator.traits.base import BaseTrait


@dataclass
class ContainerTrait(BaseTrait):
    """Names the integration container and wires its HTTP port to the Service, if any."""

    name: str = trait_property("name", "str", default=DEFAULT_CONTAINER_NAME)
    port: int = trait_property("port", "int", default=8080)
    port_name: str = trait_property("port-name", "str", default="http")
    service_port: int = trait_property("service-port", "int", default=80)
    service_port_name: str = trait_property("service-port-name", "str", default="http")

    ID = "container"
    ORDER = 1600
    PLATFORM_TRAIT = True

    def configure(self, env: Environment) -> bool:
        if self.is_explicitly_disabled():
            return False
        return is_deploying_or_running(env)

    def _containers(self, env: Environment) -> list[Container]:
        found: list[Container] = []

        def collect(obj) -> None:
            found.extend(c for c in obj.containers if c.name == DEFAULT_CONTAINER_NAME)

        env.resources.visit_deployments(collect)
        env.resources.visit_knative_services(collect)
        return found

    def apply(self, env: Environment) -> None:
        integration = require_integration(env, self.id)
        containers = self._containers(env)
        for container in containers:
            container.name = self.name

        if env.get_trait("service") is None:
            return
        service = env.resources.get_service_for_integration(integration)
        if service is None:
            return

        for container in containers:
            if not any(p.name == self.port_name for p in container.ports):
                container.ports.append(ContainerPort(name=self.port_name, container_port=self.port))
        if not any(p.name == self.service_port_name for p in service.ports):
            service.ports.append(
                ServicePort(name=self.service_port_name, port=self.service_port, target_port=self.port_name)
            )


TRAIT = TraitRef(
    id=ContainerTrait.ID,
    factory=ContainerTrait,
    doc="Configures the integration container name and the port exposed through the Service.",
    tags=("workload", "network"),
)
