"""Cluster object values assembled by traits.

Only the fields traits read or write are modelled; `to_dict` renders the manifest
shape handed to the persistence collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass
class ObjectMeta:
    name: str
    namespace: str = "default"
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    owner_references: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.labels:
            out["labels"] = dict(self.labels)
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.owner_references:
            out["ownerReferences"] = [dict(ref) for ref in self.owner_references]
        return out


@dataclass
class EnvVar:
    name: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value}


def set_env_var(env: list[EnvVar], name: str, value: str) -> None:
    """Update the variable in place when present, else append it."""
    for item in env:
        if item.name == name:
            item.value = value
            return
    env.append(EnvVar(name=name, value=value))


def get_env_var(env: list[EnvVar], name: str) -> EnvVar | None:
    for item in env:
        if item.name == name:
            return item
    return None


@dataclass
class VolumeMount:
    name: str
    mount_path: str
    read_only: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "mountPath": self.mount_path, "readOnly": self.read_only}


@dataclass
class Volume:
    name: str
    config_map: str | None = None
    secret: str | None = None
    items: list[dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name}
        if self.config_map is not None:
            source: dict[str, Any] = {"name": self.config_map}
            if self.items:
                source["items"] = [dict(item) for item in self.items]
            out["configMap"] = source
        if self.secret is not None:
            out["secret"] = {"secretName": self.secret}
        return out


@dataclass
class ContainerPort:
    name: str
    container_port: int
    protocol: str = "TCP"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "containerPort": self.container_port, "protocol": self.protocol}


@dataclass
class Container:
    name: str
    image: str = ""
    env: list[EnvVar] = field(default_factory=list)
    volume_mounts: list[VolumeMount] = field(default_factory=list)
    ports: list[ContainerPort] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "image": self.image}
        if self.env:
            out["env"] = [e.to_dict() for e in self.env]
        if self.volume_mounts:
            out["volumeMounts"] = [m.to_dict() for m in self.volume_mounts]
        if self.ports:
            out["ports"] = [p.to_dict() for p in self.ports]
        return out


@dataclass
class Deployment:
    metadata: ObjectMeta
    replicas: int | None = None
    selector: dict[str, str] = field(default_factory=dict)
    containers: list[Container] = field(default_factory=list)
    volumes: list[Volume] = field(default_factory=list)

    kind: ClassVar[str] = "Deployment"
    api_version: ClassVar[str] = "apps/v1"

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "selector": {"matchLabels": dict(self.selector)},
            "template": {
                "metadata": {"labels": dict(self.selector)},
                "spec": {
                    "containers": [c.to_dict() for c in self.containers],
                    "volumes": [v.to_dict() for v in self.volumes],
                },
            },
        }
        if self.replicas is not None:
            spec["replicas"] = self.replicas
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": spec,
        }


@dataclass
class ServicePort:
    name: str
    port: int
    target_port: int | str
    protocol: str = "TCP"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "port": self.port,
            "targetPort": self.target_port,
            "protocol": self.protocol,
        }


@dataclass
class Service:
    metadata: ObjectMeta
    selector: dict[str, str] = field(default_factory=dict)
    ports: list[ServicePort] = field(default_factory=list)

    kind: ClassVar[str] = "Service"
    api_version: ClassVar[str] = "v1"

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": {"selector": dict(self.selector), "ports": [p.to_dict() for p in self.ports]},
        }


@dataclass
class ConfigMap:
    metadata: ObjectMeta
    data: dict[str, str] = field(default_factory=dict)

    kind: ClassVar[str] = "ConfigMap"
    api_version: ClassVar[str] = "v1"

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "data": dict(self.data),
        }


@dataclass
class Route:
    metadata: ObjectMeta
    service_name: str
    target_port: str
    host: str | None = None
    tls_termination: str | None = None

    kind: ClassVar[str] = "Route"
    api_version: ClassVar[str] = "route.openshift.io/v1"

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        spec: dict[str, Any] = {
            "port": {"targetPort": self.target_port},
            "to": {"kind": "Service", "name": self.service_name},
        }
        if self.host:
            spec["host"] = self.host
        if self.tls_termination:
            spec["tls"] = {"termination": self.tls_termination}
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": spec,
        }


@dataclass
class KnativeService:
    metadata: ObjectMeta
    template_annotations: dict[str, str] = field(default_factory=dict)
    template_labels: dict[str, str] = field(default_factory=dict)
    containers: list[Container] = field(default_factory=list)
    volumes: list[Volume] = field(default_factory=list)

    kind: ClassVar[str] = "KnativeService"
    api_version: ClassVar[str] = "serving.knative.dev/v1"

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": "Service",
            "metadata": self.metadata.to_dict(),
            "spec": {
                "template": {
                    "metadata": {
                        "labels": dict(self.template_labels),
                        "annotations": dict(self.template_annotations),
                    },
                    "spec": {
                        "containers": [c.to_dict() for c in self.containers],
                        "volumes": [v.to_dict() for v in self.volumes],
                    },
                }
            },
        }
