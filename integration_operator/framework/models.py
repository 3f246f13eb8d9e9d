from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

IntegrationPhase = Literal["", "initialization", "building-kit", "deploying", "running", "error"]
IntegrationKitPhase = Literal["", "initialization", "build-submitted", "build-running", "ready", "error"]
PlatformPhase = Literal["", "creating", "starting", "ready", "error"]

INTEGRATION_PHASE_INITIALIZATION = "initialization"
INTEGRATION_PHASE_BUILDING_KIT = "building-kit"
INTEGRATION_PHASE_DEPLOYING = "deploying"
INTEGRATION_PHASE_RUNNING = "running"
INTEGRATION_PHASE_ERROR = "error"

KIT_PHASE_INITIALIZATION = "initialization"
KIT_PHASE_BUILD_SUBMITTED = "build-submitted"
KIT_PHASE_BUILD_RUNNING = "build-running"
KIT_PHASE_READY = "ready"
KIT_PHASE_ERROR = "error"

PLATFORM_PHASE_CREATING = "creating"
PLATFORM_PHASE_READY = "ready"

PROFILE_KUBERNETES = "kubernetes"
PROFILE_OPENSHIFT = "openshift"
PROFILE_KNATIVE = "knative"
ALL_PROFILES: tuple[str, ...] = (PROFILE_KUBERNETES, PROFILE_OPENSHIFT, PROFILE_KNATIVE)

CLUSTER_KUBERNETES = "Kubernetes"
CLUSTER_OPENSHIFT = "OpenShift"

INTEGRATION_LABEL = "camel.apache.org/integration"
KIT_TYPE_LABEL = "camel.apache.org/kit.type"
KIT_TYPE_PLATFORM = "platform"
KIT_TYPE_USER = "user"
KIT_TYPE_EXTERNAL = "external"

CONDITION_SERVICE_AVAILABLE = "ServiceAvailable"
CONDITION_SERVICE_NOT_AVAILABLE_REASON = "ServiceNotAvailable"
CONDITION_KIT_AVAILABLE = "IntegrationKitAvailable"

API_VERSION = "camel.apache.org/v1"


def _mapping(value: Any, path: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{path} must be a mapping (type={type(value).__name__})")
    return dict(value)


def _list(value: Any, path: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{path} must be a list (type={type(value).__name__})")
    return list(value)


def _str_map(value: Any, path: str) -> dict[str, str]:
    return {str(k): str(v) for k, v in _mapping(value, path).items()}


def _option_value(value: Any, path: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    raise TypeError(f"{path} must be a scalar or list (type={type(value).__name__})")


@dataclass
class TraitSpec:
    configuration: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, *, path: str) -> "TraitSpec":
        raw = _mapping(data, path)
        # Both `{configuration: {...}}` and a bare option mapping are accepted.
        options = _mapping(raw["configuration"] if "configuration" in raw else raw, f"{path}.configuration")
        return cls(
            configuration={
                str(key): _option_value(value, f"{path}.configuration.{key}")
                for key, value in options.items()
            }
        )

    def to_dict(self) -> dict[str, Any]:
        return {"configuration": dict(self.configuration)}


def parse_traits(data: Any, path: str) -> dict[str, TraitSpec]:
    return {
        str(trait_id): TraitSpec.from_dict(spec, path=f"{path}.{trait_id}")
        for trait_id, spec in _mapping(data, path).items()
    }


def trait_configurations(traits: Mapping[str, TraitSpec] | None) -> dict[str, dict[str, str]]:
    """Trait id -> option mapping, the shape consumed by the configuration resolver."""
    if not traits:
        return {}
    return {trait_id: dict(spec.configuration) for trait_id, spec in traits.items()}


@dataclass
class Condition:
    type: str
    status: str
    reason: str = ""
    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "status": self.status, "reason": self.reason, "message": self.message}


def set_condition(conditions: list[Condition], condition: Condition) -> None:
    for idx, existing in enumerate(conditions):
        if existing.type == condition.type:
            conditions[idx] = condition
            return
    conditions.append(condition)


def get_condition(conditions: list[Condition], condition_type: str) -> Condition | None:
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


@dataclass
class Artifact:
    id: str
    location: str
    target: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Artifact":
        return cls(id=str(data["id"]), location=str(data.get("location", "")), target=str(data["target"]))

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "location": self.location, "target": self.target}


@dataclass
class SourceSpec:
    name: str
    content: str = ""
    content_ref: str | None = None
    content_key: str | None = None
    language: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SourceSpec":
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValueError("Integration source requires a name")
        language = str(data.get("language") or "").strip()
        if not language and "." in name:
            language = name.rsplit(".", 1)[-1]
        return cls(
            name=name,
            content=str(data.get("content") or ""),
            content_ref=data.get("contentRef"),
            content_key=data.get("contentKey"),
            language=language,
        )


@dataclass
class ResourceSpec:
    name: str
    content: str = ""
    content_ref: str | None = None
    content_key: str | None = None
    mount_path: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResourceSpec":
        return cls(
            name=str(data["name"]),
            content=str(data.get("content") or ""),
            content_ref=data.get("contentRef"),
            content_key=data.get("contentKey"),
            mount_path=data.get("mountPath"),
        )


@dataclass
class ConfigurationSpec:
    type: Literal["property", "configmap", "secret", "env"]
    value: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigurationSpec":
        kind = str(data.get("type") or "").strip()
        if kind not in ("property", "configmap", "secret", "env"):
            raise ValueError(f"Invalid configuration type: {kind!r}")
        return cls(type=kind, value=str(data.get("value") or ""))  # type: ignore[arg-type]


@dataclass
class IntegrationSpec:
    sources: list[SourceSpec] = field(default_factory=list)
    resources: list[ResourceSpec] = field(default_factory=list)
    configuration: list[ConfigurationSpec] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    traits: dict[str, TraitSpec] = field(default_factory=dict)
    profile: str | None = None
    replicas: int | None = None


@dataclass
class IntegrationStatus:
    phase: str = ""
    kit: str | None = None
    image: str | None = None
    conditions: list[Condition] = field(default_factory=list)


@dataclass
class Integration:
    name: str
    namespace: str = "default"
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    spec: IntegrationSpec = field(default_factory=IntegrationSpec)
    status: IntegrationStatus = field(default_factory=IntegrationStatus)

    kind = "Integration"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Integration":
        metadata = _mapping(data.get("metadata"), "metadata")
        spec = _mapping(data.get("spec"), "spec")
        status = _mapping(data.get("status"), "status")
        replicas = spec.get("replicas")
        if replicas is not None and (isinstance(replicas, bool) or not isinstance(replicas, int)):
            raise TypeError(f"spec.replicas must be an int (type={type(replicas).__name__})")
        return cls(
            name=str(metadata["name"]),
            namespace=str(metadata.get("namespace") or "default"),
            uid=str(metadata.get("uid") or ""),
            labels=_str_map(metadata.get("labels"), "metadata.labels"),
            annotations=_str_map(metadata.get("annotations"), "metadata.annotations"),
            spec=IntegrationSpec(
                sources=[SourceSpec.from_dict(s) for s in _list(spec.get("sources"), "spec.sources")],
                resources=[ResourceSpec.from_dict(r) for r in _list(spec.get("resources"), "spec.resources")],
                configuration=[
                    ConfigurationSpec.from_dict(c)
                    for c in _list(spec.get("configuration"), "spec.configuration")
                ],
                dependencies=[str(d) for d in _list(spec.get("dependencies"), "spec.dependencies")],
                traits=parse_traits(spec.get("traits"), "spec.traits"),
                profile=spec.get("profile"),
                replicas=replicas,
            ),
            status=IntegrationStatus(
                phase=str(status.get("phase") or ""),
                kit=status.get("kit"),
                image=status.get("image"),
            ),
        )

    def set_condition(self, condition_type: str, status: str, reason: str, message: str) -> None:
        set_condition(self.status.conditions, Condition(condition_type, status, reason, message))

    def get_condition(self, condition_type: str) -> Condition | None:
        return get_condition(self.status.conditions, condition_type)


@dataclass
class IntegrationKitSpec:
    dependencies: list[str] = field(default_factory=list)
    traits: dict[str, TraitSpec] = field(default_factory=dict)
    profile: str | None = None
    image: str | None = None


@dataclass
class IntegrationKitStatus:
    phase: str = ""
    image: str | None = None
    base_image: str | None = None
    runtime_version: str | None = None
    artifacts: list[Artifact] = field(default_factory=list)
    failure: str | None = None


@dataclass
class IntegrationKit:
    name: str
    namespace: str = "default"
    labels: dict[str, str] = field(default_factory=dict)
    spec: IntegrationKitSpec = field(default_factory=IntegrationKitSpec)
    status: IntegrationKitStatus = field(default_factory=IntegrationKitStatus)

    kind = "IntegrationKit"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IntegrationKit":
        metadata = _mapping(data.get("metadata"), "metadata")
        spec = _mapping(data.get("spec"), "spec")
        status = _mapping(data.get("status"), "status")
        return cls(
            name=str(metadata["name"]),
            namespace=str(metadata.get("namespace") or "default"),
            labels=_str_map(metadata.get("labels"), "metadata.labels"),
            spec=IntegrationKitSpec(
                dependencies=[str(d) for d in _list(spec.get("dependencies"), "spec.dependencies")],
                traits=parse_traits(spec.get("traits"), "spec.traits"),
                profile=spec.get("profile"),
                image=spec.get("image"),
            ),
            status=IntegrationKitStatus(
                phase=str(status.get("phase") or ""),
                image=status.get("image"),
                base_image=status.get("baseImage"),
                runtime_version=status.get("runtimeVersion"),
                artifacts=[Artifact.from_dict(a) for a in _list(status.get("artifacts"), "status.artifacts")],
            ),
        )

    @property
    def kit_type(self) -> str:
        return self.labels.get(KIT_TYPE_LABEL, KIT_TYPE_PLATFORM)

    def to_dict(self) -> dict[str, Any]:
        status: dict[str, Any] = {
            "phase": self.status.phase,
            "artifacts": [a.to_dict() for a in self.status.artifacts],
        }
        if self.status.image:
            status["image"] = self.status.image
        if self.status.base_image:
            status["baseImage"] = self.status.base_image
        if self.status.runtime_version:
            status["runtimeVersion"] = self.status.runtime_version
        if self.status.failure:
            status["failure"] = self.status.failure
        return {
            "apiVersion": API_VERSION,
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace, "labels": dict(self.labels)},
            "spec": {
                "dependencies": list(self.spec.dependencies),
                "traits": {k: v.to_dict() for k, v in self.spec.traits.items()},
            },
            "status": status,
        }


@dataclass
class PlatformBuildSpec:
    runtime_version: str = "1.0.0"
    base_image: str = "adoptopenjdk/openjdk11:slim"
    local_repository: str | None = None
    group_id: str = "org.apache.camel.k.integration"
    registry: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "PlatformBuildSpec":
        raw = _mapping(data, "spec.build")
        defaults = cls()
        return cls(
            runtime_version=str(raw.get("runtimeVersion") or defaults.runtime_version),
            base_image=str(raw.get("baseImage") or defaults.base_image),
            local_repository=raw.get("localRepository"),
            group_id=str(raw.get("groupId") or defaults.group_id),
            registry=raw.get("registry"),
        )


@dataclass
class PlatformSpec:
    cluster: str = CLUSTER_KUBERNETES
    profile: str | None = None
    traits: dict[str, TraitSpec] = field(default_factory=dict)
    build: PlatformBuildSpec = field(default_factory=PlatformBuildSpec)


@dataclass
class IntegrationPlatform:
    name: str
    namespace: str = "default"
    spec: PlatformSpec = field(default_factory=PlatformSpec)
    phase: str = ""

    kind = "IntegrationPlatform"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IntegrationPlatform":
        metadata = _mapping(data.get("metadata"), "metadata")
        spec = _mapping(data.get("spec"), "spec")
        status = _mapping(data.get("status"), "status")
        cluster = str(spec.get("cluster") or CLUSTER_KUBERNETES)
        if cluster not in (CLUSTER_KUBERNETES, CLUSTER_OPENSHIFT):
            raise ValueError(
                f"spec.cluster must be one of: {CLUSTER_KUBERNETES}, {CLUSTER_OPENSHIFT} (got {cluster!r})"
            )
        profile = spec.get("profile")
        if profile is not None and profile not in ALL_PROFILES:
            raise ValueError(f"spec.profile must be one of: {', '.join(ALL_PROFILES)} (got {profile!r})")
        return cls(
            name=str(metadata.get("name") or "camel-k"),
            namespace=str(metadata.get("namespace") or "default"),
            spec=PlatformSpec(
                cluster=cluster,
                profile=profile,
                traits=parse_traits(spec.get("traits"), "spec.traits"),
                build=PlatformBuildSpec.from_dict(spec.get("build")),
            ),
            phase=str(status.get("phase") or ""),
        )
