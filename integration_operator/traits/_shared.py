from __future__ import annotations

from dataclasses import dataclass, field

from integration_operator.framework.environment import Environment
from integration_operator.framework.errors import TraitApplyError
from integration_operator.framework.kube import (
    ConfigMap,
    Container,
    EnvVar,
    ObjectMeta,
    Volume,
    VolumeMount,
    set_env_var,
)
from integration_operator.framework.models import (
    INTEGRATION_LABEL,
    INTEGRATION_PHASE_DEPLOYING,
    INTEGRATION_PHASE_RUNNING,
    Integration,
)

SOURCES_MOUNT = "/etc/camel/sources"
RESOURCES_MOUNT = "/etc/camel/resources"
CONF_MOUNT = "/etc/camel/conf"
CONF_D_MOUNT = "/etc/camel/conf.d"
DEFAULT_CONTAINER_NAME = "integration"
DEFAULT_CONTENT_KEY = "content"


@dataclass
class PodTemplate:
    volumes: list[Volume] = field(default_factory=list)
    mounts: list[VolumeMount] = field(default_factory=list)
    config_maps: list[ConfigMap] = field(default_factory=list)
    env: list[EnvVar] = field(default_factory=list)


def require_integration(env: Environment, trait_id: str) -> Integration:
    if env.integration is None:
        raise TraitApplyError(f"Trait {trait_id} requires an integration", trait_id=trait_id)
    return env.integration


def is_deploying_or_running(env: Environment) -> bool:
    return env.integration_in_phase(INTEGRATION_PHASE_DEPLOYING, INTEGRATION_PHASE_RUNNING)


def integration_labels(integration: Integration) -> dict[str, str]:
    return {INTEGRATION_LABEL: integration.name}


def integration_image(env: Environment) -> str:
    if env.integration_kit is not None and env.integration_kit.status.image:
        return env.integration_kit.status.image
    if env.integration is not None and env.integration.status.image:
        return env.integration.status.image
    return ""


def _mount_content(
    template: PodTemplate,
    integration: Integration,
    *,
    prefix: str,
    index: int,
    file_name: str,
    content: str,
    content_ref: str | None,
    content_key: str | None,
    mount_path: str,
) -> None:
    volume_name = f"i-{prefix}-{index:03d}"
    if content_ref:
        cm_name = content_ref
    else:
        cm_name = f"{integration.name}-{prefix}-{index:03d}"
        template.config_maps.append(
            ConfigMap(
                metadata=ObjectMeta(
                    name=cm_name,
                    namespace=integration.namespace,
                    labels=integration_labels(integration),
                ),
                data={content_key or DEFAULT_CONTENT_KEY: content},
            )
        )
    template.volumes.append(
        Volume(
            name=volume_name,
            config_map=cm_name,
            items=[{"key": content_key or DEFAULT_CONTENT_KEY, "path": file_name}],
        )
    )
    template.mounts.append(VolumeMount(name=volume_name, mount_path=mount_path))


def build_pod_template(env: Environment, trait_id: str) -> PodTemplate:
    """Volumes, mounts, config maps and env vars shared by every workload shape."""

    integration = require_integration(env, trait_id)
    template = PodTemplate()

    properties = [c.value for c in integration.spec.configuration if c.type == "property"]
    properties_cm = f"{integration.name}-properties"
    template.config_maps.append(
        ConfigMap(
            metadata=ObjectMeta(
                name=properties_cm,
                namespace=integration.namespace,
                labels=integration_labels(integration),
            ),
            data={"application.properties": "\n".join(properties)},
        )
    )
    template.volumes.append(
        Volume(
            name="integration-properties",
            config_map=properties_cm,
            items=[{"key": "application.properties", "path": "application.properties"}],
        )
    )
    template.mounts.append(VolumeMount(name="integration-properties", mount_path=CONF_MOUNT))

    routes: list[str] = []
    for idx, source in enumerate(integration.spec.sources):
        mount_path = f"{SOURCES_MOUNT}/i-source-{idx:03d}"
        _mount_content(
            template,
            integration,
            prefix="source",
            index=idx,
            file_name=source.name,
            content=source.content,
            content_ref=source.content_ref,
            content_key=source.content_key,
            mount_path=mount_path,
        )
        route = f"file:{mount_path}/{source.name}"
        if source.language:
            route += f"?language={source.language}"
        routes.append(route)

    for idx, resource in enumerate(integration.spec.resources):
        _mount_content(
            template,
            integration,
            prefix="resource",
            index=idx,
            file_name=resource.name,
            content=resource.content,
            content_ref=resource.content_ref,
            content_key=resource.content_key,
            mount_path=resource.mount_path or f"{RESOURCES_MOUNT}/i-resource-{idx:03d}",
        )

    for conf in integration.spec.configuration:
        if conf.type == "configmap":
            template.volumes.append(Volume(name=conf.value, config_map=conf.value))
            template.mounts.append(
                VolumeMount(name=conf.value, mount_path=f"{CONF_D_MOUNT}/integration-cm-{conf.value}")
            )
        elif conf.type == "secret":
            template.volumes.append(Volume(name=conf.value, secret=conf.value))
            template.mounts.append(
                VolumeMount(name=conf.value, mount_path=f"{CONF_D_MOUNT}/integration-secret-{conf.value}")
            )

    set_env_var(template.env, "CAMEL_K_ROUTES", ",".join(routes))
    set_env_var(template.env, "CAMEL_K_CONF", f"{CONF_MOUNT}/application.properties")
    set_env_var(template.env, "CAMEL_K_CONF_D", CONF_D_MOUNT)
    for conf in integration.spec.configuration:
        if conf.type != "env":
            continue
        name, sep, value = conf.value.partition("=")
        if not sep or not name.strip():
            raise TraitApplyError(
                f"Invalid env configuration {conf.value!r} (expected NAME=value)", trait_id=trait_id
            )
        set_env_var(template.env, name.strip(), value)
    for var in env.env_vars:
        set_env_var(template.env, var.name, var.value)

    return template


def integration_container(env: Environment, template: PodTemplate) -> Container:
    return Container(
        name=DEFAULT_CONTAINER_NAME,
        image=integration_image(env),
        env=[EnvVar(e.name, e.value) for e in template.env],
        volume_mounts=list(template.mounts),
    )


def add_config_maps(env: Environment, config_maps: list[ConfigMap]) -> None:
    for cm in config_maps:
        if env.resources.find_by_key(ConfigMap.kind, cm.name) is None:
            env.resources.add(cm)
