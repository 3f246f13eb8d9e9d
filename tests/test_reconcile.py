import logging
from pathlib import Path

import pytest
import yaml

from integration_operator.app.reconcile import build_kit, persist_resources, reconcile_integration
from integration_operator.framework.cluster import InMemoryClusterClient
from integration_operator.framework.errors import BuildStepError
from integration_operator.framework.models import (
    INTEGRATION_PHASE_DEPLOYING,
    KIT_PHASE_ERROR,
    KIT_PHASE_READY,
    Integration,
    IntegrationKit,
    IntegrationPlatform,
    PlatformBuildSpec,
    PlatformSpec,
    SourceSpec,
    TraitSpec,
)


def _quiet_logger() -> logging.Logger:
    logger = logging.getLogger("test.reconcile")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


class FakeMaven:
    """Writes the on-disk layout a real `mvn package` would leave behind."""

    def __init__(self, libs: tuple[str, ...] = (), *, fail: bool = False) -> None:
        self.libs = libs
        self.fail = fail
        self.calls: list[tuple[str, ...]] = []

    def run(self, path, *options: str) -> None:
        self.calls.append(options)
        if self.fail:
            raise BuildStepError("maven exploded")
        target = Path(path) / "target"
        (target / "lib").mkdir(parents=True, exist_ok=True)
        for name in self.libs:
            (target / "lib" / name).write_bytes(b"jar")
        (target / "kit-1-1.0.0-runner.jar").write_bytes(b"runner")


def _platform() -> IntegrationPlatform:
    return IntegrationPlatform(
        name="camel-k",
        namespace="ns",
        spec=PlatformSpec(build=PlatformBuildSpec(runtime_version="1.0.0", registry="registry.local")),
    )


def _submitted_kit(**traits: TraitSpec) -> IntegrationKit:
    kit = IntegrationKit(name="kit-1", namespace="ns")
    kit.spec.dependencies = ["camel:log"]
    kit.spec.traits = dict(traits)
    return kit


def test_reconcile_creates_default_platform_and_persists_objects():
    kit = IntegrationKit(name="kit-1", namespace="ns")
    kit.status.phase = KIT_PHASE_READY
    kit.status.image = "registry.local/ns/camel-k-kit-1:1.0.0"
    integration = Integration(name="hello", namespace="ns")
    integration.spec.sources = [SourceSpec(name="hello.groovy", content="from('timer:tick').to('log:info')")]
    integration.status.phase = INTEGRATION_PHASE_DEPLOYING
    integration.status.kit = "kit-1"
    client = InMemoryClusterClient([kit])

    env = reconcile_integration(integration, client=client, logger=_quiet_logger())

    assert env.executed_trait_ids()[0] == "platform"
    assert env.platform.name == "camel-k"
    assert client.get("IntegrationPlatform", "ns", "camel-k").namespace == "ns"
    assert env.integration_kit.name == "kit-1"
    assert env.resources.get_deployment().containers[0].image == kit.status.image

    assert persist_resources(client, env) == len(env.resources)
    assert persist_resources(client, env) == len(env.resources)
    assert client.get("Deployment", "ns", "hello").name == "hello"


def test_reconcile_failure_leaves_client_untouched():
    integration = Integration(name="hello", namespace="ns")
    integration.status.phase = INTEGRATION_PHASE_DEPLOYING
    integration.spec.traits = {"container": TraitSpec({"port": "eighty"})}
    client = InMemoryClusterClient()

    with pytest.raises(ValueError, match=r"Cannot decode trait container"):
        reconcile_integration(integration, platform=_platform(), client=client, logger=_quiet_logger())

    assert client.list("Deployment") == []


def test_build_kit_records_artifacts_and_marks_kit_ready(tmp_path):
    maven = FakeMaven(libs=("org.apache.camel.camel-log-3.0.0.jar",))
    kit = _submitted_kit()

    build_kit(kit, workspace=tmp_path, runner=maven, platform=_platform(), logger=_quiet_logger())

    assert kit.status.phase == KIT_PHASE_READY
    assert [a.id for a in kit.status.artifacts] == [
        "org.apache.camel:camel-log:3.0.0",
        "org.apache.camel.k.integration:kit-1:1.0.0",
    ]
    assert kit.status.image == "registry.local/ns/camel-k-kit-1:1.0.0"
    assert kit.status.runtime_version == "1.0.0"
    assert maven.calls == [("package",)]
    assert list(tmp_path.iterdir()) == []


def test_build_kit_keeps_staging_with_manifest_when_requested(tmp_path):
    kit = _submitted_kit()

    build_kit(kit, workspace=tmp_path, runner=FakeMaven(), platform=_platform(), keep_staging=True, logger=_quiet_logger())

    (staging,) = list(tmp_path.iterdir())
    manifest = yaml.safe_load((staging / "package" / "manifest.yaml").read_text(encoding="utf-8"))
    assert manifest["image"] == kit.status.image
    assert (staging / "package" / "kit-1-1.0.0-runner.jar").read_bytes() == b"runner"


def test_build_failure_moves_kit_to_error_without_artifacts(tmp_path):
    kit = _submitted_kit()
    kit.status.artifacts = []

    with pytest.raises(BuildStepError, match=r"maven exploded"):
        build_kit(kit, workspace=tmp_path, runner=FakeMaven(fail=True), platform=_platform(), logger=_quiet_logger())

    assert kit.status.phase == KIT_PHASE_ERROR
    assert kit.status.artifacts == []
    assert kit.status.failure == "maven exploded"


def test_quarkus_trait_switches_build_to_quarkus_steps(tmp_path):
    kit = _submitted_kit(quarkus=TraitSpec({"enabled": "true"}))

    build_kit(kit, workspace=tmp_path, runner=FakeMaven(), platform=_platform(), keep_staging=True, logger=_quiet_logger())

    (staging,) = list(tmp_path.iterdir())
    pom = (staging / "maven" / "pom.xml").read_text(encoding="utf-8")
    assert "quarkus-maven-plugin" in pom
    assert "camel-k-quarkus-runtime" in pom
    assert kit.labels["camel.apache.org/runtime.provider"] == "quarkus"


def test_build_kit_requires_a_submitted_kit(tmp_path):
    kit = _submitted_kit()
    kit.status.phase = KIT_PHASE_READY

    with pytest.raises(BuildStepError, match=r"No build steps scheduled for kit kit-1"):
        build_kit(kit, workspace=tmp_path, runner=FakeMaven(), platform=_platform(), logger=_quiet_logger())
