from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from traitkit import StepRecorder, StepRunner

from integration_operator.builder.context import BuildRequest, BuildToolRunner, new_build_context
from integration_operator.foundation.logging_utils import quiet_logger
from integration_operator.framework.catalog import TraitCatalog
from integration_operator.framework.cluster import ClusterClient, NotFoundError, object_key
from integration_operator.framework.environment import Environment
from integration_operator.framework.errors import BuildStepError
from integration_operator.framework.metadata import RuntimeCatalog
from integration_operator.framework.models import (
    KIT_PHASE_BUILD_RUNNING,
    KIT_PHASE_BUILD_SUBMITTED,
    KIT_PHASE_ERROR,
    KIT_PHASE_INITIALIZATION,
    KIT_PHASE_READY,
    Integration,
    IntegrationKit,
    IntegrationPlatform,
)


def reconcile_integration(
    integration: Integration,
    *,
    kit: IntegrationKit | None = None,
    platform: IntegrationPlatform | None = None,
    client: ClusterClient | None = None,
    catalog: TraitCatalog | None = None,
    runtime_catalog: RuntimeCatalog | None = None,
    logger: logging.Logger | None = None,
) -> Environment:
    """Run one trait pass for an integration and return the populated environment.

    Nothing is persisted here. If a trait fails the exception propagates and the
    environment, with whatever earlier traits assembled, is discarded.
    """

    logger = logger or quiet_logger("integration_operator.reconcile")
    if kit is None and integration.status.kit and client is not None:
        try:
            kit = client.get(IntegrationKit.kind, integration.namespace, integration.status.kit)
        except NotFoundError:
            logger.warning("Integration kit %s not found; continuing without it", integration.status.kit)

    env = Environment(
        logger=logger,
        integration=integration,
        integration_kit=kit,
        platform=platform,
        client=client,
        runtime_catalog=runtime_catalog or RuntimeCatalog.default(),
    )
    logger.info("Reconciling integration %s/%s (phase=%s)", integration.namespace, integration.name, integration.status.phase)
    (catalog or TraitCatalog()).apply(env)
    return env


def persist_resources(client: ClusterClient, env: Environment) -> int:
    """Upsert every object assembled during a successful pass; returns the number written."""

    written = 0
    for obj in env.resources:
        kind, namespace, name = object_key(obj)
        try:
            client.get(kind, namespace, name)
        except NotFoundError:
            client.create(obj)
        else:
            client.update(obj)
        written += 1
    env.logger.info("Persisted %d objects", written)
    return written


def build_kit(
    kit: IntegrationKit,
    *,
    workspace: str | Path,
    runner: BuildToolRunner,
    platform: IntegrationPlatform | None = None,
    client: ClusterClient | None = None,
    catalog: TraitCatalog | None = None,
    recorder: StepRecorder | None = None,
    keep_staging: bool = False,
    logger: logging.Logger | None = None,
) -> IntegrationKit:
    """Apply kit-influencing traits, run the scheduled build steps and record the artifacts.

    On failure the kit is moved to the error phase with no artifacts and the
    step's exception propagates.
    """

    logger = logger or quiet_logger("integration_operator.build")
    if kit.status.phase in ("", KIT_PHASE_INITIALIZATION):
        kit.status.phase = KIT_PHASE_BUILD_SUBMITTED

    env = Environment(logger=logger, integration_kit=kit, platform=platform, client=client)
    (catalog or TraitCatalog()).apply(env)
    if not env.build_steps:
        raise BuildStepError(f"No build steps scheduled for kit {kit.name} (phase={kit.status.phase})")
    if env.platform is None:
        raise BuildStepError(f"No integration platform resolved for kit {kit.name}")

    build_spec = env.platform.spec.build
    request = BuildRequest(
        kit_name=kit.name,
        namespace=kit.namespace,
        runtime_version=build_spec.runtime_version,
        platform_build=build_spec,
        dependencies=list(kit.spec.dependencies),
    )

    Path(workspace).mkdir(parents=True, exist_ok=True)
    staging = tempfile.mkdtemp(prefix=f"builder-{kit.name}-", dir=str(workspace))
    ctx = new_build_context(request, staging, logger=logger, runner=runner)
    kit.status.phase = KIT_PHASE_BUILD_RUNNING
    logger.info("Building kit %s in %s (%d steps)", kit.name, staging, len(env.build_steps))

    try:
        StepRunner(recorder=recorder).run(ctx, env.build_steps)
    except Exception as exc:
        kit.status.phase = KIT_PHASE_ERROR
        kit.status.artifacts = []
        kit.status.failure = str(exc)
        logger.error("Build of kit %s failed: %s", kit.name, exc)
        raise
    finally:
        if not keep_staging:
            shutil.rmtree(staging, ignore_errors=True)

    kit.status.artifacts = list(ctx.artifacts)
    kit.status.image = ctx.image
    kit.status.base_image = ctx.base_image
    kit.status.runtime_version = request.runtime_version
    kit.status.failure = None
    kit.status.phase = KIT_PHASE_READY
    logger.info("Kit %s ready (image=%s, artifacts=%d)", kit.name, kit.status.image, len(kit.status.artifacts))
    return kit
