"""Default build steps: generate a Maven project, package it, lay out and describe the image."""

from __future__ import annotations

import re
import shutil
from pathlib import Path

import yaml

from traitkit import (
    APPLICATION_PACKAGE_PHASE,
    APPLICATION_PUBLISH_PHASE,
    PROJECT_BUILD_PHASE,
    PROJECT_GENERATION_PHASE,
    Step,
)

from integration_operator.builder.context import CAMEL_K_GROUP_ID, BuildContext, Dependency
from integration_operator.builder.maven import create_structure, extra_options
from integration_operator.framework.errors import BuildStepError
from integration_operator.framework.models import Artifact

# Matches `<artifact>-<version>.jar`; whatever precedes the artifact (minus one separator) is the group.
_JAR_COORDINATES = re.compile(r"([\w-]+)-([\w.]+(?:-[\w]+)?)\.jar")

MANIFEST_FILE = "manifest.yaml"


def generate_project(ctx: BuildContext) -> None:
    version = ctx.request.runtime_version
    ctx.project.dependency_management.append(
        Dependency(CAMEL_K_GROUP_ID, "camel-k-runtime-bom", version=version, type="pom", scope="import")
    )
    ctx.project.add_dependencies(Dependency(CAMEL_K_GROUP_ID, "camel-k-runtime-main"))


def inject_dependencies(ctx: BuildContext) -> None:
    try:
        deps = [Dependency.parse(spec) for spec in ctx.request.dependencies]
    except ValueError as exc:
        raise BuildStepError(f"Invalid kit dependency: {exc}") from exc
    ctx.project.add_dependencies(*deps)


def sanitize_dependencies(ctx: BuildContext) -> None:
    """Pin unversioned camel-k artifacts to the runtime version; the BOM covers the rest."""
    version = ctx.request.runtime_version
    ctx.project.dependencies = [
        Dependency(d.group_id, d.artifact_id, version, d.type, d.scope)
        if d.group_id == CAMEL_K_GROUP_ID and d.version is None
        else d
        for d in ctx.project.dependencies
    ]


def package_project(ctx: BuildContext) -> None:
    create_structure(ctx.maven_path, ctx.project)
    (ctx.maven_path / "target" / "classes").mkdir(parents=True, exist_ok=True)
    options = [*extra_options(ctx.request.platform_build.local_repository), "package"]
    ctx.require_runner().run(ctx.maven_path, *options)


def compute_dependencies(ctx: BuildContext) -> None:
    """Record every jar under `maven/target/lib` plus the runner jar as produced artifacts."""

    target = ctx.maven_path / "target"
    lib = target / "lib"
    files = sorted(p.name for p in lib.rglob("*") if p.is_file()) if lib.is_dir() else []

    for name in files:
        match = _JAR_COORDINATES.search(name)
        if match is None or match.start(1) < 1:
            ctx.logger.debug("Skipping library without coordinates: %s", name)
            continue
        group_id = name[: match.start(1) - 1]
        ctx.artifacts.append(
            Artifact(
                id=f"{group_id}:{match.group(1)}:{match.group(2)}",
                location=str(lib / name),
                target=f"dependencies/{name}",
            )
        )

    runner = ctx.project.runner_name
    ctx.artifacts.append(
        Artifact(id=ctx.project.coordinates, location=str(target / runner), target=runner)
    )


def layout_package(ctx: BuildContext) -> None:
    """Copy produced artifacts into `package/` following their image-relative targets."""

    package_dir = ctx.path / "package"
    package_dir.mkdir(parents=True, exist_ok=True)
    for artifact in ctx.artifacts:
        source = Path(artifact.location)
        if not source.is_file():
            raise BuildStepError(f"Missing build output for {artifact.id}: {source}")
        dest = package_dir / artifact.target
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)


def publish_manifest(ctx: BuildContext) -> None:
    registry = ctx.request.platform_build.registry
    image = f"{ctx.request.namespace}/camel-k-{ctx.request.kit_name}:{ctx.project.version}"
    if registry:
        image = f"{registry.rstrip('/')}/{image}"
    manifest = {
        "image": image,
        "baseImage": ctx.base_image,
        "runtimeVersion": ctx.request.runtime_version,
        "artifacts": [a.to_dict() for a in ctx.artifacts],
    }
    package_dir = ctx.path / "package"
    package_dir.mkdir(parents=True, exist_ok=True)
    (package_dir / MANIFEST_FILE).write_text(yaml.safe_dump(manifest, sort_keys=False), encoding="utf-8")
    ctx.image = image
    ctx.published = manifest


def generation_steps() -> list[Step]:
    return [
        Step("project/generate", PROJECT_GENERATION_PHASE, generate_project),
        Step("project/inject-dependencies", PROJECT_GENERATION_PHASE + 1, inject_dependencies),
        Step("project/sanitize-dependencies", PROJECT_GENERATION_PHASE + 2, sanitize_dependencies),
    ]


def publishing_steps() -> list[Step]:
    return [
        Step("build/compute-dependencies", PROJECT_BUILD_PHASE + 1, compute_dependencies),
        Step("packager/layout", APPLICATION_PACKAGE_PHASE, layout_package),
        Step("publisher/manifest", APPLICATION_PUBLISH_PHASE, publish_manifest),
    ]


def default_steps() -> list[Step]:
    return [
        *generation_steps(),
        Step("build/maven-package", PROJECT_BUILD_PHASE, package_project),
        *publishing_steps(),
    ]
