"""Quarkus variant of the build: extra BOM, runtime dependencies and the Quarkus Maven plugin."""

from __future__ import annotations

from traitkit import PROJECT_BUILD_PHASE, PROJECT_GENERATION_PHASE, Step

from integration_operator.builder.context import CAMEL_K_GROUP_ID, BuildContext, Dependency, Plugin
from integration_operator.builder.maven import create_structure, extra_options
from integration_operator.builder.steps import generation_steps, publishing_steps
from integration_operator.framework.errors import BuildStepError

QUARKUS_GROUP_ID = "io.quarkus"
QUARKUS_VERSION = "0.11.0"


def inject_quarkus_dependencies(ctx: BuildContext) -> None:
    runtime = ctx.request.runtime_version
    ctx.project.dependency_management.append(
        Dependency(QUARKUS_GROUP_ID, "quarkus-bom", version=QUARKUS_VERSION, type="pom", scope="import")
    )
    ctx.project.add_dependencies(
        Dependency(QUARKUS_GROUP_ID, "quarkus-arc"),
        Dependency(CAMEL_K_GROUP_ID, "camel-k-quarkus-deployment", version=runtime, scope="provided"),
        Dependency(CAMEL_K_GROUP_ID, "camel-k-quarkus-runtime", version=runtime, scope="runtime"),
        Dependency(CAMEL_K_GROUP_ID, "camel-k-runtime-quarkus", version=runtime, scope="runtime"),
    )
    ctx.project.plugins.append(
        Plugin(QUARKUS_GROUP_ID, "quarkus-maven-plugin", version=QUARKUS_VERSION, goals=["build"])
    )


def package_quarkus_project(ctx: BuildContext) -> None:
    create_structure(ctx.maven_path, ctx.project)
    (ctx.maven_path / "target" / "classes").mkdir(parents=True, exist_ok=True)
    options = [*extra_options(ctx.request.platform_build.local_repository), "package"]
    try:
        ctx.require_runner().run(ctx.maven_path, *options)
    except BuildStepError as exc:
        raise BuildStepError(f"failure while building Quarkus project: {exc}") from exc


def quarkus_steps() -> list[Step]:
    return [
        *generation_steps(),
        Step("project/quarkus-dependencies", PROJECT_GENERATION_PHASE + 3, inject_quarkus_dependencies),
        Step("build/quarkus-package", PROJECT_BUILD_PHASE, package_quarkus_project),
        *publishing_steps(),
    ]
