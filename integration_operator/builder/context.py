from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from integration_operator.framework.models import Artifact, PlatformBuildSpec

CAMEL_GROUP_ID = "org.apache.camel"
CAMEL_K_GROUP_ID = "org.apache.camel.k"


@dataclass(frozen=True)
class Dependency:
    group_id: str
    artifact_id: str
    version: str | None = None
    type: str | None = None
    scope: str | None = None

    def __post_init__(self) -> None:
        for attr in ("group_id", "artifact_id"):
            value = getattr(self, attr)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Dependency.{attr} must be a non-empty string")

    @property
    def key(self) -> tuple[str, str]:
        return self.group_id, self.artifact_id

    @classmethod
    def parse(cls, spec: str) -> "Dependency":
        """Parse `camel:<name>`, `camel-k:<name>` or `mvn:<group>:<artifact>[:<version>]`."""

        scheme, sep, rest = str(spec).strip().partition(":")
        if not sep or not rest:
            raise ValueError(f"Invalid dependency {spec!r} (expected <scheme>:<coordinates>)")
        if scheme == "camel":
            return cls(CAMEL_GROUP_ID, f"camel-{rest}")
        if scheme == "camel-k":
            return cls(CAMEL_K_GROUP_ID, f"camel-k-{rest}")
        if scheme == "mvn":
            parts = rest.split(":")
            if len(parts) == 2:
                return cls(parts[0], parts[1])
            if len(parts) == 3:
                return cls(parts[0], parts[1], parts[2])
            raise ValueError(f"Invalid maven dependency {spec!r} (expected mvn:<group>:<artifact>[:<version>])")
        raise ValueError(f"Unknown dependency scheme {scheme!r} in {spec!r}")


@dataclass
class Plugin:
    group_id: str
    artifact_id: str
    version: str | None = None
    goals: list[str] = field(default_factory=list)


@dataclass
class Project:
    group_id: str
    artifact_id: str
    version: str
    dependencies: list[Dependency] = field(default_factory=list)
    dependency_management: list[Dependency] = field(default_factory=list)
    plugins: list[Plugin] = field(default_factory=list)
    runner_suffix: str = "-runner"

    def add_dependencies(self, *deps: Dependency) -> None:
        """Append dependencies not already present (by group and artifact)."""
        present = {d.key for d in self.dependencies}
        for dep in deps:
            if dep.key in present:
                continue
            self.dependencies.append(dep)
            present.add(dep.key)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def runner_name(self) -> str:
        return f"{self.artifact_id}-{self.version}{self.runner_suffix}.jar"


@dataclass
class BuildRequest:
    kit_name: str
    namespace: str = "default"
    runtime_version: str = "1.0.0"
    platform_build: PlatformBuildSpec = field(default_factory=PlatformBuildSpec)
    dependencies: list[str] = field(default_factory=list)


class BuildToolRunner(Protocol):
    def run(self, path: str | Path, *options: str) -> None: ...


@dataclass
class BuildContext:
    """Per-build mutable state shared by every build step.

    `artifacts` is the only part meant to outlive the build.
    """

    request: BuildRequest
    project: Project
    path: Path
    logger: logging.Logger
    runner: BuildToolRunner | None = None
    artifacts: list[Artifact] = field(default_factory=list)
    steps: list[dict[str, Any]] = field(default_factory=list)
    base_image: str | None = None
    image: str | None = None
    published: dict[str, Any] = field(default_factory=dict)

    @property
    def maven_path(self) -> Path:
        return self.path / "maven"

    def require_runner(self) -> BuildToolRunner:
        if self.runner is None:
            raise RuntimeError("No build tool runner configured for this build")
        return self.runner


def new_build_context(
    request: BuildRequest,
    path: str | Path,
    *,
    logger: logging.Logger,
    runner: BuildToolRunner | None = None,
) -> BuildContext:
    project = Project(
        group_id=request.platform_build.group_id,
        artifact_id=request.kit_name,
        version=request.runtime_version,
    )
    return BuildContext(
        request=request,
        project=project,
        path=Path(path),
        logger=logger,
        runner=runner,
        base_image=request.platform_build.base_image,
    )
