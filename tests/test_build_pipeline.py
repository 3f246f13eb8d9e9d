import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from traitkit import NullStepRecorder, Step, StepRunner
from traitkit.engine import order_steps, phase_name
from integration_operator.builder.context import BuildRequest, Dependency, new_build_context
from integration_operator.builder.quarkus import quarkus_steps
from integration_operator.builder.steps import compute_dependencies, default_steps
from integration_operator.framework.errors import BuildStepError
from integration_operator.framework.models import PlatformBuildSpec


def _quiet_logger() -> logging.Logger:
    logger = logging.getLogger("test.build_pipeline")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@dataclass
class _FlowCtx:
    logger: logging.Logger
    steps: list[dict[str, Any]] = field(default_factory=list)
    seen: list[str] = field(default_factory=list)


def _record(name: str):
    def fn(ctx: _FlowCtx) -> None:
        ctx.seen.append(name)

    return fn


class FakeRunner:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def run(self, path, *options: str) -> None:
        self.calls.append((str(path), options))
        if self.fail:
            raise BuildStepError("mvn package failed")


def _make_ctx(tmp_path, runner=None, dependencies=()):
    request = BuildRequest(
        kit_name="kit-example",
        namespace="ns",
        runtime_version="1.2.3",
        platform_build=PlatformBuildSpec(runtime_version="1.2.3", local_repository="/repo"),
        dependencies=list(dependencies),
    )
    return new_build_context(request, tmp_path / "staging", logger=_quiet_logger(), runner=runner)


def test_steps_run_by_phase_then_registration_order():
    ctx = _FlowCtx(logger=_quiet_logger())
    steps = [Step("b", 1, _record("b")), Step("a", 0, _record("a")), Step("c", 1, _record("c"))]

    StepRunner(recorder=NullStepRecorder()).run(ctx, steps)

    assert ctx.seen == ["a", "b", "c"]
    assert [record["id"] for record in ctx.steps] == ["a", "b", "c"]


def test_first_failure_aborts_and_propagates_verbatim():
    ctx = _FlowCtx(logger=_quiet_logger())
    boom = OSError("disk full")

    def fail(_ctx) -> None:
        raise boom

    steps = [Step("a", 0, _record("a")), Step("b", 1, fail), Step("c", 2, _record("c"))]

    with pytest.raises(OSError) as excinfo:
        StepRunner(recorder=NullStepRecorder()).run(ctx, steps)

    assert excinfo.value is boom
    assert excinfo.value.pipeline_step == "b"
    assert excinfo.value.pipeline_phase == 1
    assert ctx.seen == ["a"]


def test_duplicate_step_ids_are_rejected():
    with pytest.raises(ValueError, match=r"Duplicate step id\(s\): a"):
        StepRunner().run(_FlowCtx(logger=_quiet_logger()), [Step("a", 0, _record("a")), Step("a", 1, _record("a"))])


def test_step_validates_its_fields():
    with pytest.raises(ValueError, match=r"Step id cannot be empty"):
        Step("  ", 0, _record("x"))
    with pytest.raises(TypeError, match=r"Step phase must be an int"):
        Step("x", True, _record("x"))
    with pytest.raises(TypeError, match=r"Step fn must be callable"):
        Step("x", 0, "nope")


def test_default_and_quarkus_step_layout():
    assert [s.id for s in order_steps(default_steps())] == [
        "project/generate",
        "project/inject-dependencies",
        "project/sanitize-dependencies",
        "build/maven-package",
        "build/compute-dependencies",
        "packager/layout",
        "publisher/manifest",
    ]
    assert [s.id for s in order_steps(quarkus_steps())] == [
        "project/generate",
        "project/inject-dependencies",
        "project/sanitize-dependencies",
        "project/quarkus-dependencies",
        "build/quarkus-package",
        "build/compute-dependencies",
        "packager/layout",
        "publisher/manifest",
    ]
    assert phase_name(21) == "project-build"


def test_packaging_failure_skips_dependency_computation(tmp_path):
    runner = FakeRunner(fail=True)
    ctx = _make_ctx(tmp_path, runner=runner, dependencies=["camel:log"])

    with pytest.raises(BuildStepError, match=r"mvn package failed") as excinfo:
        StepRunner(recorder=NullStepRecorder()).run(ctx, default_steps())

    assert excinfo.value.pipeline_step == "build/maven-package"
    assert ctx.artifacts == []
    assert [r["id"] for r in ctx.steps] == [
        "project/generate",
        "project/inject-dependencies",
        "project/sanitize-dependencies",
    ]
    assert runner.calls == [(str(tmp_path / "staging" / "maven"), ("-Dmaven.repo.local=/repo", "package"))]
    assert (tmp_path / "staging" / "maven" / "pom.xml").is_file()


def test_compute_dependencies_recovers_coordinates_from_file_names(tmp_path):
    ctx = _make_ctx(tmp_path)
    lib = ctx.maven_path / "target" / "lib"
    lib.mkdir(parents=True)
    for name in ("org.apache.camel.camel-core-3.0.0.jar", "io.quarkus.quarkus-arc-0.11.0.jar", "README.txt"):
        (lib / name).write_text("x", encoding="utf-8")

    compute_dependencies(ctx)

    assert [a.id for a in ctx.artifacts] == [
        "io.quarkus:quarkus-arc:0.11.0",
        "org.apache.camel:camel-core:3.0.0",
        "org.apache.camel.k.integration:kit-example:1.2.3",
    ]
    assert ctx.artifacts[0].target == "dependencies/io.quarkus.quarkus-arc-0.11.0.jar"
    assert ctx.artifacts[0].location == str(lib / "io.quarkus.quarkus-arc-0.11.0.jar")
    runner = ctx.artifacts[-1]
    assert runner.target == "kit-example-1.2.3-runner.jar"
    assert runner.location == str(ctx.maven_path / "target" / "kit-example-1.2.3-runner.jar")


def test_compute_dependencies_without_lib_records_only_runner(tmp_path):
    ctx = _make_ctx(tmp_path)

    compute_dependencies(ctx)

    assert [a.target for a in ctx.artifacts] == ["kit-example-1.2.3-runner.jar"]


def test_project_generation_steps_resolve_dependencies(tmp_path):
    ctx = _make_ctx(tmp_path, dependencies=["camel:log", "camel-k:loader-groovy", "mvn:org.acme:lib:2.0", "camel:log"])
    generation = [s for s in order_steps(default_steps()) if s.id.startswith("project/")]

    StepRunner(recorder=NullStepRecorder()).run(ctx, generation)

    assert [(d.group_id, d.artifact_id, d.version) for d in ctx.project.dependencies] == [
        ("org.apache.camel.k", "camel-k-runtime-main", "1.2.3"),
        ("org.apache.camel", "camel-log", None),
        ("org.apache.camel.k", "camel-k-loader-groovy", "1.2.3"),
        ("org.acme", "lib", "2.0"),
    ]
    assert ctx.project.dependency_management[0].artifact_id == "camel-k-runtime-bom"


def test_invalid_dependency_fails_injection(tmp_path):
    ctx = _make_ctx(tmp_path, dependencies=["gradle:foo"])
    generation = [s for s in order_steps(default_steps()) if s.id.startswith("project/")]

    with pytest.raises(BuildStepError, match=r"Unknown dependency scheme 'gradle'"):
        StepRunner(recorder=NullStepRecorder()).run(ctx, generation)


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("camel:http", ("org.apache.camel", "camel-http", None)),
        ("camel-k:runtime-main", ("org.apache.camel.k", "camel-k-runtime-main", None)),
        ("mvn:com.acme:widget", ("com.acme", "widget", None)),
        ("mvn:com.acme:widget:1.0", ("com.acme", "widget", "1.0")),
    ],
)
def test_dependency_parse(spec, expected):
    dep = Dependency.parse(spec)
    assert (dep.group_id, dep.artifact_id, dep.version) == expected


def test_dependency_parse_rejects_malformed_maven_coordinates():
    with pytest.raises(ValueError, match=r"Invalid maven dependency"):
        Dependency.parse("mvn:only-group")
