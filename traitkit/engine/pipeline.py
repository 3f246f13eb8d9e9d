"""Execution engine for phase-ordered build steps.

This module is intentionally app-agnostic and must not import `integration_operator.*`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Protocol

PROJECT_GENERATION_PHASE = 10
PROJECT_BUILD_PHASE = 20
APPLICATION_PACKAGE_PHASE = 30
APPLICATION_PUBLISH_PHASE = 40

PHASE_NAMES: dict[int, str] = {
    PROJECT_GENERATION_PHASE: "project-generation",
    PROJECT_BUILD_PHASE: "project-build",
    APPLICATION_PACKAGE_PHASE: "application-packaging",
    APPLICATION_PUBLISH_PHASE: "application-publishing",
}


def utc_now_iso8601() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def phase_name(phase: int) -> str:
    """Coarse phase bucket for a step phase (offsets like `PROJECT_BUILD_PHASE + 1` included)."""

    bucket = None
    for start in sorted(PHASE_NAMES):
        if phase >= start:
            bucket = start
    if bucket is None:
        return "init"
    return PHASE_NAMES[bucket]


class BuildFlowContext(Protocol):
    logger: logging.Logger
    steps: list[dict[str, Any]]


@dataclass(frozen=True)
class Step:
    id: str
    phase: int
    fn: Callable[[Any], Any]
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.id, str):
            raise TypeError(f"Step id must be a string (type={type(self.id).__name__})")
        step_id = self.id.strip()
        if not step_id:
            raise ValueError("Step id cannot be empty")
        object.__setattr__(self, "id", step_id)

        if isinstance(self.phase, bool) or not isinstance(self.phase, int):
            raise TypeError(f"Step phase must be an int (type={type(self.phase).__name__})")
        if not callable(self.fn):
            raise TypeError(f"Step fn must be callable (type={type(self.fn).__name__})")
        if not isinstance(self.meta, dict):
            raise TypeError(f"Step meta must be a dict (type={type(self.meta).__name__})")


def order_steps(steps: Iterable[Step]) -> list[Step]:
    """Sort by phase; registration order is kept within a phase."""

    indexed = list(enumerate(steps))
    for idx, step in indexed:
        if not isinstance(step, Step):
            raise TypeError(f"Pipeline entry {idx} is not a Step (type={type(step).__name__})")
    indexed.sort(key=lambda pair: (pair[1].phase, pair[0]))
    return [step for _, step in indexed]


class StepRecorder(Protocol):
    def on_step_start(self, ctx: BuildFlowContext, step: Step) -> None:
        ...

    def on_step_end(self, ctx: BuildFlowContext, record: dict[str, Any]) -> None:
        ...

    def on_step_error(self, ctx: BuildFlowContext, step: Step, exc: Exception) -> None:
        ...


class DefaultStepRecorder:
    def on_step_start(self, ctx: BuildFlowContext, step: Step) -> None:
        ctx.logger.info("Step: %s (phase=%s, bucket=%s)", step.id, step.phase, phase_name(step.phase))

    def on_step_end(self, ctx: BuildFlowContext, record: dict[str, Any]) -> None:
        ctx.steps.append(record)
        ctx.logger.info(
            "Completed step %s (duration_s=%s)", record.get("id", "<unknown>"), record.get("duration_s")
        )

    def on_step_error(self, ctx: BuildFlowContext, step: Step, exc: Exception) -> None:
        ctx.logger.error("Step failed: %s (%s)", step.id, exc)


class NullStepRecorder:
    def on_step_start(self, ctx: BuildFlowContext, step: Step) -> None:
        return

    def on_step_end(self, ctx: BuildFlowContext, record: dict[str, Any]) -> None:
        ctx.steps.append(record)

    def on_step_error(self, ctx: BuildFlowContext, step: Step, exc: Exception) -> None:
        return


class StepRunner:
    def __init__(self, *, recorder: StepRecorder | None = None):
        self._recorder = recorder or DefaultStepRecorder()
        self._validate_recorder(self._recorder)

    def run(self, ctx: BuildFlowContext, steps: Iterable[Step]) -> None:
        ordered = order_steps(steps)
        self._validate_unique_ids(ordered)
        for step in ordered:
            self._execute_step(ctx, step)

    def _validate_recorder(self, recorder: StepRecorder) -> None:
        required = ("on_step_start", "on_step_end", "on_step_error")
        for name in required:
            method = getattr(recorder, name, None)
            if method is None or not callable(method):
                raise TypeError(f"Step recorder missing required method: {name}")

    def _validate_unique_ids(self, steps: list[Step]) -> None:
        seen: set[str] = set()
        duplicates: set[str] = set()
        for step in steps:
            if step.id in seen:
                duplicates.add(step.id)
            seen.add(step.id)
        if duplicates:
            raise ValueError(f"Duplicate step id(s): {', '.join(sorted(duplicates))}")

    def _attach_pipeline_error(self, exc: Exception, step: Step) -> None:
        for attr, value in (("pipeline_step", step.id), ("pipeline_phase", step.phase)):
            if hasattr(exc, attr):
                continue
            try:
                setattr(exc, attr, value)
            except AttributeError:
                pass

    def _execute_step(self, ctx: BuildFlowContext, step: Step) -> None:
        try:
            self._recorder.on_step_start(ctx, step)
            started = time.perf_counter()
            step.fn(ctx)
            record: dict[str, Any] = {
                "id": step.id,
                "phase": step.phase,
                "duration_s": round(time.perf_counter() - started, 3),
                "created_at": utc_now_iso8601(),
            }
            if step.meta:
                record["meta"] = dict(step.meta)
            self._recorder.on_step_end(ctx, record)
        except Exception as exc:
            try:
                self._recorder.on_step_error(ctx, step, exc)
            except Exception:
                ctx.logger.exception("Step recorder failed during error handling for %s", step.id)
            self._attach_pipeline_error(exc, step)
            raise
