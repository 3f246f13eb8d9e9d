"""Engine primitives for ordering and running build steps."""

from traitkit.engine.pipeline import (
    APPLICATION_PACKAGE_PHASE,
    APPLICATION_PUBLISH_PHASE,
    PHASE_NAMES,
    PROJECT_BUILD_PHASE,
    PROJECT_GENERATION_PHASE,
    BuildFlowContext,
    DefaultStepRecorder,
    NullStepRecorder,
    Step,
    StepRecorder,
    StepRunner,
    order_steps,
    phase_name,
    utc_now_iso8601,
)

__all__ = [
    "APPLICATION_PACKAGE_PHASE",
    "APPLICATION_PUBLISH_PHASE",
    "PHASE_NAMES",
    "PROJECT_BUILD_PHASE",
    "PROJECT_GENERATION_PHASE",
    "BuildFlowContext",
    "DefaultStepRecorder",
    "NullStepRecorder",
    "Step",
    "StepRecorder",
    "StepRunner",
    "order_steps",
    "phase_name",
    "utc_now_iso8601",
]
