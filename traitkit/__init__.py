"""Reusable trait composition kernel (config resolution, trait registry, build-step engine).

This package is intentionally independent of `integration_operator.*`. Cluster object
shapes, phases, profiles and concrete traits must live in the consuming application.
"""

from traitkit.config_namespace import (
    CONFIG_LEVELS,
    ConfigNamespace,
    TraitDecodeError,
    parse_bool,
    parse_int,
    parse_list_str,
    resolve,
    trait_property,
)
from traitkit.engine.pipeline import (
    APPLICATION_PACKAGE_PHASE,
    APPLICATION_PUBLISH_PHASE,
    PROJECT_BUILD_PHASE,
    PROJECT_GENERATION_PHASE,
    DefaultStepRecorder,
    NullStepRecorder,
    Step,
    StepRecorder,
    StepRunner,
    utc_now_iso8601,
)
from traitkit.trait_registry import TraitRegistry
from traitkit.trait_types import Trait, TraitFactory, TraitRef

__all__ = [
    "APPLICATION_PACKAGE_PHASE",
    "APPLICATION_PUBLISH_PHASE",
    "CONFIG_LEVELS",
    "ConfigNamespace",
    "DefaultStepRecorder",
    "NullStepRecorder",
    "PROJECT_BUILD_PHASE",
    "PROJECT_GENERATION_PHASE",
    "Step",
    "StepRecorder",
    "StepRunner",
    "Trait",
    "TraitDecodeError",
    "TraitFactory",
    "TraitRef",
    "TraitRegistry",
    "parse_bool",
    "parse_int",
    "parse_list_str",
    "resolve",
    "trait_property",
    "utc_now_iso8601",
]
