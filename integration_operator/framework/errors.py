from __future__ import annotations


class TraitError(RuntimeError):
    """Base class for failures raised while configuring or applying a trait."""

    def __init__(self, message: str, *, trait_id: str | None = None) -> None:
        super().__init__(message)
        if trait_id is not None:
            self.trait_id = trait_id


class TraitApplyError(TraitError):
    """A trait found the environment inconsistent (missing object, unresolved kit, ...)."""


class SourceResolutionError(TraitError):
    """An integration source references content that cannot be found."""


class BuildStepError(RuntimeError):
    """A build step failed; the produced artifacts of the build must not be trusted."""
