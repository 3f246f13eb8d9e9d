from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from traitkit import trait_property

from integration_operator.framework.environment import Environment
from integration_operator.framework.models import ALL_PROFILES


@dataclass
class BaseTrait:
    """Shared trait attributes; subclasses declare their options with `trait_property`."""

    enabled: bool | None = trait_property("enabled", "bool")

    ID: ClassVar[str] = ""
    ORDER: ClassVar[int] = 0
    PROFILES: ClassVar[tuple[str, ...]] = ALL_PROFILES
    INFLUENCES_KIT: ClassVar[bool] = False
    PLATFORM_TRAIT: ClassVar[bool] = False
    REQUIRES_PLATFORM: ClassVar[bool] = True

    @property
    def id(self) -> str:
        return self.ID

    @property
    def order(self) -> int:
        return self.ORDER

    def is_allowed_in_profile(self, profile: str) -> bool:
        return profile in self.PROFILES

    def influences_kit(self) -> bool:
        return self.INFLUENCES_KIT

    def is_platform_trait(self) -> bool:
        return self.PLATFORM_TRAIT

    def requires_integration_platform(self) -> bool:
        return self.REQUIRES_PLATFORM

    def is_explicitly_disabled(self) -> bool:
        return self.enabled is False

    def configure(self, env: Environment) -> bool:
        raise NotImplementedError

    def apply(self, env: Environment) -> None:
        raise NotImplementedError
