from __future__ import annotations

from typing import Any

from traitkit import Trait, TraitRegistry, resolve
from traitkit.config_namespace import property_specs

from integration_operator.framework.environment import Environment
from integration_operator.framework.models import ALL_PROFILES


def _attach_trait_error(exc: Exception, trait: Trait, phase: str) -> None:
    for attr, value in (("trait_id", trait.id), ("trait_phase", phase)):
        if hasattr(exc, attr):
            continue
        try:
            setattr(exc, attr, value)
        except AttributeError:
            pass


def _sort_key(trait: Trait) -> tuple[int, str]:
    return trait.order, trait.id


class TraitCatalog:
    """Owns the trait registry and runs configured traits against an Environment."""

    def __init__(self, registry: TraitRegistry | None = None) -> None:
        if registry is None:
            from integration_operator.traits.registry import get_trait_registry  # noqa: PLC0415

            registry = get_trait_registry()
        self._registry = registry
        self._prototypes: list[Trait] | None = None

    @property
    def registry(self) -> TraitRegistry:
        return self._registry

    def all_traits(self) -> list[Trait]:
        """Unconfigured instances, one per registered trait, sorted by order."""
        if self._prototypes is None:
            self._prototypes = sorted(self._registry.create_all(), key=_sort_key)
        return list(self._prototypes)

    def get_trait(self, trait_id: str) -> Trait | None:
        for trait in self.all_traits():
            if trait.id == trait_id:
                return trait
        return None

    def traits_for_profile(self, profile: str) -> list[Trait]:
        return [trait for trait in self.all_traits() if trait.is_allowed_in_profile(profile)]

    def configure(self, env: Environment) -> list[Trait]:
        """Fresh trait instances with Platform -> Kit -> Integration options decoded onto them."""
        platform, kit, integration = env.trait_levels()
        configured: list[Trait] = []
        for trait in self._registry.create_all():
            resolve(trait.id, platform, kit, integration, trait)
            configured.append(trait)
        return configured

    def apply(self, env: Environment) -> list[Trait]:
        env.catalog = self
        traits = self.configure(env)

        profile = env.determine_profile()
        env.logger.info("Applying traits (profile=%s, candidates=%d)", profile, len(traits))

        candidates: list[Trait] = []
        for trait in traits:
            if not trait.is_allowed_in_profile(profile):
                env.logger.debug("Trait %s skipped: not allowed in profile %s", trait.id, profile)
                continue
            candidates.append(trait)
        candidates.sort(key=_sort_key)

        for trait in candidates:
            # Checked at the trait's turn: an earlier trait may have established the platform.
            if trait.requires_integration_platform() and env.platform is None:
                env.logger.debug("Trait %s skipped: no integration platform", trait.id)
                continue

            try:
                enabled = trait.configure(env)
            except Exception as exc:
                env.logger.error("Trait %s failed to configure (%s)", trait.id, exc)
                _attach_trait_error(exc, trait, "configure")
                raise
            if not enabled:
                env.logger.debug("Trait %s not enabled", trait.id)
                continue

            env.logger.info("Trait: %s (order=%d)", trait.id, trait.order)
            try:
                trait.apply(env)
            except Exception as exc:
                env.logger.error("Trait %s failed to apply (%s)", trait.id, exc)
                _attach_trait_error(exc, trait, "apply")
                raise
            env.executed_traits.append(trait)

        env.logger.info("Executed traits: %s", ", ".join(env.executed_trait_ids()) or "<none>")
        return list(env.executed_traits)

    def describe(self) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        docs = {ref.id: ref.doc for ref in self._registry.refs()}
        for trait in self.all_traits():
            rows.append(
                {
                    "id": trait.id,
                    "order": trait.order,
                    "influences_kit": trait.influences_kit(),
                    "platform_trait": trait.is_platform_trait(),
                    "requires_platform": trait.requires_integration_platform(),
                    "profiles": _profiles_of(trait),
                    "doc": docs.get(trait.id),
                }
            )
        return rows

    def compute_traits_properties(self) -> dict[str, list[str]]:
        """Configurable option names of every user-facing (non platform) trait."""
        out: dict[str, list[str]] = {}
        for trait in self.all_traits():
            if trait.is_platform_trait():
                continue
            out[trait.id] = sorted(spec.name for spec in property_specs(trait))
        return out


def _profiles_of(trait: Trait) -> list[str]:
    return [profile for profile in ALL_PROFILES if trait.is_allowed_in_profile(profile)]
