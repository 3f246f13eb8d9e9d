import logging

import pytest

from traitkit import ConfigNamespace, TraitDecodeError, resolve
from integration_operator.framework.catalog import TraitCatalog
from integration_operator.framework.environment import Environment
from integration_operator.framework.models import (
    Integration,
    IntegrationKit,
    IntegrationPlatform,
    TraitSpec,
)
from integration_operator.traits.container import ContainerTrait
from integration_operator.traits.knative_service import KnativeServiceTrait
from integration_operator.traits.owner import OwnerTrait


def _quiet_logger() -> logging.Logger:
    logger = logging.getLogger("test.trait_config")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def test_three_level_hierarchy_most_specific_wins():
    platform = {"knative-service": {"enabled": "false", "max-scale": "10", "autoscaling-target": "15"}}
    kit = {"knative-service": {"enabled": "true", "min-scale": "5"}}
    integration = {"knative-service": {"max-scale": "20"}}

    trait = resolve("knative-service", platform, kit, integration, KnativeServiceTrait())

    assert trait.enabled is True
    assert trait.min_scale == 5
    assert trait.max_scale == 20
    assert trait.autoscaling_target == 15
    assert trait.autoscaling_class is None


def test_resolution_is_deterministic():
    platform = {"knative-service": {"max-scale": "10"}}
    kit = {"knative-service": {"min-scale": "5"}}
    integration = {"knative-service": {"max-scale": "20"}}

    first = resolve("knative-service", platform, kit, integration, KnativeServiceTrait())
    second = resolve("knative-service", platform, kit, integration, KnativeServiceTrait())

    assert first == second
    assert (first.min_scale, first.max_scale) == (5, 20)


def test_absent_trait_id_keeps_defaults():
    trait = resolve("container", {"service": {"port": "1"}}, None, {}, ContainerTrait())

    assert trait.port == 8080
    assert trait.port_name == "http"
    assert trait.enabled is None


def test_unknown_options_are_ignored():
    options = {"service": {"enabled": "false", "port": "7071", "cippa": "lippa"}}

    trait = resolve("service", None, None, options, ContainerTrait())

    assert trait.enabled is False
    assert trait.port == 7071


def test_invalid_value_raises_decode_error_naming_trait_level_and_key():
    with pytest.raises(TraitDecodeError, match=r"knative-service \(integration level\)") as excinfo:
        resolve("knative-service", None, None, {"knative-service": {"min-scale": "many"}}, KnativeServiceTrait())

    assert excinfo.value.trait_id == "knative-service"
    assert excinfo.value.level == "integration"
    assert excinfo.value.key == "min-scale"


def test_invalid_value_at_overridden_level_still_fails():
    platform = {"knative-service": {"max-scale": "ten"}}
    integration = {"knative-service": {"max-scale": "20"}}

    with pytest.raises(TraitDecodeError) as excinfo:
        resolve("knative-service", platform, None, integration, KnativeServiceTrait())

    assert excinfo.value.level == "platform"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("YES", True), ("1", True), ("false", False), ("No", False), (" 0 ", False)],
)
def test_boolean_spellings(raw, expected):
    trait = resolve("container", None, None, {"container": {"enabled": raw}}, ContainerTrait())
    assert trait.enabled is expected


def test_list_options_split_on_delimiter():
    trait = resolve("owner", None, None, {"owner": {"target-labels": "team, app ,,tier"}}, OwnerTrait())

    assert trait.target_labels == ["team", "app", "tier"]
    assert trait.target_annotations == []


def test_list_default_is_not_shared_between_instances():
    first = OwnerTrait()
    first.target_labels.append("x")

    assert OwnerTrait().target_labels == []


def test_config_namespace_tracks_consumed_keys():
    ns = ConfigNamespace({"port": "80", "extra": "1"}, path="integration.traits.container")

    assert ns.get_int("port") == 80
    assert ns.consumed_keys() == ("port",)
    assert ns.unconsumed_keys() == ("extra",)


def test_catalog_configure_uses_environment_levels():
    platform = IntegrationPlatform(name="camel-k")
    platform.spec.traits = {"knative-service": TraitSpec({"max-scale": "10"})}
    kit = IntegrationKit(name="kit-1")
    kit.spec.traits = {"knative-service": TraitSpec({"min-scale": "5"})}
    integration = Integration(name="test")
    integration.spec.traits = {"knative-service": TraitSpec({"max-scale": "20"})}
    env = Environment(logger=_quiet_logger(), integration=integration, integration_kit=kit, platform=platform)

    traits = {trait.id: trait for trait in TraitCatalog().configure(env)}

    assert traits["knative-service"].min_scale == 5
    assert traits["knative-service"].max_scale == 20
    assert traits["container"].port == 8080


def test_trait_spec_accepts_bare_mapping_and_typed_values():
    spec = TraitSpec.from_dict({"enabled": False, "port": 7071, "target-labels": ["a", "b"]}, path="traits.x")
    nested = TraitSpec.from_dict({"configuration": {"enabled": "true"}}, path="traits.y")

    assert spec.configuration == {"enabled": "false", "port": "7071", "target-labels": "a,b"}
    assert nested.configuration == {"enabled": "true"}
