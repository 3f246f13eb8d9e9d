from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from datetime import datetime, timezone

from integration_operator.foundation.config_io import dump_yaml_documents, load_config, load_yaml_mapping
from integration_operator.framework.models import (
    ALL_PROFILES,
    INTEGRATION_PHASE_DEPLOYING,
    Integration,
    IntegrationKit,
    IntegrationPlatform,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="integration-operator", add_help=True)
    parser.add_argument("--config", default=None, help="Operator settings YAML (default: $INTEGRATION_OPERATOR_CONFIG)")
    sub = parser.add_subparsers(dest="command", required=True)

    deploy = sub.add_parser("deploy", help="Render the cluster objects of an integration")
    deploy.add_argument("integration", help="Integration YAML file")
    deploy.add_argument("--kit", default=None, help="IntegrationKit YAML file")
    deploy.add_argument("--platform", default=None, help="IntegrationPlatform YAML file")
    deploy.add_argument("--output", "-o", default=None, help="Write manifests here instead of stdout")

    build = sub.add_parser("build", help="Build an integration kit with Maven")
    build.add_argument("kit", help="IntegrationKit YAML file")
    build.add_argument("--platform", default=None, help="IntegrationPlatform YAML file")
    build.add_argument("--output", "-o", default=None, help="Write the updated kit here instead of stdout")

    list_traits = sub.add_parser("list-traits", help="List available traits and their options")
    list_traits.add_argument("--profile", choices=ALL_PROFILES, default=None)

    return parser


def _run_id(command: str) -> str:
    return f"{command}-{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}"


def _emit(text: str, output: str | None) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as handle:
            handle.write(text)
    else:
        sys.stdout.write(text)


def _load_settings(config_path: str | None):
    from integration_operator.framework.config import OperatorConfig

    cfg_dict, meta = load_config(config_path=config_path)
    cfg, warnings = OperatorConfig.from_dict(cfg_dict)
    return cfg, meta, warnings


def _list_traits(profile: str | None) -> int:
    from integration_operator.framework.catalog import TraitCatalog

    catalog = TraitCatalog()
    properties = catalog.compute_traits_properties()
    for row in catalog.describe():
        if profile and profile not in row["profiles"]:
            continue
        flags = [
            name
            for name, on in (
                ("kit", row["influences_kit"]),
                ("platform", row["platform_trait"]),
                ("needs-platform", row["requires_platform"]),
            )
            if on
        ]
        print(f"{row['id']:<16} order={row['order']:<5} profiles={','.join(row['profiles'])} flags={','.join(flags) or '-'}")
        if row["doc"]:
            print(f"    {row['doc']}")
        options = properties.get(row["id"])
        if options:
            print(f"    options: {', '.join(options)}")
    return 0


def _deploy(args: argparse.Namespace) -> int:
    from integration_operator.app.reconcile import persist_resources, reconcile_integration
    from integration_operator.foundation.logging_utils import setup_operational_logger
    from integration_operator.framework.cluster import InMemoryClusterClient

    cfg, meta, warnings = _load_settings(args.config)
    logger, _ = setup_operational_logger(cfg.log_dir, _run_id("deploy"))
    logger.info("Loaded operator settings (mode=%s)", meta["mode"])
    for warning in warnings:
        logger.warning("%s", warning)

    integration = Integration.from_dict(load_yaml_mapping(args.integration))
    kit = IntegrationKit.from_dict(load_yaml_mapping(args.kit)) if args.kit else None
    platform = IntegrationPlatform.from_dict(load_yaml_mapping(args.platform)) if args.platform else None
    if not integration.status.phase:
        integration.status.phase = INTEGRATION_PHASE_DEPLOYING
    if kit is not None and not integration.status.kit:
        integration.status.kit = kit.name

    client = InMemoryClusterClient([obj for obj in (kit, platform) if obj is not None])
    try:
        env = reconcile_integration(integration, kit=kit, platform=platform, client=client, logger=logger)
    except Exception as exc:
        logger.exception("Deploy failed for integration %s: %s", integration.name, exc)
        return 1

    persist_resources(client, env)
    _emit(dump_yaml_documents(env.resources.as_dicts()), args.output)
    return 0


def _build(args: argparse.Namespace) -> int:
    from integration_operator.app.reconcile import build_kit
    from integration_operator.builder.maven import MavenRunner
    from integration_operator.foundation.logging_utils import setup_operational_logger

    cfg, meta, warnings = _load_settings(args.config)
    logger, _ = setup_operational_logger(cfg.log_dir, _run_id("build"))
    logger.info("Loaded operator settings (mode=%s)", meta["mode"])
    for warning in warnings:
        logger.warning("%s", warning)

    kit = IntegrationKit.from_dict(load_yaml_mapping(args.kit))
    if args.platform:
        platform = IntegrationPlatform.from_dict(load_yaml_mapping(args.platform))
    else:
        platform = IntegrationPlatform(name="camel-k", namespace=kit.namespace)
        platform.spec.build = cfg.build

    runner = MavenRunner(cfg.maven_executable, cfg.maven_extra_options)
    try:
        build_kit(
            kit,
            workspace=cfg.workspace,
            runner=runner,
            platform=platform,
            keep_staging=cfg.keep_staging,
            logger=logger,
        )
    except Exception as exc:
        logger.exception("Build failed for kit %s: %s", kit.name, exc)
        _emit(dump_yaml_documents([kit.to_dict()]), args.output)
        return 1

    _emit(dump_yaml_documents([kit.to_dict()]), args.output)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "list-traits":
        return _list_traits(args.profile)

    if args.command == "deploy":
        return _deploy(args)

    if args.command == "build":
        return _build(args)

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
