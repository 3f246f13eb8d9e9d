from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml


def load_yaml_mapping(path: str | os.PathLike[str]) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Document must contain a YAML mapping: {path}")
    return dict(payload)


def dump_yaml_documents(documents: list[Mapping[str, Any]]) -> str:
    return yaml.safe_dump_all([dict(doc) for doc in documents], sort_keys=False, default_flow_style=False)


def deep_merge(base: Any, overlay: Any, *, path: str) -> Any:
    if overlay is None:
        return None

    if base is None:
        return overlay

    if isinstance(base, Mapping):
        if not isinstance(overlay, Mapping):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is mapping but overlay is {type(overlay).__name__}"
            )
        merged: dict[str, Any] = dict(base)
        for key, overlay_value in overlay.items():
            next_path = f"{path}.{key}" if path else str(key)
            if key in base:
                merged[key] = deep_merge(base[key], overlay_value, path=next_path)
            else:
                merged[key] = overlay_value
        return merged

    if isinstance(base, (list, tuple)):
        if not isinstance(overlay, (list, tuple)):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is list but overlay is {type(overlay).__name__}"
            )
        return list(overlay)

    if isinstance(overlay, (Mapping, list, tuple)):
        raise ValueError(
            f"Invalid config overlay merge at {path}: base is {type(base).__name__} but overlay is {type(overlay).__name__}"
        )

    return overlay


def load_config(
    *,
    config_path: str | os.PathLike[str] | None = None,
    env_var: str | None = "INTEGRATION_OPERATOR_CONFIG",
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load operator settings from a YAML file.

    The file comes from `config_path`, else from the environment variable. A sibling
    `<stem>.local.yaml` overlay is deep-merged when present. With neither source the
    settings are empty and defaults apply.
    """

    explicit_path = None
    mode = "explicit"
    if config_path is not None:
        explicit_path = str(config_path).strip() or None
    elif env_var:
        explicit_path = os.environ.get(str(env_var), "").strip() or None
        mode = "env"

    if not explicit_path:
        return {}, {"mode": "defaults", "paths": [], "env_var": env_var}

    expanded = Path(os.path.expandvars(os.path.expanduser(explicit_path))).resolve()
    if not expanded.is_file():
        raise FileNotFoundError(f"Missing operator config file: {expanded}")

    cfg = load_yaml_mapping(expanded)
    loaded_paths = [str(expanded)]

    overlay_path = expanded.with_name(f"{expanded.stem}.local{expanded.suffix}")
    if overlay_path.is_file():
        overlay = load_yaml_mapping(overlay_path)
        cfg = deep_merge(cfg, overlay, path="")
        loaded_paths.append(str(overlay_path))
        mode = f"{mode}+local"

    meta = {"mode": mode, "paths": loaded_paths, "env_var": env_var}
    return cfg, meta
