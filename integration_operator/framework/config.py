from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from traitkit import parse_bool

from integration_operator.framework.models import PlatformBuildSpec

KNOWN_KEYS: dict[str, tuple[str, ...]] = {
    "": ("workspace", "log_dir", "keep_staging", "maven", "build"),
    "maven": ("executable", "local_repository", "extra_options"),
    "build": ("runtime_version", "base_image", "group_id", "registry"),
}


@dataclass(frozen=True)
class OperatorConfig:
    workspace: str
    log_dir: str
    keep_staging: bool
    maven_executable: str
    maven_local_repository: str | None
    maven_extra_options: tuple[str, ...]
    build: PlatformBuildSpec

    @staticmethod
    def from_dict(cfg: Mapping[str, Any]) -> tuple["OperatorConfig", list[str]]:
        """
        Parse and validate operator settings, returning (OperatorConfig, warnings).

        Unknown keys produce warnings rather than errors.

        Raises:
            ValueError: if a known key has an invalid value.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        warnings: list[str] = []

        def normalize_path(value: str) -> str:
            return os.path.abspath(os.path.expandvars(os.path.expanduser(value.strip())))

        def lookup(path: str) -> tuple[bool, Any]:
            cur: Any = cfg
            for part in path.split("."):
                if not isinstance(cur, Mapping) or part not in cur:
                    return False, None
                cur = cur[part]
            return True, cur

        def optional_str(path: str) -> str | None:
            found, cur = lookup(path)
            if not found or cur is None:
                return None
            if not isinstance(cur, str):
                raise ValueError(f"Invalid config type for {path}: expected string")
            return cur.strip() or None

        def optional_bool(path: str, *, default: bool) -> bool:
            found, cur = lookup(path)
            if not found:
                return default
            if cur is None:
                raise ValueError(f"Invalid boolean for {path}: None")
            if isinstance(cur, bool):
                return cur
            return parse_bool(str(cur), path)

        def optional_str_list(path: str) -> tuple[str, ...]:
            found, cur = lookup(path)
            if not found or cur is None:
                return ()
            if isinstance(cur, str):
                return tuple(part for part in cur.split() if part)
            if not isinstance(cur, (list, tuple)) or not all(isinstance(item, str) for item in cur):
                raise ValueError(f"Invalid config type for {path}: expected list[str]")
            return tuple(item.strip() for item in cur if item.strip())

        for section, keys in KNOWN_KEYS.items():
            if section:
                found, raw = lookup(section)
                if not found or raw is None:
                    continue
                if not isinstance(raw, Mapping):
                    raise ValueError(f"Invalid config type for {section}: expected mapping")
            else:
                raw = cfg
            for key in raw:
                if key not in keys:
                    path = f"{section}.{key}" if section else str(key)
                    warnings.append(f"Unknown config key {path} (ignored)")

        defaults = PlatformBuildSpec()
        workspace = optional_str("workspace") or os.path.join(".", "_work")
        log_dir = optional_str("log_dir") or os.path.join(workspace, "logs")

        local_repository = optional_str("maven.local_repository")
        if local_repository:
            local_repository = normalize_path(local_repository)

        config = OperatorConfig(
            workspace=normalize_path(workspace),
            log_dir=normalize_path(log_dir),
            keep_staging=optional_bool("keep_staging", default=False),
            maven_executable=optional_str("maven.executable") or "mvn",
            maven_local_repository=local_repository,
            maven_extra_options=optional_str_list("maven.extra_options"),
            build=PlatformBuildSpec(
                runtime_version=optional_str("build.runtime_version") or defaults.runtime_version,
                base_image=optional_str("build.base_image") or defaults.base_image,
                local_repository=local_repository,
                group_id=optional_str("build.group_id") or defaults.group_id,
                registry=optional_str("build.registry"),
            ),
        )
        return config, warnings
