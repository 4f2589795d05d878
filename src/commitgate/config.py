"""Gate configuration loader.

Supports ``.commitgate.yaml`` (or ``.yml``) at the repository root, or a
``[tool.commitgate]`` table in ``pyproject.toml``. Missing files fall back to
the defaults below.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DocScanMode = Literal["previous-line", "skip-blank-lines"]

DOC_SCAN_MODES: tuple[str, ...] = ("previous-line", "skip-blank-lines")

YAML_CONFIG_NAMES: tuple[str, ...] = (".commitgate.yaml", ".commitgate.yml")

DEFAULT_GENERIC_MESSAGES: tuple[str, ...] = (
    "wip",
    "test",
    "fix",
    "temp",
    "asdf",
    "todo",
    "hack",
    "debug",
)


@dataclass(frozen=True)
class GateConfig:
    """Tunables for the pre-commit and commit-msg gates."""

    min_overall_coverage: int = 60
    min_file_coverage: int = 20
    min_message_length: int = 10
    lint_command: tuple[str, ...] = ("npm", "run", "lint")
    test_command: tuple[str, ...] = ("npm", "run", "test:coverage")
    source_extensions: tuple[str, ...] = (".js", ".jsx")
    forbidden_pattern: str = "console.log"
    coverage_source_prefix: str = "src/"
    coverage_aggregate_label: str = "All files"
    generic_messages: tuple[str, ...] = DEFAULT_GENERIC_MESSAGES
    doc_scan_mode: DocScanMode = "previous-line"
    docs_source_dir: str = "src"
    docs_output: str = "docs/API.md"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GateConfig:
        """Parse and validate a config mapping into GateConfig."""
        known = {f.name: f for f in fields(cls)}
        values: dict[str, Any] = {}
        for raw_key, value in data.items():
            key = str(raw_key).replace("-", "_")
            if key not in known:
                raise ValueError(f"unknown key: {raw_key}")
            default = known[key].default
            if isinstance(default, tuple):
                if isinstance(value, str):
                    value = value.split() if key.endswith("_command") else [value]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise TypeError(f"{raw_key} must be a list of strings")
                value = tuple(value)
            elif isinstance(default, int):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError(f"{raw_key} must be an integer")
            elif not isinstance(value, str):
                raise TypeError(f"{raw_key} must be a string")
            values[key] = value

        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        for name in ("min_overall_coverage", "min_file_coverage"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be within 0..100, got {value}")
        if self.min_message_length < 0:
            raise ValueError(f"min_message_length must be >= 0, got {self.min_message_length}")
        if self.doc_scan_mode not in DOC_SCAN_MODES:
            raise ValueError(
                f"doc_scan_mode must be one of {', '.join(DOC_SCAN_MODES)}, got {self.doc_scan_mode}"
            )
        if not self.lint_command or not self.test_command:
            raise ValueError("lint_command and test_command must not be empty")
        if not self.forbidden_pattern:
            raise ValueError("forbidden_pattern must not be empty")

    def with_overrides(self, **overrides: Any) -> GateConfig:
        """Return a copy with non-None overrides applied (CLI flags)."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        if not applied:
            return self
        config = replace(self, **applied)
        config.validate()
        return config


def load_gate_config(repo_root: Path) -> GateConfig:
    """Load gate configuration for a repository.

    Priority order:
    1. .commitgate.yaml / .commitgate.yml
    2. [tool.commitgate] in pyproject.toml
    3. built-in defaults

    Raises:
        RuntimeError: If a config file is malformed or invalid
    """
    for name in YAML_CONFIG_NAMES:
        yaml_path = repo_root / name
        if not yaml_path.exists():
            continue
        try:
            with open(yaml_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise TypeError("top level must be a mapping")
            config = GateConfig.from_dict(data)
        except yaml.YAMLError as e:
            raise RuntimeError(f"Malformed YAML config at {yaml_path}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise RuntimeError(f"Invalid config structure in {yaml_path}: {e}") from e
        logger.debug("config: loaded %s", yaml_path)
        return config

    pyproject_path = repo_root / "pyproject.toml"
    if pyproject_path.exists():
        try:
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise RuntimeError(f"Malformed TOML config at {pyproject_path}: {e}") from e
        table = data.get("tool", {}).get("commitgate")
        if table is not None:
            try:
                if not isinstance(table, dict):
                    raise TypeError("[tool.commitgate] must be a table")
                config = GateConfig.from_dict(table)
            except (KeyError, TypeError, ValueError) as e:
                raise RuntimeError(f"Invalid config structure in {pyproject_path}: {e}") from e
            logger.debug("config: loaded [tool.commitgate] from %s", pyproject_path)
            return config

    logger.debug("config: no config file under %s, using defaults", repo_root)
    return GateConfig()
