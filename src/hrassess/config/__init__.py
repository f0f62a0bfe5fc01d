"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


class ConfigManager:
    """YAML-backed configuration loader for named profiles."""

    SUFFIXES: tuple[str, ...] = (".yaml", ".yml")

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def path_for(self, name: str) -> Path:
        for suffix in self.SUFFIXES:
            candidate = self._base_path / f"{name}{suffix}"
            if candidate.exists():
                return candidate
        raise FileNotFoundError(self._base_path / f"{name}.yaml")

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML mapping by name without file extension."""
        with self.path_for(name).open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config {name!r} must be a YAML mapping")
        return data

    def load_app_config(self, name: str) -> AppConfig:
        return load_config(self.load(name))


__all__ = ["ConfigManager"]
