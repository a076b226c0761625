"""
Engine settings.

Defaults reproduce the spreadsheet conventions the reference data is
written in. A YAML file may override any of them:

    report_stalled: true
    fallback_question: "Please answer tag {tag_id}"
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from .columns import canon
from .errors import ConfigError


@dataclass(frozen=True)
class EngineConfig:
    bool_entry_category: str = "bool"
    yes_answer: str = "yes"
    no_answer: str = "no"
    no_display_entry_type: str = "no display"
    fallback_question: str = "Answer for Tag {tag_id}"
    fallback_entry_type: str = "Text"
    # Report Status.STALLED instead of DONE when pending clauses have nothing left to ask.
    report_stalled: bool = False

    def is_bool_category(self, entry_category: Any) -> bool:
        return canon(entry_category) == canon(self.bool_entry_category)

    def is_no_display(self, entry_type: Any) -> bool:
        return canon(entry_type) == canon(self.no_display_entry_type)


DEFAULT_CONFIG = EngineConfig()


def config_from_dict(data: Dict[str, Any] | None) -> EngineConfig:
    """Merge a mapping over the defaults, rejecting unknown keys."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    known = {f.name: f for f in dataclasses.fields(EngineConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "report_stalled":
            if not isinstance(value, bool):
                raise ConfigError(f"report_stalled must be true or false, got {value!r}")
        elif not isinstance(value, str):
            raise ConfigError(f"{key} must be a string, got {value!r}")
        values[key] = value

    return dataclasses.replace(DEFAULT_CONFIG, **values)


def load_config(path: str | Path | None = None) -> EngineConfig:
    """
    Load engine settings from a YAML file.

    A missing path (None) returns the defaults. An empty file is the same
    as no overrides.

    Raises:
        FileNotFoundError: If the path does not exist
        ConfigError: If the YAML is invalid or holds unknown keys
    """
    if path is None:
        return DEFAULT_CONFIG

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")

    return config_from_dict(data)
