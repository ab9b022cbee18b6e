"""Project settings: waste fractions, rounding precision, logging.

Settings are merged in layers, lowest priority first::

    defaults -> <project>/.qto/settings.json -> QTO_* environment variables

Usage::

    from qto.settings import load_settings

    settings = load_settings("/path/to/project")
    settings.waste.concrete   # 0.05
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from qto.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_ROUNDING,
    DEFAULT_WASTE,
    SETTINGS_DIR,
    SETTINGS_FILE,
)

logger = logging.getLogger(__name__)

# Environment variable -> (section, key, caster)
_ENV_KEYS: dict[str, tuple[str, str, type]] = {
    "QTO_WASTE_CONCRETE": ("waste", "concrete", float),
    "QTO_WASTE_REBAR": ("waste", "rebar", float),
    "QTO_WASTE_FORMWORK": ("waste", "formwork", float),
    "QTO_ROUND_CONCRETE": ("rounding", "concrete", int),
    "QTO_ROUND_REBAR": ("rounding", "rebar", int),
    "QTO_ROUND_FORMWORK": ("rounding", "formwork", int),
}


class WasteSettings(BaseModel):
    """Waste fractions per trade (0.05 = 5 %)."""

    model_config = ConfigDict(extra="ignore")

    concrete: float = Field(default=DEFAULT_WASTE["concrete"], ge=0.0, le=1.0)
    rebar: float = Field(default=DEFAULT_WASTE["rebar"], ge=0.0, le=1.0)
    formwork: float = Field(default=DEFAULT_WASTE["formwork"], ge=0.0, le=1.0)
    """Accepted for compatibility; formwork quantities are never wasted."""


class RoundingSettings(BaseModel):
    """Decimal places per trade."""

    model_config = ConfigDict(extra="ignore")

    concrete: int = Field(default=DEFAULT_ROUNDING["concrete"], ge=0, le=6)
    rebar: int = Field(default=DEFAULT_ROUNDING["rebar"], ge=0, le=6)
    formwork: int = Field(default=DEFAULT_ROUNDING["formwork"], ge=0, le=6)


class ProjectSettings(BaseModel):
    """Calculation settings for one project snapshot."""

    model_config = ConfigDict(extra="ignore")

    waste: WasteSettings = Field(default_factory=WasteSettings)
    rounding: RoundingSettings = Field(default_factory=RoundingSettings)


def load_settings(project_path: str | Path | None = None) -> ProjectSettings:
    """Load merged settings for a project root.

    Invalid or unreadable settings files are logged and skipped.
    """
    data: dict[str, dict[str, Any]] = {"waste": {}, "rounding": {}}

    if project_path is not None:
        settings_json = Path(project_path) / SETTINGS_DIR / SETTINGS_FILE
        if settings_json.is_file():
            try:
                raw = json.loads(settings_json.read_text(encoding="utf-8"))
                for section in ("waste", "rounding"):
                    if isinstance(raw.get(section), dict):
                        data[section].update(raw[section])
            except (json.JSONDecodeError, OSError, AttributeError):
                logger.warning("Could not read %s, using defaults", settings_json, exc_info=True)

    for env_key, (section, key, caster) in _ENV_KEYS.items():
        env_val = os.environ.get(env_key)
        if env_val is None:
            continue
        try:
            data[section][key] = caster(env_val)
        except ValueError:
            logger.warning("Ignoring %s=%r (not a %s)", env_key, env_val, caster.__name__)

    return ProjectSettings.model_validate(data)


def configure_logging(level: str | None = None) -> None:
    """Configure the ``qto`` logger from *level* or ``QTO_LOG_LEVEL``."""
    level_name = (level or os.environ.get("QTO_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    logging.getLogger("qto").setLevel(getattr(logging, level_name, logging.INFO))
