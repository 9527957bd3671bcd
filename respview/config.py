"""
Configuration management for respview.
Merges built-in defaults, an optional JSON settings file and environment
variables (including a ``.env`` file).  Settings are read-only at runtime.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(value: str) -> Optional[bool]:
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return None


class Config:
    """Holds respview settings."""

    DEFAULT_CONFIG = {
        "color": True,
        "color_depth": "256",       # "256" or "truecolor"
        "sniff_threshold": 0.5,     # minimum grammar score for plain text
        "show_summary": True,       # Content-Type / Detected Format header
    }

    COLOR_DEPTHS = ("256", "truecolor")

    def __init__(self, config_dir: Optional[str] = None, load_env: bool = True):
        """
        Initialize config.

        Args:
            config_dir: Override default config directory (~/.respview)
            load_env: Read a .env file found from the working directory
        """
        if config_dir:
            self.config_dir = Path(config_dir).expanduser()
        else:
            self.config_dir = Path.home() / ".respview"

        self.config_file = self.config_dir / "config.json"

        if load_env:
            dotenv_path = find_dotenv(usecwd=True)
            if dotenv_path:
                load_dotenv(dotenv_path, override=False)

        self.settings = self._load_config()
        self._load_env_vars()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file, falling back to defaults."""
        config = self.DEFAULT_CONFIG.copy()
        if not self.config_file.exists():
            return config
        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("config file %s unreadable (%s), using defaults", self.config_file, e)
            return config
        if not isinstance(loaded, dict):
            logger.warning("config file %s is not a JSON object, using defaults", self.config_file)
            return config
        # Unknown keys are ignored so older files keep working.
        for key in self.DEFAULT_CONFIG:
            if key in loaded:
                config[key] = loaded[key]
        return config

    def _load_env_vars(self):
        """Apply environment overrides."""
        # https://no-color.org: any non-empty value disables colour
        if os.getenv("NO_COLOR"):
            self.settings["color"] = False

        color = os.getenv("RESPVIEW_COLOR")
        if color is not None:
            flag = _env_flag(color)
            if flag is not None:
                self.settings["color"] = flag

        depth = os.getenv("RESPVIEW_COLOR_DEPTH")
        if depth:
            self.settings["color_depth"] = depth.strip().lower()

        threshold = os.getenv("RESPVIEW_SNIFF_THRESHOLD")
        if threshold:
            try:
                self.settings["sniff_threshold"] = float(threshold)
            except ValueError:
                logger.warning("ignoring RESPVIEW_SNIFF_THRESHOLD=%r (not a number)", threshold)

    @property
    def color(self) -> bool:
        return bool(self.settings["color"])

    @property
    def color_depth(self) -> str:
        depth = str(self.settings["color_depth"])
        return depth if depth in self.COLOR_DEPTHS else "256"

    @property
    def sniff_threshold(self) -> float:
        try:
            return float(self.settings["sniff_threshold"])
        except (TypeError, ValueError):
            return self.DEFAULT_CONFIG["sniff_threshold"]

    @property
    def show_summary(self) -> bool:
        return bool(self.settings["show_summary"])
