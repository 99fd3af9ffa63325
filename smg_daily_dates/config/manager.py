"""
Configuration manager for loading and validating settings.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from smg_daily_dates.data.schemas import Config

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading from YAML files and environment variables."""

    # Environment variable -> config field, optionally with a converter.
    # Later entries win, so SMG_* names override the plain Supabase/PORT ones.
    ENV_MAPPINGS = {
        "SUPABASE_URL": "supabase_url",
        "SMG_SUPABASE_URL": "supabase_url",
        "SUPABASE_ANON_KEY": "supabase_key",
        "SMG_SUPABASE_KEY": "supabase_key",
        "SMG_HOLIDAY_SOURCE": "holiday_source",
        "SMG_HOLIDAY_TABLE": "holiday_table",
        "SMG_HOLIDAY_TIMEOUT": ("holiday_timeout", float),
        "SMG_HOLIDAY_COUNTRY": "holiday_country",
        "SMG_HOLIDAY_SUBDIVISION": "holiday_subdivision",
        "SMG_DEFAULT_DAYS": ("default_lookback_days", int),
        "SMG_LOG_LEVEL": "log_level",
        "SMG_OUTPUT_FORMAT": "output_format",
        "SMG_OUTPUT_DIRECTORY": "output_directory",
        "SMG_API_HOST": "api_host",
        "PORT": ("api_port", int),
        "SMG_API_PORT": ("api_port", int),
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config manager.

        Args:
            config_path: Optional path to config file. If not provided, uses default.
        """
        self.config_path = config_path or self._get_default_config_path()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        return str(Path(__file__).parent / "settings.yaml")

    def load_config(self) -> Config:
        """
        Load configuration from YAML file with environment variable overrides.

        Returns:
            Config: Validated configuration object.

        Raises:
            ValueError: If config is invalid.
        """
        config_dict = self._load_yaml()
        config_dict = self._apply_env_overrides(config_dict)

        try:
            return Config(**config_dict)
        except Exception as e:
            raise ValueError(f"Invalid configuration: {e}")

    def _load_yaml(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(self.config_path)

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}, using defaults")
            return {}

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config file: {e}")

        logger.debug(f"Loaded config from: {config_path}")
        return self._flatten_config(config) if config else {}

    def _flatten_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Flatten nested YAML config to match Config model fields.

        Args:
            config: Nested configuration dictionary.

        Returns:
            Flattened configuration dictionary.
        """
        result = {}

        if "holidays" in config:
            hol = config["holidays"] or {}
            for key, field in (
                ("source", "holiday_source"),
                ("table", "holiday_table"),
                ("timeout", "holiday_timeout"),
                ("country", "holiday_country"),
                ("subdivision", "holiday_subdivision"),
                ("dates", "static_holidays"),
            ):
                if key in hol:
                    result[field] = hol[key]

        if "supabase" in config:
            sb = config["supabase"] or {}
            if "url" in sb:
                result["supabase_url"] = sb["url"]
            if "key" in sb:
                result["supabase_key"] = sb["key"]

        if "lookback" in config:
            lb = config["lookback"] or {}
            if "default_days" in lb:
                result["default_lookback_days"] = lb["default_days"]

        if "logging" in config:
            log = config["logging"] or {}
            if "level" in log:
                result["log_level"] = log["level"]

        if "output" in config:
            out = config["output"] or {}
            if "format" in out:
                result["output_format"] = out["format"]
            if "directory" in out:
                result["output_directory"] = out["directory"]

        if "api" in config:
            api = config["api"] or {}
            if "host" in api:
                result["api_host"] = api["host"]
            if "port" in api:
                result["api_port"] = api["port"]

        # YAML null means "not set"
        return {k: v for k, v in result.items() if v is not None}

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Args:
            config_dict: Configuration dictionary from YAML.

        Returns:
            Updated configuration dictionary.
        """
        for env_var, mapping in self.ENV_MAPPINGS.items():
            env_value = os.environ.get(env_var)
            if env_value is None or env_value == "":
                continue
            if isinstance(mapping, tuple):
                config_key, type_converter = mapping
                try:
                    config_dict[config_key] = type_converter(env_value)
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_var}: {env_value!r}")
                    continue
            else:
                config_key = mapping
                config_dict[config_key] = env_value
            logger.debug(f"Override from env: {env_var} -> {config_key}")

        return config_dict

    def save_config(self, config: Config, output_path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration object to save.
            output_path: Optional output path. If not provided, uses default.
        """
        output_path = output_path or self.config_path

        config_dict = {
            "holidays": {
                "source": config.holiday_source.value,
                "table": config.holiday_table,
                "timeout": config.holiday_timeout,
                "country": config.holiday_country,
                "subdivision": config.holiday_subdivision,
                "dates": [d.isoformat() for d in config.static_holidays],
            },
            "supabase": {
                "url": config.supabase_url,
                "key": config.supabase_key,
            },
            "lookback": {
                "default_days": config.default_lookback_days,
            },
            "logging": {
                "level": config.log_level,
            },
            "output": {
                "format": config.output_format,
                "directory": config.output_directory,
            },
            "api": {
                "host": config.api_host,
                "port": config.api_port,
            },
        }

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Saved configuration to: {output_path}")
