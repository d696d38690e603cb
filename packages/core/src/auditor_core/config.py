import os
from pathlib import Path
from typing import Optional

import yaml

from auditor_core.errors import ConfigError
from auditor_core.utils.files import AUDITED_EXTENSIONS

DEFAULT_CONFIG: dict = {
    "endpoint": "http://localhost:3000/",
    "author": None,  # None = $USER, falling back to "auditor"
    "allowed_extensions": list(AUDITED_EXTENSIONS),  # empty list = every file
    "exclude": [],  # fnmatch patterns or directory names never loaded on activation
    "timeout": 10.0,
}


def load_config(config_path: str = ".auditor.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .auditor.yml in the current directory
      3. CLI argument overrides
      4. AUDITOR_ENDPOINT / AUDITOR_AUTHOR environment variables
    """
    config = {
        **DEFAULT_CONFIG,
        "allowed_extensions": list(DEFAULT_CONFIG["allowed_extensions"]),
        "exclude": list(DEFAULT_CONFIG["exclude"]),
    }

    path = Path(config_path)
    if path.exists():
        try:
            with open(path) as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if os.environ.get("AUDITOR_ENDPOINT"):
        config["endpoint"] = os.environ["AUDITOR_ENDPOINT"]
    if os.environ.get("AUDITOR_AUTHOR"):
        config["author"] = os.environ["AUDITOR_AUTHOR"]
    if not config.get("author"):
        config["author"] = os.environ.get("USER") or "auditor"

    return config
