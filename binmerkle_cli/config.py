"""
CLI Configuration

Locates and loads the YAML configuration file for the binmerkle CLI.
Environment variables (BINMERKLE_* prefix) override file settings.
"""

from __future__ import annotations

from pathlib import Path

from binmerkle.config.runtime import RuntimeConfig


DEFAULT_CONFIG_NAME = "binmerkle.yaml"


def default_config_paths() -> list[Path]:
    """Candidate config locations, in lookup order."""
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.cwd() / f".{DEFAULT_CONFIG_NAME}",
        Path.home() / ".config" / "binmerkle" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to a YAML config file; when omitted the
                     default locations are searched

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# binmerkle configuration
tree:
  depth: 16
  hash_algorithm: sha256
  # Digest size in bytes; only adjustable for blake2b, blake2s, shake_128, shake_256
  hash_size: null
  already_hashed: false
logging:
  level: INFO
  file: null
"""
