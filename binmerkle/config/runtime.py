"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from binmerkle.crypto.hashing import DEFAULT_ALGORITHM, HashlibHasher, new_hasher
from binmerkle.merkle.builder import TreeBuilder
from binmerkle.merkle.shape import DEPTH_MAX, TreeShape, compute_shape
from binmerkle.schemas.errors import ConfigurationException

load_dotenv()


ENV_PREFIX = "BINMERKLE_"


def _env_int(name: str) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationException(
            f"{name} must be an integer, got {raw!r}",
            details={"variable": name},
        ) from e


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class TreeConfig:
    """Configuration for tree shape and hashing."""
    depth: int = DEPTH_MAX
    hash_algorithm: str = DEFAULT_ALGORITHM
    hash_size: Optional[int] = None  # None: the algorithm's natural size
    already_hashed: bool = False

    def new_hasher(self) -> HashlibHasher:
        return new_hasher(self.hash_algorithm, self.hash_size)

    def shape(self) -> TreeShape:
        """Validate depth and hash size and return the tree shape."""
        size = self.hash_size if self.hash_size is not None else self.new_hasher().digest_size
        return compute_shape(self.depth, size)

    def new_builder(self) -> TreeBuilder:
        hasher = self.new_hasher()
        return TreeBuilder(compute_shape(self.depth, hasher.digest_size), hasher)


@dataclass
class LoggingConfig:
    """Configuration for log output."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - BINMERKLE_DEPTH: Tree depth
        - BINMERKLE_HASH_ALGORITHM: hashlib algorithm name
        - BINMERKLE_HASH_SIZE: Digest size in bytes (blake2/shake only)
        - BINMERKLE_ALREADY_HASHED: Treat leaves as digests (true/false)
        - BINMERKLE_LOG_LEVEL: Log level
        - BINMERKLE_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        # Tree settings
        if os.getenv(f"{ENV_PREFIX}DEPTH"):
            overrides.setdefault("tree", {})["depth"] = _env_int(f"{ENV_PREFIX}DEPTH")
        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("tree", {})["hash_algorithm"] = os.getenv(
                f"{ENV_PREFIX}HASH_ALGORITHM"
            )
        if os.getenv(f"{ENV_PREFIX}HASH_SIZE"):
            overrides.setdefault("tree", {})["hash_size"] = _env_int(f"{ENV_PREFIX}HASH_SIZE")
        if os.getenv(f"{ENV_PREFIX}ALREADY_HASHED"):
            overrides.setdefault("tree", {})["already_hashed"] = _env_bool(
                f"{ENV_PREFIX}ALREADY_HASHED"
            )

        # Logging settings
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationException(
                    f"Invalid YAML in config file {path}: {e}",
                    details={"path": str(path)},
                ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Config file must contain a mapping: {path}",
                details={"path": str(path)},
            )
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {}) or {}
        logging_data = data.get("logging", {}) or {}

        try:
            tree = TreeConfig(**tree_data)
            log = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationException(
                f"Unknown configuration key: {e}",
                details={"tree": list(tree_data), "logging": list(logging_data)},
            ) from e

        return cls(tree=tree, logging=log)

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            for key, value in overrides["tree"].items():
                setattr(new_config.tree, key, value)

        if "logging" in overrides:
            for key, value in overrides["logging"].items():
                setattr(new_config.logging, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "hash_algorithm": self.tree.hash_algorithm,
                "hash_size": self.tree.hash_size,
                "already_hashed": self.tree.already_hashed,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }

