"""Configuration loading from environment variables and memeseum.toml."""

from __future__ import annotations

import getpass
import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_DATA_DIR = Path.home() / ".memeseum" / "data"
_CONFIG_FILENAME = "memeseum.toml"


def _default_creator() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "anonymous"


@dataclass
class StorageConfig:
    """Where memes live and how their ids are minted."""

    data_dir: Path = _DEFAULT_DATA_DIR
    id_policy: str = "clock"
    clock_step: float = 1.0


@dataclass
class MemeseumConfig:
    """Top-level configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    creator: str = field(default_factory=_default_creator)
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> MemeseumConfig:
    """Load configuration from environment variables and optional memeseum.toml.

    Priority: environment variables > memeseum.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.memeseum/
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".memeseum" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    storage_data = file_data.get("storage", {})

    config = MemeseumConfig(
        storage=StorageConfig(
            data_dir=Path(
                os.getenv("MEMESEUM_DATA_DIR", storage_data.get("data_dir", str(_DEFAULT_DATA_DIR)))
            ).expanduser(),
            id_policy=os.getenv("MEMESEUM_ID_POLICY", storage_data.get("id_policy", "clock")),
            clock_step=float(os.getenv("MEMESEUM_CLOCK_STEP", storage_data.get("clock_step", 1.0))),
        ),
        creator=os.getenv("MEMESEUM_CREATOR", file_data.get("creator") or _default_creator()),
        log_level=os.getenv("MEMESEUM_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
