"""Repository configuration helpers."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import yaml

from .constants import CONFIG_FILE

logger = logging.getLogger(__name__)


@dataclass
class FimConfig:
    """Configuration read from .fim/config.yaml."""

    ignore: List[str] = field(default_factory=list)


def load_config(store_dir: Path) -> FimConfig:
    """Load configuration from the store directory if present."""

    cfg_path = store_dir / CONFIG_FILE
    if not cfg_path.exists():
        return FimConfig()

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable %s: %s", cfg_path, e)
        return FimConfig()

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", cfg_path)
        return FimConfig()

    ignore = data.get("ignore") or []
    if not isinstance(ignore, list):
        ignore = [ignore]
    return FimConfig(ignore=[str(p) for p in ignore])


def save_config(config: FimConfig, store_dir: Path) -> None:
    """Write configuration into the store directory."""
    (store_dir / CONFIG_FILE).write_text(
        yaml.safe_dump({"ignore": list(config.ignore)}, sort_keys=False)
    )
