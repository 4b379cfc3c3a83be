"""Profile-based configuration loader with merge precedence."""

from pathlib import Path
from typing import Any, Dict, List, Optional
import os
import yaml

from hit_trader.constants import PROFILES_DIR
from hit_trader.core.config_models import EngineConfig
from hit_trader.core.logger import logger

ENV_PREFIX = "HT_"


def load_profile(
    profile_name: str = "base",
    cli_overrides: Optional[Dict[str, Any]] = None,
    profiles_dir: Optional[Path] = None,
) -> Dict[str, Any]:
    """Load config with precedence: base < profile < env < CLI."""
    profiles_dir = profiles_dir or PROFILES_DIR

    # 1. Load base
    base_path = profiles_dir / "base.yaml"
    config = _load_yaml(base_path) if base_path.exists() else {}

    # 2. Load profile
    if profile_name != "base":
        profile_path = profiles_dir / f"{profile_name}.yaml"
        if profile_path.exists():
            profile = _load_yaml(profile_path)
            profile.pop("_extends", None)
            config = _deep_merge(config, profile)
        else:
            logger.warning(f"Profile not found: {profile_path} (using base)")

    # 3. Apply env overrides (HT_* prefix)
    config = _apply_env_overrides(config)

    # 4. Apply CLI overrides
    if cli_overrides:
        config = _deep_merge(config, cli_overrides)

    return config


def load_engine_config(
    profile_name: str = "base",
    cli_overrides: Optional[Dict[str, Any]] = None,
    profiles_dir: Optional[Path] = None,
) -> EngineConfig:
    """Merge a profile and validate it. Raises ``pydantic.ValidationError``."""
    raw = load_profile(profile_name, cli_overrides, profiles_dir)
    return EngineConfig.validate_config(raw)


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``base`` with ``override`` layered on top; nested sections merge."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ``HT_SECTION_FIELD=value`` variables to keys the profile defines."""
    for name, raw in sorted(os.environ.items()):
        if not name.startswith(ENV_PREFIX):
            continue
        words = name[len(ENV_PREFIX):].lower().split("_")
        path = _resolve_env_path(config, words)
        if path is None:
            logger.warning(f"Ignoring {name}: no matching config key")
            continue
        section = config
        for key in path[:-1]:
            section = section[key]
        section[path[-1]] = _parse_value(raw)
    return config


def _resolve_env_path(section: Dict[str, Any], words: List[str]) -> Optional[List[str]]:
    """Map underscore-split words onto existing keys, e.g. auto/trade/proportion
    -> ["auto_trade", "proportion"]. Returns None when nothing matches."""
    for split in range(1, len(words) + 1):
        key = "_".join(words[:split])
        if key not in section:
            continue
        rest = words[split:]
        if not rest:
            return [key]
        if isinstance(section[key], dict):
            tail = _resolve_env_path(section[key], rest)
            if tail is not None:
                return [key] + tail
    return None


def _parse_value(raw: str) -> Any:
    # YAML scalar rules, so env values read the same as profile values
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
