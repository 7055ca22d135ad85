"""
Engine configuration persistence.

Stores tuning knobs (run length, rest limit, probabilities) in a JSON file.
"""

import json
from pathlib import Path
from typing import TypedDict


class EngineConfig(TypedDict, total=False):
    """Engine tuning."""
    final_week: int  # Week whose settlement ends the run
    max_stamina: int  # Stamina ceiling for recovery
    week_start_stamina: int  # Stamina reset value at each week advance
    weekly_decay: int  # Satiety and hydration lost per week advance
    rest_click_limit: int  # Rest clicks in one week that end the run
    explore_bonus_chance: float  # Probability an expedition yields a bonus item
    hunger_threshold: int  # Satiety/hydration below this counts as a hungry week
    npc_gate_divisor: int  # NPC knock chance is social / divisor, capped at 1
    seed: int | None  # Fixed seed for reproducible runs


DEFAULT_CONFIG: EngineConfig = {
    "final_week": 45,
    "max_stamina": 120,
    "week_start_stamina": 100,
    "weekly_decay": 10,
    "rest_click_limit": 10,
    "explore_bonus_chance": 0.3,
    "hunger_threshold": 30,
    "npc_gate_divisor": 100,
    "seed": None,
}


def merge_config(overrides: EngineConfig | dict | None = None) -> EngineConfig:
    """Defaults with any known overrides applied."""
    config = DEFAULT_CONFIG.copy()
    if overrides:
        config.update({k: v for k, v in overrides.items() if k in DEFAULT_CONFIG})
    return config


def get_config_path(saves_dir: Path | str = "saves") -> Path:
    """Get path to config file."""
    return Path(saves_dir) / ".afterlife_config.json"


def load_config(saves_dir: Path | str = "saves") -> EngineConfig:
    """Load config from file, or return defaults if not found."""
    path = get_config_path(saves_dir)

    if not path.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
        return merge_config(saved)
    except (json.JSONDecodeError, IOError):
        return DEFAULT_CONFIG.copy()


def save_config(config: EngineConfig, saves_dir: Path | str = "saves") -> bool:
    """Save config to file. Returns True on success."""
    path = get_config_path(saves_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except IOError:
        return False


def set_final_week(week: int, saves_dir: Path | str = "saves") -> None:
    """Save run length preference."""
    config = load_config(saves_dir)
    config["final_week"] = week
    save_config(config, saves_dir)


def set_seed(seed: int | None, saves_dir: Path | str = "saves") -> None:
    """Save a fixed seed (None for fresh entropy each run)."""
    config = load_config(saves_dir)
    config["seed"] = seed
    save_config(config, saves_dir)
