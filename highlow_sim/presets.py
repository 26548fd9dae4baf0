"""
Preset configurations for Math High-Low simulation.
Pairs a rule set with the strategies each side plays.
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum

from .engine.game import GameConfig


class StrategyType(Enum):
    BASIC = "basic"    # Numbers in dealt order
    SMART = "smart"    # Exhaustive search


class Difficulty(Enum):
    DEFAULT = "default"
    EASY = "easy"
    HARD = "hard"


@dataclass
class Preset:
    """A complete preset configuration for a match."""
    name: str
    description: str
    difficulty: Difficulty = Difficulty.DEFAULT
    player_strategy: StrategyType = StrategyType.BASIC
    ai_strategy: StrategyType = StrategyType.SMART
    config_overrides: dict = field(default_factory=dict)

    def build_config(self) -> GameConfig:
        """Base config for the difficulty with overrides applied."""
        if self.difficulty == Difficulty.EASY:
            config = GameConfig.easy()
        elif self.difficulty == Difficulty.HARD:
            config = GameConfig.hard()
        else:
            config = GameConfig.default()
        for key, value in self.config_overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)
        return config


# Built-in presets
PRESETS = {
    "standard": Preset(
        name="Standard",
        description="Default rules, naive player against the searching AI",
    ),

    "easy": Preset(
        name="Easy",
        description="More credits and friendlier targets (5 or 10)",
        difficulty=Difficulty.EASY,
    ),

    "hard": Preset(
        name="Hard",
        description="Fewer credits, bigger bets, targets of 1, 50 or 100",
        difficulty=Difficulty.HARD,
    ),

    "mirror": Preset(
        name="Mirror Match",
        description="Searching AI on both sides",
        player_strategy=StrategyType.SMART,
        config_overrides={"max_rounds": 50},
    ),

    "no_specials": Preset(
        name="No Specials",
        description="Deck without √ or forced × cards",
        config_overrides={"multiply_cards_per_round": 0, "square_root_cards_per_round": 0},
    ),

    "high_stakes": Preset(
        name="High Stakes",
        description="Maximum bet every round",
        config_overrides={"min_bet": 5, "max_bet": 5},
    ),
}


def get_preset(name: str) -> Optional[Preset]:
    """Get a preset by name."""
    return PRESETS.get(name.lower().replace(" ", "_"))


def list_presets() -> list[str]:
    """List all available preset names."""
    return list(PRESETS.keys())


def get_preset_info(name: str) -> Optional[dict]:
    """Get info about a preset."""
    preset = get_preset(name)
    if preset:
        return {
            "name": preset.name,
            "description": preset.description,
            "difficulty": preset.difficulty.value,
            "player_strategy": preset.player_strategy.value,
            "ai_strategy": preset.ai_strategy.value,
        }
    return None
