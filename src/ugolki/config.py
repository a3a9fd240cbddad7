"""Search configuration and presets."""
from dataclasses import dataclass


@dataclass
class SearchConfig:
    search_depth: int = 3
    eval_depth: int = 2
    poll_interval_ms: int = 12
    max_plies: int = 400
    preset: str = "custom"

    def __post_init__(self) -> None:
        if self.search_depth < 1:
            raise ValueError("search_depth must be at least 1")
        if self.eval_depth < 0:
            raise ValueError("eval_depth must not be negative")
        if self.max_plies < 1:
            raise ValueError("max_plies must be at least 1")


def preset_search_config(name: str) -> SearchConfig:
    preset = name.lower()
    if preset == "fast":
        return SearchConfig(search_depth=2, eval_depth=1, preset="fast")
    if preset == "default":
        return SearchConfig(search_depth=3, eval_depth=2, preset="default")
    if preset == "strong":
        # Depths used by the desktop game.
        return SearchConfig(search_depth=4, eval_depth=4, preset="strong")
    raise ValueError(f"Unknown search preset '{name}'")
