"""
Environments for the REINFORCE agent.

The agent only talks to an environment through BaseGame.reset() and
BaseGame.step(); everything else here is lookup by name for the CLI.

    >>> GameClass = get_game('line_walk')
    >>> game = GameClass(config)
"""

from typing import Any, Dict, List, Optional, Type

from .base_game import BaseGame
from .line_walk import LineWalk


# name -> class plus the metadata shown by get_game_info()
GAME_REGISTRY: Dict[str, Dict[str, Any]] = {
    'line_walk': {
        'class': LineWalk,
        'name': 'LineWalk',
        'description': 'Walk right along a corridor to reach the goal',
        'actions': ['LEFT', 'RIGHT'],
    },
}


def get_game(name: str) -> Optional[Type[BaseGame]]:
    """Environment class registered under name (case-insensitive), or None."""
    entry = GAME_REGISTRY.get(name.lower())
    return entry['class'] if entry else None


def list_games() -> List[str]:
    return list(GAME_REGISTRY)


def get_game_info(name: str) -> Optional[Dict[str, Any]]:
    """Registry metadata without the class itself, or None for unknown names."""
    entry = GAME_REGISTRY.get(name.lower())
    if entry is None:
        return None
    return {key: value for key, value in entry.items() if key != 'class'}


__all__ = [
    'BaseGame',
    'LineWalk',
    'GAME_REGISTRY',
    'get_game',
    'list_games',
    'get_game_info',
]
