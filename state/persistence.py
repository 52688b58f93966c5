# state/persistence.py
import json
from pathlib import Path
from .game_state import GameState


def save_state(game_state: GameState, path: str):
    """
    Save the game state to disk as JSON.
    Args:
        game_state (GameState): The game state to save.
        path (str): The file path to save the game state to.
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(game_state.to_dict(), f, indent=2, ensure_ascii=False)


def load_state(path: str) -> GameState:
    """
    Load the game state from disk.
    Args:
        path (str): The file path to load the game state from.
    Returns:
        GameState: The loaded game state.
    Raises:
        ValueError: If the file is not a saved game.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict) or "rules" not in data:
        raise ValueError(f"{path} does not contain a saved game.")
    return GameState.from_dict(data)
