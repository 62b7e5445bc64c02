"""Factories for building a new game's world and player."""

from .player_factory import create_starting_player
from .world_factory import create_world_graph

__all__ = ["create_starting_player", "create_world_graph"]
