"""The referee process: spawns players, runs the turn loop, keeps score."""

from .loader import load_deck, load_path_text
from .server import Dealer, PlayerChannel, ShutdownHandle, run_dealer

__all__ = ["Dealer", "PlayerChannel", "ShutdownHandle", "run_dealer", "load_deck", "load_path_text"]
