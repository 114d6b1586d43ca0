"""Player processes: the protocol loop and the two built-in strategies."""

from .agent import PlayerAgent
from .strategies import STRATEGIES, strategy_a, strategy_b

__all__ = ["PlayerAgent", "STRATEGIES", "strategy_a", "strategy_b"]
