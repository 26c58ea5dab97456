"""Move advisors and self-play."""

from backgammon_rules.advisor.agents import Advisor, first_move_advisor, random_advisor
from backgammon_rules.advisor.self_play import GameRecord, TurnRecord, compute_game_statistics, play_game

__all__ = [
    "Advisor",
    "first_move_advisor",
    "random_advisor",
    "GameRecord",
    "TurnRecord",
    "compute_game_statistics",
    "play_game",
]
