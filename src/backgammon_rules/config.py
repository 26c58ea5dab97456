"""Rules configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RulesConfig:
    """Rule options for move enumeration and turn handling.

    Attributes:
        enforce_maximal_usage: Only allow moves that start a sequence using
            as many dice as possible (and the higher die when only one of
            two can be played). When False, any move that is legal on its
            own for a remaining die is accepted.
    """
    enforce_maximal_usage: bool = False


DEFAULT_RULES = RulesConfig()
STRICT_RULES = RulesConfig(enforce_maximal_usage=True)
