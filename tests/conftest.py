"""Pytest configuration and shared fixtures."""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Create a seeded NumPy generator for testing."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_board():
    """Create a sample board state for testing."""
    from backgammon_rules.core.board import initial_board
    return initial_board()


@pytest.fixture
def playing_game():
    """A standard game in play, White to roll."""
    from backgammon_rules.engine.game import new_game, start_game
    return start_game(new_game())
