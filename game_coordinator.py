"""
GameCoordinator — stateful wrapper around the pure Yacht engine.

Owns the current GameState, the randomness source and the game log.
Frontends (TUI, web) call coordinator action methods in response to user
input and read coordinator properties to decide what to show.
"""
from __future__ import annotations

import argparse
import logging
import random

from game_engine import (
    Category,
    GameState,
    can_commit,
    can_roll,
    can_toggle_hold,
    turn_phase,
)
from game_engine import (
    commit_category as engine_commit_category,
)
from game_engine import (
    restart_game as engine_restart_game,
)
from game_engine import (
    roll_dice as engine_roll_dice,
)
from game_engine import (
    toggle_die_hold as engine_toggle_die,
)
from game_log import GameLog

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class GameCoordinator:
    """Coordinates game state and the game log for a single player.

    Every action method returns True when the state changed and False when
    the action was not allowed (the state is then left untouched).
    """

    def __init__(self, rng=None) -> None:
        """Initialize the coordinator.

        Args:
            rng: Optional randomness source with randint(a, b). Defaults to
                 the random module.
        """
        self.rng = rng or random
        self.game_log = GameLog()
        self.state = GameState.create_initial(self.rng)
        self._roll_number = 1
        self._log_opening_throw()

    # ── Read-only state ───────────────────────────────────────────────────

    @property
    def dice(self):
        return self.state.dice

    @property
    def scorecard(self):
        return self.state.scorecard

    @property
    def rolls_left(self) -> int:
        return self.state.rolls_left

    @property
    def game_over(self) -> bool:
        return self.state.game_over

    @property
    def current_round(self) -> int:
        return self.state.current_round

    @property
    def phase(self):
        return turn_phase(self.state)

    @property
    def can_roll_now(self) -> bool:
        return can_roll(self.state)

    def can_commit(self, category: Category) -> bool:
        return can_commit(self.state, category)

    # ── Actions ───────────────────────────────────────────────────────────

    def roll_dice(self) -> bool:
        """Re-roll the unheld dice. Returns False if no roll was allowed."""
        if not can_roll(self.state):
            logger.debug("Roll ignored: rolls_left=%d game_over=%s",
                         self.state.rolls_left, self.state.game_over)
            return False
        self.state = engine_roll_dice(self.state, self.rng)
        self._roll_number += 1
        self.game_log.log_roll(self.current_round, self._roll_number, list(self.state.values))
        logger.debug("Rolled %s (%d left)", self.state.values, self.state.rolls_left)
        return True

    def toggle_hold(self, die_index: int) -> bool:
        """Hold or release one die. Returns False for a bad index or after game over."""
        if not can_toggle_hold(self.state, die_index):
            logger.debug("Hold ignored for die %r", die_index)
            return False
        self.state = engine_toggle_die(self.state, die_index)
        held = [i for i, is_held in enumerate(self.state.held) if is_held]
        self.game_log.log_hold_change(self.current_round, held, list(self.state.values))
        return True

    def commit_category(self, category: Category) -> bool:
        """Score the current dice in a category and start the next turn."""
        if not can_commit(self.state, category):
            logger.debug("Commit ignored for %s", category)
            return False

        turn = self.current_round
        dice_values = list(self.state.values)
        self.state = engine_commit_category(self.state, category, self.rng)
        score = self.state.scorecard.scores[category]
        self.game_log.log_commit(turn, category, score, dice_values)
        logger.debug("Committed %s for %d with %s", category.value, score, dice_values)

        if self.state.game_over:
            logger.info("Game over: final score %d", self.state.scorecard.get_grand_total())
        else:
            self._roll_number = 1
            self._log_opening_throw()
        return True

    def restart(self) -> None:
        """Throw away the current game and start over. Always allowed."""
        self.state = engine_restart_game(self.rng)
        self.game_log.clear()
        self._roll_number = 1
        self._log_opening_throw()
        logger.debug("Game restarted")

    def _log_opening_throw(self):
        self.game_log.log_roll(self.current_round, self._roll_number, list(self.state.values))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.

    Returns:
        Parsed argparse.Namespace.
    """
    parser = argparse.ArgumentParser(description="Yacht dice game")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed the dice for a reproducible session")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING",
                        help="Logging verbosity (default: WARNING)")
    return parser.parse_args(argv)


def make_rng(seed: int | None):
    """Randomness source for a session: seeded when a seed is given."""
    if seed is None:
        return random
    return random.Random(seed)


def configure_logging(level: str, handlers: list[logging.Handler] | None = None) -> None:
    """Install root logging. Frontends that own the terminal pass their own handlers."""
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
