"""
Yacht Game Engine - Pure game logic without any frontend dependencies

This module contains the scoring rules and the turn state machine for a
single-player Yacht game. It uses immutable data structures and pure functions
so every rule can be unit tested without a UI.

Dice are rolled through an injectable randomness source: any object with a
``randint(a, b)`` method. The ``random`` module is used when none is given.
"""
from dataclasses import dataclass, replace
from typing import Tuple
from enum import Enum
from collections import Counter
import random


NUM_DICE = 5
ROLLS_PER_TURN = 2  # re-rolls left after the opening throw of a turn
UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 35


class Category(Enum):
    """Yacht score categories, in scorecard order"""
    ONES = "ones"
    TWOS = "twos"
    THREES = "threes"
    FOURS = "fours"
    FIVES = "fives"
    SIXES = "sixes"
    CHANCE = "chance"
    YACHT = "yacht"
    THREE_OF_KIND = "three_kind"
    FOUR_OF_KIND = "four_kind"
    FULL_HOUSE = "full_house"
    SMALL_STRAIGHT = "small_straight"
    LARGE_STRAIGHT = "large_straight"


UPPER_FACE_VALUES = {
    Category.ONES: 1, Category.TWOS: 2, Category.THREES: 3,
    Category.FOURS: 4, Category.FIVES: 5, Category.SIXES: 6,
}

UPPER_CATEGORIES = tuple(UPPER_FACE_VALUES)
LOWER_CATEGORIES = tuple(cat for cat in Category if cat not in UPPER_FACE_VALUES)


def is_upper(category):
    """Whether a category scores by face value (ones..sixes)."""
    return category in UPPER_FACE_VALUES


class Scorecard:
    """Manages the Yacht scorecard"""

    def __init__(self):
        """Initialize an empty scorecard"""
        # None = category not committed yet
        self.scores = {category: None for category in Category}

    def is_filled(self, category):
        """Check if a category has been committed"""
        return self.scores.get(category) is not None

    def set_score(self, category, score):
        """Set the score for a category. A committed score is never replaced."""
        if not self.is_filled(category):
            self.scores[category] = score

    def get_upper_section_total(self):
        """Sum of committed upper-category scores"""
        return sum(self.scores[cat] for cat in UPPER_CATEGORIES
                   if self.scores[cat] is not None)

    def get_upper_section_bonus(self):
        """35 points once the upper subtotal reaches 63, otherwise nothing"""
        if self.get_upper_section_total() >= UPPER_BONUS_THRESHOLD:
            return UPPER_BONUS
        return 0

    def get_remaining_to_bonus(self):
        """Points still needed in the upper section to earn the bonus"""
        return max(0, UPPER_BONUS_THRESHOLD - self.get_upper_section_total())

    def get_lower_section_total(self):
        """Sum of committed lower-category scores"""
        return sum(self.scores[cat] for cat in LOWER_CATEGORIES
                   if self.scores[cat] is not None)

    def get_base_total(self):
        """Sum of every committed score, bonus excluded"""
        return self.get_upper_section_total() + self.get_lower_section_total()

    def get_grand_total(self):
        """Calculate grand total including bonus"""
        return self.get_base_total() + self.get_upper_section_bonus()

    def filled_count(self):
        return sum(1 for score in self.scores.values() if score is not None)

    def open_categories(self):
        """Categories not yet committed, in scorecard order"""
        return [cat for cat in Category if not self.is_filled(cat)]

    def is_complete(self):
        """Check if all categories are filled"""
        return all(score is not None for score in self.scores.values())

    def copy(self):
        """Create a copy of the scorecard"""
        new_card = Scorecard()
        new_card.scores = self.scores.copy()
        return new_card

    def with_score(self, category, score):
        """Return new Scorecard with score set for category"""
        new_card = self.copy()
        new_card.set_score(category, score)
        return new_card


def count_values(values):
    """
    Count occurrences of each die value

    Args:
        values: Sequence of die values (ints 1-6)

    Returns:
        Counter object with die values as keys
    """
    return Counter(values)


def has_n_of_kind(values, n):
    """True if at least n dice show the same value"""
    counts = count_values(values)
    return bool(counts) and max(counts.values()) >= n


def has_full_house(values):
    """
    Check if dice form a full house (3 of one value, 2 of another)

    Five of a kind does not count: the counts must be exactly 3 and 2.
    """
    counts = count_values(values)
    return sorted(counts.values(), reverse=True) == [3, 2]


def has_small_straight(values):
    """Check if dice contain 4 consecutive values"""
    distinct = set(values)
    small_straights = [{1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6}]
    return any(straight.issubset(distinct) for straight in small_straights)


def has_large_straight(values):
    """Check if the five dice are all distinct and consecutive"""
    distinct = set(values)
    if len(distinct) != NUM_DICE:
        return False
    large_straights = [{1, 2, 3, 4, 5}, {2, 3, 4, 5, 6}]
    return any(straight == distinct for straight in large_straights)


def has_yacht(values):
    """Check if all five dice have the same value"""
    return len(values) == NUM_DICE and len(set(values)) == 1


def calculate_score(category, values):
    """
    Calculate the score for a given category and dice values

    Args:
        category: Category enum value
        values: Sequence of five die values (ints 1-6)

    Returns:
        Integer score for the category (0 if the dice don't qualify)
    """
    values = list(values)
    total = sum(values)

    # Upper section - sum of matching dice
    if category in UPPER_FACE_VALUES:
        face = UPPER_FACE_VALUES[category]
        return face * count_values(values)[face]

    elif category == Category.CHANCE:
        return total

    elif category == Category.YACHT:
        return 50 if has_yacht(values) else 0

    elif category == Category.THREE_OF_KIND:
        return total if has_n_of_kind(values, 3) else 0

    elif category == Category.FOUR_OF_KIND:
        return total if has_n_of_kind(values, 4) else 0

    elif category == Category.FULL_HOUSE:
        return 25 if has_full_house(values) else 0

    elif category == Category.SMALL_STRAIGHT:
        return 30 if has_small_straight(values) else 0

    elif category == Category.LARGE_STRAIGHT:
        return 40 if has_large_straight(values) else 0

    return 0


def roll_die(rng=None) -> int:
    """Return a single uniform die value in 1-6."""
    rng = rng or random
    return rng.randint(1, 6)


@dataclass(frozen=True)
class DieState:
    """Pure representation of a single die's state - immutable"""
    value: int  # 1-6
    held: bool = False

    def roll(self, rng=None) -> 'DieState':
        """Return new DieState with random value (if not held)"""
        if self.held:
            return self
        return replace(self, value=roll_die(rng))

    def toggle_held(self) -> 'DieState':
        """Return new DieState with held status toggled"""
        return replace(self, held=not self.held)


def fresh_dice(rng=None) -> Tuple[DieState, ...]:
    """Five newly rolled, unheld dice."""
    return tuple(DieState(value=roll_die(rng)) for _ in range(NUM_DICE))


class TurnPhase(Enum):
    """Where the current turn stands"""
    ROLLING = "rolling"
    AWAITING_COMMIT = "awaiting_commit"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameState:
    """Immutable game state - represents complete game state at a point in time"""
    dice: Tuple[DieState, ...]  # 5 dice (tuple for immutability)
    scorecard: Scorecard
    rolls_left: int = ROLLS_PER_TURN  # 0-2

    @staticmethod
    def create_initial(rng=None):
        """Create a fresh game state. The opening throw is already on the table."""
        return GameState(
            dice=fresh_dice(rng),
            scorecard=Scorecard(),
            rolls_left=ROLLS_PER_TURN,
        )

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(die.value for die in self.dice)

    @property
    def held(self) -> Tuple[bool, ...]:
        return tuple(die.held for die in self.dice)

    @property
    def game_over(self) -> bool:
        return self.scorecard.is_complete()

    @property
    def current_round(self) -> int:
        """1-13; stays at 13 once the game is over"""
        return min(self.scorecard.filled_count() + 1, len(Category))


# Game Action Functions

def roll_dice(state: GameState, rng=None) -> GameState:
    """
    Re-roll all unheld dice and use up one roll.

    If no rolls are left or the game is over, returns state unchanged.

    Args:
        state: Current game state
        rng: Optional randomness source with randint(a, b)

    Returns:
        New GameState with rolled dice
    """
    if not can_roll(state):
        return state

    new_dice = tuple(die.roll(rng) for die in state.dice)
    return replace(state,
                   dice=new_dice,
                   rolls_left=state.rolls_left - 1)


def toggle_die_hold(state: GameState, die_index: int) -> GameState:
    """
    Toggle hold status of a specific die.

    Rolls left are not affected. If the index is invalid or the game is over,
    returns state unchanged.

    Args:
        state: Current game state
        die_index: Index of die to toggle (0-4)

    Returns:
        New GameState with die hold toggled
    """
    if not can_toggle_hold(state, die_index):
        return state

    dice_list = list(state.dice)
    dice_list[die_index] = dice_list[die_index].toggle_held()
    return replace(state, dice=tuple(dice_list))


def commit_category(state: GameState, category: Category, rng=None) -> GameState:
    """
    Lock in the score of the current dice for a category and start a new turn.

    The new turn has all holds cleared, two rolls left and a fresh throw of
    five dice. Committing a filled category or acting after game over returns
    the state unchanged.

    Args:
        state: Current game state
        category: Category to score
        rng: Optional randomness source for the next turn's dice

    Returns:
        New GameState with category scored and turn reset
    """
    if not can_commit(state, category):
        return state

    score = calculate_score(category, state.values)
    new_scorecard = state.scorecard.with_score(category, score)

    return GameState(
        dice=fresh_dice(rng),
        scorecard=new_scorecard,
        rolls_left=ROLLS_PER_TURN,
    )


def can_roll(state: GameState) -> bool:
    """Player can roll while rolls are left and the game is not over."""
    return not state.game_over and state.rolls_left > 0


def can_toggle_hold(state: GameState, die_index) -> bool:
    """Any die can be held or released at any time before the game ends."""
    return (not state.game_over and isinstance(die_index, int)
            and 0 <= die_index < len(state.dice))


def can_commit(state: GameState, category: Category) -> bool:
    """
    Check if category is available to commit.

    Category is available if game is not over and category not yet filled.
    """
    return (isinstance(category, Category) and not state.game_over
            and not state.scorecard.is_filled(category))


def turn_phase(state: GameState) -> TurnPhase:
    if state.game_over:
        return TurnPhase.GAME_OVER
    if state.rolls_left > 0:
        return TurnPhase.ROLLING
    return TurnPhase.AWAITING_COMMIT


def potential_scores(state: GameState) -> dict:
    """Candidate score of every open category for the current dice."""
    if state.game_over:
        return {}
    return {cat: calculate_score(cat, state.values)
            for cat in state.scorecard.open_categories()}


def restart_game(rng=None) -> GameState:
    """
    Create a fresh game state (equivalent to starting over).

    Returns:
        New GameState with fresh dice, no holds, two rolls left and an empty
        scorecard
    """
    return GameState.create_initial(rng)
