"""Game log for Yacht — records the actions of the current game for replay.

Pure Python, no frontend dependency. Captures rolls, holds, and commits for
each turn. Kept in memory only; a restart clears it.
"""
from __future__ import annotations

from dataclasses import dataclass

from game_engine import Category


@dataclass
class LogEntry:
    """A single logged game event."""
    turn: int                                   # 1-13
    event_type: str                             # "roll", "hold", "commit"
    dice_values: tuple[int, ...]
    held_indices: tuple[int, ...] | None = None
    category: Category | None = None
    score: int | None = None
    roll_number: int = 0                        # 1 = opening throw, up to 3


class GameLog:
    """Accumulates LogEntry records during a game."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def log_roll(self, turn: int, roll_number: int, dice_values: list[int]) -> None:
        """Record a throw of the dice."""
        self.entries.append(LogEntry(
            turn=turn,
            event_type="roll",
            dice_values=tuple(dice_values),
            roll_number=roll_number,
        ))

    def log_hold_change(self, turn: int, held_indices: list[int], dice_values: list[int]) -> None:
        """Record a hold/release change."""
        self.entries.append(LogEntry(
            turn=turn,
            event_type="hold",
            dice_values=tuple(dice_values),
            held_indices=tuple(held_indices),
        ))

    def log_commit(self, turn: int, category: Category, score: int, dice_values: list[int]) -> None:
        """Record a committed category."""
        self.entries.append(LogEntry(
            turn=turn,
            event_type="commit",
            dice_values=tuple(dice_values),
            category=category,
            score=score,
        ))

    def get_turn_entries(self, turn: int) -> list[LogEntry]:
        """Return all entries for a specific turn."""
        return [e for e in self.entries if e.turn == turn]

    def get_commit_entries(self) -> list[LogEntry]:
        """Return only commit entries, in play order."""
        return [e for e in self.entries if e.event_type == "commit"]

    def clear(self) -> None:
        """Remove all entries."""
        self.entries = []
