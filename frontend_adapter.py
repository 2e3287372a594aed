"""FrontendAdapter — Shared UI state management for all Yacht frontends.

Owns category labels, candidate-score display, keyboard category navigation,
hover state and settings persistence. Pure Python — no Textual or Flask
dependency.

Each frontend (TUI, web) creates a FrontendAdapter wrapping a GameCoordinator
and delegates UI-state logic here, keeping only rendering and input
translation frontend-specific.
"""

from game_engine import (
    Category, UPPER_CATEGORIES, LOWER_CATEGORIES, UPPER_BONUS,
    UPPER_BONUS_THRESHOLD, calculate_score,
)
from settings import DEFAULTS, LANGUAGES, load_settings, save_settings


# ── Shared constants ──────────────────────────────────────────────────────────

CATEGORY_ORDER = list(Category)

CATEGORY_LABELS = {
    "en": {
        Category.ONES: "Ones",
        Category.TWOS: "Twos",
        Category.THREES: "Threes",
        Category.FOURS: "Fours",
        Category.FIVES: "Fives",
        Category.SIXES: "Sixes",
        Category.CHANCE: "Chance",
        Category.YACHT: "Yacht",
        Category.THREE_OF_KIND: "3 of a Kind",
        Category.FOUR_OF_KIND: "4 of a Kind",
        Category.FULL_HOUSE: "Full House",
        Category.SMALL_STRAIGHT: "Small Straight",
        Category.LARGE_STRAIGHT: "Large Straight",
    },
    "ja": {
        Category.ONES: "1",
        Category.TWOS: "2",
        Category.THREES: "3",
        Category.FOURS: "4",
        Category.FIVES: "5",
        Category.SIXES: "6",
        Category.CHANCE: "チャンス",
        Category.YACHT: "ヨット",
        Category.THREE_OF_KIND: "スリーカード",
        Category.FOUR_OF_KIND: "フォーカード",
        Category.FULL_HOUSE: "フルハウス",
        Category.SMALL_STRAIGHT: "ストレート（4連番）",
        Category.LARGE_STRAIGHT: "フルストレート（5連番）",
    },
}

CATEGORY_TOOLTIPS = {
    Category.ONES: "Sum of all dice showing 1",
    Category.TWOS: "Sum of all dice showing 2",
    Category.THREES: "Sum of all dice showing 3",
    Category.FOURS: "Sum of all dice showing 4",
    Category.FIVES: "Sum of all dice showing 5",
    Category.SIXES: "Sum of all dice showing 6",
    Category.CHANCE: "Sum of all dice, no pattern needed",
    Category.YACHT: "All 5 dice the same = 50",
    Category.THREE_OF_KIND: "3 of the same, score = sum of all dice",
    Category.FOUR_OF_KIND: "4 of the same, score = sum of all dice",
    Category.FULL_HOUSE: "3 of one + 2 of another = 25",
    Category.SMALL_STRAIGHT: "4 consecutive dice = 30",
    Category.LARGE_STRAIGHT: "5 consecutive dice = 40",
}


def category_by_key(key):
    """Look up a Category by its key ("ones", "full_house", ...)."""
    for cat in Category:
        if cat.value == key:
            return cat
    return None


# ── Frontend Adapter ──────────────────────────────────────────────────────────

class FrontendAdapter:
    """Shared UI state management for all Yacht frontends.

    Wraps a GameCoordinator and manages labels, keyboard navigation, hover
    and persisted settings.
    """

    def __init__(self, coordinator, settings_path=None):
        self.coordinator = coordinator
        self.settings_path = settings_path

        # Keyboard category navigation
        self.kb_selected_index = None
        self.hovered_category = None

        # Settings
        self.dark_mode = DEFAULTS["dark_mode"]
        self.language = DEFAULTS["language"]
        self.show_candidates = DEFAULTS["show_candidates"]

    # ── Labels ────────────────────────────────────────────────────────────

    def category_label(self, cat):
        return CATEGORY_LABELS[self.language][cat]

    # ── Game actions ──────────────────────────────────────────────────────

    def do_roll(self):
        """Roll the unheld dice. Returns True if a roll happened."""
        return self.coordinator.roll_dice()

    def do_hold(self, die_index):
        """Toggle hold on a die. Returns True if the die changed."""
        return self.coordinator.toggle_hold(die_index)

    def do_commit(self, cat):
        """Commit the current dice to a category. Returns True if committed."""
        if self.coordinator.commit_category(cat):
            self.kb_selected_index = None
            return True
        return False

    def commit_selected(self):
        """Commit the keyboard-selected category, if any."""
        if self.kb_selected_index is None:
            return False
        return self.do_commit(CATEGORY_ORDER[self.kb_selected_index])

    def do_restart(self):
        """Start a new game and drop any selection."""
        self.coordinator.restart()
        self.kb_selected_index = None
        self.hovered_category = None

    # ── Keyboard category navigation ──────────────────────────────────────

    def navigate_category(self, direction):
        """Move keyboard selection to next/previous open category.

        Args:
            direction: +1 for forward, -1 for backward
        """
        if self.coordinator.game_over:
            return
        scorecard = self.coordinator.scorecard
        unfilled = [i for i, cat in enumerate(CATEGORY_ORDER)
                    if not scorecard.is_filled(cat)]
        if not unfilled:
            return

        if self.kb_selected_index is None:
            self.kb_selected_index = unfilled[0] if direction > 0 else unfilled[-1]
        else:
            if direction > 0:
                candidates = [i for i in unfilled if i > self.kb_selected_index]
                self.kb_selected_index = candidates[0] if candidates else unfilled[0]
            else:
                candidates = [i for i in unfilled if i < self.kb_selected_index]
                self.kb_selected_index = candidates[-1] if candidates else unfilled[-1]

        self.hovered_category = None

    @property
    def selected_category(self):
        if self.kb_selected_index is None:
            return None
        return CATEGORY_ORDER[self.kb_selected_index]

    def set_hovered_category(self, cat):
        """Set mouse-hovered category (clears keyboard selection)."""
        self.hovered_category = cat
        self.kb_selected_index = None

    def clear_hover(self):
        """Clear mouse hover state."""
        self.hovered_category = None

    # ── Settings ──────────────────────────────────────────────────────────

    def load_settings(self):
        """Load persisted settings and apply them to the adapter."""
        settings = load_settings(self.settings_path)
        self.dark_mode = settings["dark_mode"]
        self.language = settings["language"]
        self.show_candidates = settings["show_candidates"]

    def _save_settings(self):
        """Persist current settings to disk."""
        save_settings({
            "dark_mode": self.dark_mode,
            "language": self.language,
            "show_candidates": self.show_candidates,
        }, self.settings_path)

    def toggle_dark_mode(self):
        """Toggle dark mode and save."""
        self.dark_mode = not self.dark_mode
        self._save_settings()

    def toggle_language(self):
        """Switch to the next label language and save."""
        idx = LANGUAGES.index(self.language)
        self.language = LANGUAGES[(idx + 1) % len(LANGUAGES)]
        self._save_settings()

    def toggle_candidates(self):
        """Show or hide candidate scores and save."""
        self.show_candidates = not self.show_candidates
        self._save_settings()

    # ── Data helpers ──────────────────────────────────────────────────────

    def category_rows(self, categories=None):
        """Return one display row per category.

        Each row is a dict with the category, its label, the committed score
        (or None), the candidate score for the current dice (None once
        committed) and whether the commit action is enabled.
        """
        coord = self.coordinator
        scorecard = coord.scorecard
        values = [die.value for die in coord.dice]
        rows = []
        for cat in categories or CATEGORY_ORDER:
            committed = scorecard.scores[cat]
            rows.append({
                "category": cat,
                "label": self.category_label(cat),
                "score": committed,
                "candidate": None if committed is not None else calculate_score(cat, values),
                "enabled": coord.can_commit(cat),
            })
        return rows

    def upper_rows(self):
        return self.category_rows(UPPER_CATEGORIES)

    def lower_rows(self):
        return self.category_rows(LOWER_CATEGORIES)

    def bonus_progress(self):
        """Upper-section subtotal, bonus and how far off the bonus still is."""
        scorecard = self.coordinator.scorecard
        return {
            "subtotal": scorecard.get_upper_section_total(),
            "threshold": UPPER_BONUS_THRESHOLD,
            "bonus": scorecard.get_upper_section_bonus(),
            "bonus_value": UPPER_BONUS,
            "remaining": scorecard.get_remaining_to_bonus(),
            "achieved": scorecard.get_upper_section_bonus() > 0,
        }

    # ── Full state snapshot (for web frontend) ────────────────────────────

    def get_game_snapshot(self):
        """Return a complete JSON-serializable dict of game + UI state.

        Used by the web frontend to push full state over WebSocket.
        """
        coord = self.coordinator
        scorecard = coord.scorecard

        dice = [{"value": d.value, "held": d.held} for d in coord.dice]

        scores = {}
        for cat in Category:
            val = scorecard.scores.get(cat)
            if val is not None:
                scores[cat.value] = val

        categories = []
        for row in self.category_rows():
            categories.append({
                "key": row["category"].value,
                "label": row["label"],
                "score": row["score"],
                "candidate": row["candidate"] if self.show_candidates else None,
                "enabled": row["enabled"],
            })

        return {
            "dice": dice,
            "rolls_left": coord.rolls_left,
            "current_round": coord.current_round,
            "phase": coord.phase.value,
            "game_over": coord.game_over,
            "can_roll": coord.can_roll_now,
            "scorecard": {
                "scores": scores,
                "upper_total": scorecard.get_upper_section_total(),
                "upper_bonus": scorecard.get_upper_section_bonus(),
                "remaining_to_bonus": scorecard.get_remaining_to_bonus(),
                "lower_total": scorecard.get_lower_section_total(),
                "base_total": scorecard.get_base_total(),
                "grand_total": scorecard.get_grand_total(),
            },
            "categories": categories,
            "kb_selected_index": self.kb_selected_index,
            "hovered_category": (self.hovered_category.value
                                 if self.hovered_category else None),
            "dark_mode": self.dark_mode,
            "language": self.language,
            "show_candidates": self.show_candidates,
        }
