"""Tests for tui.py — text rendering helpers and the running app under Textual's pilot."""

import asyncio
import random
from dataclasses import replace

from textual.logging import TextualHandler

import tui
from frontend_adapter import FrontendAdapter
from game_coordinator import GameCoordinator
from game_engine import Category, DieState
from tui import (
    BOX_ART, BOX_ART_HELD, YachtApp, format_category_row, render_dice_box,
    render_replay, render_scorecard, scorecard_line_categories,
)


def _make_adapter(tmp_path, *values):
    coord = GameCoordinator(rng=random.Random(0))
    if values:
        coord.state = replace(coord.state, dice=tuple(DieState(value=v) for v in values))
    return FrontendAdapter(coord, settings_path=tmp_path / "settings.json")


class TestDiceBox:

    def test_six_lines(self):
        dice = tuple(DieState(value=v) for v in (1, 2, 3, 4, 5))
        assert len(render_dice_box(dice).split("\n")) == 6

    def test_held_die_uses_double_border(self):
        dice = (DieState(value=6, held=True),) + tuple(DieState(value=1) for _ in range(4))
        first_line = render_dice_box(dice).split("\n")[0]
        assert first_line.startswith(BOX_ART_HELD[6][0])
        assert BOX_ART[1][0] in first_line

    def test_labels_mark_held_dice(self):
        dice = (DieState(value=2), DieState(value=2, held=True)) + tuple(
            DieState(value=3) for _ in range(3))
        labels = render_dice_box(dice).split("\n")[-1]
        assert "[2] HELD" in labels
        assert "[1] HELD" not in labels


class TestCategoryRow:

    def _row(self, **overrides):
        row = {"category": Category.CHANCE, "label": "Chance", "score": None,
               "candidate": 17, "enabled": True}
        row.update(overrides)
        return row

    def test_open_row_shows_candidate(self):
        assert "( 17)" in format_category_row(self._row())

    def test_committed_row_shows_score(self):
        text = format_category_row(self._row(score=22, candidate=None, enabled=False))
        assert "22" in text
        assert "(" not in text

    def test_hidden_candidates(self):
        assert "17" not in format_category_row(self._row(), show_candidates=False)

    def test_selected_marker(self):
        assert format_category_row(self._row(), selected=True).startswith(">>")


class TestScorecard:

    def test_lists_every_label(self, tmp_path):
        text = render_scorecard(_make_adapter(tmp_path))
        for label in ("Ones", "Sixes", "Chance", "Yacht", "Large Straight"):
            assert label in text

    def test_remaining_to_bonus_shown(self, tmp_path):
        adapter = _make_adapter(tmp_path, 6, 6, 6, 6, 6)
        adapter.do_commit(Category.SIXES)
        assert "Remaining: 33" in render_scorecard(adapter)

    def test_bonus_shown_when_achieved(self, tmp_path):
        adapter = _make_adapter(tmp_path)
        for cat, values in [(Category.SIXES, 6), (Category.FIVES, 5), (Category.FOURS, 4)]:
            coord = adapter.coordinator
            coord.state = replace(coord.state, dice=tuple(DieState(value=values) for _ in range(5)))
            adapter.do_commit(cat)
        text = render_scorecard(adapter)
        assert "Bonus +35" in text
        assert "TOTAL: 110" in text

    def test_tooltip_for_selected_category(self, tmp_path):
        adapter = _make_adapter(tmp_path)
        adapter.navigate_category(-1)
        assert "5 consecutive dice = 40" in render_scorecard(adapter)

    def test_japanese_labels(self, tmp_path):
        adapter = _make_adapter(tmp_path)
        adapter.toggle_language()
        assert "フルハウス" in render_scorecard(adapter)


class TestReplay:

    def test_empty_replay(self):
        coord = GameCoordinator(rng=random.Random(0))
        assert "No replay data" in render_replay(coord.game_log)

    def test_one_line_per_commit(self):
        coord = GameCoordinator(rng=random.Random(0))
        coord.roll_dice()
        coord.commit_category(Category.CHANCE)
        coord.commit_category(Category.YACHT)
        lines = [line for line in render_replay(coord.game_log).split("\n") if line.strip()]
        assert len(lines) == 2
        assert lines[0].strip().startswith("Turn 1:")
        assert "chance" in lines[0]
        assert lines[1].strip().startswith("Turn 2:")


class TestScorecardLines:

    def test_lines_match_rendered_rows(self, tmp_path):
        adapter = _make_adapter(tmp_path)
        rendered = render_scorecard(adapter).split("\n")
        for line, cat in enumerate(scorecard_line_categories(adapter)):
            if cat is not None:
                assert adapter.category_label(cat) in rendered[line]

    def test_headings_and_subtotals_have_no_category(self, tmp_path):
        lines = scorecard_line_categories(_make_adapter(tmp_path))
        assert lines[0] is None
        assert lines[7:10] == [None, None, None]
        assert [cat for cat in lines if cat is not None] == list(Category)


# ── Running app ──────────────────────────────────────────────────────────────

def run_app(tmp_path, scenario, seed=1):
    """Run YachtApp headless, drive it with an async scenario, return the app."""
    app = YachtApp(coordinator=GameCoordinator(rng=random.Random(seed)),
                   settings_path=tmp_path / "settings.json")

    async def drive():
        async with app.run_test(size=(120, 40)) as pilot:
            await scenario(pilot)

    asyncio.run(drive())
    return app


def press(*keys):
    async def scenario(pilot):
        await pilot.press(*keys)
    return scenario


class TestAppKeyboard:

    def test_nothing_focused_on_start(self, tmp_path):
        focused = []

        async def scenario(pilot):
            await pilot.pause()
            focused.append(pilot.app.focused)

        run_app(tmp_path, scenario)
        assert focused == [None]

    def test_down_enter_commits_first_category(self, tmp_path):
        app = run_app(tmp_path, press("down", "enter"))
        card = app.coordinator.scorecard
        assert card.is_filled(Category.ONES)
        assert card.filled_count() == 1
        assert app.coordinator.rolls_left == 2
        assert app.coordinator.current_round == 2

    def test_tab_navigates_and_commits(self, tmp_path):
        app = run_app(tmp_path, press("tab", "tab", "enter"))
        assert app.coordinator.scorecard.is_filled(Category.TWOS)
        assert app.coordinator.scorecard.filled_count() == 1

    def test_shift_tab_wraps_to_last_category(self, tmp_path):
        app = run_app(tmp_path, press("shift+tab", "enter"))
        assert app.coordinator.scorecard.is_filled(list(Category)[-1])

    def test_enter_without_selection_does_nothing(self, tmp_path):
        app = run_app(tmp_path, press("enter"))
        assert app.coordinator.rolls_left == 2
        assert app.coordinator.scorecard.filled_count() == 0

    def test_commit_after_rolling(self, tmp_path):
        app = run_app(tmp_path, press("space", "tab", "tab", "enter"))
        assert app.coordinator.scorecard.is_filled(Category.TWOS)
        assert app.coordinator.rolls_left == 2

    def test_space_rolls(self, tmp_path):
        app = run_app(tmp_path, press("space"))
        assert app.coordinator.rolls_left == 1

    def test_roll_button_disabled_without_rolls(self, tmp_path):
        disabled = []

        async def scenario(pilot):
            await pilot.press("space")
            disabled.append(pilot.app.query_one("#roll-btn").disabled)
            await pilot.press("space")
            disabled.append(pilot.app.query_one("#roll-btn").disabled)
            await pilot.press("down", "enter")
            disabled.append(pilot.app.query_one("#roll-btn").disabled)

        run_app(tmp_path, scenario)
        assert disabled == [False, True, False]

    def test_number_keys_hold_dice(self, tmp_path):
        app = run_app(tmp_path, press("1", "5"))
        assert [d.held for d in app.coordinator.dice] == [True, False, False, False, True]

    def test_held_die_survives_roll(self, tmp_path):
        kept = []

        async def scenario(pilot):
            kept.append(pilot.app.coordinator.dice[2].value)
            await pilot.press("3", "space")

        app = run_app(tmp_path, scenario)
        assert app.coordinator.dice[2].value == kept[0]
        assert app.coordinator.dice[2].held

    def test_n_restarts(self, tmp_path):
        app = run_app(tmp_path, press("down", "enter", "space", "n"))
        assert app.coordinator.scorecard.filled_count() == 0
        assert app.coordinator.rolls_left == 2

    def test_full_game_then_replay(self, tmp_path):
        screens = []

        async def scenario(pilot):
            for _ in Category:
                await pilot.press("down", "enter")
            screens.append(pilot.app.query_one("#roll-btn").disabled)
            await pilot.press("r")
            screens.append(type(pilot.app.screen))

        app = run_app(tmp_path, scenario)
        assert app.coordinator.game_over
        assert screens == [True, tui.ReplayScreen]

    def test_help_overlay_blocks_game_keys(self, tmp_path):
        stack = []

        async def scenario(pilot):
            await pilot.press("question_mark", "space", "down", "enter", "1")
            stack.append(len(pilot.app.screen_stack))
            await pilot.press("escape")
            stack.append(len(pilot.app.screen_stack))

        app = run_app(tmp_path, scenario)
        assert stack == [2, 1]
        assert app.coordinator.rolls_left == 2
        assert app.coordinator.scorecard.filled_count() == 0
        assert not any(d.held for d in app.coordinator.dice)


class TestAppMouse:

    def test_click_row_commits(self, tmp_path):
        async def scenario(pilot):
            lines = scorecard_line_categories(pilot.app.adapter)
            await pilot.click("#scorecard-display", offset=(4, lines.index(Category.CHANCE)))

        app = run_app(tmp_path, scenario)
        assert app.coordinator.scorecard.is_filled(Category.CHANCE)
        assert app.coordinator.scorecard.filled_count() == 1

    def test_click_heading_commits_nothing(self, tmp_path):
        app = run_app(tmp_path, lambda pilot: pilot.click("#scorecard-display", offset=(4, 0)))
        assert app.coordinator.scorecard.filled_count() == 0

    def test_hover_sets_hovered_category(self, tmp_path):
        hovered = []

        async def scenario(pilot):
            lines = scorecard_line_categories(pilot.app.adapter)
            await pilot.hover("#scorecard-display", offset=(4, lines.index(Category.YACHT)))
            hovered.append(pilot.app.adapter.hovered_category)

        run_app(tmp_path, scenario)
        assert hovered == [Category.YACHT]

    def test_roll_and_restart_buttons(self, tmp_path):
        rolls = []

        async def scenario(pilot):
            await pilot.click("#roll-btn")
            rolls.append(pilot.app.coordinator.rolls_left)
            await pilot.click("#restart-btn")
            rolls.append(pilot.app.coordinator.rolls_left)

        run_app(tmp_path, scenario)
        assert rolls == [1, 2]


class TestMain:

    def test_logging_goes_through_textual(self, monkeypatch):
        calls = []
        monkeypatch.setattr(tui, "configure_logging",
                            lambda level, handlers=None: calls.append((level, handlers)))
        monkeypatch.setattr(YachtApp, "run", lambda self: None)
        tui.main(["--seed", "3", "--log-level", "DEBUG"])
        level, handlers = calls[0]
        assert level == "DEBUG"
        assert len(handlers) == 1
        assert isinstance(handlers[0], TextualHandler)
