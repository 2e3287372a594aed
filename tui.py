#!/usr/bin/env python3
"""
Yacht TUI — Terminal-based frontend using Textual.

Keyboard-driven interface with box-art dice, a scorecard with candidate
scores, upper bonus progress, and a post-game replay.
"""
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, Center
from textual.css.query import NoMatches
from textual.logging import TextualHandler
from textual.screen import ModalScreen
from textual.widgets import Button, Footer, Header, Static
from textual import events, on

from game_coordinator import GameCoordinator, configure_logging, make_rng, parse_args
from frontend_adapter import FrontendAdapter, CATEGORY_TOOLTIPS, category_by_key

logger = logging.getLogger(__name__)


# ── Box-art die faces ─────────────────────────────────────────────────────────

BOX_ART = {
    1: [
        "┌───────┐",
        "│       │",
        "│   ●   │",
        "│       │",
        "└───────┘",
    ],
    2: [
        "┌───────┐",
        "│ ●     │",
        "│       │",
        "│     ● │",
        "└───────┘",
    ],
    3: [
        "┌───────┐",
        "│ ●     │",
        "│   ●   │",
        "│     ● │",
        "└───────┘",
    ],
    4: [
        "┌───────┐",
        "│ ●   ● │",
        "│       │",
        "│ ●   ● │",
        "└───────┘",
    ],
    5: [
        "┌───────┐",
        "│ ●   ● │",
        "│   ●   │",
        "│ ●   ● │",
        "└───────┘",
    ],
    6: [
        "┌───────┐",
        "│ ●   ● │",
        "│ ●   ● │",
        "│ ●   ● │",
        "└───────┘",
    ],
}

BOX_ART_HELD = {
    v: [
        line.replace("┌", "╔").replace("┐", "╗")
        .replace("└", "╚").replace("┘", "╝")
        .replace("─", "═").replace("│", "║")
        for line in lines
    ]
    for v, lines in BOX_ART.items()
}


def render_dice_box(dice):
    """Render 5 dice as box art, side by side. Held dice get a double border."""
    lines = []
    for row in range(5):
        parts = []
        for die in dice:
            art = BOX_ART_HELD if die.held else BOX_ART
            parts.append(art[die.value][row])
        lines.append("  ".join(parts))

    label_parts = []
    for i, die in enumerate(dice):
        held_label = " HELD" if die.held else ""
        label_parts.append(f"  [{i+1}]{held_label}".ljust(11))
    lines.append("".join(label_parts))
    return "\n".join(lines)


def format_category_row(row, selected=False, show_candidates=True):
    """Format a single scorecard row as Rich markup."""
    marker = ">>" if selected else "  "
    label = row["label"]
    if row["score"] is not None:
        return f"{marker}[green]{label:<24} {row['score']:>3}[/green]"
    if not row["enabled"]:
        return f"{marker}[dim]{label:<24}  — [/dim]"
    if not show_candidates:
        return f"{marker}{label:<24}"
    candidate = row["candidate"]
    if selected:
        return f"{marker}[bold]{label:<24} ({candidate:>3})[/bold]"
    if candidate > 0:
        return f"{marker}{label:<24} ({candidate:>3})"
    return f"{marker}[dim]{label:<24} ({candidate:>3})[/dim]"


def render_scorecard(adapter):
    """Render the full scorecard: upper rows, bonus progress, lower rows, total."""
    scorecard = adapter.coordinator.scorecard
    selected = adapter.selected_category
    lines = ["[bold]── UPPER SECTION ──[/bold]"]

    for row in adapter.upper_rows():
        lines.append(format_category_row(row, row["category"] == selected,
                                         adapter.show_candidates))

    progress = adapter.bonus_progress()
    lines.append(f"  Subtotal: {progress['subtotal']}  "
                 f"(+{progress['bonus_value']} at {progress['threshold']})")
    if progress["achieved"]:
        lines.append(f"  [bold green]Bonus +{progress['bonus']}[/bold green]")
    else:
        lines.append(f"  Remaining: {progress['remaining']}")

    lines.append("[bold]── LOWER SECTION ──[/bold]")
    for row in adapter.lower_rows():
        lines.append(format_category_row(row, row["category"] == selected,
                                         adapter.show_candidates))

    lines.append(f"[bold]  TOTAL: {scorecard.get_grand_total()}[/bold]")

    tooltip_cat = adapter.hovered_category or selected
    if tooltip_cat is not None and not scorecard.is_filled(tooltip_cat):
        lines.append(f"\n[dim]{CATEGORY_TOOLTIPS[tooltip_cat]}[/dim]")

    return "\n".join(lines)


def scorecard_line_categories(adapter):
    """Category drawn on each line of render_scorecard; None for headings and totals."""
    return ([None] + [row["category"] for row in adapter.upper_rows()]
            + [None, None, None]
            + [row["category"] for row in adapter.lower_rows()])


def render_replay(game_log):
    """Render one line per committed turn: the throws, then the commit."""
    commit_entries = game_log.get_commit_entries()
    if not commit_entries:
        return "  No replay data available.\n"

    text = ""
    for entry in commit_entries:
        rolls = [e for e in game_log.get_turn_entries(entry.turn) if e.event_type == "roll"]
        dice_str = " → ".join(f"[{','.join(str(v) for v in r.dice_values)}]" for r in rolls)
        line = f"Turn {entry.turn}: {dice_str} → {entry.category.value}: {entry.score}"
        if len(line) > 70:
            line = line[:67] + "..."
        text += f"  {line}\n"
    return text


# ── Widgets ──────────────────────────────────────────────────────────────────

class DiceDisplay(Static):
    """Renders the 5 dice using box art."""

    def render(self):
        return render_dice_box(self.app.coordinator.dice)


class StatusDisplay(Static):
    """Shows rolls left, or the final result once the game is over."""

    def render(self):
        coord = self.app.coordinator
        if coord.game_over:
            scorecard = coord.scorecard
            return (f"[bold]GAME OVER![/bold]  Final score: [bold]{scorecard.get_grand_total()}[/bold]\n"
                    f"Upper subtotal: {scorecard.get_upper_section_total()}  "
                    f"Upper bonus: +{scorecard.get_upper_section_bonus()}\n"
                    "[dim]Press N for new game, R for replay[/dim]")
        return f"Round {coord.current_round}/13    Rolls left: {coord.rolls_left}"


class ScorecardDisplay(Static):
    """Renders the scorecard as a text table. Click a row to commit it."""

    def render(self):
        return render_scorecard(self.app.adapter)

    def category_at(self, y):
        lines = scorecard_line_categories(self.app.adapter)
        return lines[y] if 0 <= y < len(lines) else None

    def on_click(self, event: events.Click) -> None:
        cat = self.category_at(event.y)
        if cat is not None:
            self.app.action_commit_category(cat.value)

    def on_mouse_move(self, event: events.MouseMove) -> None:
        adapter = self.app.adapter
        cat = self.category_at(event.y)
        if cat == adapter.hovered_category:
            return
        if cat is None:
            adapter.clear_hover()
        else:
            adapter.set_hovered_category(cat)
        self.refresh()

    def on_leave(self, event: events.Leave) -> None:
        if self.app.adapter.hovered_category is not None:
            self.app.adapter.clear_hover()
            self.refresh()


class GameButton(Button, can_focus=False):
    """Mouse-only button; the keyboard drives the game through app bindings."""


# ── Modal Screens ────────────────────────────────────────────────────────────

class HelpScreen(ModalScreen):
    """Help overlay showing key bindings."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("question_mark", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        controls = [
            ("Space", "Roll dice"),
            ("1-5", "Toggle die hold"),
            ("Tab / ↓", "Next category"),
            ("Shift+Tab / ↑", "Previous category"),
            ("Enter", "Commit selected category"),
            ("Click row", "Commit that category"),
            ("N", "Restart"),
            ("R", "Game replay (after game)"),
            ("L", "Switch label language"),
            ("S", "Show/hide candidate scores"),
            ("D", "Dark mode"),
            ("Esc", "Close overlay / Quit"),
            ("?", "This help screen"),
        ]
        text = "[bold]CONTROLS[/bold]\n\n"
        for key, desc in controls:
            text += f"  {key:<20} {desc}\n"
        text += "\n[dim]Press Esc or ? to close[/dim]"
        yield Center(Static(text, id="help-panel"))


class ReplayScreen(ModalScreen):
    """Post-game replay overlay."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("r", "dismiss", "Close"),
    ]

    def compose(self) -> ComposeResult:
        text = "[bold]GAME REPLAY[/bold]\n\n"
        text += render_replay(self.app.coordinator.game_log)
        text += "\n[dim]R or Esc to close[/dim]"
        yield Center(Static(text, id="replay-panel"))


# ── Main App ─────────────────────────────────────────────────────────────────

class YachtApp(App):
    """Yacht terminal UI application."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #game-area {
        layout: horizontal;
        height: 1fr;
    }

    #dice-panel {
        width: 60;
        padding: 1 2;
    }

    #scorecard-panel {
        width: 1fr;
        padding: 1 2;
    }

    #dice-display {
        height: auto;
    }

    #status-display {
        height: auto;
        margin-top: 1;
    }

    #button-row {
        height: auto;
        margin-top: 1;
    }

    #roll-btn, #restart-btn {
        width: 16;
        margin-right: 2;
    }

    #help-panel, #replay-panel {
        padding: 2 4;
        border: thick $accent;
        background: $surface;
        width: 76;
        height: auto;
        max-height: 80vh;
    }
    """

    BINDINGS = [
        Binding("space", "roll", "Roll", show=True),
        Binding("1", "hold(0)", "Hold 1"),
        Binding("2", "hold(1)", "Hold 2"),
        Binding("3", "hold(2)", "Hold 3"),
        Binding("4", "hold(3)", "Hold 4"),
        Binding("5", "hold(4)", "Hold 5"),
        Binding("tab", "next_cat", "Next category", show=True, priority=True),
        Binding("shift+tab", "prev_cat", "Prev category", priority=True),
        Binding("down", "next_cat", "Next", priority=True),
        Binding("up", "prev_cat", "Prev", priority=True),
        Binding("enter", "commit", "Commit", show=True, priority=True),
        Binding("n", "restart", "New game", show=True),
        Binding("r", "replay", "Replay"),
        Binding("l", "language", "Language"),
        Binding("s", "candidates", "Candidates"),
        Binding("d", "dark", "Dark mode"),
        Binding("question_mark", "help", "Help"),
        Binding("escape", "quit_or_close", "Quit"),
    ]

    # Blocked while a help or replay overlay is showing
    GAME_ACTIONS = {
        "roll", "hold", "next_cat", "prev_cat", "commit", "commit_category",
        "restart", "replay",
    }

    def __init__(self, coordinator=None, settings_path=None):
        super().__init__()
        self.coordinator = coordinator if coordinator is not None else GameCoordinator()
        self.adapter = FrontendAdapter(self.coordinator, settings_path=settings_path)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="game-area"):
            with Vertical(id="dice-panel"):
                yield DiceDisplay(id="dice-display")
                with Horizontal(id="button-row"):
                    yield GameButton("ROLL", id="roll-btn", variant="primary")
                    yield GameButton("RESTART", id="restart-btn")
                yield StatusDisplay(id="status-display")
            with Vertical(id="scorecard-panel"):
                yield ScorecardDisplay(id="scorecard-display")
        yield Footer()

    def on_mount(self):
        self.title = "Yacht"
        self.adapter.load_settings()
        self._apply_theme()
        self._refresh_display()

    def _refresh_display(self):
        """Refresh all display widgets."""
        try:
            self.query_one("#dice-display", DiceDisplay).refresh()
            self.query_one("#status-display", StatusDisplay).refresh()
            self.query_one("#scorecard-display", ScorecardDisplay).refresh()
            self.query_one("#roll-btn", Button).disabled = not self.coordinator.can_roll_now
        except NoMatches:
            # A modal screen is on top; the game screen refreshes when it returns
            logger.debug("Refresh skipped", exc_info=True)

    # ── Actions ──────────────────────────────────────────────────────────

    def check_action(self, action, parameters):
        if action in self.GAME_ACTIONS and len(self.screen_stack) > 1:
            return False
        return True

    def action_roll(self):
        if self.adapter.do_roll():
            self._refresh_display()

    @on(Button.Pressed, "#roll-btn")
    def on_roll_button(self):
        self.action_roll()

    @on(Button.Pressed, "#restart-btn")
    def on_restart_button(self):
        self.action_restart()

    def action_hold(self, index: int):
        if self.adapter.do_hold(index):
            self._refresh_display()

    def action_next_cat(self):
        self.adapter.navigate_category(+1)
        self._refresh_display()

    def action_prev_cat(self):
        self.adapter.navigate_category(-1)
        self._refresh_display()

    def action_commit(self):
        if self.adapter.commit_selected():
            self._refresh_display()

    def action_commit_category(self, key: str):
        cat = category_by_key(key)
        if cat is not None and self.adapter.do_commit(cat):
            self._refresh_display()

    def action_restart(self):
        self.adapter.do_restart()
        self._refresh_display()

    def action_replay(self):
        if self.coordinator.game_over:
            self.push_screen(ReplayScreen())

    def action_language(self):
        self.adapter.toggle_language()
        self._refresh_display()

    def action_candidates(self):
        self.adapter.toggle_candidates()
        self._refresh_display()

    def action_dark(self):
        self.adapter.toggle_dark_mode()
        self._apply_theme()

    def _apply_theme(self):
        self.theme = "textual-dark" if self.adapter.dark_mode else "textual-light"

    def action_help(self):
        self.push_screen(HelpScreen())

    def action_quit_or_close(self):
        # If any screen is stacked, pop it
        if len(self.screen_stack) > 1:
            self.pop_screen()
        else:
            self.exit()


def main(argv=None):
    """Entry point for the TUI."""
    args = parse_args(argv)
    # stderr belongs to the screen while the app runs
    configure_logging(args.log_level, handlers=[TextualHandler()])
    coordinator = GameCoordinator(rng=make_rng(args.seed))
    logger.debug("Starting TUI (seed=%s)", args.seed)
    YachtApp(coordinator=coordinator).run()


if __name__ == "__main__":
    main()
