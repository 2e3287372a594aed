#!/usr/bin/env python3
"""
Unified entry point for the Yacht interfaces.

Usage:
    python yacht.py                           # Default: terminal (Textual)
    python yacht.py --ui web                  # Browser bridge (Flask + WebSocket)
    python yacht.py --seed 7                  # Reproducible dice
    python yacht.py --ui web --port 8080      # Web on custom port

Individual entry points (tui.py, web.py) still work independently.
"""
import argparse


def main(argv=None):
    # Pre-parse just the --ui flag, pass everything else through
    parser = argparse.ArgumentParser(
        description="Yacht — play in the terminal or through the browser bridge",
        add_help=False,
    )
    parser.add_argument("--ui", choices=["tui", "web"], default="tui",
                        help="Interface: tui (terminal, default), web (browser)")
    args, remaining = parser.parse_known_args(argv)

    if args.ui == "tui":
        from tui import main as run_tui
        run_tui(remaining)

    elif args.ui == "web":
        from web import main as run_web
        run_web(remaining)


if __name__ == "__main__":
    main()
