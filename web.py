#!/usr/bin/env python3
"""
Yacht Web — Flask + WebSocket bridge for browser-based play.

Each WebSocket connection gets its own GameCoordinator instance. The client
sends one JSON action per message and receives the full game snapshot back
after every message.
"""
import json
import logging

logger = logging.getLogger(__name__)

from flask import Flask, jsonify, request
from flask_sock import Sock

from game_coordinator import GameCoordinator, LOG_LEVELS, configure_logging, make_rng
from frontend_adapter import CATEGORY_ORDER, FrontendAdapter, category_by_key

app = Flask(__name__)
sock = Sock(app)

ACTIONS = [
    "roll", "hold", "commit", "restart", "hover", "clear_hover",
    "toggle_language", "toggle_dark_mode", "toggle_candidates",
]


@app.route("/")
def index():
    """Describe the WebSocket protocol."""
    return jsonify({
        "websocket": "/ws",
        "actions": ACTIONS,
        "categories": [cat.value for cat in CATEGORY_ORDER],
    })


def _parse_seed(value):
    """Seed from a query-string value; anything that is not an integer is unseeded."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@sock.route("/ws")
def websocket(ws):
    """WebSocket handler — one game per connection."""
    seed = _parse_seed(request.args.get("seed"))
    serve_game(ws, seed)


def serve_game(ws, seed=None, settings_path=None):
    """Play one game over an open socket until the client goes away."""
    adapter = FrontendAdapter(GameCoordinator(rng=make_rng(seed)), settings_path=settings_path)
    adapter.load_settings()
    logger.info("WebSocket game started (seed=%s)", seed)
    ws.send(json.dumps(adapter.get_game_snapshot()))

    try:
        while True:
            data = ws.receive()
            if data is None:
                break
            try:
                action = json.loads(data)
            except json.JSONDecodeError:
                logger.warning("Invalid JSON from client: %s", data)
                continue
            if not isinstance(action, dict):
                logger.warning("Ignoring non-object action: %s", data)
                continue

            _handle_action(adapter, action)
            ws.send(json.dumps(adapter.get_game_snapshot()))
    except Exception:
        logger.error("WebSocket receive error", exc_info=True)


def _handle_action(adapter, action):
    """Dispatch a client action to the adapter."""
    cmd = action.get("action", "")

    if cmd == "roll":
        adapter.do_roll()

    elif cmd == "hold":
        idx = action.get("die_index")
        if isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < 5:
            adapter.do_hold(idx)

    elif cmd == "commit":
        cat = category_by_key(action.get("category", ""))
        if cat is not None:
            adapter.do_commit(cat)

    elif cmd == "restart":
        adapter.do_restart()

    elif cmd == "hover":
        cat = category_by_key(action.get("category", ""))
        if cat is not None:
            adapter.set_hovered_category(cat)
        else:
            adapter.clear_hover()

    elif cmd == "clear_hover":
        adapter.clear_hover()

    elif cmd == "toggle_language":
        adapter.toggle_language()

    elif cmd == "toggle_dark_mode":
        adapter.toggle_dark_mode()

    elif cmd == "toggle_candidates":
        adapter.toggle_candidates()


def main(argv=None):
    """Entry point for the web server."""
    import argparse
    parser = argparse.ArgumentParser(description="Yacht Web Server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=5000, help="Port (default: 5000)")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="INFO",
                        help="Logging verbosity (default: INFO)")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    logger.info("Starting Yacht web server at http://%s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == "__main__":
    main()
