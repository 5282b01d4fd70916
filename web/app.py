from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from flask import Flask, jsonify, request

from opponent import Game, MoveOrchestrator
from opponent.config import CONFIG, Config

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None, timer_factory: Callable = threading.Timer) -> Flask:
    config = config or CONFIG
    app = Flask(__name__)

    game = Game(
        mode=config.game.default_mode,
        ai_color=config.game.ai_color,
        level=config.game.default_level,
    )
    orchestrator = MoveOrchestrator(game, config.orchestrator, timer_factory=timer_factory)
    app.extensions["opponent"] = orchestrator

    def state_response():
        snap = game.snapshot()
        snap["thinking"] = orchestrator.thinking
        return jsonify(snap)

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError):
        logger.info("rejected request: %s", exc)
        return jsonify({"error": str(exc)}), 400

    @app.get("/api/state")
    def api_state():
        with orchestrator.lock:
            return state_response()

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        fen = data.get("fen")
        mode = data.get("mode")
        level = data.get("level")
        # "color" is the human's side; the computer takes the other one
        color = data.get("color")
        ai_color = None
        if color is not None:
            ai_color = {"white": "black", "black": "white"}.get(str(color).lower())
            if ai_color is None:
                raise ValueError(f"Unknown color: {color!r}")

        with orchestrator.lock:
            orchestrator.cancel()
            try:
                game.reset(fen, mode=mode, ai_color=ai_color, level=level)
            finally:
                # A rejected reset leaves the old game, whose turn must resume;
                # otherwise the computer opens when it has the side to move
                orchestrator.request_move()
            return state_response()

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True) or {}
        uci = payload.get("move")
        if not uci:
            return jsonify({"error": "Missing move"}), 400

        with orchestrator.lock:
            if orchestrator.thinking or game.is_ai_turn():
                return jsonify({"error": "Not your turn"}), 409
            game.push_uci(uci)
            orchestrator.request_move()
            return state_response()

    @app.post("/api/promotion")
    def api_promotion():
        payload = request.get_json(silent=True) or {}
        with orchestrator.lock:
            game.complete_promotion(payload.get("piece", "q"))
            orchestrator.request_move()
            return state_response()

    @app.post("/api/undo")
    def api_undo():
        with orchestrator.lock:
            orchestrator.cancel()
            # Against the computer, go back to the human's last turn
            plies = 1
            if game.mode == "ai":
                plies = 1 if game.is_ai_turn() else 2
            game.undo(plies)
            orchestrator.request_move()
            return state_response()

    @app.post("/api/level")
    def api_level():
        payload = request.get_json(silent=True) or {}
        if "level" not in payload:
            return jsonify({"error": "Missing level"}), 400
        with orchestrator.lock:
            game.set_level(payload["level"])
            return state_response()

    return app


if __name__ == "__main__":
    logging.basicConfig(level=CONFIG.log_level)
    create_app().run(host="0.0.0.0", port=5000, debug=True)
