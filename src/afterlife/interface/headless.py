"""
Headless runner for Shadow Afterlife.

Provides JSON I/O interface for programmatic control.
Input: JSON commands via stdin, one object per line
Output: JSON events and results via stdout

This enables driving the engine from other processes (a web bridge, bots,
testing) without any presentation layer.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from ..config import EngineConfig, load_config, merge_config, set_final_week, set_seed
from ..content import ContentProvider
from ..state import GameEvent, JsonSnapshotStore, SnapshotStore, get_event_bus
from ..state.event_bus import EventBus
from ..systems.phases import ActionOutcome, PhaseController

logger = logging.getLogger(__name__)

VERSION = "0.3.0"

# Command arguments the engine looks up by name
STRING_ARGS = ("cmd", "option", "action", "tier", "item", "session_id")


class HeadlessRunner:
    """
    Headless engine runner with JSON I/O.

    Commands are read from stdin as JSON objects.
    Events and responses are written to stdout as JSON.
    """

    def __init__(
        self,
        saves_dir: Path | None = None,
        content: ContentProvider | None = None,
        config: EngineConfig | dict | None = None,
        store: SnapshotStore | None = None,
        bus: EventBus | None = None,
        output: TextIO | None = None,
    ):
        self.saves_dir = saves_dir or Path("saves")
        self.output = output or sys.stdout
        self.store = store or JsonSnapshotStore(self.saves_dir)

        if config is None:
            config = load_config(self.saves_dir)
        self.bus = bus or get_event_bus()
        self.controller = PhaseController(
            content=content,
            config=merge_config(config),
            bus=self.bus,
        )

        self._subscribe_to_events()

    def _subscribe_to_events(self):
        """Forward every engine event as JSON."""
        self.bus.on_all(self._emit_event)

    def _emit_event(self, event: GameEvent):
        """Emit a game event as JSON to stdout."""
        self._write_json({
            "type": "event",
            "event_type": event.type.value,
            "data": event.data,
            "session_id": event.session_id,
            "week": event.week,
            "timestamp": event.timestamp.isoformat(),
        })

    def _write_json(self, obj: dict):
        """Write a JSON object to output followed by newline."""
        json.dump(obj, self.output)
        self.output.write("\n")
        self.output.flush()

    def _emit_response(self, response_type: str, **data):
        """Emit a response object."""
        self._write_json({
            "type": response_type,
            **data,
        })

    def _outcome(self, outcome: ActionOutcome) -> dict:
        if not outcome.accepted:
            return {
                "ok": False,
                "command": outcome.command,
                "error": outcome.reason,
            }
        response = {"ok": True}
        response.update(outcome.model_dump(mode="json", exclude_none=True))
        response["state"] = self.controller.snapshot()
        return response

    def handle_command(self, cmd: dict) -> dict:
        """
        Handle a JSON command.

        Commands:
            {"cmd": "status"} - Current run state
            {"cmd": "select_option", "option": "A"} - Weekly story choice
            {"cmd": "daily_action", "action": "rest"} - Daily action
            {"cmd": "explore", "tier": "suburb"} - Expedition
            {"cmd": "debt_work"} - Work a debt shift
            {"cmd": "buy" | "sell" | "use_item", "item": "..."} - Trade
            {"cmd": "end_week"} - Close the week (may knock)
            {"cmd": "resolve_npc", "help": true} - Answer the door
            {"cmd": "advance_week"} - Next week, or the ending
            {"cmd": "restart"} - Fresh run
            {"cmd": "save"} / {"cmd": "load", "session_id": "..."}
            {"cmd": "list_saves"} - Saved runs
            {"cmd": "journal"} - Run journal
            {"cmd": "quit"} - Exit

        Returns:
            Response dict
        """
        cmd_type = cmd.get("cmd", "")
        controller = self.controller

        for key in STRING_ARGS:
            if key in cmd and not isinstance(cmd[key], str):
                return {"ok": False, "error": f"'{key}' must be a string"}

        if cmd_type == "status":
            return self._cmd_status()
        elif cmd_type == "select_option":
            return self._outcome(controller.select_option(cmd.get("option", "")))
        elif cmd_type == "daily_action":
            return self._outcome(controller.daily_action(cmd.get("action", "")))
        elif cmd_type == "explore":
            return self._outcome(controller.explore(cmd.get("tier", "")))
        elif cmd_type == "debt_work":
            return self._outcome(controller.debt_work())
        elif cmd_type == "buy":
            return self._outcome(controller.buy(cmd.get("item", "")))
        elif cmd_type == "sell":
            return self._outcome(controller.sell(cmd.get("item", "")))
        elif cmd_type == "use_item":
            return self._outcome(controller.use_item(cmd.get("item", "")))
        elif cmd_type == "end_week":
            return self._outcome(controller.end_week())
        elif cmd_type == "resolve_npc":
            return self._outcome(controller.resolve_npc(bool(cmd.get("help", False))))
        elif cmd_type == "advance_week":
            return self._outcome(controller.advance_week())
        elif cmd_type == "restart":
            controller.restart()
            return self._cmd_status()
        elif cmd_type == "save":
            return self._cmd_save()
        elif cmd_type == "load":
            return self._cmd_load(cmd.get("session_id", ""))
        elif cmd_type == "list_saves":
            return self._cmd_list_saves()
        elif cmd_type == "journal":
            return {"ok": True, "journal": list(controller.session.journal)}
        elif cmd_type == "quit":
            return {"ok": True, "action": "quit"}
        else:
            return {"ok": False, "error": f"Unknown command: {cmd_type}"}

    def _cmd_status(self) -> dict:
        return {"ok": True, "state": self.controller.snapshot()}

    def _cmd_save(self) -> dict:
        try:
            snapshot = self.controller.save(self.store)
        except OSError as e:
            logger.error("Save failed: %s", e)
            return {"ok": False, "error": str(e)}
        return {"ok": True, "session_id": snapshot.id, "week": snapshot.week}

    def _cmd_list_saves(self) -> dict:
        saves = [
            {**run, "saved_at": run["saved_at"].isoformat()}
            for run in self.store.list_all()
        ]
        return {"ok": True, "saves": saves}

    def _cmd_load(self, session_id: str) -> dict:
        if not session_id:
            return {"ok": False, "error": "No session_id provided"}
        if not self.controller.load(self.store, session_id):
            return {"ok": False, "error": f"Save not found: {session_id}"}
        return self._cmd_status()

    def run(self, stream: TextIO | None = None):
        """
        Main loop: read JSON commands from stream (stdin by default), write
        responses to output.

        One JSON object per line. Exit on EOF or quit command.
        """
        self._emit_response("ready", version=VERSION, session_id=self.controller.session.id)

        for line in stream or sys.stdin:
            line = line.strip()
            if not line:
                continue

            try:
                cmd = json.loads(line)
            except json.JSONDecodeError as e:
                self._emit_response("error", error=f"Invalid JSON: {e}")
                continue

            if not isinstance(cmd, dict):
                self._emit_response("error", error="Command must be a JSON object")
                continue

            result = self.handle_command(cmd)
            self._emit_response("result", **result)

            if result.get("action") == "quit":
                break


def main(argv: list[str] | None = None) -> int:
    """Entry point for headless mode."""
    parser = argparse.ArgumentParser(
        prog="afterlife-headless",
        description="Drive a Shadow Afterlife run over JSON lines",
    )
    parser.add_argument("--saves-dir", type=Path, default=Path("saves"))
    parser.add_argument("--seed", type=int, default=None, help="Fixed random seed")
    parser.add_argument("--final-week", type=int, default=None)
    parser.add_argument(
        "--remember",
        action="store_true",
        help="Store --seed and --final-week as defaults for later runs",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    # stdout carries the JSON stream; logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if args.remember:
        if args.seed is not None:
            set_seed(args.seed, args.saves_dir)
        if args.final_week is not None:
            set_final_week(args.final_week, args.saves_dir)

    config = load_config(args.saves_dir)
    if args.seed is not None:
        config["seed"] = args.seed
    if args.final_week is not None:
        config["final_week"] = args.final_week

    runner = HeadlessRunner(saves_dir=args.saves_dir, config=config)
    runner.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
