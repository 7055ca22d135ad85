"""
Run snapshot storage.

Separates persistence from engine logic for testability. A save is a single
atomic snapshot write; there is no partial-state visibility.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from .schema import GameSession, SessionSnapshot

logger = logging.getLogger(__name__)


@runtime_checkable
class SnapshotStore(Protocol):
    """
    Storage interface for run snapshots.

    Implementations:
    - JsonSnapshotStore: File-based persistence
    - MemorySnapshotStore: In-memory storage (testing)
    """

    def save(self, session: GameSession) -> SessionSnapshot:
        """Persist a run and return the snapshot written."""
        ...

    def load(self, session_id: str) -> SessionSnapshot | None:
        """Load a snapshot by ID. Returns None if not found."""
        ...

    def delete(self, session_id: str) -> bool:
        """Delete a snapshot. Returns True if deleted."""
        ...

    def list_all(self) -> list[dict]:
        """List all saved runs with metadata."""
        ...


class JsonSnapshotStore:
    """
    File-based snapshot storage using JSON.

    Features:
    - Backup of the previous save
    - Atomic replace of the save file
    - Partial ID matching on load
    """

    def __init__(self, saves_dir: Path | str = "saves"):
        self.saves_dir = Path(saves_dir)
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        return self.saves_dir / f"{session_id}.json"

    def _save_files(self) -> list[Path]:
        # Dotfiles (engine config) share the directory
        return [f for f in self.saves_dir.glob("*.json") if not f.name.startswith(".")]

    def save(self, session: GameSession) -> SessionSnapshot:
        """Write the snapshot to a temp file, then swap it in."""
        snapshot = SessionSnapshot.from_session(session)
        save_file = self._path(session.id)

        if save_file.exists():
            backup = save_file.with_suffix(".json.bak")
            backup.write_text(save_file.read_text(encoding="utf-8"), encoding="utf-8")

        tmp = save_file.with_suffix(".json.tmp")
        tmp.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp, save_file)

        logger.debug("Saved run %s at week %d", session.id, session.week)
        return snapshot

    def load(self, session_id: str) -> SessionSnapshot | None:
        """
        Load by full ID or unique-enough prefix.

        Returns None for a missing or unreadable file.
        """
        save_file = self._path(session_id)

        if not save_file.exists():
            for f in self._save_files():
                if f.stem.startswith(session_id):
                    save_file = f
                    break

        if not save_file.exists():
            return None

        try:
            data = json.loads(save_file.read_text(encoding="utf-8"))
            return SessionSnapshot.model_validate(data)
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning("Could not load save %s: %s", save_file.name, e)
            return None

    def delete(self, session_id: str) -> bool:
        save_file = self._path(session_id)
        if save_file.exists():
            save_file.unlink()
            return True
        return False

    def list_all(self) -> list[dict]:
        """
        List saved runs, most recently modified first.

        Returns list of dicts with: id, week, phase, saved_at
        """
        runs = []

        for f in sorted(
            self._save_files(),
            key=lambda x: x.stat().st_mtime,
            reverse=True,
        ):
            try:
                data = json.loads(f.read_text(encoding="utf-8"))
                saved_at = datetime.fromisoformat(data.get("saved_at", "2000-01-01"))
                runs.append({
                    "id": data.get("id", f.stem),
                    "week": data.get("week", 1),
                    "phase": data.get("phase", "story"),
                    "saved_at": saved_at,
                })
            except (json.JSONDecodeError, ValueError):
                continue

        return runs


class MemorySnapshotStore:
    """
    In-memory snapshot storage for testing.

    Snapshots are stored as JSON strings so a load never aliases live state.
    """

    def __init__(self):
        self.saves: dict[str, str] = {}

    def save(self, session: GameSession) -> SessionSnapshot:
        snapshot = SessionSnapshot.from_session(session)
        self.saves[session.id] = snapshot.model_dump_json()
        return snapshot

    def load(self, session_id: str) -> SessionSnapshot | None:
        raw = self.saves.get(session_id)
        if raw is None:
            for sid, candidate in self.saves.items():
                if sid.startswith(session_id):
                    raw = candidate
                    break
        if raw is None:
            return None
        return SessionSnapshot.model_validate_json(raw)

    def delete(self, session_id: str) -> bool:
        if session_id in self.saves:
            del self.saves[session_id]
            return True
        return False

    def list_all(self) -> list[dict]:
        runs = []
        for raw in self.saves.values():
            snapshot = SessionSnapshot.model_validate_json(raw)
            runs.append({
                "id": snapshot.id,
                "week": snapshot.week,
                "phase": snapshot.phase.value,
                "saved_at": snapshot.saved_at,
            })
        return sorted(runs, key=lambda r: r["saved_at"], reverse=True)
