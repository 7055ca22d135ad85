"""Tests for snapshot persistence."""

import json

import pytest

from afterlife.state import JsonSnapshotStore, MemorySnapshotStore, SnapshotStore
from afterlife.state.schema import Alignment, GamePhase, GameSession, SessionSnapshot


@pytest.fixture
def session():
    session = GameSession(week=7, phase=GamePhase.STORY)
    session.stats.combat = 42
    session.align_counts[Alignment.RATIONAL] = 4
    session.counters.rational_choice_count = 4
    session.visited.suburb = True
    session.unlocked.suburb = True
    session.never_rest = False
    session.unlocked_achievements.append("funny-shout")
    return session


class TestJsonSnapshotStore:

    @pytest.fixture
    def store(self, tmp_path):
        return JsonSnapshotStore(tmp_path / "saves")

    def test_implements_protocol(self, store):
        assert isinstance(store, SnapshotStore)

    def test_round_trip(self, store, session):
        store.save(session)
        loaded = store.load(session.id)

        assert loaded.week == 7
        assert loaded.stats.combat == 42
        assert loaded.align_counts[Alignment.RATIONAL] == 4
        assert loaded.visited.suburb
        assert loaded.never_rest is False
        assert loaded.unlocked_achievements == ["funny-shout"]

    def test_prefix_match(self, store, session):
        store.save(session)
        assert store.load(session.id[:4]).id == session.id

    def test_backup_on_resave(self, store, session):
        store.save(session)
        session.week = 8
        store.save(session)

        backup = store.saves_dir / f"{session.id}.json.bak"
        assert backup.exists()
        assert json.loads(backup.read_text(encoding="utf-8"))["week"] == 7
        assert store.load(session.id).week == 8

    def test_corrupt_file_returns_none(self, store):
        (store.saves_dir / "broken.json").write_text("{not json", encoding="utf-8")
        assert store.load("broken") is None

    def test_missing_returns_none(self, store):
        assert store.load("missing") is None

    def test_minimal_snapshot_loads(self, store):
        """Only the core fields are required; history defaults to zero."""
        minimal = {"week": 3, "phase": "story", "stats": {"stamina": 50}}
        (store.saves_dir / "minimal.json").write_text(json.dumps(minimal), encoding="utf-8")

        loaded = store.load("minimal")
        assert loaded.week == 3
        assert loaded.stats.stamina == 50
        assert loaded.stats.money == 500
        assert loaded.counters.total_daily_events == 0
        assert loaded.align_counts[Alignment.POSITIVE] == 0

    def test_list_all_skips_config(self, store, session):
        store.save(session)
        (store.saves_dir / ".afterlife_config.json").write_text("{}", encoding="utf-8")

        runs = store.list_all()
        assert [r["id"] for r in runs] == [session.id]
        assert runs[0]["week"] == 7

    def test_delete(self, store, session):
        store.save(session)
        assert store.delete(session.id)
        assert not store.delete(session.id)
        assert store.load(session.id) is None


class TestMemorySnapshotStore:

    def test_load_is_a_copy(self, session):
        store = MemorySnapshotStore()
        store.save(session)
        session.week = 30

        assert store.load(session.id).week == 7

    def test_list_and_delete(self, session):
        store = MemorySnapshotStore()
        store.save(session)
        assert store.list_all()[0]["phase"] == "story"
        assert store.delete(session.id)
        assert store.list_all() == []


class TestSnapshotConversion:

    def test_to_session_restores_history(self, session):
        restored = SessionSnapshot.from_session(session).to_session()

        assert restored.id == session.id
        assert restored.week == 7
        assert restored.counters.rational_choice_count == 4
        assert restored.unlocked.suburb
        assert restored.week_start_stats == session.week_start_stats

    def test_week_working_state_restored(self, session):
        session.phase = GamePhase.ACTIONS
        session.rest_clicks_this_week = 3
        session.week_closed = True
        session.week_action_counts = {"rest": 3}

        restored = SessionSnapshot.model_validate_json(
            SessionSnapshot.from_session(session).model_dump_json()
        ).to_session()

        assert restored.phase == GamePhase.ACTIONS
        assert restored.rest_clicks_this_week == 3
        assert restored.week_closed
        assert restored.week_action_counts == {"rest": 3}

    def test_minimal_snapshot_starts_week_from_stats(self):
        snapshot = SessionSnapshot.model_validate(
            {"week": 3, "phase": "story", "stats": {"combat": 40}}
        )
        restored = snapshot.to_session()

        assert restored.week_start_stats == restored.stats
        assert restored.selected_option is None
        assert not restored.week_closed

    def test_ending_id_recorded(self, session, catalog):
        session.ending = catalog.get("normal-survivor")
        assert SessionSnapshot.from_session(session).ending_id == "normal-survivor"
