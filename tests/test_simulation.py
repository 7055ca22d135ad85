"""Tests for scripted simulation runs."""

from afterlife.simulation import PERSONAS, ScriptedPlayer, run_simulation
from afterlife.simulation.__main__ import main
from afterlife.state.schema import Alignment


class TestScriptedPlayer:

    def test_choice_follows_alignment(self):
        from afterlife.content import generic_story

        story = generic_story(1)
        assert ScriptedPlayer("striver").choose_option(story).alignment == Alignment.POSITIVE
        assert ScriptedPlayer("slacker").choose_option(story).alignment == Alignment.SLACK

    def test_plan_includes_expeditions_only_when_open(self):
        player = ScriptedPlayer("wanderer", seed=1)
        state = {
            "stats": {"satiety": 100, "hydration": 100, "money": 500},
            "unlocked_maps": {"suburb": True, "city": True, "mall": False},
        }
        plan = player.plan_week(state)
        assert ("explore", "suburb") in plan
        assert ("explore", "city") in plan
        assert ("explore", "mall") not in plan

    def test_hungry_player_eats(self):
        player = ScriptedPlayer("slacker")
        state = {
            "stats": {"satiety": 20, "hydration": 100, "money": 0},
            "unlocked_maps": {},
            "inventory": {"compressed-biscuit": 1},
        }
        assert player.plan_week(state)[0] == ("use_item", "compressed-biscuit")

    def test_door_stance(self):
        assert ScriptedPlayer("striver").answer_door(None) is True
        refuser = ScriptedPlayer("slacker")
        assert refuser.answer_door(None) is False
        assert refuser.get_stats()["doors_refused"] == 1


class TestRunSimulation:

    def test_sleeper_hits_rest_ratchet(self):
        transcript = run_simulation("sleeper", seed=1)
        assert transcript.ending_id == "easter-sleep"
        assert transcript.final_week == 1
        assert len(transcript.weeks) == 1

    def test_short_run_reaches_final_week(self):
        transcript = run_simulation("striver", seed=3, config={"final_week": 5})
        assert transcript.final_week == 5
        assert len(transcript.weeks) == 5
        assert transcript.ending_id is not None
        assert transcript.player_stats["total_decisions"] == 5

    def test_same_seed_same_run(self):
        first = run_simulation("wanderer", seed=11, config={"final_week": 8})
        second = run_simulation("wanderer", seed=11, config={"final_week": 8})
        assert first.weeks == second.weeks
        assert first.ending_id == second.ending_id

    def test_every_persona_finishes(self):
        for persona in PERSONAS:
            transcript = run_simulation(persona, seed=2, config={"final_week": 4})
            assert transcript.ending_id is not None, persona

    def test_cat_person_earns_cat_servant(self):
        transcript = run_simulation("cat_person", seed=4, config={"final_week": 16})
        assert "cat-servant" in transcript.achievements

    def test_transcript_markdown_and_save(self, tmp_path):
        transcript = run_simulation("thinker", seed=5, config={"final_week": 3})
        markdown = transcript.to_markdown()
        assert markdown.startswith("# Simulation Transcript")
        assert "## Week 1" in markdown
        assert "**Ending:**" in markdown

        path = transcript.save(tmp_path / "sims")
        assert path.exists()
        assert path.read_text(encoding="utf-8") == markdown


class TestSimulationCli:

    def test_main_prints_distribution(self, capsys):
        assert main(["--persona", "sleeper", "--runs", "2"]) == 0
        out = capsys.readouterr().out
        assert "Ending distribution" in out
        assert "Sleeper" in out

    def test_main_saves_transcripts(self, tmp_path):
        assert main([
            "--persona", "thinker",
            "--runs", "1",
            "--weeks", "2",
            "--save-dir", str(tmp_path),
        ]) == 0
        assert len(list(tmp_path.glob("sim_*.md"))) == 1
