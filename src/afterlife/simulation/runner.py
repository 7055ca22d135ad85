"""Simulation runner and transcript management."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..config import EngineConfig, merge_config
from ..content import ContentProvider
from ..state.event_bus import EventBus
from ..systems.phases import ActionOutcome, PhaseController
from .player import ScriptedPlayer

logger = logging.getLogger(__name__)


@dataclass
class SimulationWeek:
    """One simulated week."""

    week: int
    option: str = ""
    alignment: str = ""
    actions: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)
    npc: str | None = None
    helped: bool | None = None
    deltas: dict[str, int] = field(default_factory=dict)


@dataclass
class SimulationTranscript:
    """Complete transcript of a simulation run."""

    persona: str = "thinker"
    seed: int | str | None = None
    started_at: datetime = field(default_factory=datetime.now)
    weeks: list[SimulationWeek] = field(default_factory=list)
    ending_id: str | None = None
    ending_name: str = ""
    final_week: int = 0
    final_stats: dict = field(default_factory=dict)
    achievements: list[str] = field(default_factory=list)
    player_stats: dict = field(default_factory=dict)

    def to_markdown(self) -> str:
        """Convert transcript to markdown format."""
        lines = [
            "# Simulation Transcript",
            "",
            f"- **Date:** {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"- **Persona:** {self.persona}",
            f"- **Seed:** {self.seed}",
            f"- **Weeks:** {len(self.weeks)}",
            "",
            "---",
            "",
        ]

        for week in self.weeks:
            lines.append(f"## Week {week.week}")
            lines.append("")
            if week.option:
                lines.append(f"**Choice:** {week.option} ({week.alignment})")
                lines.append("")
            if week.actions:
                lines.append("*Actions:*")
                for i, action in enumerate(week.actions, 1):
                    lines.append(f"{i}. {action}")
                lines.append("")
            if week.rejected:
                lines.append(f"*Rejected:* {', '.join(week.rejected)}")
                lines.append("")
            if week.npc:
                answer = "helped" if week.helped else "refused"
                lines.append(f"**Door:** {week.npc} ({answer})")
                lines.append("")
            if week.deltas:
                changed = [f"{k} {v:+d}" for k, v in week.deltas.items() if v]
                if changed:
                    lines.append(f"**Settlement:** {', '.join(changed)}")
                    lines.append("")

        # Add summary
        lines.append("## Summary")
        lines.append("")
        lines.append(f"- **Ending:** {self.ending_name} (`{self.ending_id}`) in week {self.final_week}")
        if self.final_stats:
            meters = ", ".join(f"{k} {v}" for k, v in self.final_stats.items())
            lines.append(f"- **Final meters:** {meters}")
        if self.achievements:
            lines.append(f"- **Achievements:** {', '.join(self.achievements)}")
        if self.player_stats:
            lines.append(f"- **Total decisions:** {self.player_stats.get('total_decisions', 0)}")
            lines.append(f"- **Doors answered:** {self.player_stats.get('doors_answered', 0)}")
            lines.append(f"- **Doors refused:** {self.player_stats.get('doors_refused', 0)}")
        lines.append("")

        return "\n".join(lines)

    def save(self, simulations_dir: Path) -> Path:
        """Save transcript to file. Returns the file path."""
        simulations_dir.mkdir(parents=True, exist_ok=True)

        timestamp = self.started_at.strftime("%Y-%m-%d_%H%M%S")
        filename = f"sim_{timestamp}_{self.persona}_{self.seed}.md"
        filepath = simulations_dir / filename

        filepath.write_text(self.to_markdown(), encoding="utf-8")
        return filepath


def _dispatch(controller: PhaseController, command: str, arg: str | None) -> ActionOutcome:
    if command == "daily_action":
        return controller.daily_action(arg)
    if command == "explore":
        return controller.explore(arg)
    if command == "buy":
        return controller.buy(arg)
    if command == "use_item":
        return controller.use_item(arg)
    if command == "debt_work":
        return controller.debt_work()
    raise ValueError(f"Unknown simulation command: {command}")


def run_simulation(
    persona: str = "thinker",
    seed: int | str | None = None,
    config: EngineConfig | dict | None = None,
    content: ContentProvider | None = None,
    bus: EventBus | None = None,
    verbose: bool = False,
) -> SimulationTranscript:
    """
    Play one full run with a scripted persona.

    Args:
        persona: Key into PERSONAS
        seed: Seeds both the engine and the player
        config: Engine config overrides (e.g. a shorter final_week)
        content: Content provider (bundled YAML by default)
        bus: Event bus; a private one by default so runs do not cross-talk
        verbose: Log every week at INFO

    Returns:
        SimulationTranscript with all weeks and the ending
    """
    config = merge_config(config)
    if seed is not None:
        config["seed"] = seed

    controller = PhaseController(
        content=content,
        config=config,
        bus=bus or EventBus(),
    )
    player = ScriptedPlayer(persona, seed=seed)
    transcript = SimulationTranscript(persona=persona, seed=seed)
    session = controller.session

    while not session.is_over:
        option = player.choose_option(session.current_story)
        controller.select_option(option)
        week_log = SimulationWeek(
            week=session.week,
            option=option.id,
            alignment=option.alignment.value,
        )
        transcript.weeks.append(week_log)

        for command, arg in player.plan_week(controller.snapshot()):
            outcome = _dispatch(controller, command, arg)
            label = f"{command} {arg}" if arg else command
            if outcome.accepted:
                week_log.actions.append(f"{label}: {outcome.title}")
            else:
                week_log.rejected.append(f"{label} ({outcome.reason})")
            if session.is_over:
                break
        if session.is_over:
            break

        result = controller.end_week()
        if result.npc:
            week_log.npc = result.npc.id
            week_log.helped = player.answer_door(result.npc)
            controller.resolve_npc(week_log.helped)
        if session.settlement:
            week_log.deltas = session.settlement.deltas

        if verbose:
            logger.info("[%s] week %d: %s", persona, session.week, ", ".join(week_log.actions))

        result = controller.advance_week()
        if not result.accepted:
            raise RuntimeError(f"Simulation stalled in week {session.week}: {result.reason}")

    ending = session.ending
    transcript.ending_id = ending.id if ending else None
    transcript.ending_name = ending.name if ending else ""
    transcript.final_week = session.week
    transcript.final_stats = session.stats.model_dump()
    transcript.achievements = list(session.unlocked_achievements)
    transcript.player_stats = player.get_stats()

    logger.debug("Simulation %s (seed %s) ended: %s", persona, seed, transcript.ending_id)
    return transcript
