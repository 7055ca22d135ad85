"""Simulation module for scripted playthroughs and balance checks."""

from .player import ScriptedPlayer
from .personas import PERSONAS
from .runner import run_simulation, SimulationTranscript, SimulationWeek

__all__ = [
    "ScriptedPlayer",
    "PERSONAS",
    "run_simulation",
    "SimulationTranscript",
    "SimulationWeek",
]
