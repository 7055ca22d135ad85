"""
Engine systems for Shadow Afterlife.

Each system operates on an explicit GameSession (or a part of it);
PhaseController sequences them into the weekly loop.
"""

from .ledger import ResourceLedger, METER_BOUNDS, SANITY_STORY_CEILING
from .events import RandomEventResolver, EmptyPoolError
from .unlocks import UnlockGate, TierRule
from .stats import StatAccumulator, CheckpointResult
from .endings import EndingCatalog, EndingClassifier, EndingVerdict
from .achievements import AchievementSink, SessionAchievements
from .trade import Inventory, InventoryGateway, ItemSpec
from .phases import PhaseController, ActionOutcome

__all__ = [
    "ResourceLedger",
    "METER_BOUNDS",
    "SANITY_STORY_CEILING",
    "RandomEventResolver",
    "EmptyPoolError",
    "UnlockGate",
    "TierRule",
    "StatAccumulator",
    "CheckpointResult",
    "EndingCatalog",
    "EndingClassifier",
    "EndingVerdict",
    "AchievementSink",
    "SessionAchievements",
    "Inventory",
    "InventoryGateway",
    "ItemSpec",
    # Week state machine
    "PhaseController",
    "ActionOutcome",
]
