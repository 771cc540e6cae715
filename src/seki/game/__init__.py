"""Game management layer: engine state machine, territory review, replay.

Quick start::

    from seki.core import Stone
    from seki.game import Engine, RuleSet

    engine = Engine(9, 9, RuleSet(komi=5.5))
    engine.try_play(Stone.BLACK, (2, 2))
    engine.try_pass(Stone.WHITE)
    print(engine.stage)
"""

from seki.game.engine import Engine, EngineEvents
from seki.game.interfaces import DeadStoneSettings, RuleSet, Stage
from seki.game.replay import Replay
from seki.game.review import TerritoryReview
from seki.game.snapshot import (
    EngineSnapshot,
    TreeSnapshot,
    deserialize,
    deserialize_tree,
    serialize,
    serialize_tree,
)

__all__ = [
    # Configuration / states
    "DeadStoneSettings",
    "RuleSet",
    "Stage",
    # Concrete
    "Engine",
    "EngineEvents",
    "Replay",
    "TerritoryReview",
    # Persistence
    "EngineSnapshot",
    "TreeSnapshot",
    "deserialize",
    "deserialize_tree",
    "serialize",
    "serialize_tree",
]
