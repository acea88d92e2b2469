"""Event script engine.

Binds the graph interpreter to world-event triggers. A trigger is scoped by
owner (``Door``/``cellar_door``) and event kind (``Event_OnDoorOpen``): every
script attached to that owner whose graph holds a node of that kind is run
to completion, in catalog order.
"""
from __future__ import annotations
import logging
import random
from typing import Optional, Union

from adventure.core.catalog import WorldCatalog
from adventure.core.state import GameState
from config import get_debug_mode, get_max_event_depth

from .handlers import HandlerContext
from .interpreter import GraphInterpreter, RunStatus, TraversalMode
from .model import OwnerType
from .node_types import NodeCategory, NodeType
from .notifications import Message, NotificationBus

logger = logging.getLogger(__name__)

__all__ = ["EventScriptEngine"]


class EventScriptEngine:
    """Runs owner-scoped event scripts against the game state."""

    def __init__(
        self,
        catalog: WorldCatalog,
        state: GameState,
        bus: Optional[NotificationBus] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog
        self.state = state
        self.bus = bus if bus is not None else NotificationBus()
        self.rng = rng if rng is not None else random.Random()
        self.debug = get_debug_mode()
        self.max_depth = get_max_event_depth()
        self._interpreter = GraphInterpreter(TraversalMode.EVENT)
        self._depth = 0

    def trigger_event(
        self,
        owner_type: Union[OwnerType, str],
        owner_id: str,
        event_kind: Union[NodeType, str],
    ) -> None:
        """Run every script of the owner that reacts to ``event_kind``.

        Args:
            owner_type: Owner kind (enum member or its name, e.g. ``"Door"``).
            owner_id: Owner entity id (case-insensitive).
            event_kind: Event node type (enum member or tag, e.g. ``"Event_OnGameStart"``).

        No matching script is a silent no-op.
        """
        owner = OwnerType.parse(owner_type)
        kind = event_kind if isinstance(event_kind, NodeType) else NodeType.parse(event_kind)
        if owner is None or kind is None or kind.category is not NodeCategory.EVENT:
            logger.debug("Ignoring trigger %s/%s/%s", owner_type, owner_id, event_kind)
            return
        if self._depth >= self.max_depth:
            logger.warning("Event %s/%s/%s skipped: nesting deeper than %d", owner.value, owner_id, kind.value, self.max_depth)
            return

        self._depth += 1
        try:
            for script in self.catalog.scripts_for(owner, owner_id):
                entry = script.find_entry(kind)
                if entry is None:
                    continue
                if self.debug:
                    self.bus.publish(Message(f"[Debug] {kind.value} -> {script.id}", is_system=True))
                ctx = HandlerContext(
                    catalog=self.catalog,
                    state=self.state,
                    bus=self.bus,
                    script_id=script.id,
                    npc_id=owner_id if owner is OwnerType.NPC else None,
                    events=self,
                    rng=self.rng,
                    debug=self.debug,
                )
                result = self._interpreter.run(script, entry.id, ctx)
                if result.status is RunStatus.ABORTED:
                    logger.warning("Event script '%s' aborted at node '%s'", script.id, result.last_node_id)
        finally:
            self._depth -= 1
