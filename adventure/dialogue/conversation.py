"""Conversation engine: one persistent dialogue session at a time.

State machine::

    Idle --start--> Active --(PlayerChoice)--> WaitingForChoice --select_option--> Active
                      |  \\--(Shop)--> WaitingForTradeClose --close_trade--> Active
                      \\--(End / dead end)--> Idle   (fires ConversationEnded once)

``end_conversation`` forces Idle from any state without firing the ended
notification. The session lives in ``GameState.active_conversation`` so a
suspended conversation can be saved with the game and resumed later.
"""
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from adventure.core.catalog import WorldCatalog
from adventure.core.state import GameState
from adventure.script.handlers import HandlerContext
from adventure.script.interpreter import GraphInterpreter, RunResult, RunStatus, TraversalMode, VisitedNodes
from adventure.script.model import OwnerType, ScriptDefinition
from adventure.script.node_types import ON_CLOSE, NodeType
from adventure.script.notifications import ConversationEnded, DialogueOption, Message, NotificationBus, TradeOpened
from config import get_debug_mode

logger = logging.getLogger(__name__)

__all__ = ["ConversationStatus", "ActiveConversation", "ConversationEngine"]


class ConversationStatus(Enum):
    IDLE = "Idle"
    ACTIVE = "Active"
    WAITING_FOR_CHOICE = "WaitingForChoice"
    WAITING_FOR_TRADE_CLOSE = "WaitingForTradeClose"


@dataclass
class ActiveConversation:
    npc_id: str
    script_id: str
    current_node_id: str
    status: ConversationStatus = ConversationStatus.ACTIVE
    visited: VisitedNodes = field(default_factory=VisitedNodes)
    options: List[DialogueOption] = field(default_factory=list)
    trade: Optional[TradeOpened] = None

    @property
    def visited_node_ids(self) -> List[str]:
        return self.visited.to_list()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "npc_id": self.npc_id,
            "script_id": self.script_id,
            "current_node_id": self.current_node_id,
            "status": self.status.value,
            "visited_node_ids": self.visited.to_list(),
            "options": [o.to_dict() for o in self.options],
            "trade": None if self.trade is None else {
                "npc_id": self.trade.npc_id,
                "npc_name": self.trade.npc_name,
                "shop_title": self.trade.shop_title,
                "welcome_message": self.trade.welcome_message,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActiveConversation":
        trade = data.get("trade")
        return cls(
            npc_id=data["npc_id"],
            script_id=data["script_id"],
            current_node_id=data["current_node_id"],
            status=ConversationStatus(data.get("status", ConversationStatus.ACTIVE.value)),
            visited=VisitedNodes(data.get("visited_node_ids", [])),
            options=[DialogueOption.from_dict(o) for o in data.get("options", [])],
            trade=TradeOpened(**trade) if trade else None,
        )


class ConversationEngine:
    """Drives NPC dialogue graphs with explicit suspension states."""

    def __init__(
        self,
        catalog: WorldCatalog,
        state: GameState,
        bus: Optional[NotificationBus] = None,
        events: Optional[Any] = None,
        speech: Optional[Any] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog
        self.state = state
        self.bus = bus if bus is not None else NotificationBus()
        self.events = events
        self.speech = speech
        self.rng = rng if rng is not None else random.Random()
        self.debug = get_debug_mode()
        self._interpreter = GraphInterpreter(TraversalMode.CONVERSATION)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def session(self) -> Optional[ActiveConversation]:
        return self.state.active_conversation

    @property
    def status(self) -> ConversationStatus:
        session = self.session
        return session.status if session is not None else ConversationStatus.IDLE

    @property
    def is_active(self) -> bool:
        return self.status is not ConversationStatus.IDLE

    def is_conversation_active(self) -> bool:
        return self.is_active

    @property
    def current_options(self) -> List[DialogueOption]:
        session = self.session
        return list(session.options) if session is not None else []

    @property
    def visited_node_ids(self) -> List[str]:
        session = self.session
        return session.visited_node_ids if session is not None else []

    # ------------------------------------------------------------------
    # Driving operations
    # ------------------------------------------------------------------
    def start_conversation(self, npc_id: str) -> bool:
        """Begin a dialogue with ``npc_id``.

        Returns:
            bool: True if a session was created. A request while another
            session is open is rejected and leaves that session untouched.
        """
        if self.session is not None:
            logger.warning(
                "start_conversation('%s') rejected: conversation with '%s' still open",
                npc_id, self.session.npc_id,
            )
            return False
        npc = self.catalog.get_npc(npc_id)
        if npc is None:
            logger.debug("NPC '%s' not found", npc_id)
            self._debug(f"NPC '{npc_id}' non trovato.")
            return False
        script = self.catalog.find_dialogue_script(npc.id)
        if script is None:
            logger.debug("No dialogue script for NPC '%s'", npc.id)
            self._debug(f"Nessuna conversazione disponibile per {npc.name}.")
            return False
        entry = script.find_entry(NodeType.CONVERSATION_START)

        session = ActiveConversation(npc_id=npc.id, script_id=script.id, current_node_id=entry.id)
        self.state.active_conversation = session
        self._debug(f"[Conversazione con {npc.name}]")
        result = self._interpreter.run(script, entry.id, self._context(session, script), session.visited)
        self._apply(session, result)
        return True

    def select_option(self, index: int) -> bool:
        """Pick the zero-based option ``index`` of the pending choice.

        Out-of-range indexes, or a call while no choice is pending, are
        no-ops returning False.
        """
        session = self.session
        if session is None or session.status is not ConversationStatus.WAITING_FOR_CHOICE:
            logger.debug("select_option(%s) ignored: no pending choice", index)
            return False
        if not isinstance(index, int) or not 0 <= index < len(session.options):
            logger.debug("select_option(%s) ignored: %d options available", index, len(session.options))
            return False
        script = self._session_script(session)
        if script is None:
            return False
        port = session.options[index].port
        session.status = ConversationStatus.ACTIVE
        session.options = []
        result = self._interpreter.resume(script, session.current_node_id, port, self._context(session, script), session.visited)
        self._apply(session, result)
        return True

    def close_trade(self) -> bool:
        """Leave the shop and continue through the Shop node's ``OnClose`` port."""
        session = self.session
        if session is None or session.status is not ConversationStatus.WAITING_FOR_TRADE_CLOSE:
            logger.debug("close_trade() ignored: no open trade")
            return False
        script = self._session_script(session)
        if script is None:
            return False
        session.status = ConversationStatus.ACTIVE
        session.trade = None
        if self.events is not None:
            self.events.trigger_event(OwnerType.NPC, session.npc_id, NodeType.EVENT_ON_TRADE_END)
        if self.session is not session:
            return True
        result = self._interpreter.resume(script, session.current_node_id, ON_CLOSE, self._context(session, script), session.visited)
        self._apply(session, result)
        return True

    def end_conversation(self) -> None:
        """Drop the current session (if any) without notifying."""
        if self.session is not None:
            logger.debug("Conversation with '%s' cancelled", self.session.npc_id)
        self.state.active_conversation = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _context(self, session: ActiveConversation, script: ScriptDefinition) -> HandlerContext:
        return HandlerContext(
            catalog=self.catalog,
            state=self.state,
            bus=self.bus,
            script_id=script.id,
            npc_id=session.npc_id,
            visited=session.visited,
            events=self.events,
            speech=self.speech,
            rng=self.rng,
            debug=self.debug,
        )

    def _session_script(self, session: ActiveConversation) -> Optional[ScriptDefinition]:
        script = self.catalog.get_script(session.script_id)
        if script is None:
            logger.warning("Dialogue script '%s' vanished, ending conversation", session.script_id)
            self._finish(session)
        return script

    def _apply(self, session: ActiveConversation, result: RunResult) -> None:
        if self.session is not session:
            # a listener already ended or replaced this session
            return
        if result.last_node_id:
            session.current_node_id = result.last_node_id
        if result.status is RunStatus.WAITING_FOR_CHOICE:
            session.status = ConversationStatus.WAITING_FOR_CHOICE
            session.options = list(result.options)
        elif result.status is RunStatus.WAITING_FOR_TRADE:
            session.status = ConversationStatus.WAITING_FOR_TRADE_CLOSE
            session.trade = result.trade
        else:
            if result.status is RunStatus.ABORTED:
                logger.warning("Conversation script '%s' aborted at node '%s'", session.script_id, result.last_node_id)
            self._finish(session)

    def _finish(self, session: ActiveConversation) -> None:
        self.state.active_conversation = None
        self.bus.publish(ConversationEnded(session.npc_id))

    def _debug(self, text: str) -> None:
        if self.debug:
            self.bus.publish(Message(f"[Debug] {text}", is_system=True))
