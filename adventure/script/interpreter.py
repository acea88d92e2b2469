"""Graph interpreter shared by the event and conversation engines.

Starting from an entry node the interpreter repeatedly runs the node's
handler, picks the connection leaving the chosen port and moves to its
target, synchronously, until one of:

* a suspension node (PlayerChoice, Shop) asks for external input;
* a terminal node (Conversation_End) is reached;
* the chosen port has no outgoing connection (dead end);
* something is wrong with the graph (unknown node type, missing node,
  illegal node for the traversal mode, a node visited twice in the same
  run). These abort the run with a warning in the log.

Nothing here raises to the caller.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from .handlers import HandlerContext, get_handler
from .model import ScriptDefinition
from .node_types import NodeCategory, NodeType
from .notifications import DialogueOption, TradeOpened

logger = logging.getLogger(__name__)

__all__ = [
    "TraversalMode",
    "RunStatus",
    "RunResult",
    "VisitedNodes",
    "GraphInterpreter",
]


class TraversalMode(Enum):
    EVENT = "event"
    CONVERSATION = "conversation"


class RunStatus(Enum):
    WAITING_FOR_CHOICE = "waiting_for_choice"
    WAITING_FOR_TRADE = "waiting_for_trade"
    ENDED = "ended"          # Conversation_End reached
    DEAD_END = "dead_end"    # no connection on the chosen port
    ABORTED = "aborted"      # malformed graph or cycle

    @property
    def suspended(self) -> bool:
        return self in (RunStatus.WAITING_FOR_CHOICE, RunStatus.WAITING_FOR_TRADE)


@dataclass
class RunResult:
    status: RunStatus
    last_node_id: Optional[str] = None
    options: List[DialogueOption] = field(default_factory=list)
    trade: Optional[TradeOpened] = None
    steps: int = 0


class VisitedNodes:
    """Insertion-ordered set of node ids."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: dict = {}
        for node_id in ids:
            self.add(node_id)

    def add(self, node_id: str) -> bool:
        if node_id in self._ids:
            return False
        self._ids[node_id] = None
        return True

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VisitedNodes):
            return NotImplemented
        return list(self._ids) == list(other._ids)

    def __repr__(self) -> str:
        return f"VisitedNodes({list(self._ids)!r})"

    def to_list(self) -> List[str]:
        return list(self._ids)


class GraphInterpreter:
    def __init__(self, mode: TraversalMode):
        self.mode = mode

    def _is_legal(self, node_type: NodeType) -> bool:
        if self.mode is TraversalMode.EVENT:
            return node_type.category is not NodeCategory.DIALOGUE
        return True

    def run(
        self,
        script: ScriptDefinition,
        entry_node_id: str,
        ctx: HandlerContext,
        visited: Optional[VisitedNodes] = None,
    ) -> RunResult:
        """Traverse from ``entry_node_id`` until suspension or termination."""
        visited = visited if visited is not None else VisitedNodes()
        seen_this_run = set()
        node_id = entry_node_id
        steps = 0
        while True:
            node = script.get_node(node_id)
            if node is None:
                logger.warning("[%s] connection to missing node '%s', stopping", script.id, node_id)
                return RunResult(RunStatus.ABORTED, node_id, steps=steps)
            if node_id in seen_this_run:
                logger.warning("[%s] cycle detected at node '%s', stopping", script.id, node_id)
                return RunResult(RunStatus.ABORTED, node_id, steps=steps)
            seen_this_run.add(node_id)
            visited.add(node_id)
            steps += 1

            node_type = node.node_type
            handler = get_handler(node_type)
            if node_type is None or handler is None:
                logger.warning("[%s] node '%s' has unknown type '%s', stopping", script.id, node_id, node.type_name)
                return RunResult(RunStatus.ABORTED, node_id, steps=steps)
            if not self._is_legal(node_type):
                logger.warning(
                    "[%s] node '%s' (%s) not allowed in %s scripts, stopping",
                    script.id, node_id, node_type.value, self.mode.value,
                )
                return RunResult(RunStatus.ABORTED, node_id, steps=steps)

            ctx.pending_options = []
            ctx.trade = None
            try:
                outcome = handler(node, ctx)
            except Exception:
                logger.exception("[%s] handler for node '%s' (%s) failed", script.id, node_id, node_type.value)
                return RunResult(RunStatus.ABORTED, node_id, steps=steps)

            if outcome.terminal:
                return RunResult(RunStatus.ENDED, node_id, steps=steps)
            if outcome.suspend:
                if node_type is NodeType.CONVERSATION_SHOP:
                    return RunResult(RunStatus.WAITING_FOR_TRADE, node_id, trade=ctx.trade, steps=steps)
                return RunResult(RunStatus.WAITING_FOR_CHOICE, node_id, options=list(ctx.pending_options), steps=steps)

            conn = script.connection_from(node_id, outcome.port or "")
            if conn is None:
                return RunResult(RunStatus.DEAD_END, node_id, steps=steps)
            node_id = conn.to_node_id

    def resume(
        self,
        script: ScriptDefinition,
        from_node_id: str,
        port: str,
        ctx: HandlerContext,
        visited: Optional[VisitedNodes] = None,
    ) -> RunResult:
        """Continue from a suspended node through ``port``."""
        conn = script.connection_from(from_node_id, port)
        if conn is None:
            return RunResult(RunStatus.DEAD_END, from_node_id)
        return self.run(script, conn.to_node_id, ctx, visited)
