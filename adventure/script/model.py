"""Graph data model for scripts.

Pure, immutable dataclasses. Construction from raw dictionaries and
validation live in :mod:`adventure.script.loader` and
:mod:`adventure.script.validator`.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .node_types import NodeCategory, NodeType
from .values import PropertyBag

__all__ = [
    "OwnerType",
    "ScriptNode",
    "NodeConnection",
    "ScriptDefinition",
]


class OwnerType(Enum):
    GAME = "Game"
    ROOM = "Room"
    DOOR = "Door"
    NPC = "Npc"
    OBJECT = "GameObject"
    QUEST = "Quest"

    @classmethod
    def parse(cls, raw) -> Optional["OwnerType"]:
        if isinstance(raw, OwnerType):
            return raw
        if not raw:
            return None
        key = str(raw).strip().lower()
        if key == "object":
            return cls.OBJECT
        for member in cls:
            if member.value.lower() == key:
                return member
        return None


@dataclass(frozen=True)
class ScriptNode:
    id: str
    type_name: str
    properties: PropertyBag = field(default_factory=PropertyBag)

    @property
    def node_type(self) -> Optional[NodeType]:
        """Resolved type, ``None`` for tags outside the catalog."""
        return NodeType.parse(self.type_name)

    @property
    def category(self) -> Optional[NodeCategory]:
        nt = self.node_type
        return nt.category if nt else None


@dataclass(frozen=True)
class NodeConnection:
    from_node_id: str
    from_port: str
    to_node_id: str
    to_port: str = "In"


@dataclass(frozen=True)
class ScriptDefinition:
    id: str
    owner_type: OwnerType
    owner_id: str
    nodes: Tuple[ScriptNode, ...] = ()
    connections: Tuple[NodeConnection, ...] = ()
    name: str = ""
    _node_index: Dict[str, ScriptNode] = field(init=False, repr=False, compare=False)
    _port_index: Dict[Tuple[str, str], NodeConnection] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        node_index: Dict[str, ScriptNode] = {}
        for node in self.nodes:
            node_index.setdefault(node.id, node)
        port_index: Dict[Tuple[str, str], NodeConnection] = {}
        for conn in self.connections:
            port_index.setdefault((conn.from_node_id, conn.from_port.lower()), conn)
        object.__setattr__(self, "_node_index", node_index)
        object.__setattr__(self, "_port_index", port_index)

    def get_node(self, node_id: str) -> Optional[ScriptNode]:
        return self._node_index.get(node_id)

    def find_entry(self, node_type: NodeType) -> Optional[ScriptNode]:
        """First node (in authored order) of the given type."""
        for node in self.nodes:
            if node.node_type is node_type:
                return node
        return None

    def connection_from(self, node_id: str, port: str) -> Optional[NodeConnection]:
        return self._port_index.get((node_id, port.lower()))

    def is_owned_by(self, owner_type: OwnerType, owner_id: str) -> bool:
        return self.owner_type is owner_type and self.owner_id.lower() == (owner_id or "").lower()
