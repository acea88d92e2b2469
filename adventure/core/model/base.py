"""Data model definitions for world content.

This module only contains pure dataclasses without loading or validation logic.
They are intended to be immutable structural representations of world content;
everything that changes during play lives in :class:`adventure.core.state.GameState`.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from adventure.script.model import ScriptDefinition

__all__ = [
    "GameInfo",
    "Room",
    "GameObject",
    "Npc",
    "Door",
    "QuestDefinition",
    "World",
]

@dataclass(frozen=True)
class GameInfo:
    id: str
    title: str
    start_room_id: str
    start_money: int = 0
    start_stats: Dict[str, int] = field(default_factory=dict)

@dataclass(frozen=True)
class Room:
    id: str
    name: str
    description: str = ""

@dataclass(frozen=True)
class GameObject:
    id: str
    name: str
    description: str = ""
    room_id: Optional[str] = None
    visible: bool = True
    can_take: bool = True
    price: int = 0

@dataclass(frozen=True)
class Npc:
    id: str
    name: str
    description: str = ""
    room_id: Optional[str] = None
    visible: bool = True
    is_shopkeeper: bool = False
    money: int = 0

@dataclass(frozen=True)
class Door:
    id: str
    name: str
    room_a: Optional[str] = None
    room_b: Optional[str] = None
    is_open: bool = False
    is_locked: bool = False
    key_object_id: Optional[str] = None

@dataclass(frozen=True)
class QuestDefinition:
    id: str
    name: str
    description: str = ""
    is_main_quest: bool = False

@dataclass(frozen=True)
class World:
    game: GameInfo
    rooms: Dict[str, Room]
    objects: Dict[str, GameObject] = field(default_factory=dict)
    npcs: Dict[str, Npc] = field(default_factory=dict)
    doors: Dict[str, Door] = field(default_factory=dict)
    quests: Dict[str, QuestDefinition] = field(default_factory=dict)
    scripts: List[ScriptDefinition] = field(default_factory=list)
    props: Dict[str, Any] = field(default_factory=dict)
