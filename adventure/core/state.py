"""Game state container for runtime mutable data.

Separated from the static world definition (:mod:`adventure.core.model.base`).
Script handlers are the only writers during play. Entity lookups by id are
case-insensitive; flag and counter names are exact.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from adventure.core.model.base import World


QUEST_NOT_STARTED = "NotStarted"
QUEST_IN_PROGRESS = "InProgress"
QUEST_COMPLETED = "Completed"
QUEST_FAILED = "Failed"
QUEST_STATUSES = (QUEST_NOT_STARTED, QUEST_IN_PROGRESS, QUEST_COMPLETED, QUEST_FAILED)

DEFAULT_PLAYER_STATS = {
    "Health": 100,
    "MaxHealth": 100,
    "Hunger": 0,
    "Thirst": 0,
    "Energy": 100,
    "Sanity": 100,
    "Mana": 0,
    "MaxMana": 0,
    "Strength": 10,
    "Constitution": 10,
    "Intelligence": 10,
    "Dexterity": 10,
    "Charisma": 10,
}


def _ci_key(mapping: Dict[str, Any], key: str) -> Optional[str]:
    """Return the stored key matching ``key`` case-insensitively."""
    if not key:
        return None
    if key in mapping:
        return key
    wanted = key.lower()
    for k in mapping:
        if k.lower() == wanted:
            return k
    return None


@dataclass
class DoorState:
    is_open: bool = False
    is_locked: bool = False


@dataclass
class GameState:
    world_id: str
    current_room: str
    money: int = 0
    player_stats: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_PLAYER_STATS))
    flags: Dict[str, bool] = field(default_factory=dict)
    counters: Dict[str, int] = field(default_factory=dict)
    inventory: List[str] = field(default_factory=list)
    doors: Dict[str, DoorState] = field(default_factory=dict)
    # object id -> room id (None = not placed in any room, e.g. carried)
    object_rooms: Dict[str, Optional[str]] = field(default_factory=dict)
    object_visible: Dict[str, bool] = field(default_factory=dict)
    npc_rooms: Dict[str, Optional[str]] = field(default_factory=dict)
    npc_visible: Dict[str, bool] = field(default_factory=dict)
    quests: Dict[str, str] = field(default_factory=dict)
    # ActiveConversation while a dialogue is open, None when idle
    active_conversation: Optional[Any] = None

    @classmethod
    def from_world(cls, world: World) -> "GameState":
        stats = dict(DEFAULT_PLAYER_STATS)
        stats.update(world.game.start_stats)
        return cls(
            world_id=world.game.id,
            current_room=world.game.start_room_id,
            money=world.game.start_money,
            player_stats=stats,
            doors={d.id: DoorState(is_open=d.is_open, is_locked=d.is_locked) for d in world.doors.values()},
            object_rooms={o.id: o.room_id for o in world.objects.values()},
            object_visible={o.id: o.visible for o in world.objects.values()},
            npc_rooms={n.id: n.room_id for n in world.npcs.values()},
            npc_visible={n.id: n.visible for n in world.npcs.values()},
        )

    # --- Lookup helpers ---
    def door(self, door_id: str) -> Optional[DoorState]:
        key = _ci_key(self.doors, door_id)
        return self.doors[key] if key is not None else None

    def object_key(self, obj_id: str) -> Optional[str]:
        return _ci_key(self.object_rooms, obj_id) or _ci_key(self.object_visible, obj_id)

    def npc_key(self, npc_id: str) -> Optional[str]:
        return _ci_key(self.npc_rooms, npc_id) or _ci_key(self.npc_visible, npc_id)

    def stat_key(self, stat: str) -> Optional[str]:
        return _ci_key(self.player_stats, stat)

    def quest_status(self, quest_id: str) -> str:
        key = _ci_key(self.quests, quest_id)
        return self.quests[key] if key is not None else QUEST_NOT_STARTED

    # --- Inventory (ordered multiset) ---
    def inventory_count(self, obj_id: str) -> int:
        wanted = (obj_id or "").lower()
        return sum(1 for i in self.inventory if i.lower() == wanted)

    def has_item(self, obj_id: str) -> bool:
        return self.inventory_count(obj_id) > 0

    def remove_all_items(self, obj_id: str) -> int:
        wanted = (obj_id or "").lower()
        before = len(self.inventory)
        self.inventory[:] = [i for i in self.inventory if i.lower() != wanted]
        return before - len(self.inventory)
