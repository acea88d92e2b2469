"""Read-only world catalog.

In-memory indices over a loaded :class:`World` for quick, case-insensitive
lookup by id without traversing nested structures repeatedly.
"""
from __future__ import annotations
from typing import Dict, List, Optional, TypeVar

from adventure.core.model.base import World, Room, GameObject, Npc, QuestDefinition
from adventure.script.model import OwnerType, ScriptDefinition
from adventure.script.node_types import NodeType

T = TypeVar("T")


def _ci_index(items: Dict[str, T]) -> Dict[str, T]:
    return {k.lower(): v for k, v in items.items()}


class WorldCatalog:
    def __init__(self, world: World):
        self.world = world
        self._rooms = _ci_index(world.rooms)
        self._objects = _ci_index(world.objects)
        self._npcs = _ci_index(world.npcs)
        self._quests = _ci_index(world.quests)
        self._scripts: Dict[str, ScriptDefinition] = {}
        for script in world.scripts:
            self._scripts.setdefault(script.id, script)

    @property
    def game_id(self) -> str:
        return self.world.game.id

    @property
    def scripts(self) -> List[ScriptDefinition]:
        return list(self.world.scripts)

    def get_room(self, room_id: str) -> Optional[Room]:
        return self._rooms.get((room_id or "").lower())

    def get_object(self, obj_id: str) -> Optional[GameObject]:
        return self._objects.get((obj_id or "").lower())

    def get_npc(self, npc_id: str) -> Optional[Npc]:
        return self._npcs.get((npc_id or "").lower())

    def get_quest(self, quest_id: str) -> Optional[QuestDefinition]:
        return self._quests.get((quest_id or "").lower())

    def get_script(self, script_id: str) -> Optional[ScriptDefinition]:
        return self._scripts.get(script_id)

    # --- Display names (fall back to the id) ---
    def object_name(self, obj_id: str) -> str:
        obj = self.get_object(obj_id)
        return obj.name if obj else obj_id

    def quest_name(self, quest_id: str) -> str:
        quest = self.get_quest(quest_id)
        return quest.name if quest else quest_id

    def npc_name(self, npc_id: str) -> str:
        npc = self.get_npc(npc_id)
        return npc.name if npc else "???"

    # --- Script lookup ---
    def scripts_for(self, owner_type: OwnerType, owner_id: str) -> List[ScriptDefinition]:
        """Scripts attached to an owner, in catalog order."""
        return [s for s in self.world.scripts if s.is_owned_by(owner_type, owner_id)]

    def find_dialogue_script(self, npc_id: str) -> Optional[ScriptDefinition]:
        """First NPC-owned script with a ``Conversation_Start`` node."""
        for script in self.scripts_for(OwnerType.NPC, npc_id):
            if script.find_entry(NodeType.CONVERSATION_START) is not None:
                return script
        return None
