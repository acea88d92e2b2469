"""World loading and validation utilities.

Separates construction logic from raw JSON (dict) into model dataclasses.
No I/O performed here; caller is responsible for reading JSON from disk.
"""
from __future__ import annotations
from typing import Dict, Any, List

from adventure.script.loader import load_script_definitions
from adventure.script.model import OwnerType
from ..model.base import (
    World,
    GameInfo,
    Room,
    GameObject,
    Npc,
    Door,
    QuestDefinition,
)

__all__ = ["build_world_from_dict", "validate_world"]

def build_world_from_dict(data: Dict[str, Any]) -> World:
    g = data.get("game", {})
    rooms = [Room(id=r["id"], name=r["name"], description=r.get("description", "")) for r in data.get("rooms", [])]
    game = GameInfo(
        id=g.get("id", data.get("id", "game")),
        title=g.get("title", ""),
        start_room_id=g.get("start_room_id") or (rooms[0].id if rooms else ""),
        start_money=g.get("start_money", 0),
        start_stats=dict(g.get("start_stats", {})),
    )
    objects = [
        GameObject(
            id=o["id"],
            name=o["name"],
            description=o.get("description", ""),
            room_id=o.get("room_id"),
            visible=o.get("visible", True),
            can_take=o.get("can_take", True),
            price=o.get("price", 0),
        )
        for o in data.get("objects", [])
    ]
    npcs = [
        Npc(
            id=n["id"],
            name=n["name"],
            description=n.get("description", ""),
            room_id=n.get("room_id"),
            visible=n.get("visible", True),
            is_shopkeeper=n.get("is_shopkeeper", False),
            money=n.get("money", 0),
        )
        for n in data.get("npcs", [])
    ]
    doors = [
        Door(
            id=d["id"],
            name=d.get("name", d["id"]),
            room_a=d.get("room_a"),
            room_b=d.get("room_b"),
            is_open=d.get("is_open", False),
            is_locked=d.get("is_locked", False),
            key_object_id=d.get("key_object_id"),
        )
        for d in data.get("doors", [])
    ]
    quests = [
        QuestDefinition(
            id=q["id"],
            name=q["name"],
            description=q.get("description", ""),
            is_main_quest=q.get("is_main_quest", False),
        )
        for q in data.get("quests", [])
    ]
    world = World(
        game=game,
        rooms={r.id: r for r in rooms},
        objects={o.id: o for o in objects},
        npcs={n.id: n for n in npcs},
        doors={d.id: d for d in doors},
        quests={q.id: q for q in quests},
        scripts=load_script_definitions(data.get("scripts", [])),
        props=data.get("props", {}),
    )
    return world

def validate_world(world: World) -> List[str]:
    issues: List[str] = []
    if world.game.start_room_id not in world.rooms:
        issues.append(f"Start room '{world.game.start_room_id}' does not exist")
    for obj in world.objects.values():
        if obj.room_id and obj.room_id not in world.rooms:
            issues.append(f"Object '{obj.id}' placed in missing room '{obj.room_id}'")
    for npc in world.npcs.values():
        if npc.room_id and npc.room_id not in world.rooms:
            issues.append(f"NPC '{npc.id}' placed in missing room '{npc.room_id}'")
    for door in world.doors.values():
        for side in (door.room_a, door.room_b):
            if side and side not in world.rooms:
                issues.append(f"Door '{door.id}' connects missing room '{side}'")
        if door.key_object_id and door.key_object_id not in world.objects:
            issues.append(f"Door '{door.id}' key '{door.key_object_id}' is not an object")
    owners = {
        OwnerType.ROOM: world.rooms,
        OwnerType.NPC: world.npcs,
        OwnerType.DOOR: world.doors,
        OwnerType.OBJECT: world.objects,
        OwnerType.QUEST: world.quests,
    }
    for script in world.scripts:
        known = owners.get(script.owner_type)
        if known is None:
            continue
        if not any(k.lower() == script.owner_id.lower() for k in known):
            issues.append(
                f"Script '{script.id}' attached to missing {script.owner_type.value} '{script.owner_id}'"
            )
    return issues
