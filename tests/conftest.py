"""Shared fixtures: a small plaza world with a merchant and a guard."""

import copy
import random

import pytest

from adventure.core.catalog import WorldCatalog
from adventure.core.loader.world_loader import build_world_from_dict
from adventure.core.state import GameState
from adventure.dialogue.conversation import ConversationEngine
from adventure.script.events import EventScriptEngine
from adventure.script.notifications import NotificationBus


def make_script(script_id, owner_type, owner_id, nodes, connections=()):
    """Compact script builder: nodes as (id, type[, props]), connections as (from, port, to)."""
    return {
        "id": script_id,
        "owner_type": owner_type,
        "owner_id": owner_id,
        "nodes": [
            {"id": n[0], "node_type": n[1], "properties": n[2] if len(n) > 2 else {}}
            for n in nodes
        ],
        "connections": [
            {"from_node_id": a, "from_port": port, "to_node_id": b, "to_port": "In"}
            for a, port, b in connections
        ],
    }


MERCHANT_SCRIPT = make_script(
    "merchant_script", "Npc", "merchant",
    [
        ("start", "Conversation_Start"),
        ("greeting", "Conversation_NpcSay", {
            "Text": "¡Bienvenido a mi tienda! ¿En qué puedo ayudarte?",
            "SpeakerName": "Comerciante",
            "Emotion": "Feliz",
        }),
        ("choice1", "Conversation_PlayerChoice", {"Text1": "Quiero ver tus productos.", "Text2": "Adiós."}),
        ("shop", "Conversation_Shop", {"ShopTitle": "Tienda"}),
        ("farewell", "Conversation_NpcSay", {"Text": "¡Hasta luego! Vuelve pronto.", "SpeakerName": "Comerciante"}),
        ("end", "Conversation_End"),
    ],
    [
        ("start", "Exec", "greeting"),
        ("greeting", "Exec", "choice1"),
        ("choice1", "Option1", "shop"),
        ("choice1", "Option2", "farewell"),
        ("shop", "OnClose", "farewell"),
        ("farewell", "Exec", "end"),
    ],
)

GUARD_SCRIPT = make_script(
    "guard_script", "Npc", "guard",
    [
        ("start", "Conversation_Start"),
        ("greeting", "Conversation_NpcSay", {"Text": "Alto ahí, ciudadano. ¿Qué necesitas?"}),
        ("end", "Conversation_End"),
    ],
    [("start", "Exec", "greeting"), ("greeting", "Exec", "end")],
)

BASE_WORLD = {
    "game": {"id": "conversation_test", "title": "Conversation Test World", "start_room_id": "room1", "start_money": 100},
    "rooms": [
        {"id": "room1", "name": "Plaza del pueblo"},
        {"id": "cellar", "name": "Bodega"},
    ],
    "objects": [
        {"id": "key", "name": "llave", "room_id": "room1"},
        {"id": "lamp", "name": "lámpara", "room_id": "cellar", "visible": False},
    ],
    "npcs": [
        {"id": "merchant", "name": "Comerciante", "room_id": "room1", "is_shopkeeper": True, "money": 500},
        {"id": "guard", "name": "Guardia", "room_id": "room1"},
        {"id": "silent", "name": "NPC Silencioso", "room_id": "room1"},
    ],
    "doors": [
        {"id": "cellar_door", "name": "puerta", "room_a": "room1", "room_b": "cellar", "is_locked": True},
    ],
    "quests": [
        {"id": "find_key", "name": "Encontrar la llave"},
    ],
    "scripts": [MERCHANT_SCRIPT, GUARD_SCRIPT],
}


class Recorder:
    """Collects every notification published on a bus."""

    def __init__(self, bus):
        self.items = []
        bus.subscribe(None, self.items.append)

    def of(self, kind):
        return [n for n in self.items if isinstance(n, kind)]

    def kinds(self):
        return [type(n).__name__ for n in self.items]

    def clear(self):
        self.items.clear()


@pytest.fixture
def build_world():
    """Factory: (extra scripts) -> (catalog, state)."""
    def _build(*extra_scripts, replace_scripts=False):
        data = copy.deepcopy(BASE_WORLD)
        if replace_scripts:
            data["scripts"] = []
        data["scripts"].extend(copy.deepcopy(list(extra_scripts)))
        world = build_world_from_dict(data)
        return WorldCatalog(world), GameState.from_world(world)
    return _build


@pytest.fixture
def world(build_world):
    return build_world()


@pytest.fixture
def bus():
    return NotificationBus()


@pytest.fixture
def recorder(bus):
    return Recorder(bus)


@pytest.fixture
def conversation(world, bus):
    catalog, state = world
    return ConversationEngine(catalog, state, bus, rng=random.Random(7))


@pytest.fixture
def make_events(bus):
    def _make(catalog, state):
        return EventScriptEngine(catalog, state, bus, rng=random.Random(7))
    return _make
