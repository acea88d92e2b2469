"""Bootstrap utilities: load world JSON and create initial GameState + catalog + engines."""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from adventure.core.catalog import WorldCatalog
from adventure.core.loader.world_loader import build_world_from_dict, validate_world
from adventure.core.state import GameState
from adventure.dialogue.conversation import ConversationEngine
from adventure.dialogue.speech import create_speech_client
from adventure.script.events import EventScriptEngine
from adventure.script.model import OwnerType
from adventure.script.node_types import NodeType
from adventure.script.notifications import ConversationRequested, NotificationBus
from config import get_world_file

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets" / "world"
WORLD_FILE = ASSETS_DIR / "world.json"


def load_world_and_state(path: Optional[str | Path] = None) -> tuple[WorldCatalog, GameState]:
    world_path = Path(path or get_world_file() or WORLD_FILE)
    with world_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    world = build_world_from_dict(data)
    issues = validate_world(world)
    if issues:
        for i in issues:
            logger.warning("[WORLD WARNING] %s", i)
    catalog = WorldCatalog(world)
    state = GameState.from_world(world)
    logger.info("-- Caricati %d script per '%s' --", len(world.scripts), world.game.id)
    return catalog, state


@dataclass
class Runtime:
    catalog: WorldCatalog
    state: GameState
    bus: NotificationBus
    events: EventScriptEngine
    conversations: ConversationEngine

    def start_game(self) -> None:
        self.events.trigger_event(OwnerType.GAME, self.catalog.game_id, NodeType.EVENT_ON_GAME_START)

    def talk_to(self, npc_id: str) -> bool:
        """Fire the NPC's OnTalk scripts, then open its dialogue (if any).

        An OnTalk script may already have opened the dialogue through
        Action_StartConversation; that still counts as started.
        """
        self.events.trigger_event(OwnerType.NPC, npc_id, NodeType.EVENT_ON_TALK)
        if self.conversations.start_conversation(npc_id):
            return True
        session = self.conversations.session
        npc = self.catalog.get_npc(npc_id)
        return session is not None and npc is not None and session.npc_id == npc.id


def build_runtime(catalog: WorldCatalog, state: GameState, bus: Optional[NotificationBus] = None) -> Runtime:
    bus = bus if bus is not None else NotificationBus()
    events = EventScriptEngine(catalog, state, bus)
    conversations = ConversationEngine(catalog, state, bus, events=events, speech=create_speech_client())
    # Action_StartConversation only publishes a request; the runtime opens the dialogue
    bus.subscribe(ConversationRequested, lambda n: conversations.start_conversation(n.npc_id))
    return Runtime(catalog=catalog, state=state, bus=bus, events=events, conversations=conversations)
