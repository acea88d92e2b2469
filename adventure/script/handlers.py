"""Node handler registry.

Every :class:`NodeType` maps to exactly one handler in :data:`NODE_HANDLERS`.
A handler receives the node and a :class:`HandlerContext`, applies at most one
state mutation or notification, and returns an :class:`Outcome` telling the
interpreter which output port to follow (or whether to suspend or stop).

Handlers never raise for missing data: an unknown object, door or NPC is
logged at DEBUG level and the node still advances through its default port.
"""
from __future__ import annotations
import logging
import operator
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Dict, List, Optional

from adventure.core.catalog import WorldCatalog
from adventure.core.state import (
    GameState,
    QUEST_COMPLETED,
    QUEST_FAILED,
    QUEST_IN_PROGRESS,
    QUEST_NOT_STARTED,
    QUEST_STATUSES,
)

from .model import OwnerType, ScriptNode
from .node_types import (
    EXEC, FALSE, MAX_PLAYER_OPTIONS, NOT_ENOUGH_MONEY, NO_ITEM, RANDOM_BRANCH_OUTPUTS, SUCCESS, TRUE,
    NodeType, option_port, random_port,
)
from .notifications import (
    ConversationRequested,
    DialogueMessage,
    DialogueOption,
    Message,
    Notification,
    NotificationBus,
    PlayerOptions,
    PlayerTeleported,
    SoundRequested,
    TradeOpened,
)

logger = logging.getLogger(__name__)

__all__ = [
    "Outcome",
    "HandlerContext",
    "NODE_HANDLERS",
    "get_handler",
]


@dataclass(frozen=True)
class Outcome:
    """Result of a handler: next port, suspension, or termination."""
    port: Optional[str] = EXEC
    suspend: bool = False
    terminal: bool = False

    @classmethod
    def follow(cls, port: str) -> "Outcome":
        return cls(port=port)

    @classmethod
    def branch(cls, result: bool) -> "Outcome":
        return cls(port=TRUE if result else FALSE)


ADVANCE = Outcome()
SUSPEND = Outcome(port=None, suspend=True)
END = Outcome(port=None, terminal=True)


@dataclass
class HandlerContext:
    catalog: WorldCatalog
    state: GameState
    bus: NotificationBus
    script_id: str = ""
    npc_id: Optional[str] = None
    # node ids already visited in the current conversation
    visited: Collection[str] = ()
    events: Optional[Any] = None
    speech: Optional[Any] = None
    rng: random.Random = field(default_factory=random.Random)
    debug: bool = False
    # filled by suspension handlers
    pending_options: List[DialogueOption] = field(default_factory=list)
    trade: Optional[TradeOpened] = None

    def emit(self, notification: Notification) -> None:
        self.bus.publish(notification)

    def system_message(self, text: str) -> None:
        self.emit(Message(text, is_system=True))

    def debug_message(self, text: str) -> None:
        logger.debug("[%s] %s", self.script_id, text)
        if self.debug:
            self.emit(Message(f"[Debug] {text}", is_system=True))

    def raise_event(self, owner_type: OwnerType, owner_id: str, kind: NodeType) -> None:
        """Trigger a follow-up event when an event engine is attached."""
        if self.events is not None and owner_id:
            self.events.trigger_event(owner_type, owner_id, kind)


Handler = Callable[[ScriptNode, HandlerContext], Outcome]


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _same(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").lower() == (b or "").lower()


def _stat_value(state: GameState, stat: str) -> int:
    if _same(stat, "Money"):
        return state.money
    key = state.stat_key(stat)
    return state.player_stats.get(key, 0) if key else 0


def _set_stat_value(state: GameState, stat: str, value: int) -> None:
    if _same(stat, "Money"):
        state.money = max(0, value)
        return
    key = state.stat_key(stat) or stat
    state.player_stats[key] = value


def _give_item(ctx: HandlerContext, obj_id: str) -> bool:
    if not obj_id:
        ctx.debug_message("GiveItem senza ObjectId")
        return False
    if ctx.state.has_item(obj_id):
        return False
    obj = ctx.catalog.get_object(obj_id)
    ctx.state.inventory.append(obj.id if obj else obj_id)
    key = ctx.state.object_key(obj_id)
    if key is not None:
        ctx.state.object_rooms[key] = None
    return True


def _add_money(ctx: HandlerContext, amount: int) -> None:
    ctx.state.money += amount
    if amount > 0:
        ctx.raise_event(OwnerType.GAME, ctx.catalog.game_id, NodeType.EVENT_ON_MONEY_GAINED)


def _remove_money(ctx: HandlerContext, amount: int) -> None:
    before = ctx.state.money
    ctx.state.money = max(0, before - amount)
    if ctx.state.money < before:
        ctx.raise_event(OwnerType.GAME, ctx.catalog.game_id, NodeType.EVENT_ON_MONEY_LOST)


def _start_quest(ctx: HandlerContext, quest_id: str) -> None:
    if not quest_id:
        return
    quest = ctx.catalog.get_quest(quest_id)
    ctx.state.quests[quest.id if quest else quest_id] = QUEST_IN_PROGRESS
    ctx.emit(Message(f"[Nuova missione: {ctx.catalog.quest_name(quest_id)}]"))
    ctx.raise_event(OwnerType.QUEST, quest_id, NodeType.EVENT_ON_QUEST_START)


def _finish_quest(ctx: HandlerContext, quest_id: str, status: str) -> None:
    if not quest_id:
        return
    current = ctx.state.quest_status(quest_id)
    if current == QUEST_NOT_STARTED:
        ctx.debug_message(f"missione '{quest_id}' non avviata")
        return
    key = next(k for k in ctx.state.quests if _same(k, quest_id))
    ctx.state.quests[key] = status
    name = ctx.catalog.quest_name(quest_id)
    if status == QUEST_COMPLETED:
        ctx.emit(Message(f"[Missione completata: {name}]"))
        ctx.raise_event(OwnerType.QUEST, quest_id, NodeType.EVENT_ON_QUEST_COMPLETE)
    else:
        ctx.emit(Message(f"[Missione fallita: {name}]"))
        ctx.raise_event(OwnerType.QUEST, quest_id, NodeType.EVENT_ON_QUEST_FAIL)


# ---------------------------------------------------------------------------
# Event handlers
# ---------------------------------------------------------------------------

def _pass_through(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    return ADVANCE


# ---------------------------------------------------------------------------
# Condition handlers
# ---------------------------------------------------------------------------

_COMPARATORS: Dict[str, Callable[[int, int], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _has_item(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    return Outcome.branch(ctx.state.has_item(node.properties.get_text("ObjectId")))


def _player_owns_item(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    owned = ctx.state.inventory_count(p.get_text("ObjectId"))
    return Outcome.branch(owned >= p.get_int("Quantity", 1))


def _is_in_room(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    return Outcome.branch(_same(ctx.state.current_room, node.properties.get_text("RoomId")))


def _has_flag(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    name = node.properties.get_text("FlagName")
    return Outcome.branch(bool(name) and ctx.state.flags.get(name, False) is True)


def _compare_counter(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    current = ctx.state.counters.get(p.get_text("CounterName"), 0)
    op = p.get_text("Operator", "==").strip()
    compare = _COMPARATORS.get(op)
    if compare is None:
        ctx.debug_message(f"operatore sconosciuto '{op}' in {node.id}")
        return Outcome.branch(False)
    return Outcome.branch(compare(current, p.get_int("Value", 0)))


def _is_door_open(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    door = ctx.state.door(node.properties.get_text("DoorId"))
    return Outcome.branch(door is not None and door.is_open)


def _is_door_locked(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    door = ctx.state.door(node.properties.get_text("DoorId"))
    return Outcome.branch(door is not None and door.is_locked)


def _is_object_visible(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    key = ctx.state.object_key(node.properties.get_text("ObjectId"))
    return Outcome.branch(key is not None and ctx.state.object_visible.get(key, False))


def _object_in_room(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    key = ctx.state.object_key(p.get_text("ObjectId"))
    room = ctx.state.object_rooms.get(key) if key else None
    return Outcome.branch(room is not None and _same(room, p.get_text("RoomId")))


def _is_npc_visible(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    key = ctx.state.npc_key(node.properties.get_text("NpcId"))
    return Outcome.branch(key is not None and ctx.state.npc_visible.get(key, False))


def _npc_in_room(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    key = ctx.state.npc_key(p.get_text("NpcId"))
    room = ctx.state.npc_rooms.get(key) if key else None
    return Outcome.branch(room is not None and _same(room, p.get_text("RoomId")))


def _player_has_money(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    return Outcome.branch(ctx.state.money >= node.properties.get_int("Amount", 100))


def _quest_status_is(ctx: HandlerContext, quest_id: str, wanted: str) -> bool:
    if not any(_same(wanted, s) for s in QUEST_STATUSES):
        ctx.debug_message(f"stato missione sconosciuto '{wanted}'")
        return False
    return _same(ctx.state.quest_status(quest_id), wanted)


def _is_quest_status(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    return Outcome.branch(_quest_status_is(ctx, p.get_text("QuestId"), p.get_text("Status", QUEST_NOT_STARTED)))


def _player_state_above(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    value = _stat_value(ctx.state, p.get_text("StateType", "Health"))
    return Outcome.branch(value > p.get_int("Threshold", 50))


def _player_state_below(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    value = _stat_value(ctx.state, p.get_text("StateType", "Health"))
    return Outcome.branch(value < p.get_int("Threshold", 25))


def _random(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    probability = node.properties.get_int("Probability", 50)
    return Outcome.branch(ctx.rng.randrange(100) < probability)


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------

def _show_message(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    text = node.properties.get_text("Message")
    if text:
        ctx.emit(Message(text))
    return ADVANCE


def _give_item_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    _give_item(ctx, node.properties.get_text("ObjectId"))
    return ADVANCE


def _remove_item(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    ctx.state.remove_all_items(node.properties.get_text("ObjectId"))
    return ADVANCE


def _teleport_player(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    room_id = node.properties.get_text("RoomId")
    if room_id:
        room = ctx.catalog.get_room(room_id)
        if room is None:
            ctx.debug_message(f"stanza '{room_id}' non trovata")
        else:
            room_id = room.id
        ctx.state.current_room = room_id
        ctx.emit(PlayerTeleported(room_id))
    return ADVANCE


def _set_flag(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    name = p.get_text("FlagName")
    if name:
        ctx.state.flags[name] = p.get_bool("Value", True)
    return ADVANCE


def _set_counter(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    name = p.get_text("CounterName")
    if name:
        ctx.state.counters[name] = p.get_int("Value", 0)
    return ADVANCE


def _increment_counter(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    name = p.get_text("CounterName")
    if name:
        ctx.state.counters[name] = ctx.state.counters.get(name, 0) + p.get_int("Amount", 1)
    return ADVANCE


def _play_sound(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    sound_id = node.properties.get_text("SoundId")
    if sound_id:
        ctx.emit(SoundRequested(sound_id))
    return ADVANCE


def _door_action(attr: str, value: bool, event: NodeType) -> Handler:
    def handler(node: ScriptNode, ctx: HandlerContext) -> Outcome:
        door_id = node.properties.get_text("DoorId")
        door = ctx.state.door(door_id)
        if door is None:
            ctx.debug_message(f"porta '{door_id}' non trovata")
            return ADVANCE
        setattr(door, attr, value)
        ctx.raise_event(OwnerType.DOOR, door_id, event)
        return ADVANCE
    return handler


def _set_object_visible(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    key = ctx.state.object_key(p.get_text("ObjectId"))
    if key is None:
        ctx.debug_message(f"oggetto '{p.get_text('ObjectId')}' non trovato")
        return ADVANCE
    ctx.state.object_visible[key] = p.get_bool("Visible", True)
    return ADVANCE


def _move_object_to_room(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    obj_id, room_id = p.get_text("ObjectId"), p.get_text("RoomId")
    key = ctx.state.object_key(obj_id)
    if key is None or not room_id:
        ctx.debug_message(f"oggetto '{obj_id}' non trovato")
        return ADVANCE
    ctx.state.remove_all_items(obj_id)
    ctx.state.object_rooms[key] = room_id
    return ADVANCE


def _set_npc_visible(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    key = ctx.state.npc_key(p.get_text("NpcId"))
    if key is None:
        ctx.debug_message(f"NPC '{p.get_text('NpcId')}' non trovato")
        return ADVANCE
    ctx.state.npc_visible[key] = p.get_bool("Visible", True)
    return ADVANCE


def _move_npc(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    key = ctx.state.npc_key(p.get_text("NpcId"))
    room_id = p.get_text("RoomId")
    if key is None or not room_id:
        ctx.debug_message(f"NPC '{p.get_text('NpcId')}' non trovato")
        return ADVANCE
    ctx.state.npc_rooms[key] = room_id
    return ADVANCE


def _add_money_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    _add_money(ctx, node.properties.get_int("Amount", 0))
    return ADVANCE


def _remove_money_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    _remove_money(ctx, node.properties.get_int("Amount", 0))
    return ADVANCE


def _set_player_state(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    _set_stat_value(ctx.state, p.get_text("StateType", "Health"), p.get_int("Value", 100))
    return ADVANCE


def _modify_player_state(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    stat = p.get_text("StateType", "Health")
    _set_stat_value(ctx.state, stat, _stat_value(ctx.state, stat) + p.get_int("Amount", 10))
    return ADVANCE


def _start_quest_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    _start_quest(ctx, node.properties.get_text("QuestId"))
    return ADVANCE


def _complete_quest_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    _finish_quest(ctx, node.properties.get_text("QuestId"), QUEST_COMPLETED)
    return ADVANCE


def _fail_quest_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    _finish_quest(ctx, node.properties.get_text("QuestId"), QUEST_FAILED)
    return ADVANCE


def _start_conversation(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    npc_id = node.properties.get_text("NpcId")
    if npc_id:
        ctx.emit(ConversationRequested(npc_id))
    return ADVANCE


# ---------------------------------------------------------------------------
# Dialogue handlers
# ---------------------------------------------------------------------------

def _npc_say(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    text = p.get_text("Text")
    speaker = p.get_text("SpeakerName") or ctx.catalog.npc_name(ctx.npc_id or "")
    voice = ctx.speech.synthesize(text) if ctx.speech is not None and text else None
    ctx.emit(DialogueMessage(
        text=text,
        speaker_name=speaker,
        emotion=p.get_text("Emotion", "Neutral"),
        is_npc=True,
        voice=voice,
    ))
    return ADVANCE


def _player_choice(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    options: List[DialogueOption] = []
    for i in range(MAX_PLAYER_OPTIONS):
        text = node.properties.get_text(f"Text{i + 1}").strip()
        if not text:
            continue
        options.append(DialogueOption(index=len(options), text=text, port=option_port(i)))
    ctx.pending_options = options
    ctx.emit(PlayerOptions(tuple(options)))
    return SUSPEND


_BRANCH_CHECKS: Dict[str, Callable[[ScriptNode, HandlerContext], bool]] = {
    "HasFlag": lambda n, c: c.state.flags.get(n.properties.get_text("FlagName"), False) is True,
    "HasItem": lambda n, c: c.state.has_item(n.properties.get_text("ObjectId") or n.properties.get_text("ItemId")),
    "HasMoney": lambda n, c: c.state.money >= n.properties.get_int("MoneyAmount", n.properties.get_int("Amount", 0)),
    "QuestStatus": lambda n, c: _quest_status_is(
        c, n.properties.get_text("QuestId"), n.properties.get_text("QuestStatus", QUEST_NOT_STARTED),
    ),
    "VisitedNode": lambda n, c: n.properties.get_text("NodeId", n.id) in c.visited,
}


def _branch(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    kind = node.properties.get_text("ConditionType")
    check = next((fn for name, fn in _BRANCH_CHECKS.items() if _same(name, kind)), None)
    if check is None:
        ctx.debug_message(f"ConditionType sconosciuto '{kind}' in {node.id}")
        return Outcome.branch(False)
    return Outcome.branch(check(node, ctx))


def _shop(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    npc_id = ctx.npc_id or ""
    ctx.trade = TradeOpened(
        npc_id=npc_id,
        npc_name=ctx.catalog.npc_name(npc_id),
        shop_title=p.get_text("ShopTitle"),
        welcome_message=p.get_text("WelcomeMessage"),
    )
    ctx.emit(ctx.trade)
    ctx.raise_event(OwnerType.NPC, npc_id, NodeType.EVENT_ON_TRADE_START)
    return SUSPEND


def _buy_item(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    obj_id, price = p.get_text("ObjectId"), p.get_int("Price", 0)
    if ctx.state.money < price:
        ctx.system_message("Non hai abbastanza denaro.")
        return Outcome.follow(NOT_ENOUGH_MONEY)
    ctx.state.money -= price
    _give_item(ctx, obj_id)
    ctx.system_message(f"Hai comprato {ctx.catalog.object_name(obj_id)} per {price}.")
    ctx.raise_event(OwnerType.NPC, ctx.npc_id or "", NodeType.EVENT_ON_ITEM_BOUGHT)
    return Outcome.follow(SUCCESS)


def _sell_item(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    obj_id, price = p.get_text("ObjectId"), p.get_int("Price", 0)
    if not ctx.state.has_item(obj_id):
        ctx.system_message("Non possiedi quell'oggetto.")
        return Outcome.follow(NO_ITEM)
    ctx.state.remove_all_items(obj_id)
    ctx.state.money += price
    ctx.system_message(f"Hai venduto {ctx.catalog.object_name(obj_id)} per {price}.")
    ctx.raise_event(OwnerType.NPC, ctx.npc_id or "", NodeType.EVENT_ON_ITEM_SOLD)
    return Outcome.follow(SUCCESS)


def _conversation_action(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    p = node.properties
    action = p.get_text("ActionType").lower()
    if action == "giveitem":
        obj_id = p.get_text("ObjectId")
        if _give_item(ctx, obj_id):
            ctx.system_message(f"Hai ricevuto: {ctx.catalog.object_name(obj_id)}")
    elif action == "removeitem":
        ctx.state.remove_all_items(p.get_text("ObjectId"))
    elif action == "addmoney":
        amount = p.get_int("Amount", 0)
        _add_money(ctx, amount)
        if amount > 0:
            ctx.system_message(f"Hai ricevuto {amount} monete.")
    elif action == "removemoney":
        _remove_money(ctx, p.get_int("Amount", 0))
    elif action == "setflag":
        name = p.get_text("FlagName")
        if name:
            ctx.state.flags[name] = p.get_bool("Value", True)
    elif action == "startquest":
        _start_quest(ctx, p.get_text("QuestId"))
    elif action == "completequest":
        _finish_quest(ctx, p.get_text("QuestId"), QUEST_COMPLETED)
    elif action == "showmessage":
        text = p.get_text("Message")
        if text:
            ctx.system_message(text)
    else:
        ctx.debug_message(f"ActionType sconosciuto '{p.get_text('ActionType')}' in {node.id}")
    return ADVANCE


def _end(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    return END


# ---------------------------------------------------------------------------
# Flow handlers
# ---------------------------------------------------------------------------

def _random_branch(node: ScriptNode, ctx: HandlerContext) -> Outcome:
    return Outcome.follow(random_port(ctx.rng.randrange(RANDOM_BRANCH_OUTPUTS)))


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

NODE_HANDLERS: Dict[NodeType, Handler] = {
    **{t: _pass_through for t in NodeType if t.name.startswith("EVENT_")},
    NodeType.CONDITION_HAS_ITEM: _has_item,
    NodeType.CONDITION_PLAYER_OWNS_ITEM: _player_owns_item,
    NodeType.CONDITION_IS_IN_ROOM: _is_in_room,
    NodeType.CONDITION_HAS_FLAG: _has_flag,
    NodeType.CONDITION_COMPARE_COUNTER: _compare_counter,
    NodeType.CONDITION_IS_DOOR_OPEN: _is_door_open,
    NodeType.CONDITION_IS_DOOR_LOCKED: _is_door_locked,
    NodeType.CONDITION_IS_OBJECT_VISIBLE: _is_object_visible,
    NodeType.CONDITION_OBJECT_IN_ROOM: _object_in_room,
    NodeType.CONDITION_IS_NPC_VISIBLE: _is_npc_visible,
    NodeType.CONDITION_NPC_IN_ROOM: _npc_in_room,
    NodeType.CONDITION_PLAYER_HAS_MONEY: _player_has_money,
    NodeType.CONDITION_IS_QUEST_STATUS: _is_quest_status,
    NodeType.CONDITION_PLAYER_STATE_ABOVE: _player_state_above,
    NodeType.CONDITION_PLAYER_STATE_BELOW: _player_state_below,
    NodeType.CONDITION_RANDOM: _random,
    NodeType.ACTION_SHOW_MESSAGE: _show_message,
    NodeType.ACTION_GIVE_ITEM: _give_item_action,
    NodeType.ACTION_REMOVE_ITEM: _remove_item,
    NodeType.ACTION_TELEPORT_PLAYER: _teleport_player,
    NodeType.ACTION_SET_FLAG: _set_flag,
    NodeType.ACTION_SET_COUNTER: _set_counter,
    NodeType.ACTION_INCREMENT_COUNTER: _increment_counter,
    NodeType.ACTION_PLAY_SOUND: _play_sound,
    NodeType.ACTION_OPEN_DOOR: _door_action("is_open", True, NodeType.EVENT_ON_DOOR_OPEN),
    NodeType.ACTION_CLOSE_DOOR: _door_action("is_open", False, NodeType.EVENT_ON_DOOR_CLOSE),
    NodeType.ACTION_LOCK_DOOR: _door_action("is_locked", True, NodeType.EVENT_ON_DOOR_LOCK),
    NodeType.ACTION_UNLOCK_DOOR: _door_action("is_locked", False, NodeType.EVENT_ON_DOOR_UNLOCK),
    NodeType.ACTION_SET_OBJECT_VISIBLE: _set_object_visible,
    NodeType.ACTION_MOVE_OBJECT_TO_ROOM: _move_object_to_room,
    NodeType.ACTION_SET_NPC_VISIBLE: _set_npc_visible,
    NodeType.ACTION_MOVE_NPC: _move_npc,
    NodeType.ACTION_ADD_MONEY: _add_money_action,
    NodeType.ACTION_REMOVE_MONEY: _remove_money_action,
    NodeType.ACTION_SET_PLAYER_STATE: _set_player_state,
    NodeType.ACTION_MODIFY_PLAYER_STATE: _modify_player_state,
    NodeType.ACTION_START_QUEST: _start_quest_action,
    NodeType.ACTION_COMPLETE_QUEST: _complete_quest_action,
    NodeType.ACTION_FAIL_QUEST: _fail_quest_action,
    NodeType.ACTION_START_CONVERSATION: _start_conversation,
    NodeType.CONVERSATION_START: _pass_through,
    NodeType.CONVERSATION_NPC_SAY: _npc_say,
    NodeType.CONVERSATION_PLAYER_CHOICE: _player_choice,
    NodeType.CONVERSATION_BRANCH: _branch,
    NodeType.CONVERSATION_SHOP: _shop,
    NodeType.CONVERSATION_BUY_ITEM: _buy_item,
    NodeType.CONVERSATION_SELL_ITEM: _sell_item,
    NodeType.CONVERSATION_ACTION: _conversation_action,
    NodeType.CONVERSATION_END: _end,
    NodeType.FLOW_RANDOM_BRANCH: _random_branch,
}


def get_handler(node_type: Optional[NodeType]) -> Optional[Handler]:
    if node_type is None:
        return None
    return NODE_HANDLERS.get(node_type)
