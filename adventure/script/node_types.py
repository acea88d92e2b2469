"""Closed catalog of script node types.

Each :class:`NodeType` member carries the raw tag used in authored content
(``"Action_SetFlag"``). The category is derived from the tag prefix and the
declared output ports come from :data:`OUTPUT_PORTS` (``Exec`` by default).
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Tuple

__all__ = [
    "NodeCategory",
    "NodeType",
    "OUTPUT_PORTS",
    "SUSPENSION_TYPES",
    "MAX_PLAYER_OPTIONS",
    "RANDOM_BRANCH_OUTPUTS",
    "EXEC", "TRUE", "FALSE", "ON_CLOSE", "ON_BUY", "ON_SELL",
    "SUCCESS", "NOT_ENOUGH_MONEY", "NO_ITEM",
    "option_port",
    "random_port",
]

EXEC = "Exec"
TRUE = "True"
FALSE = "False"
ON_CLOSE = "OnClose"
ON_BUY = "OnBuy"
ON_SELL = "OnSell"
SUCCESS = "Success"
NOT_ENOUGH_MONEY = "NotEnoughMoney"
NO_ITEM = "NoItem"

MAX_PLAYER_OPTIONS = 4
RANDOM_BRANCH_OUTPUTS = 3


def option_port(index: int) -> str:
    """Port name for the zero-based option ``index`` (0 -> ``Option1``)."""
    return f"Option{index + 1}"


def random_port(index: int) -> str:
    """Port name for the zero-based random outcome ``index`` (0 -> ``Out0``)."""
    return f"Out{index}"


class NodeCategory(Enum):
    EVENT = "Event"
    CONDITION = "Condition"
    ACTION = "Action"
    DIALOGUE = "Dialogue"
    FLOW = "Flow"


_PREFIX_CATEGORY = {
    "Event": NodeCategory.EVENT,
    "Condition": NodeCategory.CONDITION,
    "Action": NodeCategory.ACTION,
    "Conversation": NodeCategory.DIALOGUE,
    "Flow": NodeCategory.FLOW,
}


class NodeType(Enum):
    # --- Events ---
    EVENT_ON_GAME_START = "Event_OnGameStart"
    EVENT_ON_GAME_END = "Event_OnGameEnd"
    EVENT_ON_TURN_START = "Event_OnTurnStart"
    EVENT_ON_ENTER = "Event_OnEnter"
    EVENT_ON_EXIT = "Event_OnExit"
    EVENT_ON_LOOK = "Event_OnLook"
    EVENT_ON_TALK = "Event_OnTalk"
    EVENT_ON_TAKE = "Event_OnTake"
    EVENT_ON_DROP = "Event_OnDrop"
    EVENT_ON_USE = "Event_OnUse"
    EVENT_ON_EXAMINE = "Event_OnExamine"
    EVENT_ON_READ = "Event_OnRead"
    EVENT_ON_GIVE = "Event_OnGive"
    EVENT_ON_DOOR_OPEN = "Event_OnDoorOpen"
    EVENT_ON_DOOR_CLOSE = "Event_OnDoorClose"
    EVENT_ON_DOOR_LOCK = "Event_OnDoorLock"
    EVENT_ON_DOOR_UNLOCK = "Event_OnDoorUnlock"
    EVENT_ON_QUEST_START = "Event_OnQuestStart"
    EVENT_ON_QUEST_COMPLETE = "Event_OnQuestComplete"
    EVENT_ON_QUEST_FAIL = "Event_OnQuestFail"
    EVENT_ON_MONEY_GAINED = "Event_OnMoneyGained"
    EVENT_ON_MONEY_LOST = "Event_OnMoneyLost"
    EVENT_ON_TRADE_START = "Event_OnTradeStart"
    EVENT_ON_TRADE_END = "Event_OnTradeEnd"
    EVENT_ON_ITEM_BOUGHT = "Event_OnItemBought"
    EVENT_ON_ITEM_SOLD = "Event_OnItemSold"

    # --- Conditions ---
    CONDITION_HAS_ITEM = "Condition_HasItem"
    CONDITION_PLAYER_OWNS_ITEM = "Condition_PlayerOwnsItem"
    CONDITION_IS_IN_ROOM = "Condition_IsInRoom"
    CONDITION_HAS_FLAG = "Condition_HasFlag"
    CONDITION_COMPARE_COUNTER = "Condition_CompareCounter"
    CONDITION_IS_DOOR_OPEN = "Condition_IsDoorOpen"
    CONDITION_IS_DOOR_LOCKED = "Condition_IsDoorLocked"
    CONDITION_IS_OBJECT_VISIBLE = "Condition_IsObjectVisible"
    CONDITION_OBJECT_IN_ROOM = "Condition_ObjectInRoom"
    CONDITION_IS_NPC_VISIBLE = "Condition_IsNpcVisible"
    CONDITION_NPC_IN_ROOM = "Condition_NpcInRoom"
    CONDITION_PLAYER_HAS_MONEY = "Condition_PlayerHasMoney"
    CONDITION_IS_QUEST_STATUS = "Condition_IsQuestStatus"
    CONDITION_PLAYER_STATE_ABOVE = "Condition_PlayerStateAbove"
    CONDITION_PLAYER_STATE_BELOW = "Condition_PlayerStateBelow"
    CONDITION_RANDOM = "Condition_Random"

    # --- Actions ---
    ACTION_SHOW_MESSAGE = "Action_ShowMessage"
    ACTION_GIVE_ITEM = "Action_GiveItem"
    ACTION_REMOVE_ITEM = "Action_RemoveItem"
    ACTION_TELEPORT_PLAYER = "Action_TeleportPlayer"
    ACTION_SET_FLAG = "Action_SetFlag"
    ACTION_SET_COUNTER = "Action_SetCounter"
    ACTION_INCREMENT_COUNTER = "Action_IncrementCounter"
    ACTION_PLAY_SOUND = "Action_PlaySound"
    ACTION_OPEN_DOOR = "Action_OpenDoor"
    ACTION_CLOSE_DOOR = "Action_CloseDoor"
    ACTION_LOCK_DOOR = "Action_LockDoor"
    ACTION_UNLOCK_DOOR = "Action_UnlockDoor"
    ACTION_SET_OBJECT_VISIBLE = "Action_SetObjectVisible"
    ACTION_MOVE_OBJECT_TO_ROOM = "Action_MoveObjectToRoom"
    ACTION_SET_NPC_VISIBLE = "Action_SetNpcVisible"
    ACTION_MOVE_NPC = "Action_MoveNpc"
    ACTION_ADD_MONEY = "Action_AddMoney"
    ACTION_REMOVE_MONEY = "Action_RemoveMoney"
    ACTION_SET_PLAYER_STATE = "Action_SetPlayerState"
    ACTION_MODIFY_PLAYER_STATE = "Action_ModifyPlayerState"
    ACTION_START_QUEST = "Action_StartQuest"
    ACTION_COMPLETE_QUEST = "Action_CompleteQuest"
    ACTION_FAIL_QUEST = "Action_FailQuest"
    ACTION_START_CONVERSATION = "Action_StartConversation"

    # --- Dialogue ---
    CONVERSATION_START = "Conversation_Start"
    CONVERSATION_NPC_SAY = "Conversation_NpcSay"
    CONVERSATION_PLAYER_CHOICE = "Conversation_PlayerChoice"
    CONVERSATION_BRANCH = "Conversation_Branch"
    CONVERSATION_SHOP = "Conversation_Shop"
    CONVERSATION_BUY_ITEM = "Conversation_BuyItem"
    CONVERSATION_SELL_ITEM = "Conversation_SellItem"
    CONVERSATION_ACTION = "Conversation_Action"
    CONVERSATION_END = "Conversation_End"

    # --- Flow ---
    FLOW_RANDOM_BRANCH = "Flow_RandomBranch"

    @property
    def category(self) -> NodeCategory:
        return _PREFIX_CATEGORY[self.value.split("_", 1)[0]]

    @property
    def output_ports(self) -> Tuple[str, ...]:
        return OUTPUT_PORTS.get(self, (EXEC,))

    def declares_port(self, port: str) -> bool:
        wanted = port.lower()
        return any(p.lower() == wanted for p in self.output_ports)

    @classmethod
    def parse(cls, tag: Optional[str]) -> Optional["NodeType"]:
        """Resolve a raw tag (case-insensitive). Unknown tags give ``None``."""
        if not tag:
            return None
        return _BY_TAG.get(tag.strip().lower())


_BY_TAG: Dict[str, NodeType] = {t.value.lower(): t for t in NodeType}

_BRANCH = (TRUE, FALSE)

OUTPUT_PORTS: Dict[NodeType, Tuple[str, ...]] = {
    **{t: _BRANCH for t in NodeType if t.category is NodeCategory.CONDITION},
    NodeType.CONVERSATION_PLAYER_CHOICE: tuple(option_port(i) for i in range(MAX_PLAYER_OPTIONS)),
    NodeType.CONVERSATION_BRANCH: _BRANCH,
    NodeType.CONVERSATION_SHOP: (ON_CLOSE, ON_BUY, ON_SELL),
    NodeType.CONVERSATION_BUY_ITEM: (SUCCESS, NOT_ENOUGH_MONEY),
    NodeType.CONVERSATION_SELL_ITEM: (SUCCESS, NO_ITEM),
    NodeType.CONVERSATION_END: (),
    NodeType.FLOW_RANDOM_BRANCH: tuple(random_port(i) for i in range(RANDOM_BRANCH_OUTPUTS)),
}

# Node types that halt traversal until external input arrives
SUSPENSION_TYPES = frozenset({
    NodeType.CONVERSATION_PLAYER_CHOICE,
    NodeType.CONVERSATION_SHOP,
})
