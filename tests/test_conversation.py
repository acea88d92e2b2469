"""Tests for the conversation engine: dialogue flow, choices, trade hand-off."""

import random

import pytest

from adventure.dialogue.conversation import ActiveConversation, ConversationEngine, ConversationStatus
from adventure.script.notifications import (
    ConversationEnded,
    DialogueMessage,
    Message,
    PlayerOptions,
    TradeOpened,
)
from conftest import make_script


def test_start_valid_npc_initiates_conversation(conversation, world):
    _, state = world
    assert conversation.start_conversation("merchant") is True
    assert conversation.is_conversation_active()
    assert state.active_conversation is not None
    assert state.active_conversation.npc_id == "merchant"
    assert conversation.status is ConversationStatus.WAITING_FOR_CHOICE


def test_start_unknown_npc_stays_idle(conversation, world):
    _, state = world
    assert conversation.start_conversation("nonexistent") is False
    assert not conversation.is_active
    assert state.active_conversation is None


def test_npc_without_dialogue_does_not_start(conversation):
    assert conversation.start_conversation("silent") is False
    assert conversation.is_conversation_active() is False


def test_npc_lookup_is_case_insensitive(conversation):
    assert conversation.start_conversation("MERCHANT") is True
    assert conversation.session.npc_id == "merchant"


def test_scenario_guard_greets_then_ends(conversation, recorder):
    conversation.start_conversation("guard")

    assert recorder.kinds() == ["DialogueMessage", "ConversationEnded"]
    msg = recorder.items[0]
    assert msg.text.startswith("Alto ahí")
    assert msg.speaker_name == "Guardia"  # falls back to the NPC name
    assert msg.is_npc is True
    assert msg.emotion == "Neutral"
    assert recorder.items[1] == ConversationEnded("guard")
    assert not conversation.is_active


def test_scenario_merchant_greeting_and_options(conversation, recorder):
    conversation.start_conversation("merchant")

    assert recorder.kinds() == ["DialogueMessage", "PlayerOptions"]
    greeting = recorder.items[0]
    assert greeting.speaker_name == "Comerciante"
    assert greeting.emotion == "Feliz"
    options = recorder.items[1]
    assert options.texts == ["Quiero ver tus productos.", "Adiós."]
    assert [o.port for o in options.options] == ["Option1", "Option2"]


def test_scenario_merchant_shop_then_farewell(conversation, recorder):
    conversation.start_conversation("merchant")
    recorder.clear()

    assert conversation.select_option(0) is True
    assert recorder.kinds() == ["TradeOpened"]
    trade = recorder.items[0]
    assert trade.npc_id == "merchant"
    assert trade.npc_name == "Comerciante"
    assert trade.shop_title == "Tienda"
    assert conversation.status is ConversationStatus.WAITING_FOR_TRADE_CLOSE

    recorder.clear()
    assert conversation.close_trade() is True
    assert recorder.kinds() == ["DialogueMessage", "ConversationEnded"]
    assert "Hasta luego" in recorder.items[0].text
    assert not conversation.is_active


def test_scenario_merchant_goodbye_option(conversation, recorder):
    conversation.start_conversation("merchant")
    recorder.clear()

    conversation.select_option(1)

    assert recorder.kinds() == ["DialogueMessage", "ConversationEnded"]
    assert "Hasta luego" in recorder.of(DialogueMessage)[0].text
    assert len(recorder.of(ConversationEnded)) == 1
    assert conversation.is_conversation_active() is False


@pytest.mark.parametrize("index", [2, 99, -1])
def test_out_of_range_selection_is_noop(conversation, recorder, index):
    conversation.start_conversation("merchant")
    before = conversation.session.to_dict()
    recorder.clear()

    assert conversation.select_option(index) is False

    assert conversation.session.to_dict() == before
    assert recorder.items == []


def test_select_option_without_pending_choice_is_noop(conversation, recorder):
    assert conversation.select_option(0) is False
    conversation.start_conversation("merchant")
    conversation.select_option(0)  # now trading
    recorder.clear()
    assert conversation.select_option(1) is False
    assert recorder.items == []
    assert conversation.status is ConversationStatus.WAITING_FOR_TRADE_CLOSE


def test_close_trade_outside_trade_is_noop(conversation):
    conversation.start_conversation("merchant")
    assert conversation.close_trade() is False
    assert conversation.status is ConversationStatus.WAITING_FOR_CHOICE


def test_start_while_active_is_rejected(conversation, recorder):
    conversation.start_conversation("merchant")
    before = conversation.session.to_dict()
    recorder.clear()

    assert conversation.start_conversation("guard") is False

    assert conversation.session.to_dict() == before
    assert recorder.items == []


def test_visited_nodes_include_entry(conversation):
    conversation.start_conversation("merchant")
    assert conversation.visited_node_ids == ["start", "greeting", "choice1"]


def test_end_conversation_clears_without_notification(conversation, recorder, world):
    _, state = world
    conversation.start_conversation("merchant")
    recorder.clear()

    conversation.end_conversation()

    assert not conversation.is_active
    assert state.active_conversation is None
    assert recorder.of(ConversationEnded) == []


def test_can_talk_to_another_npc_after_ending(conversation, recorder):
    conversation.start_conversation("merchant")
    conversation.select_option(1)
    conversation.start_conversation("guard")
    assert recorder.of(DialogueMessage)[-1].speaker_name == "Guardia"


def test_suspended_session_survives_save_and_load(world, bus, recorder):
    catalog, state = world
    engine = ConversationEngine(catalog, state, bus)
    engine.start_conversation("merchant")
    saved = state.active_conversation.to_dict()

    # fresh engine over the reloaded state
    state.active_conversation = ActiveConversation.from_dict(saved)
    restored = ConversationEngine(catalog, state, bus)
    assert restored.status is ConversationStatus.WAITING_FOR_CHOICE
    assert [o.text for o in restored.current_options] == ["Quiero ver tus productos.", "Adiós."]

    recorder.clear()
    restored.select_option(1)
    assert recorder.kinds() == ["DialogueMessage", "ConversationEnded"]


def test_player_choice_yields_authored_option_count(build_world, bus, recorder):
    script = make_script(
        "quiz", "Npc", "guard",
        [
            ("start", "Conversation_Start"),
            ("ask", "Conversation_PlayerChoice", {"Text1": "Uno", "Text2": "Dos", "Text3": "Tres"}),
        ],
        [("start", "Exec", "ask")],
    )
    catalog, state = build_world(script, replace_scripts=True)
    engine = ConversationEngine(catalog, state, bus)
    engine.start_conversation("guard")
    assert recorder.of(PlayerOptions)[0].texts == ["Uno", "Dos", "Tres"]

    # Option3 is authored but not connected: dead end, natural termination
    recorder.clear()
    engine.select_option(2)
    assert recorder.kinds() == ["ConversationEnded"]
    assert not engine.is_active


def test_player_choice_skips_blank_slots(build_world, bus, recorder):
    script = make_script(
        "quiz", "Npc", "guard",
        [
            ("start", "Conversation_Start"),
            ("ask", "Conversation_PlayerChoice", {"Text1": "Uno", "Text2": "", "Text3": "Tres"}),
            ("one", "Conversation_NpcSay", {"Text": "uno"}),
            ("three", "Conversation_NpcSay", {"Text": "tres"}),
        ],
        [("start", "Exec", "ask"), ("ask", "Option1", "one"), ("ask", "Option3", "three")],
    )
    catalog, state = build_world(script, replace_scripts=True)
    engine = ConversationEngine(catalog, state, bus)
    engine.start_conversation("guard")
    assert recorder.of(PlayerOptions)[0].texts == ["Uno", "Tres"]
    assert [o.port for o in engine.current_options] == ["Option1", "Option3"]

    recorder.clear()
    assert engine.select_option(1) is True
    assert recorder.of(DialogueMessage)[0].text == "tres"
    assert not engine.is_active


def test_dead_end_terminates_once(build_world, bus, recorder):
    script = make_script(
        "short", "Npc", "guard",
        [("start", "Conversation_Start"), ("say", "Conversation_NpcSay", {"Text": "Hola"})],
        [("start", "Exec", "say")],
    )
    catalog, state = build_world(script, replace_scripts=True)
    engine = ConversationEngine(catalog, state, bus)
    engine.start_conversation("guard")
    assert recorder.kinds() == ["DialogueMessage", "ConversationEnded"]


class TestDialogueNodes:
    """Branch, trade and inline actions inside conversations."""

    def _engine(self, build_world, bus, nodes, connections):
        script = make_script("s", "Npc", "merchant", [("start", "Conversation_Start")] + nodes, connections)
        catalog, state = build_world(script, replace_scripts=True)
        return ConversationEngine(catalog, state, bus, rng=random.Random(1)), state

    def test_branch_has_money(self, build_world, bus, recorder):
        engine, state = self._engine(
            build_world, bus,
            [
                ("check", "Conversation_Branch", {"ConditionType": "HasMoney", "MoneyAmount": 50}),
                ("rich", "Conversation_NpcSay", {"Text": "rico"}),
                ("poor", "Conversation_NpcSay", {"Text": "pobre"}),
            ],
            [("start", "Exec", "check"), ("check", "True", "rich"), ("check", "False", "poor")],
        )
        engine.start_conversation("merchant")
        assert recorder.of(DialogueMessage)[0].text == "rico"

        state.money = 10
        recorder.clear()
        engine.start_conversation("merchant")
        assert recorder.of(DialogueMessage)[0].text == "pobre"

    def test_buy_item_success_and_failure(self, build_world, bus, recorder):
        engine, state = self._engine(
            build_world, bus,
            [
                ("buy", "Conversation_BuyItem", {"ObjectId": "lamp", "Price": 60}),
                ("ok", "Conversation_NpcSay", {"Text": "gracias"}),
                ("ko", "Conversation_NpcSay", {"Text": "sin dinero"}),
            ],
            [("start", "Exec", "buy"), ("buy", "Success", "ok"), ("buy", "NotEnoughMoney", "ko")],
        )
        engine.start_conversation("merchant")
        assert state.money == 40
        assert state.inventory == ["lamp"]
        assert recorder.of(DialogueMessage)[0].text == "gracias"

        recorder.clear()
        engine.start_conversation("merchant")
        assert state.money == 40
        assert recorder.of(DialogueMessage)[0].text == "sin dinero"
        assert recorder.of(Message)[0].is_system

    def test_sell_item_requires_item(self, build_world, bus, recorder):
        engine, state = self._engine(
            build_world, bus,
            [("sell", "Conversation_SellItem", {"ObjectId": "key", "Price": 5}), ("end", "Conversation_End")],
            [("start", "Exec", "sell"), ("sell", "Success", "end")],
        )
        engine.start_conversation("merchant")
        assert state.money == 100  # NoItem port unconnected: dead end

        state.inventory.extend(["key", "key"])
        engine.start_conversation("merchant")
        assert state.money == 105
        assert state.inventory == []

    def test_conversation_action_give_item_and_flag(self, build_world, bus, recorder):
        engine, state = self._engine(
            build_world, bus,
            [
                ("give", "Conversation_Action", {"ActionType": "GiveItem", "ObjectId": "key"}),
                ("flag", "Conversation_Action", {"ActionType": "SetFlag", "FlagName": "talked"}),
            ],
            [("start", "Exec", "give"), ("give", "Exec", "flag")],
        )
        engine.start_conversation("merchant")
        assert state.inventory == ["key"]
        assert state.object_rooms["key"] is None
        assert state.flags == {"talked": True}
        assert "llave" in recorder.of(Message)[0].text

    def test_action_nodes_run_inside_conversations(self, build_world, bus):
        engine, state = self._engine(
            build_world, bus,
            [("money", "Action_AddMoney", {"Amount": 25}), ("end", "Conversation_End")],
            [("start", "Exec", "money"), ("money", "Exec", "end")],
        )
        engine.start_conversation("merchant")
        assert state.money == 125


def test_listener_errors_do_not_break_conversation(conversation, bus, recorder):
    def broken(_):
        raise RuntimeError("boom")
    bus.subscribe(DialogueMessage, broken)
    conversation.start_conversation("guard")
    assert recorder.kinds() == ["DialogueMessage", "ConversationEnded"]


def test_debug_mode_publishes_system_messages(world, bus, recorder, monkeypatch):
    monkeypatch.setenv("ADV_DEBUG", "1")
    catalog, state = world
    engine = ConversationEngine(catalog, state, bus)
    engine.start_conversation("silent")
    debug = [m for m in recorder.of(Message) if m.text.startswith("[Debug]")]
    assert debug and debug[0].is_system
