"""Tests for script loading, schema checks and graph sanitizing."""

import json
import logging

import pytest

from adventure.script.loader import ScriptLoadError, load_script_definitions, load_scripts_file
from adventure.script.model import OwnerType
from adventure.script.node_types import NodeCategory, NodeType
from adventure.script.validator import validate_graph, validate_schema
from conftest import GUARD_SCRIPT, MERCHANT_SCRIPT, make_script


@pytest.fixture
def valid_script():
    return json.loads(json.dumps(MERCHANT_SCRIPT))


class TestSchemaValidation:
    """Structural checks via jsonschema."""

    def test_valid_schema(self, valid_script):
        assert validate_schema(valid_script) is True

    def test_missing_required_field(self, valid_script):
        del valid_script["owner_type"]
        with pytest.raises(Exception):  # jsonschema.ValidationError
            validate_schema(valid_script)

    def test_node_without_type(self, valid_script):
        del valid_script["nodes"][0]["node_type"]
        with pytest.raises(Exception):
            validate_schema(valid_script)

    def test_invalid_scripts_are_skipped(self, valid_script, caplog):
        broken = dict(valid_script, id="")
        with caplog.at_level(logging.WARNING):
            scripts = load_script_definitions([broken, GUARD_SCRIPT, "nonsense"])
        assert [s.id for s in scripts] == ["guard_script"]
        assert "skipped" in caplog.text


def test_load_builds_definitions(valid_script):
    [script] = load_script_definitions([valid_script])
    assert script.owner_type is OwnerType.NPC
    assert script.owner_id == "merchant"
    assert [n.id for n in script.nodes] == ["start", "greeting", "choice1", "shop", "farewell", "end"]
    assert script.get_node("greeting").category is NodeCategory.DIALOGUE
    assert script.get_node("greeting").properties.get_text("Emotion") == "Feliz"
    assert script.connection_from("choice1", "option2").to_node_id == "farewell"
    assert script.find_entry(NodeType.CONVERSATION_START).id == "start"


def test_owner_type_parsing():
    assert OwnerType.parse("npc") is OwnerType.NPC
    assert OwnerType.parse("Object") is OwnerType.OBJECT
    assert OwnerType.parse("GameObject") is OwnerType.OBJECT
    assert OwnerType.parse("Planet") is None


def test_unknown_owner_type_is_skipped():
    raw = make_script("x", "Planet", "mars", [("e", "Event_OnGameStart")])
    assert load_script_definitions([raw]) == []


def test_duplicate_script_ids_keep_first():
    a = make_script("dup", "Game", "g", [("e", "Event_OnGameStart")])
    b = make_script("dup", "Game", "g", [("e", "Event_OnGameEnd")])
    [script] = load_script_definitions([a, b])
    assert script.nodes[0].node_type is NodeType.EVENT_ON_GAME_START


class TestGraphValidation:
    """Referential integrity: bad connections are dropped, never raised."""

    def _load(self, nodes, connections):
        [script] = load_script_definitions([make_script("g", "Game", "g", nodes, connections)])
        return script

    def test_clean_graph_has_no_issues(self, valid_script):
        [script] = load_script_definitions([valid_script])
        clean, issues = validate_graph(script)
        assert issues == []
        assert clean is script

    def test_dangling_target_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            script = self._load(
                [("e", "Event_OnGameStart"), ("a", "Action_SetFlag", {"FlagName": "f"})],
                [("e", "Exec", "missing"), ("a", "Exec", "e")],
            )
        assert len(script.connections) == 1
        assert script.connection_from("e", "Exec") is None
        assert "missing node" in caplog.text

    def test_undeclared_port_is_dropped(self):
        script = self._load(
            [("e", "Event_OnGameStart"), ("c", "Condition_HasFlag"), ("a", "Action_SetFlag")],
            [("e", "Exec", "c"), ("c", "Exec", "a"), ("c", "True", "a")],
        )
        assert script.connection_from("c", "Exec") is None
        assert script.connection_from("c", "True").to_node_id == "a"

    def test_duplicate_node_ids_keep_first(self):
        script = self._load(
            [("e", "Event_OnGameStart"), ("e", "Event_OnGameEnd")],
            [],
        )
        assert len(script.nodes) == 1
        assert script.nodes[0].node_type is NodeType.EVENT_ON_GAME_START

    def test_second_connection_on_same_port_is_dropped(self):
        script = self._load(
            [("e", "Event_OnGameStart"), ("a", "Action_SetFlag"), ("b", "Action_SetFlag")],
            [("e", "Exec", "a"), ("e", "Exec", "b")],
        )
        assert script.connection_from("e", "Exec").to_node_id == "a"
        assert len(script.connections) == 1

    def test_unknown_node_type_is_reported(self):
        raw = make_script("g", "Game", "g", [("e", "Event_OnGameStart"), ("x", "Action_Fly")], [("e", "Exec", "x")])
        [script] = load_script_definitions([raw])
        _, issues = validate_graph(script)
        assert any("unknown type 'Action_Fly'" in i for i in issues)
        assert script.get_node("x").node_type is None


def test_load_scripts_file(tmp_path):
    path = tmp_path / "scripts.json"
    path.write_text(json.dumps({"scripts": [GUARD_SCRIPT]}), encoding="utf-8")
    [script] = load_scripts_file(path)
    assert script.id == "guard_script"


def test_load_scripts_file_errors(tmp_path):
    with pytest.raises(ScriptLoadError):
        load_scripts_file(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ScriptLoadError):
        load_scripts_file(bad)
