"""Script definition loader (JSON -> ScriptDefinition).

Raw definitions look like::

    {
      "id": "guard_script", "owner_type": "Npc", "owner_id": "guard",
      "nodes": [{"id": "start", "node_type": "Conversation_Start"}, ...],
      "connections": [{"from_node_id": "start", "from_port": "Exec",
                       "to_node_id": "greeting", "to_port": "In"}]
    }

Structurally invalid definitions are logged and skipped, graph defects are
sanitized by :func:`validate_graph`.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

from .model import NodeConnection, OwnerType, ScriptDefinition, ScriptNode
from .validator import schema_errors, validate_graph
from .values import PropertyBag

logger = logging.getLogger(__name__)

__all__ = [
    "ScriptLoadError",
    "build_script_definition",
    "load_script_definitions",
    "load_scripts_file",
]


class ScriptLoadError(Exception):
    pass


def build_script_definition(data: Dict[str, Any]) -> ScriptDefinition:
    """Build a definition from a schema-valid dictionary (no graph checks)."""
    owner = OwnerType.parse(data.get("owner_type"))
    if owner is None:
        raise ScriptLoadError(f"Script '{data.get('id')}' has unknown owner type '{data.get('owner_type')}'")
    nodes = []
    for n in data.get("nodes", []):
        raw_category = n.get("category")
        node = ScriptNode(
            id=n["id"],
            type_name=n["node_type"],
            properties=PropertyBag(n.get("properties") or {}),
        )
        if raw_category and node.category and raw_category.lower() != node.category.value.lower():
            logger.warning(
                "Script '%s' node '%s': category '%s' ignored, '%s' implies %s",
                data["id"], node.id, raw_category, node.type_name, node.category.value,
            )
        nodes.append(node)
    connections = [
        NodeConnection(
            from_node_id=c["from_node_id"],
            from_port=c["from_port"],
            to_node_id=c["to_node_id"],
            to_port=c.get("to_port", "In"),
        )
        for c in data.get("connections", [])
    ]
    return ScriptDefinition(
        id=data["id"],
        owner_type=owner,
        owner_id=data.get("owner_id", ""),
        nodes=tuple(nodes),
        connections=tuple(connections),
        name=data.get("name", ""),
    )


def load_script_definitions(raw_scripts: Iterable[Dict[str, Any]]) -> List[ScriptDefinition]:
    """Build and sanitize every definition, skipping the broken ones.

    Catalog order is preserved.
    """
    scripts: List[ScriptDefinition] = []
    seen_ids = set()
    for idx, data in enumerate(raw_scripts):
        if not isinstance(data, dict):
            logger.warning("Script #%d skipped: not an object", idx)
            continue
        errors = schema_errors(data)
        if errors:
            logger.warning("Script #%d ('%s') skipped: %s", idx, data.get("id"), "; ".join(errors))
            continue
        try:
            definition = build_script_definition(data)
        except ScriptLoadError as e:
            logger.warning("Script #%d skipped: %s", idx, e)
            continue
        if definition.id in seen_ids:
            logger.warning("Duplicate script id '%s' skipped", definition.id)
            continue
        seen_ids.add(definition.id)
        definition, _issues = validate_graph(definition)
        scripts.append(definition)
    return scripts


def load_scripts_file(path: str | Path) -> List[ScriptDefinition]:
    """Load definitions from a JSON file (a list, or an object with ``scripts``)."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ScriptLoadError(f"Cannot read scripts from {p}: {e}") from e
    if isinstance(data, dict):
        data = data.get("scripts", [])
    if not isinstance(data, list):
        raise ScriptLoadError(f"{p}: expected a list of scripts")
    return load_script_definitions(data)
