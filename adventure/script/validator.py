"""Script definition validation.

Two layers:

* :func:`validate_schema` checks the raw dictionary against
  :data:`SCRIPT_DEFINITION_SCHEMA` (jsonschema) and raises on failure.
* :func:`validate_graph` checks a built :class:`ScriptDefinition` for graph
  defects and returns a sanitized copy plus the list of issues found. Nothing
  here raises: offending nodes and connections are dropped so the game keeps
  running.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Tuple

import jsonschema

from .model import NodeConnection, ScriptDefinition, ScriptNode
from .schema import SCRIPT_DEFINITION_SCHEMA

logger = logging.getLogger(__name__)

__all__ = ["validate_schema", "schema_errors", "validate_graph"]


def validate_schema(payload: dict):
    """Validate a raw script definition against the schema."""
    jsonschema.validate(payload, SCRIPT_DEFINITION_SCHEMA)
    return True


def schema_errors(payload: dict) -> List[str]:
    """Collect every schema violation as ``path: message`` strings."""
    validator = jsonschema.Draft7Validator(SCRIPT_DEFINITION_SCHEMA)
    errors = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: list(e.path)):
        path = "/".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{path}: {err.message}")
    return errors


def validate_graph(definition: ScriptDefinition) -> Tuple[ScriptDefinition, List[str]]:
    """Check node-id uniqueness, node types and connection integrity.

    Args:
        definition: The definition as built by the loader.

    Returns:
        tuple: (sanitized definition, list of issue strings). When no issue is
        found the original definition is returned unchanged.
    """
    issues: List[str] = []
    sid = definition.id

    nodes: List[ScriptNode] = []
    seen: Dict[str, ScriptNode] = {}
    for node in definition.nodes:
        if node.id in seen:
            issues.append(f"[{sid}] duplicate node id '{node.id}' (keeping the first)")
            continue
        seen[node.id] = node
        nodes.append(node)
        if node.node_type is None:
            issues.append(f"[{sid}] node '{node.id}' has unknown type '{node.type_name}'")

    connections: List[NodeConnection] = []
    used_ports = set()
    for conn in definition.connections:
        source = seen.get(conn.from_node_id)
        if source is None:
            issues.append(f"[{sid}] connection from missing node '{conn.from_node_id}'")
            continue
        if conn.to_node_id not in seen:
            issues.append(f"[{sid}] connection {conn.from_node_id}.{conn.from_port} -> missing node '{conn.to_node_id}'")
            continue
        nt = source.node_type
        if nt is not None and not nt.declares_port(conn.from_port):
            issues.append(f"[{sid}] node '{source.id}' ({nt.value}) has no output port '{conn.from_port}'")
            continue
        key = (conn.from_node_id, conn.from_port.lower())
        if key in used_ports:
            issues.append(f"[{sid}] port {conn.from_node_id}.{conn.from_port} already connected (extra connection dropped)")
            continue
        used_ports.add(key)
        connections.append(conn)

    if not issues:
        return definition, issues
    for issue in issues:
        logger.warning("Malformed script graph: %s", issue)
    clean = ScriptDefinition(
        id=definition.id,
        owner_type=definition.owner_type,
        owner_id=definition.owner_id,
        nodes=tuple(nodes),
        connections=tuple(connections),
        name=definition.name,
    )
    return clean, issues
