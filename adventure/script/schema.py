"""JSON schema definition for authored script definitions.

Only the structural shape is checked here. Referential integrity (node ids,
ports, node types) is checked by :func:`adventure.script.validator.validate_graph`.
"""

PROPERTY_VALUE_SCHEMA = {"type": ["string", "number", "boolean", "null"]}

SCRIPT_DEFINITION_SCHEMA = {
    "type": "object",
    "required": ["id", "owner_type", "owner_id", "nodes"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "owner_type": {"type": "string", "minLength": 1},
        "owner_id": {"type": "string"},
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "node_type"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "node_type": {"type": "string", "minLength": 1},
                    "category": {"type": "string"},
                    "properties": {
                        "type": "object",
                        "additionalProperties": PROPERTY_VALUE_SCHEMA,
                    },
                    # editor layout, ignored by the runtime
                    "x": {"type": "number"},
                    "y": {"type": "number"},
                },
            },
        },
        "connections": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["from_node_id", "from_port", "to_node_id"],
                "properties": {
                    "from_node_id": {"type": "string"},
                    "from_port": {"type": "string"},
                    "to_node_id": {"type": "string"},
                    "to_port": {"type": "string"},
                },
            },
        },
    },
}
