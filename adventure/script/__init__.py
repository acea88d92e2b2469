"""Node-graph scripts: data model, loading and notifications.

The executing side (``handlers``, ``interpreter``, ``events``) depends on the
world catalog and game state and is imported from its own modules.
"""

from .node_types import NodeCategory, NodeType
from .values import PropertyBag, PropertyValue
from .model import OwnerType, ScriptNode, NodeConnection, ScriptDefinition
from .notifications import (
    NotificationBus, DialogueMessage, DialogueOption, PlayerOptions, ConversationEnded,
    TradeOpened, Message, PlayerTeleported, SoundRequested, ConversationRequested,
)
from .loader import load_script_definitions, load_scripts_file, ScriptLoadError
from .validator import validate_graph

__all__ = [
    'NodeCategory', 'NodeType', 'PropertyBag', 'PropertyValue',
    'OwnerType', 'ScriptNode', 'NodeConnection', 'ScriptDefinition',
    'NotificationBus', 'DialogueMessage', 'DialogueOption', 'PlayerOptions', 'ConversationEnded',
    'TradeOpened', 'Message', 'PlayerTeleported', 'SoundRequested', 'ConversationRequested',
    'load_script_definitions', 'load_scripts_file', 'ScriptLoadError',
    'validate_graph',
]
