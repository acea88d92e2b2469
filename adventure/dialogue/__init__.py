"""NPC dialogue: conversation engine and optional speech synthesis."""

from .conversation import ConversationEngine, ConversationStatus, ActiveConversation
from .speech import SpeechClient, create_speech_client

__all__ = [
    'ConversationEngine', 'ConversationStatus', 'ActiveConversation',
    'SpeechClient', 'create_speech_client',
]
