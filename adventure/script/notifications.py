"""Notifications emitted by the script engines and a synchronous listener bus.

The engines never render anything themselves: every visible effect (an NPC
line, a list of choices, a teleport, a sound) is published as an immutable
notification that the presentation layer consumes.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Type

logger = logging.getLogger(__name__)

__all__ = [
    "Notification",
    "DialogueOption",
    "DialogueMessage",
    "PlayerOptions",
    "ConversationEnded",
    "TradeOpened",
    "Message",
    "PlayerTeleported",
    "SoundRequested",
    "ConversationRequested",
    "NotificationBus",
]


class Notification:
    """Marker base class."""


@dataclass(frozen=True)
class DialogueOption:
    index: int
    text: str
    port: str

    def to_dict(self) -> dict:
        return {"index": self.index, "text": self.text, "port": self.port}

    @classmethod
    def from_dict(cls, data: dict) -> "DialogueOption":
        return cls(index=int(data["index"]), text=data["text"], port=data["port"])


@dataclass(frozen=True)
class DialogueMessage(Notification):
    text: str
    speaker_name: str
    emotion: str = "Neutral"
    is_npc: bool = True
    voice: Optional[bytes] = field(default=None, repr=False)


@dataclass(frozen=True)
class PlayerOptions(Notification):
    options: Tuple[DialogueOption, ...]

    @property
    def texts(self) -> List[str]:
        return [o.text for o in self.options]


@dataclass(frozen=True)
class ConversationEnded(Notification):
    npc_id: str


@dataclass(frozen=True)
class TradeOpened(Notification):
    npc_id: str
    npc_name: str
    shop_title: str = ""
    welcome_message: str = ""


@dataclass(frozen=True)
class Message(Notification):
    text: str
    is_system: bool = False


@dataclass(frozen=True)
class PlayerTeleported(Notification):
    room_id: str


@dataclass(frozen=True)
class SoundRequested(Notification):
    sound_id: str


@dataclass(frozen=True)
class ConversationRequested(Notification):
    npc_id: str


Listener = Callable[[Notification], None]


class NotificationBus:
    """Synchronous publish/subscribe hub.

    Listeners run at the moment of publication: first those subscribed to the
    notification's type, then those subscribed with ``kind=None`` (all kinds).
    Exceptions raised by a listener are logged and never reach the engine.
    """

    def __init__(self):
        self._listeners: Dict[Optional[Type[Notification]], List[Listener]] = {}

    def subscribe(self, kind: Optional[Type[Notification]], callback: Listener) -> Listener:
        self._listeners.setdefault(kind, []).append(callback)
        return callback

    def unsubscribe(self, kind: Optional[Type[Notification]], callback: Listener) -> bool:
        listeners = self._listeners.get(kind, [])
        if callback in listeners:
            listeners.remove(callback)
            return True
        return False

    def publish(self, notification: Notification) -> None:
        targets = list(self._listeners.get(type(notification), ())) + list(self._listeners.get(None, ()))
        for callback in targets:
            try:
                callback(notification)
            except Exception:
                logger.exception("Notification listener failed on %s", type(notification).__name__)
