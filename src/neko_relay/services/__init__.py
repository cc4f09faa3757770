"""Business logic services for the Neko relay."""

from .broadcast import BroadcastEngine
from .connections import ConnectionRegistry, QueueSink
from .history import MessageLog
from .identity import IdentityStore
from .pipeline import ChatOutcome, ChatPipeline
from .relay import ChatRelay, get_relay
from .response_policy import KeywordResponsePolicy, PolicyDecision
from .rewards import RewardLedger
from .sessions import SessionManager

__all__ = [
    "BroadcastEngine",
    "ChatOutcome",
    "ChatPipeline",
    "ChatRelay",
    "ConnectionRegistry",
    "IdentityStore",
    "KeywordResponsePolicy",
    "MessageLog",
    "PolicyDecision",
    "QueueSink",
    "RewardLedger",
    "SessionManager",
    "get_relay",
]
