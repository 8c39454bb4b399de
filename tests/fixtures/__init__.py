"""Test fixtures for in-memory implementations."""

from .fake_tipup_api import FakeTipupApi
from .in_memory_chat import InMemoryChannel, InMemoryChatConnection
from .recording_sleep import RecordingSleep

__all__ = [
    "FakeTipupApi",
    "InMemoryChannel",
    "InMemoryChatConnection",
    "RecordingSleep",
]
