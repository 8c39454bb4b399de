"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .chat_connection_protocol import ChatChannelProtocol, ChatConnectionProtocol
from .tipup_api_protocol import TipupApiClientProtocol

__all__ = [
    "ChatChannelProtocol",
    "ChatConnectionProtocol",
    "TipupApiClientProtocol",
]
