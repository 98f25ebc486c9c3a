# shooter/services/client_registry.py
"""Player id to WebSocket mapping with its own lock."""

import asyncio
from typing import Dict, List, Tuple

from fastapi import WebSocket


class ClientRegistry:
    """Tracks open connections by player id.

    The registry lock is independent of the state lock. Code that needs both
    takes the registry lock first, then the state lock.
    """

    def __init__(self):
        self._clients: Dict[str, WebSocket] = {}
        self.lock = asyncio.Lock()

    def add(self, player_id: str, websocket: WebSocket):
        """Register a connection. Caller holds the lock."""
        self._clients[player_id] = websocket

    def discard(self, player_id: str, websocket: WebSocket) -> bool:
        """Drop a connection if it is still the one registered under player_id.

        Caller holds the lock. A newer connection that reused the id is kept.
        """
        if self._clients.get(player_id) is not websocket:
            return False
        del self._clients[player_id]
        return True

    def items(self) -> List[Tuple[str, WebSocket]]:
        """Copy the current recipients. Caller holds the lock."""
        return list(self._clients.items())

    def ids(self) -> List[str]:
        return list(self._clients)

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._clients

    def __len__(self) -> int:
        return len(self._clients)
