"""State shared by every adapter between a TCP peer and a datagram device."""

from __future__ import annotations

from typing import Optional

from .tcp_config import FdAdapterConfig


class FdAdapterBase:
    """Holds an adapter's configuration and whether its TCP peer is listening."""

    def __init__(self, config: Optional[FdAdapterConfig] = None) -> None:
        self.config = config if config is not None else FdAdapterConfig()
        self._listening = False
        self.elapsed_ms = 0

    @property
    def listening(self) -> bool:
        """Is the connected TCP peer waiting for an incoming connection?"""
        return self._listening

    def set_listening(self, listening: bool) -> None:
        self._listening = bool(listening)

    def tick(self, ms_since_last_tick: int) -> None:
        """Called periodically as time passes; records the total time elapsed."""
        self.elapsed_ms += ms_since_last_tick