"""Wire formats, checksums, sockets, a poll-based event loop and TUN adapters for carrying TCP over IPv4."""

__version__ = "0.1.0"