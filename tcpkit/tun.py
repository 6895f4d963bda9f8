"""File descriptors for Linux TUN and TAP devices."""

from __future__ import annotations

import fcntl
import os
import struct

from .errors import UnixError
from .file_descriptor import FileDescriptor

CLONEDEV = "/dev/net/tun"

IFNAMSIZ = 16
IFF_TUN = 0x0001
IFF_TAP = 0x0002
IFF_NO_PI = 0x1000
TUNSETIFF = 0x400454CA

_IFREQ = struct.Struct("@16sh22x")


def make_ifreq(devname: str, is_tun: bool) -> bytes:
    """Build the ``struct ifreq`` that attaches to a TUN (or TAP) device without packet info."""
    name = os.fsencode(devname)[: IFNAMSIZ - 1]
    flags = (IFF_TUN if is_tun else IFF_TAP) | IFF_NO_PI
    return _IFREQ.pack(name, flags)


class TunTapFD(FileDescriptor):
    """A descriptor on an existing persistent TUN or TAP device."""

    def __init__(self, devname: str, is_tun: bool) -> None:
        try:
            fd = os.open(CLONEDEV, os.O_RDWR | os.O_CLOEXEC)
        except OSError as err:
            raise UnixError("open", err.errno or 0) from err
        super().__init__(fd)
        try:
            fcntl.ioctl(fd, TUNSETIFF, make_ifreq(devname, is_tun))
        except OSError as err:
            self.close()
            raise UnixError("ioctl", err.errno or 0) from err


class TunFD(TunTapFD):
    """A TUN device: reads and writes IP datagrams."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, True)


class TapFD(TunTapFD):
    """A TAP device: reads and writes Ethernet frames."""

    def __init__(self, devname: str) -> None:
        super().__init__(devname, False)