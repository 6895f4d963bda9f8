# tcpkit

Building blocks for running a user-space TCP implementation over IPv4 on Linux:
wire formats, the Internet checksum, address handling, file-descriptor and socket
wrappers, a `poll`-based event loop, TUN/TAP devices, and adapters that carry TCP
messages inside IPv4 datagrams.

It has no dependencies outside the standard library.

## Modules

- `tcpkit.errors` — `TaggedError` (an `OSError` that names the operation that
  failed), `UnixError` (the same for an errno value), `check_system_call` and
  `notnull`.
- `tcpkit.checksum` — `InternetChecksum`: add bytes (or an iterable of byte
  buffers) and read the 16-bit ones'-complement checksum with `value()`.
- `tcpkit.wire` — `Parser` and `Serializer` for big-endian integers and byte
  strings over lists of buffers, and the helpers `serialize(obj)` and
  `parse(cls, buffers, *args)`. `parse` raises `ParseError` when the buffers do
  not hold a valid object (too short, wrong version, bad checksum and so on).
- `tcpkit.rng` — `get_random_engine()`, a `random.Random` seeded from
  `os.urandom`.
- `tcpkit.address` — `Address`: an IPv4 address and port built from a dotted quad
  (`Address("10.0.0.1", 80)`), by resolving a host and service
  (`Address.resolve`), from a socket-module address (`Address.from_sockaddr`) or
  from a 32-bit number (`Address.from_ipv4_numeric`); with `ip_port()`,
  `ipv4_numeric()` and `to_string()`.
- `tcpkit.ethernet` — `EthernetHeader`, `EthernetFrame`, `ETHERNET_BROADCAST` and
  `format_ethernet_address`.
- `tcpkit.arp` — `ARPMessage` for Ethernet/IPv4 requests and replies.
- `tcpkit.ipv4` — `IPv4Header` (options are skipped on parse, never written) and
  `IPv4Datagram` (also available as `InternetDatagram`).
- `tcpkit.tcp_segment` — `TCPSenderMessage`, `TCPReceiverMessage`, `TCPMessage`,
  `UserDatagramInfo` and `TCPSegment`, which parses and serializes the TCP header
  and computes its checksum with the IPv4 pseudo-header.
- `tcpkit.file_descriptor` — `FileDescriptor`: reads and writes that count
  themselves and track EOF, scatter reads (`read_buffers`), gather writes,
  `duplicate()` handles that share one descriptor, `set_blocking`, and use as a
  context manager.
- `tcpkit.sockets` — `Socket`, `DatagramSocket`, `UDPSocket`, `TCPSocket`,
  `PacketSocket`, `LocalStreamSocket` and `LocalDatagramSocket`.
- `tcpkit.eventloop` — `EventLoop` with `add_category`, `add_rule` (rules with no
  descriptor), `add_fd_rule` (rules that wait for a descriptor to be readable or
  writable, `Direction.IN` / `Direction.OUT`) and `wait_next_event`, which serves
  at most one rule and returns a `Result` (`SUCCESS`, `TIMEOUT` or `EXIT`). It
  raises `RuntimeError` when a rule stays interested without making progress.
  `RuleHandle.cancel()` drops a rule.
- `tcpkit.tun` — `TunFD` and `TapFD` open an existing persistent TUN or TAP device;
  `make_ifreq` builds the request that attaches to it.
- `tcpkit.tcp_config` — `TCPConfig` and `FdAdapterConfig`.
- `tcpkit.fd_adapter` — `FdAdapterBase`, holding an adapter's configuration and
  listening flag.
- `tcpkit.tcp_over_ip` — `TCPOverIPv4Adapter`: `wrap_tcp_in_ip` puts a
  `TCPMessage` in an IPv4 datagram; `unwrap_tcp_in_ip` returns the message of a
  datagram that belongs to the connection, or `None`. While listening, an
  incoming SYN fixes the connection's addresses and ports.
- `tcpkit.lossy_fd_adapter` — `LossyFdAdapter` wraps another adapter and drops
  reads and writes at the configured rates (`loss_rate_dn`, `loss_rate_up`, out
  of 65536).
- `tcpkit.tuntap_adapter` — `TCPOverIPv4OverTunFdAdapter` reads and writes
  TCP-in-IPv4 datagrams on a TUN device (or any `FileDescriptor`).

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

An IPv4 datagram, serialized and parsed back:

```python
from tcpkit.ipv4 import IPv4Datagram
from tcpkit.wire import parse, serialize

dgram = IPv4Datagram()
dgram.header.src = 0x0A000001
dgram.header.dst = 0x0A000002
dgram.header.length = 20 + 5
dgram.payload = [b"hello"]
dgram.header.compute_checksum()

buffers = serialize(dgram)
again = parse(IPv4Datagram, buffers)
print(again.header.to_string())
# IPv4 len=25 protocol=6 ttl=128 src=10.0.0.1 dst=10.0.0.2
```

A TCP message wrapped in IPv4 by one side and unwrapped by the other:

```python
from tcpkit.address import Address
from tcpkit.tcp_over_ip import TCPOverIPv4Adapter
from tcpkit.tcp_segment import TCPMessage

client = TCPOverIPv4Adapter()
client.config.source = Address("10.0.0.1", 40000)
client.config.destination = Address("10.0.0.2", 80)

server = TCPOverIPv4Adapter()
server.config.source = Address("10.0.0.2", 80)
server.config.destination = Address("10.0.0.1", 40000)

msg = TCPMessage()
msg.sender.syn = True
msg.sender.seqno = 1000

received = server.unwrap_tcp_in_ip(client.wrap_tcp_in_ip(msg))
print(received.sender.syn, received.sender.seqno)  # True 1000
```

## What it does not do

This package carries TCP messages; it does not run a TCP connection. There is no
TCP sender, receiver, reassembler or byte stream here, no socket-like object that
drives a connection in the background, and no network interface that resolves
next hops with ARP. `ARPMessage` and `EthernetFrame` only parse and serialize.

Opening a TUN or TAP device requires that it already exists and that your user may
use it, for example one created by the system administrator with `ip tuntap add`.
The package does not create devices.