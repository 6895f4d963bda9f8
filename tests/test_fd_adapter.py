from tcpkit.address import Address
from tcpkit.fd_adapter import FdAdapterBase
from tcpkit.tcp_config import FdAdapterConfig


def test_not_listening_by_default():
    adapter = FdAdapterBase()
    assert adapter.listening is False


def test_set_listening_toggles_flag():
    adapter = FdAdapterBase()
    adapter.set_listening(True)
    assert adapter.listening is True
    adapter.set_listening(False)
    assert adapter.listening is False


def test_config_is_given_or_default():
    cfg = FdAdapterConfig(source=Address("10.0.0.1", 1234))
    assert FdAdapterBase(cfg).config is cfg
    assert FdAdapterBase().config == FdAdapterConfig()


def test_config_is_mutable_and_per_adapter():
    first = FdAdapterBase()
    second = FdAdapterBase()
    first.config.destination = Address("10.0.0.2", 80)
    assert first.config.destination == Address("10.0.0.2", 80)
    assert second.config.destination == Address("0", 0)


def test_tick_leaves_state_unchanged():
    adapter = FdAdapterBase()
    adapter.set_listening(True)
    before = FdAdapterConfig(
        source=adapter.config.source, destination=adapter.config.destination
    )
    adapter.tick(10)
    assert adapter.listening is True
    assert adapter.config == before