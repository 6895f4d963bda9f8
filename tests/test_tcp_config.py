from tcpkit.address import Address
from tcpkit.tcp_config import FdAdapterConfig, TCPConfig


def test_tcp_config_defaults_follow_class_constants():
    cfg = TCPConfig()
    assert cfg.rt_timeout == TCPConfig.TIMEOUT_DFLT
    assert cfg.recv_capacity == TCPConfig.DEFAULT_CAPACITY
    assert cfg.send_capacity == TCPConfig.DEFAULT_CAPACITY
    assert cfg.isn == 137


def test_tcp_config_fields_can_be_overridden():
    cfg = TCPConfig(rt_timeout=100, recv_capacity=10, isn=12345)
    assert (cfg.rt_timeout, cfg.recv_capacity, cfg.isn) == (100, 10, 12345)
    assert cfg.send_capacity == TCPConfig.DEFAULT_CAPACITY


def test_adapter_config_defaults_to_any_address():
    cfg = FdAdapterConfig()
    assert cfg.source == Address("0", 0)
    assert cfg.destination == Address("0", 0)
    assert cfg.source.ipv4_numeric() == 0
    assert cfg.source.port() if hasattr(cfg.source, "port") and callable(getattr(cfg.source, "port")) else cfg.source.ip_port()[1] == 0
    assert (cfg.loss_rate_dn, cfg.loss_rate_up) == (0, 0)


def test_adapter_configs_are_independent():
    first = FdAdapterConfig()
    second = FdAdapterConfig()
    first.source = Address("10.0.0.1", 1234)
    first.loss_rate_up = 5
    assert second.source == Address("0", 0)
    assert second.loss_rate_up == 0