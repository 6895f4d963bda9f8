from tcpkit.rng import get_random_engine


def test_engines_are_independently_seeded():
    draws = {tuple(get_random_engine().getrandbits(64) for _ in range(4)) for _ in range(5)}
    assert len(draws) == 5


def test_values_within_range():
    engine = get_random_engine()
    values = [engine.randint(0, 2**32 - 1) for _ in range(1000)]
    assert all(0 <= v <= 2**32 - 1 for v in values)


def test_engine_is_deterministic_from_its_state():
    engine = get_random_engine()
    state = engine.getstate()
    first = [engine.random() for _ in range(10)]
    engine.setstate(state)
    assert [engine.random() for _ in range(10)] == first