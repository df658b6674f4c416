from rate_limiter import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_limit_is_per_client():
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=60, clock=FakeClock())

    assert limiter.allow("a")
    assert limiter.allow("a")
    assert not limiter.allow("a")
    assert limiter.allow("b")


def test_hits_expire_after_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    assert limiter.allow("a")
    clock.now += 59
    assert not limiter.allow("a")
    clock.now += 1
    assert limiter.allow("a")


def test_rejected_requests_do_not_extend_the_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=10, clock=clock)

    limiter.allow("a")
    for _ in range(5):
        clock.now += 1
        assert not limiter.allow("a")
    clock.now += 5
    assert limiter.allow("a")


def test_reset_clears_all_clients():
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())
    limiter.allow("a")

    limiter.reset()

    assert limiter.allow("a")


def test_idle_clients_are_forgotten():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=60, clock=clock)
    for client in ("a", "b", "c"):
        limiter.allow(client)
    assert limiter.tracked_clients() == 3

    clock.now += 60
    limiter.allow("d")

    assert limiter.tracked_clients() == 1
