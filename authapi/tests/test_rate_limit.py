from __future__ import annotations

from authapi.shared.middleware.rate_limit import InMemoryRateLimiter
from conftest import ManualClock


def test_limiter_blocks_after_limit() -> None:
    clock = ManualClock()
    limiter = InMemoryRateLimiter(limit=2, window_seconds=60, clock=clock)

    assert limiter.hit("client") == 0
    assert limiter.hit("client") == 0
    assert limiter.hit("client") == 60
    assert limiter.hit("other-client") == 0


def test_limiter_frees_slots_as_the_window_slides() -> None:
    clock = ManualClock()
    limiter = InMemoryRateLimiter(limit=1, window_seconds=10, clock=clock)

    assert limiter.hit("client") == 0
    clock.advance(4)
    assert limiter.hit("client") == 6
    clock.advance(6)
    assert limiter.hit("client") == 0
