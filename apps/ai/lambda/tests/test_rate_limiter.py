import threading
import unittest

from ai_gateway.rate_limiter import FixedWindowRateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FixedWindowRateLimiterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.limiter = FixedWindowRateLimiter(max_requests=30, window_seconds=60, clock=self.clock)

    def test_first_request_creates_entry(self) -> None:
        self.assertTrue(self.limiter.allow("1.2.3.4"))

        entry = self.limiter.get_entry("1.2.3.4")
        self.assertIsNotNone(entry)
        self.assertEqual(entry.count, 1)
        self.assertEqual(entry.window_reset_at, 1060.0)

    def test_allows_thirty_requests_then_denies_within_window(self) -> None:
        results = []
        for _ in range(30):
            results.append(self.limiter.allow("client"))
            self.clock.advance(0.3)

        self.assertTrue(all(results))
        self.assertFalse(self.limiter.allow("client"))
        self.assertEqual(self.limiter.get_entry("client").count, 30)

    def test_denied_while_window_is_open(self) -> None:
        for _ in range(30):
            self.limiter.allow("client")

        self.clock.advance(59.9)

        self.assertFalse(self.limiter.allow("client"))

    def test_window_resets_after_expiry(self) -> None:
        for _ in range(30):
            self.limiter.allow("client")
        self.assertFalse(self.limiter.allow("client"))

        self.clock.advance(60.5)

        self.assertTrue(self.limiter.allow("client"))
        entry = self.limiter.get_entry("client")
        self.assertEqual(entry.count, 1)
        self.assertEqual(entry.window_reset_at, self.clock.now + 60)

    def test_window_boundary_is_inclusive(self) -> None:
        for _ in range(30):
            self.limiter.allow("client")

        self.clock.advance(60)

        # The window only expires once "now" is strictly past the reset time.
        self.assertFalse(self.limiter.allow("client"))

    def test_keys_are_counted_independently(self) -> None:
        for _ in range(30):
            self.limiter.allow("a")

        self.assertFalse(self.limiter.allow("a"))
        self.assertTrue(self.limiter.allow("b"))

    def test_tracked_keys_are_bounded(self) -> None:
        limiter = FixedWindowRateLimiter(max_tracked_keys=3, clock=self.clock)
        for key in ("a", "b", "c"):
            limiter.allow(key)
        limiter.allow("a")
        limiter.allow("d")

        self.assertEqual(len(limiter), 3)
        self.assertIsNone(limiter.get_entry("b"))
        self.assertIsNotNone(limiter.get_entry("a"))
        self.assertIsNotNone(limiter.get_entry("d"))

    def test_concurrent_requests_never_exceed_limit(self) -> None:
        allowed: list[bool] = []
        allowed_lock = threading.Lock()
        barrier = threading.Barrier(20)

        def worker() -> None:
            barrier.wait()
            for _ in range(5):
                result = self.limiter.allow("shared")
                with allowed_lock:
                    allowed.append(result)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(allowed), 100)
        self.assertEqual(sum(allowed), 30)


if __name__ == "__main__":
    unittest.main()
