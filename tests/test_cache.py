import threading
from unittest.mock import MagicMock

from apidocx.model.base import ApiDocumentation
from apidocx.server.cache import DocumentationCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestDocumentationCache:
    def test_builds_once(self):
        builder = MagicMock(return_value=ApiDocumentation(title="A"))
        cache = DocumentationCache(builder)

        first = cache.get_or_build()
        second = cache.get_or_build()

        assert first is second
        builder.assert_called_once()

    def test_invalidate_forces_rebuild(self):
        builder = MagicMock(side_effect=[ApiDocumentation(title="A"), ApiDocumentation(title="B")])
        cache = DocumentationCache(builder)

        assert cache.get_or_build().title == "A"
        cache.invalidate()
        assert cache.built_at is None
        assert cache.get_or_build().title == "B"
        assert builder.call_count == 2

    def test_refresh_returns_rebuild_time(self):
        clock = FakeClock(1000.0)
        builder = MagicMock(side_effect=[ApiDocumentation(title="A"), ApiDocumentation(title="B")])
        cache = DocumentationCache(builder, clock=clock)

        cache.get_or_build()
        assert cache.built_at == 1000.0

        clock.now = 2000.5
        assert cache.refresh() == 2000.5
        assert cache.get_or_build().title == "B"

    def test_concurrent_first_readers_share_one_build(self):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def slow_builder():
            calls.append(1)
            started.set()
            release.wait(timeout=5)
            return ApiDocumentation(title="slow")

        cache = DocumentationCache(slow_builder)
        results = []
        threads = [threading.Thread(target=lambda: results.append(cache.get_or_build())) for _ in range(5)]
        for t in threads:
            t.start()
        started.wait(timeout=5)
        release.set()
        for t in threads:
            t.join(timeout=5)

        assert len(calls) == 1
        assert len(results) == 5
        assert all(r is results[0] for r in results)

    def test_injected_lock_is_used(self):
        lock = MagicMock()
        cache = DocumentationCache(lambda: ApiDocumentation(), lock=lock)
        cache.get_or_build()
        lock.__enter__.assert_called_once()
