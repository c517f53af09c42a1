"""Integration tests for the CheckHealth use case."""

from catalog.application.check_health import (
    DEGRADED,
    HEALTHY,
    UNHEALTHY,
    CheckHealthHandler,
)
from tests.fakes import FakeCacheRepository, FakeProductRepository


def _setup():
    repo = FakeProductRepository()
    cache = FakeCacheRepository()
    return CheckHealthHandler(repo, cache), repo, cache


class TestCheckHealth:

    def test_all_up(self):
        handler, _, _ = _setup()
        report = handler.handle()
        assert report.status == HEALTHY
        assert report.services == {"store": HEALTHY, "cache": HEALTHY}

    def test_cache_down_degrades(self):
        handler, _, cache = _setup()
        cache.down = True
        report = handler.handle()
        assert report.status == DEGRADED
        assert report.services["cache"] == UNHEALTHY

    def test_store_down_is_unhealthy(self):
        handler, repo, _ = _setup()
        repo.down = True
        report = handler.handle()
        assert report.status == UNHEALTHY
        assert report.services == {"store": UNHEALTHY, "cache": HEALTHY}

    def test_both_down(self):
        handler, repo, cache = _setup()
        repo.down = True
        cache.down = True
        assert handler.handle().status == UNHEALTHY
