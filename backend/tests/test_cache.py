"""
Tests for the redis-backed pipeline cache
"""
import pytest
import redis

from talentrack.core import cache
from talentrack.core.config import settings


class FakeRedis:
    """Minimal in-memory stand-in for the commands the cache uses"""
    
    def __init__(self):
        self.store = {}
        self.gets = 0
    
    def get(self, key):
        self.gets += 1
        return self.store.get(key)
    
    def setex(self, key, ttl, value):
        self.store[key] = value
        return True
    
    def delete(self, *keys):
        return sum(1 for key in keys if self.store.pop(key, None) is not None)
    
    def scan_iter(self, match=None):
        prefix = (match or "*").rstrip("*")
        return [key for key in list(self.store) if key.startswith(prefix)]


class BrokenRedis:
    def get(self, key):
        raise redis.ConnectionError("connection refused")
    
    def setex(self, key, ttl, value):
        raise redis.ConnectionError("connection refused")
    
    def delete(self, *keys):
        raise redis.ConnectionError("connection refused")


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(settings, "CACHE_ENABLED", True)
    monkeypatch.setattr(cache, "redis_client", fake)
    return fake


class TestCacheHelpers:
    
    def test_disabled_cache_is_a_no_op(self, monkeypatch):
        monkeypatch.setattr(settings, "CACHE_ENABLED", False)
        assert cache.set_cache("key", {"a": 1}) is False
        assert cache.get_cache("key") is None
    
    def test_round_trip_and_pattern_invalidation(self, fake_redis):
        cache.set_cache(cache.get_cache_key("pipeline", 1), {"total": 2})
        cache.set_cache(cache.get_cache_key("pipeline", 2), {"total": 5})
        assert cache.get_cache("pipeline:1") == {"total": 2}
        
        assert cache.invalidate_pattern("pipeline:*") == 2
        assert fake_redis.store == {}
    
    def test_redis_errors_degrade_to_misses(self, monkeypatch):
        monkeypatch.setattr(settings, "CACHE_ENABLED", True)
        monkeypatch.setattr(cache, "redis_client", BrokenRedis())
        assert cache.get_cache("pipeline:1") is None
        assert cache.set_cache("pipeline:1", {}) is False
        assert cache.delete_cache("pipeline:1") is False


class TestPipelineCaching:
    
    def test_summary_cached_and_invalidated_on_move(self, fake_redis, client, make_job, make_application, recruiter_headers):
        job = make_job()
        application = make_application(job=job)
        key = f"pipeline:{job['id']}"
        
        first = client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers).json()
        assert key in fake_redis.store
        
        second = client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers).json()
        assert second == first
        
        client.post(f"/api/v1/applications/{application['id']}/advance", headers=recruiter_headers)
        assert key not in fake_redis.store
        
        fresh = client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers).json()
        assert fresh["stages"][1]["count"] == 1
    
    def test_stage_changes_invalidate(self, fake_redis, client, make_job, recruiter_headers):
        job = make_job()
        key = f"pipeline:{job['id']}"
        client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers)
        assert key in fake_redis.store
        
        client.post(f"/api/v1/jobs/{job['id']}/stages", json={"name": "Reference check"}, headers=recruiter_headers)
        assert key not in fake_redis.store
    
    @pytest.fixture
    def cached_pipeline(self, fake_redis, client, make_job, make_application, recruiter_headers):
        """An open job with one application and its summary already cached"""
        job = make_job()
        application = make_application(job=job)
        key = f"pipeline:{job['id']}"
        client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers)
        assert key in fake_redis.store
        return job, application, key
    
    @pytest.mark.parametrize("action", ["reject", "withdraw"])
    def test_closing_an_application_invalidates(self, cached_pipeline, fake_redis, client, recruiter_headers, action):
        _job, application, key = cached_pipeline
        client.post(f"/api/v1/applications/{application['id']}/{action}", json={}, headers=recruiter_headers)
        assert key not in fake_redis.store
    
    def test_job_status_change_invalidates(self, cached_pipeline, fake_redis, client, recruiter_headers):
        job, _application, key = cached_pipeline
        client.post(f"/api/v1/jobs/{job['id']}/status", json={"status": "on_hold"}, headers=recruiter_headers)
        assert key not in fake_redis.store
    
    def test_offer_acceptance_invalidates(self, cached_pipeline, fake_redis, client, recruiter_headers):
        job, application, key = cached_pipeline
        offer = client.post(
            "/api/v1/offers/", json={"application_id": application["id"], "salary": 90000}, headers=recruiter_headers
        ).json()
        client.post(f"/api/v1/offers/{offer['id']}/extend", headers=recruiter_headers)
        client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers)
        assert key in fake_redis.store
        
        client.post(f"/api/v1/offers/{offer['id']}/accept", headers=recruiter_headers)
        assert key not in fake_redis.store
        
        summary = client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers).json()
        assert summary["status_counts"]["hired"] == 1
    
    def test_candidate_deletion_invalidates(self, cached_pipeline, fake_redis, client, recruiter_headers):
        job, application, key = cached_pipeline
        client.delete(f"/api/v1/candidates/{application['candidate_id']}", headers=recruiter_headers)
        assert key not in fake_redis.store
        
        summary = client.get(f"/api/v1/jobs/{job['id']}/pipeline", headers=recruiter_headers).json()
        assert summary["total"] == 0
