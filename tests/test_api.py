"""Tests for API endpoints."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient, ASGITransport
from prometheus_client.parser import text_string_to_metric_families

from web_app import create_app
from config import Config
from shortlink.service import URLShortenerService
from shortlink.storage.exceptions import StorageError
from shortlink.storage.models import URLMapping


@pytest.fixture
def config():
    return Config(base_url="http://testserver", db_type="memory")


@pytest.fixture
async def app(memory_store, service, config):
    """Create test FastAPI app."""
    return create_app(
        store_instance=memory_store,
        service_instance=service,
        config=config,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.mark.asyncio
class TestAPIEndpoints:
    """Test API endpoints."""

    async def test_health_check(self, client):
        """Test GET /api/health."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    async def test_shorten_url(self, client, sample_urls):
        """Test POST /api/shorten."""
        response = await client.post(
            "/api/shorten",
            json={"userId": "user1", "url": sample_urls[0]},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["short_code"]) == 6
        assert data["short_url"] == f"http://testserver/{data['short_code']}"

    async def test_shorten_invalid_url(self, client):
        """Test POST /api/shorten with invalid URL."""
        response = await client.post(
            "/api/shorten",
            json={"userId": "user1", "url": "not-a-url"},
        )

        assert response.status_code == 422

    async def test_shorten_missing_user(self, client):
        """Test POST /api/shorten without userId."""
        response = await client.post("/api/shorten", json={"url": "https://example.com"})

        assert response.status_code == 422

    async def test_shorten_storage_failure(self, memory_store, config):
        """Test storage errors surface as 500."""
        service = URLShortenerService(store=memory_store, base_url="http://testserver")
        memory_store.save = AsyncMock(side_effect=StorageError("disk full"))
        app = create_app(store_instance=memory_store, service_instance=service, config=config)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.post(
                "/api/shorten",
                json={"userId": "user1", "url": "https://example.com"},
            )

        assert response.status_code == 500
        assert response.json()["detail"] == "disk full"

    async def test_redirect(self, client, service, sample_urls):
        """Test GET /{code} redirects and counts the click."""
        create = await client.post(
            "/api/shorten",
            json={"userId": "user1", "url": sample_urls[1]},
        )
        code = create.json()["short_code"]

        response = await client.get(f"/{code}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[1]

        await service.wait_for_pending_clicks()
        listing = await client.get("/api/users/user1/urls")
        assert listing.json()[0]["clicks"] == 1

    async def test_redirect_unknown_code(self, client):
        """Test GET /{code} for nonexistent code."""
        response = await client.get("/nonexistent", follow_redirects=False)

        assert response.status_code == 404

    async def test_redirect_expired_code(self, client, memory_store):
        """Test expired codes are not found."""
        await memory_store.save(URLMapping(
            code="expired1",
            original_url="https://example.com/gone",
            user_id="user1",
            created_at=datetime.now(timezone.utc) - timedelta(days=2),
            expires_at=datetime.now(timezone.utc) - timedelta(days=1),
        ))

        response = await client.get("/expired1", follow_redirects=False)

        assert response.status_code == 404

    async def test_redirect_invalid_format(self, client):
        """Test non-code paths are rejected without a lookup."""
        response = await client.get("/favicon.ico", follow_redirects=False)

        assert response.status_code == 404

    async def test_redirect_storage_failure(self, memory_store, config):
        """Test a failed lookup is reported as 503, not 404."""
        service = URLShortenerService(store=memory_store)
        memory_store.get = AsyncMock(side_effect=StorageError("timeout"))
        app = create_app(store_instance=memory_store, service_instance=service, config=config)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
            response = await client.get("/abc123", follow_redirects=False)

        assert response.status_code == 503

    async def test_list_user_urls(self, client, sample_urls):
        """Test GET /api/users/{user_id}/urls."""
        for url in sample_urls:
            await client.post("/api/shorten", json={"userId": "alice", "url": url})
        await client.post("/api/shorten", json={"userId": "bob", "url": sample_urls[0]})

        response = await client.get("/api/users/alice/urls")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 3
        assert {item["original_url"] for item in data} == set(sample_urls)
        assert all(item["user_id"] == "alice" for item in data)
        assert all(item["clicks"] == 0 for item in data)

    async def test_list_user_urls_empty(self, client):
        """Test listing for a user with no URLs."""
        response = await client.get("/api/users/nobody/urls")

        assert response.status_code == 200
        assert response.json() == []

    async def test_delete_url(self, client, sample_urls):
        """Test DELETE /api/urls/{code}."""
        create = await client.post(
            "/api/shorten",
            json={"userId": "user1", "url": sample_urls[0]},
        )
        code = create.json()["short_code"]

        response = await client.delete(f"/api/urls/{code}")
        assert response.status_code == 204

        response = await client.get(f"/{code}", follow_redirects=False)
        assert response.status_code == 404

    async def test_delete_unknown_url(self, client):
        """Test DELETE /api/urls/{code} for nonexistent code."""
        response = await client.delete("/api/urls/nonexistent")

        assert response.status_code == 404

    async def test_request_id_header(self, client):
        """Test every response carries a request ID."""
        response = await client.get("/api/health")

        request_id = response.headers["x-request-id"]
        assert uuid.UUID(request_id)

    async def test_request_id_is_propagated(self, client):
        """Test an incoming request ID is echoed back."""
        response = await client.get("/api/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["x-request-id"] == "req-42"

    async def test_request_logging(self, client, caplog):
        """Test requests are logged with status and request ID."""
        with caplog.at_level("INFO", logger="shortlink.web"):
            await client.get("/api/health", headers={"X-Request-ID": "req-7"})
            await client.get("/nonexistent")

        messages = [r.getMessage() for r in caplog.records if r.name == "shortlink.web"]
        assert any("req-7" in m and "status=200" in m for m in messages)
        assert any(m.startswith("Request failed") and "status=404" in m for m in messages)


def scraped_value(body: str, metric: str, path: str, status: str) -> float:
    """Read one labelled sample from Prometheus text exposition."""
    for family in text_string_to_metric_families(body):
        for sample in family.samples:
            if (sample.name == metric
                    and sample.labels.get("path") == path
                    and sample.labels.get("status") == status):
                return sample.value
    return 0.0


@pytest.mark.asyncio
class TestMetrics:
    """Test request counters exposed on /metrics."""

    async def test_request_and_error_counters(self, client):
        """Test successes and errors are counted per route template and status."""
        before = (await client.get("/metrics")).text

        await client.get("/api/health")
        await client.get("/nonexistent", follow_redirects=False)

        response = await client.get("/metrics")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        after = response.text

        def delta(metric, path, status):
            return scraped_value(after, metric, path, status) - scraped_value(before, metric, path, status)

        assert delta("shortlink_requests_total", "/api/health", "200") == 1
        assert delta("shortlink_requests_errors_total", "/api/health", "200") == 0
        assert delta("shortlink_requests_total", "/{code}", "404") == 1
        assert delta("shortlink_requests_errors_total", "/{code}", "404") == 1

    async def test_metrics_scrape_not_counted(self, client):
        """Test /metrics is served by its own route, not the redirect, and is not counted."""
        first = (await client.get("/metrics")).text
        second = (await client.get("/metrics")).text

        assert scraped_value(second, "shortlink_requests_total", "/metrics", "200") == 0
        assert scraped_value(second, "shortlink_requests_total", "/{code}", "404") == \
            scraped_value(first, "shortlink_requests_total", "/{code}", "404")
