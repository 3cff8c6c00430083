"""
Tests for the JSON API.

Tests the Flask routes, error mapping and both rate limits against an
in-memory store.
"""

import pytest
import json
from unittest.mock import patch

import web.app as web_module
from src.services.rate_limiter import RateLimiter
from tests.test_config import CONFIG, EXPECTED, MESSAGES


pytestmark = pytest.mark.web


def post_rating(client, body, headers=None, query=""):
    data = body if isinstance(body, str) else json.dumps(body)
    return client.post(f"/api/ratings{query}", data=data, content_type="application/json", headers=headers or {})


# =============================================================================
# Service endpoints
# =============================================================================

class TestServiceEndpoints:
    """Tests for /api/health, /api/version and /api/info."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}

    def test_version(self, client):
        response = client.get("/api/version")

        assert response.status_code == 200
        assert response.get_json()["version"]

    def test_info(self, client):
        data = client.get("/api/info").get_json()

        assert data["name"] == "topper"
        assert data["uptimeSeconds"] >= 0

    def test_unknown_api_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.get_json() == {"error": MESSAGES["not_found"]}


# =============================================================================
# Catalog endpoints
# =============================================================================

class TestCatalogEndpoints:
    """Tests for listing, lookup, random, leaderboard and stats."""

    def test_items_default_sort_is_new(self, client):
        data = client.get("/api/items").get_json()

        assert data["total"] == 3
        assert [i["id"] for i in data["items"]] == ["item-ro-facts", "item-ai-news", "item-ua-offer"]

    def test_items_localized(self, client):
        data = client.get("/api/items?lang=ro&sort=top").get_json()

        assert data["total"] == 1
        assert data["items"][0]["contentText"] == "Fapte despre climă"
        assert data["items"][0]["displayLang"] == "ro"

    def test_items_pagination(self, client):
        data = client.get("/api/items?sort=top&limit=1&offset=1").get_json()

        assert data["total"] == 3
        assert [i["id"] for i in data["items"]] == ["item-ai-news"]

    def test_items_out_of_range_limit_uses_default(self, client):
        data = client.get("/api/items?limit=1000").get_json()

        assert len(data["items"]) == 3

    def test_item_lookup(self, client):
        response = client.get("/api/items/item-ai-news?lang=ua")

        assert response.status_code == 200
        assert response.get_json()["item"]["contentText"] == "ШІ змінює ринок"

    def test_item_invalid_id(self, client):
        response = client.get("/api/items/bad;id")

        assert response.status_code == EXPECTED["http"]["bad_request"]
        assert response.get_json() == {"error": MESSAGES["invalid_id_format"]}

    def test_item_id_with_trailing_newline_rejected(self, client):
        response = client.get("/api/items/item-ai-news%0A")

        assert response.status_code == EXPECTED["http"]["bad_request"]
        assert response.get_json() == {"error": MESSAGES["invalid_id_format"]}

    def test_item_missing(self, client):
        response = client.get("/api/items/missing-item")

        assert response.status_code == 404
        assert response.get_json() == {"error": MESSAGES["not_found"]}

    def test_random(self, client):
        data = client.get("/api/random").get_json()

        assert data["item"]["id"] in {"item-ai-news", "item-ro-facts", "item-ua-offer"}

    def test_random_empty_store(self, client, memory_storage):
        memory_storage.clear()

        response = client.get("/api/random")

        assert response.status_code == 404
        assert response.get_json() == {"error": MESSAGES["no_items"]}

    def test_leaderboard(self, client):
        data = client.get("/api/leaderboard?limit=2").get_json()

        assert [i["id"] for i in data["items"]] == ["item-ro-facts", "item-ai-news"]

    def test_leaderboard_category(self, client):
        data = client.get("/api/leaderboard?category=ads").get_json()

        assert [i["id"] for i in data["items"]] == ["item-ua-offer"]

    def test_stats(self, client):
        post_rating(client, {"itemId": "item-ro-facts", "value": 1})

        data = client.get("/api/stats").get_json()

        assert data["totalItems"] == 3
        assert data["totalRatings"] == 1
        assert data["mostRatedType"] == "facts"
        assert data["averageScore"] == 0.67


# =============================================================================
# Ratings
# =============================================================================

class TestRatingsEndpoint:
    """Tests for POST /api/ratings."""

    def test_upvote(self, client, memory_storage):
        """
        GIVEN: item-ai-news with score 0
        WHEN: An upvote is posted
        THEN: 200 with the new score, a ledger event and a next item
        """
        response = post_rating(client, {"itemId": "item-ai-news", "value": 1, "userId": CONFIG["valid_user_id"]})

        assert response.status_code == 200
        data = response.get_json()
        assert data["item"] == {"id": "item-ai-news", "score": 1}
        assert data["rating"]["itemId"] == "item-ai-news"
        assert data["rating"]["userId"] == CONFIG["valid_user_id"]
        assert data["nextItem"]["id"] != "item-ai-news"
        assert len(memory_storage.read_ratings()) == 1

    def test_next_item_localized(self, client):
        data = post_rating(client, {"itemId": "item-ai-news", "value": -1}, query="?lang=ru").get_json()

        assert data["nextItem"]["displayLang"] == "ru"

    @pytest.mark.parametrize("body, code", [
        ("{not json", "invalid_json"),
        ("", "invalid_json"),
        ("[1, 2]", "invalid_payload"),
        ({"itemId": "item-ai-news"}, "invalid_payload"),
        ({"itemId": "item-ai-news", "value": 3}, "invalid_value"),
        ({"itemId": "../etc", "value": 1}, "invalid_item_id"),
        ({"itemId": "item-ai-news\n", "value": 1}, "invalid_item_id"),
        ({"itemId": "item-ai-news", "value": 1, "userId": "123e4567-e89b-12d3-a456-426614174000\n"},
         "invalid_user_id_format"),
        ({"itemId": "item-ai-news", "value": 1, "userId": "nope"}, "invalid_user_id_format"),
    ])
    def test_bad_requests(self, client, memory_storage, body, code):
        response = post_rating(client, body)

        assert response.status_code == EXPECTED["http"]["bad_request"]
        assert response.get_json() == {"error": code}
        assert memory_storage.write_count == 0

    def test_unknown_item(self, client, memory_storage):
        response = post_rating(client, {"itemId": "no-such-item", "value": 1})

        assert response.status_code == 404
        assert response.get_json() == {"error": MESSAGES["item_not_found"]}
        assert memory_storage.write_count == 0

    def test_persist_failure(self, client, memory_storage):
        memory_storage.fail_writes = True

        response = post_rating(client, {"itemId": "item-ai-news", "value": 1})

        assert response.status_code == 500
        assert response.get_json() == {"error": MESSAGES["persist_failed"]}

    def test_rating_rate_limit(self, client):
        for _ in range(EXPECTED["config"]["default_rating_rate_limit"]):
            assert post_rating(client, {"itemId": "item-ai-news", "value": 1}).status_code == 200

        response = post_rating(client, {"itemId": "item-ai-news", "value": 1})

        assert response.status_code == EXPECTED["http"]["rate_limited"]
        assert response.get_json()["error"] == MESSAGES["rate_limit_exceeded"]
        assert int(response.headers["Retry-After"]) >= 1

    def test_rate_limit_keyed_by_forwarded_for(self, client):
        for _ in range(EXPECTED["config"]["default_rating_rate_limit"]):
            post_rating(client, {"itemId": "item-ai-news", "value": 1}, headers={"X-Forwarded-For": "10.0.0.1"})

        blocked = post_rating(client, {"itemId": "item-ai-news", "value": 1},
                              headers={"X-Forwarded-For": "10.0.0.1, 172.16.0.1"})
        other = post_rating(client, {"itemId": "item-ai-news", "value": 1},
                            headers={"X-Forwarded-For": "10.0.0.2"})

        assert blocked.status_code == 429
        assert other.status_code == 200


# =============================================================================
# General limits and failures
# =============================================================================

class TestApiRateLimitAndErrors:
    """Tests for the general API limit and the catch-all error handler."""

    def test_api_limit_applies_to_api_routes(self, client, monkeypatch):
        monkeypatch.setattr(web_module, "api_limiter", RateLimiter(2, 60))

        assert client.get("/api/stats").status_code == 200
        assert client.get("/api/items").status_code == 200
        response = client.get("/api/leaderboard")

        assert response.status_code == 429
        assert response.get_json()["error"] == MESSAGES["rate_limit_exceeded"]
        assert "Retry-After" in response.headers

    def test_health_exempt_from_api_limit(self, client, monkeypatch):
        monkeypatch.setattr(web_module, "api_limiter", RateLimiter(1, 60))

        statuses = [client.get("/api/health").status_code for _ in range(5)]

        assert statuses == [200] * 5

    def test_unexpected_error_is_internal_error(self, client):
        with patch("web.app.get_storage", side_effect=RuntimeError("boom")):
            response = client.get("/api/stats")

        assert response.status_code == 500
        assert response.get_json() == {"error": MESSAGES["internal_error"]}

    def test_method_not_allowed_passes_through(self, client):
        response = client.get("/api/ratings")

        assert response.status_code == 405
