"""
Topper - JSON API

Flask application serving items, leaderboards, statistics and rating
submissions from the flat-file store.

Run with: python -m web.app
Or: topper serve
"""

import json
import logging
import math
import sys
import time
from pathlib import Path
from importlib.metadata import PackageNotFoundError, version as package_version

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException

from src.catalog import catalog_stats, find_item, leaderboard, list_items, random_item
from src.config import (
    API_RATE_LIMIT,
    DEBUG,
    HOST,
    NEXT_ITEM_STRATEGY,
    PORT,
    RATE_LIMIT_WINDOW_SECONDS,
    RATING_RATE_LIMIT,
    configure_logging,
)
from src.models.localization import localize
from src.rating import (
    RateLimited,
    RatingError,
    RatingService,
    is_valid_item_id,
    parse_rating_payload,
)
from src.selection import get_strategy
from src.services.rate_limiter import RateLimiter
from src.storage import JsonFileStorage, Storage

logger = logging.getLogger(__name__)

APP_NAME = "topper"
VERSION_FILE = Path(__file__).parent.parent / "version.txt"

app = Flask(__name__)

_started_at = time.monotonic()

# General limit for every /api/* route except health; stricter one for ratings
api_limiter = RateLimiter(API_RATE_LIMIT, RATE_LIMIT_WINDOW_SECONDS)
rating_limiter = RateLimiter(RATING_RATE_LIMIT, RATE_LIMIT_WINDOW_SECONDS)


# =============================================================================
# Helpers
# =============================================================================

def get_storage() -> Storage:
    """Storage from app.config["STORAGE"], else the configured data directory."""
    storage = app.config.get("STORAGE")
    if storage is None:
        storage = JsonFileStorage()
        app.config["STORAGE"] = storage
    return storage


def get_rating_service() -> RatingService:
    strategy = app.config.get("NEXT_ITEM_STRATEGY") or get_strategy(NEXT_ITEM_STRATEGY)
    return RatingService(get_storage(), strategy=strategy)


def get_version() -> str:
    """Version from version.txt, then the installed package, then "0.0.0"."""
    try:
        text = VERSION_FILE.read_text(encoding="utf-8").strip()
        if text:
            return text
    except OSError:
        pass
    try:
        return package_version(APP_NAME)
    except PackageNotFoundError:
        return "0.0.0"


def client_key() -> str:
    """First X-Forwarded-For entry, else the remote address."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or request.remote_addr or "unknown"


def error_response(code: str, status: int, **extra):
    return jsonify({"error": code, **extra}), status


# =============================================================================
# Rate limiting and error handling
# =============================================================================

@app.before_request
def enforce_api_rate_limit():
    """Apply the general limit to /api/* (health exempt)."""
    if not request.path.startswith("/api/") or request.path == "/api/health":
        return None

    result = api_limiter.check(client_key())
    if result.allowed:
        return None

    error = RateLimited(result.retry_after)
    response = jsonify(error.to_dict())
    response.status_code = error.status
    response.headers["Retry-After"] = str(max(1, math.ceil(error.retry_after)))
    return response


@app.errorhandler(RatingError)
def handle_rating_error(error: RatingError):
    response = jsonify(error.to_dict())
    response.status_code = error.status
    if isinstance(error, RateLimited):
        response.headers["Retry-After"] = str(max(1, math.ceil(error.retry_after)))
    return response


@app.errorhandler(404)
def handle_not_found(error):
    if request.path.startswith("/api/"):
        return error_response("not_found", 404)
    return error


@app.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return error
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return error_response("internal_error", 500)


# =============================================================================
# Service endpoints
# =============================================================================

@app.route("/api/health")
def api_health():
    return jsonify({"status": "ok"})


@app.route("/api/version")
def api_version():
    return jsonify({"version": get_version()})


@app.route("/api/info")
def api_info():
    return jsonify({
        "name": APP_NAME,
        "version": get_version(),
        "uptimeSeconds": round(time.monotonic() - _started_at, 3),
    })


# =============================================================================
# Catalog endpoints
# =============================================================================

@app.route("/api/items")
def api_items():
    """GET /api/items?limit=20&offset=0&lang=ro&sort=top"""
    lang = request.args.get("lang") or None
    total, page = list_items(
        get_storage().read_items(),
        lang=lang,
        sort=request.args.get("sort", "new"),
        limit=request.args.get("limit"),
        offset=request.args.get("offset"),
    )
    return jsonify({
        "total": total,
        "items": [localize(item, lang).to_dict() for item in page],
    })


@app.route("/api/items/<item_id>")
def api_item(item_id):
    if not is_valid_item_id(item_id):
        return error_response("invalid_id_format", 400)

    item = find_item(get_storage().read_items(), item_id)
    if item is None:
        return error_response("not_found", 404)
    return jsonify({"item": localize(item, request.args.get("lang")).to_dict()})


@app.route("/api/random")
def api_random():
    item = random_item(get_storage().read_items())
    if item is None:
        return error_response("no_items", 404)
    return jsonify({"item": localize(item, request.args.get("lang")).to_dict()})


@app.route("/api/leaderboard")
def api_leaderboard():
    """GET /api/leaderboard?limit=10&lang=en&category=news"""
    lang = request.args.get("lang") or None
    top = leaderboard(
        get_storage().read_items(),
        limit=request.args.get("limit"),
        lang=lang,
        category=request.args.get("category") or None,
    )
    return jsonify({"items": [localize(item, lang).to_dict() for item in top]})


@app.route("/api/stats")
def api_stats():
    storage = get_storage()
    return jsonify(catalog_stats(storage.read_items(), storage.read_ratings()))


# =============================================================================
# Ratings
# =============================================================================

@app.route("/api/ratings", methods=["POST"])
def api_ratings():
    """
    Submit a vote.

    Body: {"itemId": str, "value": 1 | -1, "userId"?: uuid}
    Response: {"rating", "item": {"id", "score"}, "nextItem"?}
    """
    limit = rating_limiter.check(client_key())
    if not limit.allowed:
        raise RateLimited(limit.retry_after)

    try:
        payload = json.loads(request.get_data(as_text=True) or "")
    except ValueError:
        return error_response("invalid_json", 400)

    lang = request.args.get("lang") or None
    rating_request = parse_rating_payload(payload)
    result = get_rating_service().submit(
        rating_request.item_id,
        rating_request.value,
        user_id=rating_request.user_id,
        lang=lang,
    )
    return jsonify(result.to_dict(lang))


if __name__ == "__main__":
    configure_logging()
    print("=" * 50)
    print("Topper API")
    print("=" * 50)
    print(f"Listening on http://{HOST}:{PORT}")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(host=HOST, port=PORT, debug=DEBUG)
