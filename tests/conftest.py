"""
Pytest Configuration and Fixtures

This module provides:
- Timestamped result file generation
- Shared fixtures for all tests
- Test category markers
"""

import pytest
import random
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import test configuration
from tests.test_config import (
    CONFIG, EXPECTED, TEST_DATA, MESSAGES, TEST_CATEGORIES,
    get_all_sample_items,
)


# =============================================================================
# TEST RESULT FILE CONFIGURATION
# =============================================================================

RESULTS_DIR = PROJECT_ROOT / "test_results"


def get_result_filename() -> str:
    """Generate timestamped result filename."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"test_results_{timestamp}.txt"


class TestResultCollector:
    """Collects test results for the summary report."""

    __test__ = False

    def __init__(self):
        self.results: List[Dict[str, Any]] = []
        self.start_time: datetime = None
        self.end_time: datetime = None

    def add_result(self, nodeid: str, outcome: str, duration: float):
        filename = nodeid.split("::")[0].split("/")[-1]
        self.results.append({
            "nodeid": nodeid,
            "category": filename.replace("test_", "").replace(".py", ""),
            "outcome": outcome,
            "duration": duration,
        })

    def get_summary(self) -> Dict[str, int]:
        return {
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r["outcome"] == "passed"),
            "failed": sum(1 for r in self.results if r["outcome"] == "failed"),
            "skipped": sum(1 for r in self.results if r["outcome"] == "skipped"),
        }


_collector = TestResultCollector()


def pytest_runtest_logreport(report):
    """Record the call phase of every test."""
    if report.when == "call":
        _collector.add_result(report.nodeid, report.outcome, report.duration)


def pytest_sessionfinish(session, exitstatus):
    """Write the report file and print a short summary."""
    _collector.end_time = datetime.now()
    summary = _collector.get_summary()

    lines = ["=" * 80, "TOPPER - TEST RESULTS REPORT", "=" * 80, ""]
    if _collector.start_time:
        lines.append(f"Run Date:     {_collector.start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"Total Tests:  {summary['total']}")
    lines.append(f"Passed:       {summary['passed']} ✓")
    lines.append(f"Failed:       {summary['failed']} ✗")
    lines.append(f"Skipped:      {summary['skipped']} ○")
    lines.append("")

    categories = sorted({r["category"] for r in _collector.results})
    for category in categories:
        info = TEST_CATEGORIES.get(category, {"name": category.replace("_", " ").title(), "description": ""})
        results = [r for r in _collector.results if r["category"] == category]
        passed = sum(1 for r in results if r["outcome"] == "passed")
        lines.append(f"{info['name']}: {passed}/{len(results)} passed")
        for result in results:
            if result["outcome"] == "failed":
                lines.append(f"  ✗ {result['nodeid']}")

    try:
        RESULTS_DIR.mkdir(exist_ok=True)
        (RESULTS_DIR / get_result_filename()).write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError:
        pass

    print("\n" + "=" * 60)
    print("TEST RUN COMPLETE")
    print("=" * 60)
    print(f"Total: {summary['total']} | Passed: {summary['passed']} | Failed: {summary['failed']} | Skipped: {summary['skipped']}")
    print("=" * 60)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def sample_records():
    """On-disk item records."""
    return get_all_sample_items()


@pytest.fixture
def sample_items(sample_records):
    """Sample records as ContentItem instances."""
    from src.models.content_item import ContentItem
    return [ContentItem.from_dict(record) for record in sample_records]


@pytest.fixture
def make_item():
    """Factory for small ContentItems."""
    from src.models.content_item import ContentItem

    def _make(item_id, tags=(), category="", type="", lang=None, score=0, votes=0, published=None):
        return ContentItem(
            id=item_id,
            text={"en": f"Text for {item_id}"},
            tags=list(tags),
            category=category,
            type=type,
            lang=lang,
            score=score,
            votes=votes,
            published=published,
        )

    return _make


@pytest.fixture
def memory_storage(sample_items):
    """In-memory storage preloaded with the sample items."""
    from src.storage.memory import InMemoryStorage
    return InMemoryStorage(items=sample_items)


@pytest.fixture
def json_storage(tmp_path, sample_items):
    """File storage in a temp directory, preloaded with the sample items."""
    from src.storage.json_files import JsonFileStorage
    storage = JsonFileStorage(tmp_path / "data")
    storage.write_items(sample_items)
    return storage


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(CONFIG["rng_seed"])


@pytest.fixture
def test_config():
    return CONFIG


@pytest.fixture
def expected_values():
    return EXPECTED


@pytest.fixture
def test_data():
    return TEST_DATA


@pytest.fixture
def messages():
    return MESSAGES


@pytest.fixture
def web_app(memory_storage):
    """Flask app wired to in-memory storage with fresh rate limit windows."""
    from web.app import app, api_limiter, rating_limiter

    app.config["TESTING"] = True
    app.config["STORAGE"] = memory_storage
    app.config.pop("NEXT_ITEM_STRATEGY", None)
    api_limiter.reset()
    rating_limiter.reset()
    yield app
    app.config.pop("STORAGE", None)
    app.config.pop("NEXT_ITEM_STRATEGY", None)
    api_limiter.reset()
    rating_limiter.reset()


@pytest.fixture
def client(web_app):
    """Flask test client."""
    with web_app.test_client() as client:
        yield client


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers and start the result collector."""
    config.addinivalue_line("markers", "unit: Fast isolated tests")
    config.addinivalue_line("markers", "system: Behaviour across modules")
    config.addinivalue_line("markers", "web: Flask route tests")
    config.addinivalue_line("markers", "config_validation: Configuration validation tests")
    config.addinivalue_line("markers", "cli_behavior: CLI interface tests")

    _collector.start_time = datetime.now()
