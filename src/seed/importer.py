"""
Awesome-list importer.

Fetches one or more "awesome" Markdown lists (raw GitHub URLs), extracts
the link entries and turns them into items. Entries are first built in the
flat legacy shape {id, title, source, url, tags, categories, lang, ...}
and then translated with ContentItem.from_legacy().

Usage:
    result = import_awesome_lists(DEFAULT_AWESOME_URLS)
    write_import(JsonFileStorage(), result, merge=True)
"""

from dataclasses import dataclass, field
import logging
import re
import uuid
from typing import List, Optional
from urllib.parse import urlparse

import requests

from src.config import REQUEST_TIMEOUT
from src.models.content_item import ContentItem, MAX_TEXT_LENGTH, truncate_text
from src.models.rating import utc_now_iso
from src.storage.base import Storage
from src.storage.json_files import JsonFileStorage

logger = logging.getLogger(__name__)

DEFAULT_AWESOME_URLS = [
    "https://raw.githubusercontent.com/sindresorhus/awesome/main/readme.md",
    "https://raw.githubusercontent.com/sindresorhus/awesome-nodejs/master/readme.md",
]

OUTPUT_FILENAME = "items_awesome.json"
DEFAULT_CATEGORY = "awesome"

# [Title](https://url) with an optional " - description" tail
MD_LINK_RE = re.compile(r"\[([^\]]{1,300})\]\((https?://[^\s)]+)\)(?:\s*[-–—]\s*(.+))?")
ANGLE_LINK_RE = re.compile(r"<\s*(https?://[^>]+)\s*>")
BARE_LINK_RE = re.compile(r"(https?://[^\s)]+)")
BRACKET_TITLE_RE = re.compile(r"\[([^\]]+)\]")


@dataclass
class ParsedEntry:
    """One link found in a Markdown list."""
    title: str
    url: str
    description: Optional[str] = None


@dataclass
class ImportResult:
    """Items gathered from all lists, deduplicated by URL."""
    urls: List[str] = field(default_factory=list)
    items: List[ContentItem] = field(default_factory=list)
    failed_urls: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "generatedAt": utc_now_iso(),
            "sourceCount": len(self.urls),
            "itemCount": len(self.items),
            "items": [item.to_dict() for item in self.items],
        }


def host_of(url: str) -> str:
    """Hostname without a leading www., or "unknown"."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return "unknown"
    if not host:
        return "unknown"
    return re.sub(r"^www\.", "", host)


def parse_markdown(markdown: str) -> List[ParsedEntry]:
    """
    Extract link entries from Markdown text.

    Recognized, in order of preference per line:
    - [Title](https://url) - optional description
    - <https://url>  (title = host)
    - a bare https://url anywhere in the line

    Lines without a link are skipped.
    """
    entries = []
    for raw_line in markdown.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        match = MD_LINK_RE.search(line)
        if match:
            description = match.group(3).strip() if match.group(3) else None
            entries.append(ParsedEntry(match.group(1).strip(), match.group(2).strip(), description))
            continue

        match = ANGLE_LINK_RE.search(line)
        if match:
            url = match.group(1).strip()
            entries.append(ParsedEntry(host_of(url), url))
            continue

        match = BARE_LINK_RE.search(line)
        if match:
            url = match.group(1)
            bracket = BRACKET_TITLE_RE.search(line)
            title = bracket.group(1) if bracket else host_of(url)
            tail = line.split(url, 1)[1]
            description = re.sub(r"^[\s\-–—:]+", "", tail).strip()
            entries.append(ParsedEntry(title.strip(), url.strip(), description or None))

    return entries


def build_legacy_record(entry: ParsedEntry, source_url: str, category: str = DEFAULT_CATEGORY) -> dict:
    """Flat legacy record for one parsed entry; the title is capped at 140 chars."""
    source = host_of(source_url)
    title = entry.title or source
    if entry.description:
        title = f"{title} - {entry.description}"
    now = utc_now_iso()

    return {
        "id": str(uuid.uuid4()),
        "title": truncate_text(title, MAX_TEXT_LENGTH),
        "source": source,
        "url": entry.url,
        "authorId": None,
        "tags": ["awesome", category],
        "categories": [category],
        "lang": "en",
        "publishedAt": now,
        "createdAt": now,
        "score": 0,
    }


def fetch_markdown(url: str, timeout: int = REQUEST_TIMEOUT) -> str:
    """
    Download a raw Markdown file.

    Raises:
        requests.RequestException: On network or HTTP errors.
    """
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def import_awesome_lists(urls: List[str] = None, category: str = DEFAULT_CATEGORY) -> ImportResult:
    """
    Fetch and parse every list; a failing URL is logged and skipped.

    Returns:
        ImportResult with items deduplicated by URL (first occurrence wins).
    """
    urls = list(urls or DEFAULT_AWESOME_URLS)
    result = ImportResult(urls=urls)
    seen_urls = set()

    for url in urls:
        try:
            logger.info("Fetching %s", url)
            markdown = fetch_markdown(url)
        except requests.RequestException as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            result.failed_urls.append(url)
            continue

        entries = parse_markdown(markdown)
        logger.info("Parsed %d candidate entries from %s", len(entries), url)

        for entry in entries:
            if entry.url in seen_urls:
                continue
            try:
                item = ContentItem.from_legacy(build_legacy_record(entry, url, category))
            except ValueError as e:
                logger.debug("Skipping entry %s: %s", entry.url, e)
                continue
            seen_urls.add(entry.url)
            result.items.append(item)

    return result


def write_import(storage: Storage, result: ImportResult, merge: bool = False) -> int:
    """
    Persist an import.

    File storage always gets the items_awesome.json snapshot. With merge,
    items whose link is not yet in the store are appended to it.

    Returns:
        Number of items added to the store (0 without merge).
    """
    if isinstance(storage, JsonFileStorage):
        path = storage.write_records(OUTPUT_FILENAME, result.to_dict())
        logger.info("Wrote %s (%d items)", path, len(result.items))

    if not merge:
        return 0

    existing = storage.read_items()
    known_links = {item.source_link for item in existing if item.source_link}
    new_items = [item for item in result.items if item.source_link not in known_links]
    if new_items:
        storage.write_items(existing + new_items)
    logger.info("Merged %d new items into %s", len(new_items), storage)
    return len(new_items)
