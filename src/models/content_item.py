"""
Core data model for Topper.

Defines the ContentItem dataclass representing a single ratable piece of
content (a fact, a news snippet, an offer...) with one text variant per
supported locale and a mutable community score.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import re
import uuid

from src.config import SUPPORTED_LANGUAGES


# On-disk column suffix for each locale. Ukrainian is stored as "_ua" in the
# data files while the rest of the system speaks "uk".
DISK_SUFFIXES: dict[str, str] = {
    "en": "en",
    "ro": "ro",
    "uk": "ua",
    "ru": "ru",
}

# Keys owned by ContentItem.to_dict(); anything else on disk goes to `extra`
_KNOWN_KEYS = {
    "content_id",
    "content_canonical_text_en",
    "content_source_link",
    "content_country",
    "content_created_by",
    "content_created",
    "content_published",
    "content_edited",
    "content_type",
    "content_category",
    "content_subcategory",
    "content_tags",
    "content_votes",
    "content_score",
    "lang",
} | {f"content_text_{s}" for s in DISK_SUFFIXES.values()} | {
    f"content_source_name_{s}" for s in DISK_SUFFIXES.values()
}

MAX_TEXT_LENGTH = 140


def normalize_language(lang: Optional[str]) -> Optional[str]:
    """
    Normalize a locale code to the internal form.

    "ua" is accepted as an alias of "uk"; codes are lowercased.
    Empty values normalize to None.
    """
    if not lang:
        return None
    code = str(lang).strip().lower()
    if code == "ua":
        return "uk"
    return code or None


@dataclass
class ContentItem:
    """
    A unit of ratable content.

    Attributes:
        id: Identifier used by the API and the rating ledger.
        text: Text variant per locale (en/ro/uk/ru).
        source_name: Source attribution per locale.
        type: Free-form content type (e.g. "news", "facts").
        category: Free-form category.
        tags: Topic tags (unordered, may be empty).
        score: Signed sum of all applied ratings (plus any seeded score).
        votes: Number of ratings applied.
        lang: Primary locale the item was authored in (None = any).
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    text: dict[str, str] = field(default_factory=dict)
    source_name: dict[str, str] = field(default_factory=dict)
    canonical_text_en: str = ""
    source_link: str = ""
    type: str = ""
    category: str = ""
    subcategory: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    score: int = 0
    votes: int = 0
    lang: Optional[str] = None
    country: Optional[str] = None
    created_by: Optional[str] = None
    created: Optional[str] = None
    published: Optional[str] = None
    edited: Optional[str] = None

    # Unknown on-disk keys, written back untouched
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.lang = normalize_language(self.lang)
        self.validate()

    def validate(self) -> None:
        """
        Validate field shapes.

        Raises:
            ValueError: If validation fails.
        """
        errors = []

        if not self.id or not str(self.id).strip():
            errors.append("id is required and cannot be empty")

        if isinstance(self.score, bool) or not isinstance(self.score, int):
            errors.append(f"score must be an integer, got {self.score!r}")

        if isinstance(self.votes, bool) or not isinstance(self.votes, int) or self.votes < 0:
            errors.append(f"votes must be a non-negative integer, got {self.votes!r}")

        if not isinstance(self.tags, list):
            errors.append("tags must be a list")

        if errors:
            raise ValueError(f"ContentItem validation failed: {'; '.join(errors)}")

    def text_for(self, lang: Optional[str]) -> str:
        """Text in the given locale, falling back to English then any variant."""
        code = normalize_language(lang) or self.lang or "en"
        for candidate in (code, "en"):
            if self.text.get(candidate):
                return self.text[candidate]
        for value in self.text.values():
            if value:
                return value
        return self.canonical_text_en

    def source_name_for(self, lang: Optional[str]) -> str:
        """Source attribution in the given locale, falling back to English."""
        code = normalize_language(lang) or self.lang or "en"
        return self.source_name.get(code) or self.source_name.get("en", "")

    def shares_tag_with(self, other: "ContentItem") -> bool:
        """True when both items carry at least one common tag."""
        return bool(set(self.tags) & set(other.tags))

    def to_dict(self) -> dict:
        """
        Convert to the on-disk record shape.

        Returns:
            Dictionary using the content_* column names.
        """
        data: dict[str, Any] = dict(self.extra)
        data["content_id"] = self.id
        data["content_canonical_text_en"] = self.canonical_text_en
        for lang in SUPPORTED_LANGUAGES:
            data[f"content_text_{DISK_SUFFIXES[lang]}"] = self.text.get(lang, "")
        for lang in SUPPORTED_LANGUAGES:
            data[f"content_source_name_{DISK_SUFFIXES[lang]}"] = self.source_name.get(lang, "")
        data["content_source_link"] = self.source_link
        if self.country is not None:
            data["content_country"] = self.country
        data["content_created_by"] = self.created_by
        data["content_created"] = self.created
        data["content_published"] = self.published
        if self.edited is not None:
            data["content_edited"] = self.edited
        data["content_type"] = self.type
        data["content_category"] = self.category
        if self.subcategory is not None:
            data["content_subcategory"] = self.subcategory
        data["content_tags"] = list(self.tags)
        data["content_votes"] = self.votes
        data["content_score"] = self.score
        data["lang"] = self.lang
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ContentItem":
        """
        Create a ContentItem from an on-disk record.

        Args:
            data: Dictionary with content_* fields.

        Returns:
            New ContentItem instance.
        """
        text = {}
        source_name = {}
        for lang in SUPPORTED_LANGUAGES:
            suffix = DISK_SUFFIXES[lang]
            if data.get(f"content_text_{suffix}"):
                text[lang] = data[f"content_text_{suffix}"]
            if data.get(f"content_source_name_{suffix}"):
                source_name[lang] = data[f"content_source_name_{suffix}"]

        tags = data.get("content_tags") or []

        return cls(
            id=str(data.get("content_id", "")),
            text=text,
            source_name=source_name,
            canonical_text_en=data.get("content_canonical_text_en") or "",
            source_link=data.get("content_source_link") or "",
            type=data.get("content_type") or "",
            category=data.get("content_category") or "",
            subcategory=data.get("content_subcategory"),
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
            score=int(data.get("content_score") or 0),
            votes=int(data.get("content_votes") or 0),
            lang=data.get("lang"),
            country=data.get("content_country"),
            created_by=data.get("content_created_by"),
            created=data.get("content_created"),
            published=data.get("content_published"),
            edited=data.get("content_edited"),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    @classmethod
    def from_legacy(cls, data: dict) -> "ContentItem":
        """
        Translate a flat legacy record into the canonical shape.

        Legacy records look like
        ``{id, title, source, url, tags, categories, lang, score, publishedAt, createdAt}``
        and are produced by import scripts. The title becomes the text in the
        record's language, the first category becomes both type and category.

        Args:
            data: Flat legacy dictionary.

        Returns:
            New ContentItem instance.
        """
        lang = normalize_language(data.get("lang")) or "en"
        title = truncate_text(str(data.get("title") or data.get("name") or "").strip())
        source = str(data.get("source") or "")
        categories = data.get("categories") or []
        category = str(categories[0]) if categories else ""
        raw_id = str(data.get("id") or uuid.uuid4())

        return cls(
            id=re.sub(r"[^A-Za-z0-9_-]", "-", raw_id),
            text={lang: title} if title else {},
            source_name={lang: source} if source else {},
            canonical_text_en=title if lang == "en" else "",
            source_link=str(data.get("url") or ""),
            type=str(data.get("type") or category),
            category=category,
            tags=[str(t) for t in data.get("tags") or []],
            score=int(data.get("score") or 0),
            votes=int(data.get("votes") or 0),
            lang=lang,
            created_by=data.get("authorId"),
            created=data.get("createdAt"),
            published=data.get("publishedAt"),
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"[{self.category or '-'}] {self.text_for(None)[:50]} (score: {self.score})"

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"ContentItem(id={self.id!r}, type={self.type!r}, "
            f"category={self.category!r}, score={self.score}, votes={self.votes})"
        )


def truncate_text(text: str, max_length: int = MAX_TEXT_LENGTH) -> str:
    """
    Trim text to max_length characters, preferring a word boundary.

    Cuts at the last space before the limit when that space is past the
    midpoint, and appends "...".
    """
    if len(text) <= max_length:
        return text
    cut = text[: max_length - 3]
    last_space = cut.rfind(" ")
    if last_space > max_length // 2:
        return cut[:last_space] + "..."
    return cut + "..."
