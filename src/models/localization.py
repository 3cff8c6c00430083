"""
Localized projection of a ContentItem.

The API never mutates stored items to add per-request language fields.
Instead `localize()` returns a fixed-shape LocalizedView for the requested
locale.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.models.content_item import ContentItem, normalize_language


@dataclass(frozen=True)
class LocalizedView:
    """Read-only, language-resolved view of an item."""

    id: str
    lang: Optional[str]
    display_lang: str
    content_text: str
    source_name: str
    source_link: str
    type: str
    category: str
    tags: tuple[str, ...] = field(default_factory=tuple)
    score: int = 0
    votes: int = 0
    published: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lang": self.lang,
            "displayLang": self.display_lang,
            "contentText": self.content_text,
            "sourceName": self.source_name,
            "sourceLink": self.source_link,
            "type": self.type,
            "category": self.category,
            "tags": list(self.tags),
            "score": self.score,
            "votes": self.votes,
            "published": self.published,
        }


def localize(item: ContentItem, lang: Optional[str] = None) -> LocalizedView:
    """
    Project an item into the requested locale.

    The requested language wins, then the item's own language, then English.
    Unknown locales resolve to English.
    """
    display_lang = normalize_language(lang) or item.lang or "en"
    if display_lang not in ("en", "ro", "uk", "ru"):
        display_lang = "en"

    return LocalizedView(
        id=item.id,
        lang=item.lang,
        display_lang=display_lang,
        content_text=item.text_for(display_lang),
        source_name=item.source_name_for(display_lang),
        source_link=item.source_link,
        type=item.type,
        category=item.category,
        tags=tuple(item.tags),
        score=item.score,
        votes=item.votes,
        published=item.published,
    )
