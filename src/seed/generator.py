"""
Demo data generator.

Builds users, categories, multilingual items and a rating ledger. Ratings
are applied to the items through the score updater, so every seeded item
already satisfies score == sum of its ratings and votes == their count.

Usage:
    data = generate_seed_data(rng=random.Random(7))
    write_seed_data(JsonFileStorage(), data)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging
import random
import uuid
from typing import List, Optional

from src.config import SEED_ITEMS, SEED_RATINGS, SEED_USERS, SUPPORTED_LANGUAGES
from src.models.content_item import ContentItem, truncate_text
from src.models.rating import RatingEvent
from src.rating.score_updater import apply_rating
from src.storage.base import Storage
from src.storage.json_files import JsonFileStorage

logger = logging.getLogger(__name__)

SEED_VERSION = "0.0.1"

TITLE_TEMPLATES = {
    "en": [
        "10 surprising facts about {X}",
        "Breaking: {X} changes the market",
        "How to understand {X} in 5 minutes",
        "Top tips for {X} you didn't know",
        "Study reveals new insights into {X}",
        "Why {X} matters today",
    ],
    "ro": [
        "10 fapte surprinzătoare despre {X}",
        "Breaking: {X} schimbă piața",
        "Cum să înțelegi {X} în 5 minute",
        "Sfaturi de top pentru {X} pe care nu le știai",
        "Studiu dezvăluie noi informații despre {X}",
        "De ce contează {X} azi",
    ],
    "uk": [
        "10 дивовижних фактів про {X}",
        "Терміново: {X} змінює ринок",
        "Як зрозуміти {X} за 5 хвилин",
        "Топ порад по {X}, про які ви не знали",
        "Дослідження відкриває нове про {X}",
        "Чому {X} важливий сьогодні",
    ],
    "ru": [
        "10 удивительных фактов про {X}",
        "Срочно: {X} меняет рынок",
        "Как понять {X} за 5 минут",
        "Лучшие советы по {X}, о которых вы не знали",
        "Исследование раскрывает новое о {X}",
        "Почему {X} важно сегодня",
    ],
}

SUBJECTS = ["AI", "climate", "economy", "startup", "education", "health", "sports", "travel"]

TAGS_POOL = [
    "science", "tech", "economy", "health", "politics", "sports",
    "culture", "product", "startup", "travel", "education", "fun",
]

SOURCES = ["Example News", "Facts Daily", "Top Insights", "Open Source", "Community Post", "Global Times"]

# Localized prefix for the source attribution
SOURCE_PREFIXES = {"en": "", "ro": "Sursa ", "uk": "Джерело ", "ru": "Источник "}

CATEGORY_DEFS = [
    ("facts", "Facts"),
    ("news", "News"),
    ("offers", "Offers"),
    ("ads", "Ads"),
    ("products", "Products"),
    ("opinion", "Opinion"),
]

COUNTRIES = ["US", "RO", "UA", "RU"]
SUBCATEGORIES = ["General", "Tech", "Science", "News"]

# Share of ratings cast by known users (the rest are anonymous)
USER_RATING_SHARE = 0.8
# Probability that a rating is positive
POSITIVE_SHARE = 0.55


@dataclass
class SeedData:
    """Everything one seed run produces."""
    users: List[dict] = field(default_factory=list)
    categories: List[dict] = field(default_factory=list)
    items: List[ContentItem] = field(default_factory=list)
    ratings: List[RatingEvent] = field(default_factory=list)
    settings: dict = field(default_factory=dict)


def _days_ago(rng: random.Random, max_days: int, min_days: int = 0) -> str:
    moment = datetime.now(timezone.utc) - timedelta(days=rng.randint(min_days, max_days))
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _uuid(rng: random.Random) -> str:
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def _title(rng: random.Random, lang: str) -> str:
    template = rng.choice(TITLE_TEMPLATES[lang])
    return truncate_text(template.replace("{X}", rng.choice(SUBJECTS)))


def generate_users(rng: random.Random, count: int) -> List[dict]:
    return [
        {
            "id": _uuid(rng),
            "username": f"user{i}",
            "displayName": f"User {i}",
            "role": "admin" if i == 1 else "user",
            "locale": rng.choice(SUPPORTED_LANGUAGES),
            "createdAt": _days_ago(rng, 365, 1),
        }
        for i in range(1, count + 1)
    ]


def generate_categories(rng: random.Random) -> List[dict]:
    return [
        {
            "id": _uuid(rng),
            "slug": slug,
            "name": name,
            "lang": SUPPORTED_LANGUAGES[index % len(SUPPORTED_LANGUAGES)],
        }
        for index, (slug, name) in enumerate(CATEGORY_DEFS)
    ]


def generate_item(rng: random.Random, users: List[dict], categories: List[dict]) -> ContentItem:
    """One item with a text variant in every supported language."""
    lang = rng.choice(SUPPORTED_LANGUAGES)
    text = {code: _title(rng, code) for code in SUPPORTED_LANGUAGES}
    source = rng.choice(SOURCES)
    slug = rng.choice(CATEGORY_DEFS)[0]
    item_id = _uuid(rng)
    author = rng.choice(users)["id"] if users and rng.random() < USER_RATING_SHARE else None
    category_ids = [c["id"] for c in rng.sample(categories, rng.randint(1, 2))] if categories else []

    return ContentItem(
        id=item_id,
        text=text,
        source_name={code: f"{SOURCE_PREFIXES[code]}{source}" for code in SUPPORTED_LANGUAGES},
        canonical_text_en=text["en"],
        source_link=f"https://example.test/source/{source.lower().replace(' ', '-')}/{item_id}",
        type=slug,
        category=slug,
        subcategory=rng.choice(SUBCATEGORIES),
        tags=rng.sample(TAGS_POOL, rng.randint(1, 4)),
        lang=lang,
        country=rng.choice(COUNTRIES),
        created_by=author,
        created=_days_ago(rng, 365),
        published=_days_ago(rng, 365),
        extra={"categories": category_ids},
    )


def generate_ratings(
    rng: random.Random,
    items: List[ContentItem],
    users: List[dict],
    count: int,
) -> List[RatingEvent]:
    """Random ledger; each rating is applied to its item as it is created."""
    ratings = []
    if not items:
        return ratings

    for _ in range(count):
        item = rng.choice(items)
        user_id = rng.choice(users)["id"] if users and rng.random() < USER_RATING_SHARE else None
        value = 1 if rng.random() < POSITIVE_SHARE else -1
        apply_rating(item, value)
        ratings.append(RatingEvent(
            item_id=item.id,
            value=value,
            user_id=user_id,
            id=f"rating_seed_{_uuid(rng).replace('-', '')}",
            created_at=_days_ago(rng, 365),
        ))
    return ratings


def generate_seed_data(
    users: int = SEED_USERS,
    items: int = SEED_ITEMS,
    ratings: int = SEED_RATINGS,
    rng: Optional[random.Random] = None,
) -> SeedData:
    """
    Generate a complete demo data set.

    Args:
        users: Number of users.
        items: Number of items.
        ratings: Number of ratings.
        rng: Random source (pass a seeded instance for reproducible output).
    """
    if users < 0 or items < 0 or ratings < 0:
        raise ValueError("seed counts must be non-negative")

    rng = rng or random.Random()
    data = SeedData()
    data.users = generate_users(rng, users)
    data.categories = generate_categories(rng)
    data.items = [generate_item(rng, data.users, data.categories) for _ in range(items)]
    data.ratings = generate_ratings(rng, data.items, data.users, ratings)
    data.settings = {
        "version": SEED_VERSION,
        "seededAt": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "counts": {
            "users": len(data.users),
            "items": len(data.items),
            "ratings": len(data.ratings),
            "categories": len(data.categories),
        },
    }
    return data


def write_seed_data(storage: Storage, data: SeedData) -> None:
    """
    Replace the store contents with a seed data set.

    Users, categories and settings are only written for file storage.
    """
    storage.reset(data.items, data.ratings)
    if isinstance(storage, JsonFileStorage):
        storage.write_records("users.json", data.users)
        storage.write_records("categories.json", data.categories)
        storage.write_records("settings.json", data.settings)
    logger.info(
        "Seeded %d users, %d items, %d ratings into %s",
        len(data.users), len(data.items), len(data.ratings), storage,
    )
