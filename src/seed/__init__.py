"""
Seed module.

Demo data generation and the awesome-list importer.
"""

from src.seed.generator import SeedData, generate_seed_data, write_seed_data
from src.seed.importer import (
    DEFAULT_AWESOME_URLS,
    OUTPUT_FILENAME,
    ImportResult,
    ParsedEntry,
    host_of,
    parse_markdown,
    build_legacy_record,
    fetch_markdown,
    import_awesome_lists,
    write_import,
)

__all__ = [
    "SeedData",
    "generate_seed_data",
    "write_seed_data",
    "DEFAULT_AWESOME_URLS",
    "OUTPUT_FILENAME",
    "ImportResult",
    "ParsedEntry",
    "host_of",
    "parse_markdown",
    "build_legacy_record",
    "fetch_markdown",
    "import_awesome_lists",
    "write_import",
]
