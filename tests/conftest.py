"""
Pytest configuration for the attraction sync tests.
"""

import io
import json
import sqlite3
from typing import Optional

import pytest
from PIL import Image

from attractions.models.records import AttractionRecord
from attractions.services.cache_repository import CacheRepository
from attractions.services.normalizer import to_id


EXTERNAL_SCHEMA = """
CREATE TABLE destinations (
    id TEXT,
    category TEXT,
    description TEXT,
    location TEXT,
    copyright TEXT
)
"""


def make_image_bytes(width: int = 1600, height: int = 1200, fmt: str = "JPEG", mode: str = "RGB") -> bytes:
    """Create an encoded test image."""
    color = (200, 120, 40, 255) if mode == "RGBA" else (200, 120, 40)
    img = Image.new(mode, (width, height), color)
    output = io.BytesIO()
    img.save(output, format=fmt)
    return output.getvalue()


def make_record(name: str = "Trakų Pilis", url: Optional[str] = "https://img.test/a.jpg", **overrides) -> AttractionRecord:
    """Build a cache record with sensible defaults."""
    description = {"name": name, "hours": {"wkd": "08:00-18:00", "std": "10:00-16:00", "snd": "10:00-14:00"},
                   "info": "A fourteenth century island castle on Lake Galvė."}
    location = {"city": "Trakai", "coordinates": {"latitude": 54.65, "longitude": 24.93}}
    fields = {
        "id": to_id(name),
        "category": "heritage",
        "description": json.dumps(description),
        "location": json.dumps(location),
        "name": name,
        "image_url": url,
        "image_copyright": "CC BY-SA",
    }
    fields.update(overrides)
    return AttractionRecord(**fields)


@pytest.fixture
def cache(tmp_path):
    """Cache repository backed by a fresh, migrated temp database."""
    repo = CacheRepository(str(tmp_path / "cache.db"))
    yield repo
    repo.close()


@pytest.fixture
def external_db(tmp_path):
    """Path to an external store with the destinations table created."""
    path = str(tmp_path / "external.db")
    conn = sqlite3.connect(path)
    conn.execute(EXTERNAL_SCHEMA)
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def jpeg_bytes():
    return make_image_bytes()


def make_payload(**overrides) -> dict:
    """A POST /add body that passes every validation rule."""
    payload = {
        "category": "heritage",
        "description": {
            "name": "Trakų Pilis",
            "hours": {"wkd": "10:00-18:00", "std": "10:00-19:00", "snd": "10:00-19:00"},
            "info": "Gothic island castle built in the fourteenth century on Lake Galvė.",
        },
        "location": {
            "city": "Trakai",
            "coordinates": {"latitude": 54.652, "longitude": 24.934},
        },
        "image": {"url": "https://img.test/trakai.jpg", "copyright": "CC BY-SA 4.0"},
    }
    payload.update(overrides)
    return payload
