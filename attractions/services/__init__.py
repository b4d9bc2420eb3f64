from .normalizer import to_id
from .title_matcher import similarity, find_similar
from .cache_repository import CacheRepository
from .external_store import ExternalStoreWriter
from .attraction_sync import AttractionSync

__all__ = [
    "to_id",
    "similarity",
    "find_similar",
    "CacheRepository",
    "ExternalStoreWriter",
    "AttractionSync",
]
