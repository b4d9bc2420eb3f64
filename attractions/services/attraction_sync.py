"""
Attraction sync service.

Drains the local cache into an external store, then fetches, transforms
and delivers each attraction's photo. One failure list is threaded
through the image stages so a bad record never aborts the batch.

Storage faults (empty cache, unreadable cache, failed external write)
abort the run. Everything after the external write is per-record.
"""

import logging
from typing import Optional

from ..feature_flags import FeatureFlags, get_feature_flags
from ..models.records import FailureList, SyncResult
from .cache_repository import CacheRepository
from .external_store import ExternalStoreWriter
from .image_fetcher import ImageFetcher, collect_downloadables
from .image_sink import ImageSink
from .image_transform import ImageTransformer

logger = logging.getLogger(__name__)


class AttractionSync:
    """
    Runs sync runs against one cache.

    At most one run should be active at a time: concurrent runs would race
    on the cache clear.
    """

    def __init__(
        self,
        cache: CacheRepository,
        writer: Optional[ExternalStoreWriter] = None,
        fetcher: Optional[ImageFetcher] = None,
        transformer: Optional[ImageTransformer] = None,
        sink: Optional[ImageSink] = None,
        flags: Optional[FeatureFlags] = None,
    ):
        self.cache = cache
        self.flags = flags or get_feature_flags()
        self.writer = writer or ExternalStoreWriter(cache, flags=self.flags)
        self.fetcher = fetcher or ImageFetcher()
        self.transformer = transformer or ImageTransformer()
        self.sink = sink or ImageSink()

    def merge(self, store_ref: str, endpoint: Optional[str] = None) -> SyncResult:
        """
        Run one sync.

        Args:
            store_ref: Location of the external store
            endpoint: If given, images are POSTed here instead of saved locally

        Returns:
            SyncResult with delivery counts and the failure list

        Raises:
            StorageFault: The cache could not be read (or was empty), or the
                external write failed. No image work is done.
        """
        records = self.cache.read_all_attractions()
        logger.info(f"Sync started: {len(records)} cached attraction(s) -> {store_ref}")

        # The external write and cache clear complete before any image work;
        # images are processed from the snapshot read above
        written = self.writer.write_batch(store_ref, records)

        failures = FailureList()
        downloadables = collect_downloadables(records, failures)
        downloadables = self.fetcher.download(
            downloadables, failures, parallel=self.flags.feature_parallel_fetch
        )
        downloadables = self.transformer.process(downloadables, failures)

        if endpoint:
            sink_result = self.sink.send(downloadables, endpoint, failures)
        else:
            sink_result = self.sink.save(downloadables, failures)

        result = SyncResult(total=len(records), written=written, sink=sink_result, endpoint=endpoint)

        if result.all_failed:
            logger.warning(f"Sync finished but every record failed ({result.total})")
        logger.info(
            f"Sync complete: {sink_result.delivered} delivered, "
            f"{sink_result.failed} failed ({sink_result.mode.value})"
        )
        return result

    def initialize_titles(self, store_ref: str) -> int:
        """
        Seed cache titles from the attractions already in an external store.

        Returns:
            Number of titles added
        """
        titles = self.writer.read_titles(store_ref)
        added = self.cache.add_titles(titles)
        logger.info(f"Seeded {added} title(s) from {store_ref}")
        return added
