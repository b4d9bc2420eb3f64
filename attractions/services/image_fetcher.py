"""
Image acquisition for the sync pipeline.

Splits a batch of attractions into those with an image URL and those
without, then downloads the raw bytes for the former. Every download
carries an explicit timeout so one slow host cannot stall the batch.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Union

import requests

from ..config import Config
from ..errors import NetworkFault
from ..models.enums import FailureStage
from ..models.records import AttractionRecord, Downloadable, FailureList

logger = logging.getLogger(__name__)


def collect_downloadables(
    records: Iterable[AttractionRecord],
    failures: FailureList,
) -> list[Downloadable]:
    """Records with an image URL become downloadables; the rest fail as no_url."""
    downloadables = []
    for record in records:
        if record.image_url:
            downloadables.append(Downloadable(id=record.id, url=record.image_url))
        else:
            failures.add(record.id, FailureStage.NO_URL, "no image url")
    return downloadables


class ImageFetcher:
    """
    Downloads image bytes with a shared requests session.

    Only transport errors count as failures: the HTTP status code is not
    inspected, so an error page body is forwarded to the transform stage
    (where it will normally fail to decode).
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else Config.fetch_timeout()
        self.max_workers = max_workers or Config.fetch_workers()

    def _fetch(self, item: Downloadable) -> Union[Downloadable, NetworkFault]:
        try:
            response = self.session.get(item.url, timeout=self.timeout)
            try:
                item.image_bytes = response.content
            finally:
                response.close()
        except requests.RequestException as e:
            return NetworkFault(f"fetch failed: {e}")
        return item

    def download(
        self,
        downloadables: list[Downloadable],
        failures: FailureList,
        parallel: bool = False,
    ) -> list[Downloadable]:
        """
        Fetch bytes for every downloadable.

        Args:
            downloadables: Items produced by collect_downloadables
            failures: Run failure list; failed fetches are appended as fetch
            parallel: Use a bounded thread pool instead of fetching in order

        Returns:
            Downloadables that now carry image_bytes, in input order
        """
        if parallel and len(downloadables) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(self._fetch, downloadables))
        else:
            outcomes = [self._fetch(item) for item in downloadables]

        # Single writer: failures are merged here, after all fetches finished
        fetched = []
        fetch_failures = FailureList()
        for item, outcome in zip(downloadables, outcomes):
            if isinstance(outcome, NetworkFault):
                logger.warning(f"Image fetch failed for '{item.id}' ({item.url}): {outcome.message}")
                fetch_failures.add(item.id, FailureStage.FETCH, outcome.message)
            else:
                fetched.append(outcome)
        failures.merge(fetch_failures)

        logger.info(f"Downloaded {len(fetched)} of {len(downloadables)} image(s)")
        return fetched
