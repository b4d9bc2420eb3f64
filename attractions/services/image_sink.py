"""
Delivery stage of the sync pipeline.

Local mode writes one JPEG per attraction, named by its id. Remote mode
POSTs a single JSON array of {"id", "image"} objects, where image is the
base64 of the original fetched bytes (not the transformed image).

The two modes account for failures differently: a local encode/write
error fails that one id, while a remote transport error fails nothing
and is only reported on the result.
"""

import base64
import logging
from pathlib import Path
from typing import Optional, Union

import requests

from ..config import Config
from ..models.enums import FailureStage, SinkMode
from ..models.records import Downloadable, FailureList, SinkResult

logger = logging.getLogger(__name__)


class ImageSink:
    """Delivers transformed images to local storage or a remote endpoint."""

    def __init__(
        self,
        output_dir: Optional[Union[str, Path]] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        jpeg_quality: int = Config.JPEG_QUALITY,
    ):
        self.output_dir = Path(output_dir if output_dir is not None else Config.image_output_dir())
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else Config.send_timeout()
        self.jpeg_quality = jpeg_quality

    def _target_path(self, root: Path, record_id: str) -> Path:
        """
        <root>/<id>.jpg, refusing ids that would land outside root.

        Raises:
            ValueError: The id contains a path separator or parent reference
        """
        path = (root / f"{record_id}.jpg").resolve()
        if path.parent != root:
            raise ValueError(f"id '{record_id}' is not a plain file name")
        return path

    def save(self, downloadables: list[Downloadable], failures: FailureList) -> SinkResult:
        """Encode each decoded image as <output_dir>/<id>.jpg."""
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            root = self.output_dir.resolve()
        except OSError as e:
            logger.error(f"Cannot use image directory {self.output_dir}: {e}")
            for item in downloadables:
                failures.add(item.id, FailureStage.DELIVER, str(e))
            return SinkResult(mode=SinkMode.LOCAL, delivered=0, failures=failures)

        delivered = 0
        for item in downloadables:
            try:
                path = self._target_path(root, item.id)
                img = item.decoded_image
                # Convert to RGB if needed (for JPEG)
                if img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                img.save(path, format="JPEG", quality=self.jpeg_quality)
            except (OSError, ValueError, AttributeError) as e:
                logger.warning(f"Failed to save image for '{item.id}': {e}")
                failures.add(item.id, FailureStage.DELIVER, str(e))
                continue
            delivered += 1

        logger.info(f"Saved {delivered} image(s) to {self.output_dir}")
        return SinkResult(mode=SinkMode.LOCAL, delivered=delivered, failures=failures)

    def send(self, downloadables: list[Downloadable], url: str, failures: FailureList) -> SinkResult:
        """POST every original image to url as one JSON payload."""
        payload = [
            {
                "id": item.id,
                "image": base64.b64encode(item.image_bytes).decode("ascii"),
            }
            for item in downloadables
        ]

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Failed to send images to {url}: {e}")
            return SinkResult(
                mode=SinkMode.REMOTE,
                delivered=0,
                failures=failures,
                transport_error=str(e),
            )

        if not response.ok:
            # Status is logged only; the batch still counts as sent
            logger.warning(f"Image endpoint {url} answered {response.status_code}")

        logger.info(f"Sent {len(payload)} image(s) to {url}")
        return SinkResult(mode=SinkMode.REMOTE, delivered=len(payload), failures=failures)
