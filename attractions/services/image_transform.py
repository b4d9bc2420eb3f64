"""
Image transform stage of the sync pipeline.

Decodes fetched bytes, resizes to a fixed width preserving aspect ratio,
then takes the largest centered crop with the configured aspect ratio.
"""

import io
import logging
from typing import Optional

from PIL import Image

from ..config import Config
from ..errors import DecodeFault, TransformFault
from ..models.enums import FailureStage
from ..models.records import Downloadable, FailureList

logger = logging.getLogger(__name__)


def decode_image(image_bytes: Optional[bytes]) -> Image.Image:
    """
    Decode raw bytes into a fully loaded Pillow image.

    Raises:
        DecodeFault: Bytes are missing or not a supported image
    """
    if not image_bytes:
        raise DecodeFault("no image bytes")
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeFault(f"cannot decode image: {e}") from e
    return img


def resize_to_width(img: Image.Image, width: int = Config.TARGET_WIDTH) -> Image.Image:
    """
    Resize to a fixed width, height following the aspect ratio (bicubic).

    Raises:
        TransformFault: The scaled height rounds to zero
    """
    original_width, original_height = img.size
    height = round(original_height * width / original_width)
    if height < 1:
        raise TransformFault(
            f"{original_width}x{original_height} cannot be scaled to width {width}"
        )
    return img.resize((width, height), Image.Resampling.BICUBIC)


def crop_to_ratio(img: Image.Image, ratio: tuple[int, int] = Config.CROP_RATIO) -> Image.Image:
    """
    Largest centered crop with the given width:height ratio.

    Raises:
        TransformFault: The image is too small to hold a non-empty crop
    """
    ratio_w, ratio_h = ratio
    width, height = img.size

    crop_width = width
    crop_height = width * ratio_h // ratio_w
    if crop_height > height:
        crop_height = height
        crop_width = height * ratio_w // ratio_h

    if crop_width < 1 or crop_height < 1:
        raise TransformFault(f"{width}x{height} is too small for a {ratio_w}:{ratio_h} crop")

    left = (width - crop_width) // 2
    top = (height - crop_height) // 2
    return img.crop((left, top, left + crop_width, top + crop_height))


class ImageTransformer:
    """Runs decode, resize and crop over a batch of downloadables."""

    def __init__(
        self,
        width: int = Config.TARGET_WIDTH,
        ratio: tuple[int, int] = Config.CROP_RATIO,
    ):
        self.width = width
        self.ratio = ratio

    def transform(self, image_bytes: bytes) -> Image.Image:
        """Decode, resize and crop a single image."""
        img = decode_image(image_bytes)
        img = resize_to_width(img, self.width)
        return crop_to_ratio(img, self.ratio)

    def process(self, downloadables: list[Downloadable], failures: FailureList) -> list[Downloadable]:
        """
        Transform every downloadable, dropping the ones that fail.

        Survivors carry decoded_image and keep their original image_bytes,
        which the remote sink transmits instead of the transformed image.
        """
        processed = []
        for item in downloadables:
            try:
                item.decoded_image = self.transform(item.image_bytes)
            except DecodeFault as e:
                logger.warning(f"Image decode failed for '{item.id}': {e}")
                failures.add(item.id, FailureStage.DECODE, str(e))
                continue
            except TransformFault as e:
                logger.warning(f"Image crop failed for '{item.id}': {e}")
                failures.add(item.id, FailureStage.TRANSFORM, str(e))
                continue
            processed.append(item)

        logger.info(f"Processed {len(processed)} of {len(downloadables)} image(s)")
        return processed
