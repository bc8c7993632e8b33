"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.raycaster.preview.export import save_png
    >>> from src.raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> save_png(renderer, "output.png")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.raycaster.preview.display import as_image_array

if TYPE_CHECKING:
    from src.raycaster.core.renderer import Renderer

logger = logging.getLogger(__name__)


def image_to_pil(image: Renderer | npt.NDArray[np.uint8]) -> PILImage.Image:
    """Convert a Renderer or a (H, W, 3) uint8 array to a Pillow RGB image."""
    return PILImage.fromarray(as_image_array(image), mode="RGB")


def save_png(image: Renderer | npt.NDArray[np.uint8], filepath: str) -> None:
    """Save a rendered image as an 8-bit RGB PNG file.

    Args:
        image: A Renderer or a (H, W, 3) uint8 array.
        filepath: Output file path (should end in .png).
    """
    pil_image = image_to_pil(image)
    pil_image.save(filepath, format="PNG")
    logger.info("Saved %dx%d image to %s", pil_image.width, pil_image.height, filepath)


def compute_rmse(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
) -> float:
    """Compute root mean squared error between two 8-bit images.

    Channel values are scaled to [0, 1] first.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = (image_a.astype(np.float64) - image_b.astype(np.float64)) / 255.0
    return float(np.sqrt(np.mean(diff**2)))
