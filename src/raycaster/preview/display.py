"""Matplotlib-based preview display for rendered images.

The render target is already 8-bit RGB with row 0 at the top, which is the
layout imshow() expects, so no tone mapping or flipping is applied.

Example:
    >>> from src.raycaster.preview.display import show_image
    >>> from src.raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> show_image(renderer, title="Demo scene")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.raycaster.core.renderer import Renderer


def as_image_array(image: Renderer | npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Get a (H, W, 3) uint8 array from a Renderer or an array.

    Raises:
        ValueError: If the array does not have shape (H, W, 3).
    """
    if isinstance(image, np.ndarray):
        array = image
    else:
        array = image.get_image_uint8()

    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {array.shape}")
    return array.astype(np.uint8, copy=False)


def show_image(
    image: Renderer | npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        image: A Renderer or a (H, W, 3) uint8 array.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = as_image_array(image)
    height, width, _ = display_image.shape

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")
    ax.set_title(title if title is not None else f"Render Preview - {width}x{height}")

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.uint8],
    image_b: npt.NDArray[np.uint8],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two images with difference view.

    Args:
        image_a: First image array (H, W, 3), uint8.
        image_b: Second image array (H, W, 3), uint8.
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images, in [0, 1] units.
    """
    import matplotlib.pyplot as plt

    from src.raycaster.preview.export import compute_rmse

    rmse = compute_rmse(image_a, image_b)

    diff = np.abs(image_a.astype(np.float64) - image_b.astype(np.float64)) / 255.0
    diff_amplified = np.clip(diff * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(image_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(image_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
