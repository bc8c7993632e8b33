"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export via Pillow

Example:
    >>> from src.raycaster.preview import show_image, save_png
    >>> from src.raycaster.core.renderer import Renderer
    >>>
    >>> renderer = Renderer(512, 512)
    >>> renderer.render()
    >>> show_image(renderer)
    >>> save_png(renderer, "output.png")
"""

from src.raycaster.preview.display import (
    as_image_array,
    show_comparison,
    show_image,
)
from src.raycaster.preview.export import (
    compute_rmse,
    image_to_pil,
    save_png,
)

__all__ = [
    # Display functions
    "show_image",
    "show_comparison",
    "as_image_array",
    # Export functions
    "save_png",
    "image_to_pil",
    "compute_rmse",
]
