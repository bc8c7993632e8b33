"""Demo scene: four balls and a distant light over a checkerboard floor.

The scene consists of, in insertion order:
- A large red ball resting on the floor at the origin
- A purple ball to the left
- A small blue ball in front
- A yellow ball to the right that glows on its own
- A small, distant white light up and to the left
- An infinite checkerboard floor through the origin

Every object is probed as a light by the shader, but only the yellow ball
and the white light emit, so they are the only light sources.

The material values are those of a scene in which each ball edited one
shared material record. Fields a ball did not set kept the previous
ball's value, which is why the purple ball has no emission and the white
light has a green albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from src.raycaster.scene.demo import create_demo_scene
    >>> from src.raycaster.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> # Now render using the scene and camera
"""

from dataclasses import dataclass

from src.raycaster.camera.pinhole import Camera
from src.raycaster.scene.manager import SceneManager

# =============================================================================
# Demo Scene Parameters
# =============================================================================


@dataclass
class DemoSceneParams:
    """Parameters for configuring the demo scene.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        vfov: Vertical field of view in degrees.
        light_color: Emission of the distant white light.
        light_tile_color: Albedo of the light floor tiles.
        dark_tile_color: Albedo of the dark floor tiles.
        tile_size: Edge length of one floor tile.

    Example:
        >>> params = DemoSceneParams(width=256, height=256)
        >>> params.vfov
        60.0
    """

    width: int = 512
    height: int = 512
    vfov: float = 60.0
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    light_tile_color: tuple[float, float, float] = (0.9, 0.9, 0.9)
    dark_tile_color: tuple[float, float, float] = (0.2, 0.2, 0.2)
    tile_size: float = 1.0


# =============================================================================
# Demo Scene Constants
# =============================================================================

CAMERA_POSITION = (0.0, 6.0, 8.0)
CAMERA_DIRECTION = (0.0, -0.8, -1.0)

RED_BALL_CENTER = (0.0, 2.0, 0.0)
RED_BALL_RADIUS = 2.0
PURPLE_BALL_CENTER = (-2.5, 1.0, 2.0)
PURPLE_BALL_RADIUS = 1.0
BLUE_BALL_CENTER = (0.0, 0.5, 3.0)
BLUE_BALL_RADIUS = 0.5
YELLOW_BALL_CENTER = (2.8, 0.8, 2.0)
YELLOW_BALL_RADIUS = 0.8
LIGHT_CENTER = (-10.8, 6.4, 10.0)
LIGHT_RADIUS = 0.4


# =============================================================================
# Demo Scene Factory
# =============================================================================


def create_demo_scene(
    width: int | None = None,
    height: int | None = None,
    vfov: float | None = None,
    params: DemoSceneParams | None = None,
) -> tuple[SceneManager, Camera]:
    """Create the demo scene and the camera that views it.

    Explicit width, height, and vfov arguments override the values in params.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        vfov: Vertical field of view in degrees.
        params: Optional DemoSceneParams. If None, uses DemoSceneParams().

    Returns:
        A tuple of (SceneManager, Camera). The camera is not set up yet;
        pass it to setup_camera() before rendering.

    Example:
        >>> scene, camera = create_demo_scene()
        >>> scene.get_sphere_count(), scene.get_plane_count()
        (5, 1)
    """
    if params is None:
        params = DemoSceneParams()

    scene = SceneManager()

    # =========================================================================
    # Balls
    # =========================================================================

    scene.add_sphere_with_new_material(
        center=RED_BALL_CENTER,
        radius=RED_BALL_RADIUS,
        albedo=(0.7, 0.1, 0.1),
        specular=(0.9, 0.1, 0.1),
        reflectance=0.5,
    )
    scene.add_sphere_with_new_material(
        center=PURPLE_BALL_CENTER,
        radius=PURPLE_BALL_RADIUS,
        albedo=(0.7, 0.0, 0.7),
        specular=(0.9, 0.9, 0.8),
        reflectance=0.5,
    )
    scene.add_sphere_with_new_material(
        center=BLUE_BALL_CENTER,
        radius=BLUE_BALL_RADIUS,
        albedo=(0.0, 0.3, 1.0),
        specular=(0.0, 0.0, 1.0),
    )
    scene.add_sphere_with_new_material(
        center=YELLOW_BALL_CENTER,
        radius=YELLOW_BALL_RADIUS,
        albedo=(1.0, 1.0, 1.0),
        emissive=(1.0, 1.0, 0.2),
    )

    # =========================================================================
    # Light
    # =========================================================================

    scene.add_sphere_with_new_material(
        center=LIGHT_CENTER,
        radius=LIGHT_RADIUS,
        albedo=(0.0, 0.8, 0.0),
        emissive=params.light_color,
    )

    # =========================================================================
    # Floor
    # =========================================================================

    light_tile = scene.add_material(albedo=params.light_tile_color)
    dark_tile = scene.add_material(albedo=params.dark_tile_color)
    scene.add_tiled_plane(
        point=(0.0, 0.0, 0.0),
        normal=(0.0, 1.0, 0.0),
        material_id=light_tile,
        alt_material_id=dark_tile,
        tile_size=params.tile_size,
    )

    # =========================================================================
    # Camera Setup
    # =========================================================================

    camera = Camera.looking_along(
        position=CAMERA_POSITION,
        direction=CAMERA_DIRECTION,
        vfov=params.vfov if vfov is None else vfov,
        width=params.width if width is None else width,
        height=params.height if height is None else height,
    )

    return scene, camera
