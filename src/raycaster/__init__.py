"""Taichi-based direct-lighting ray caster.

This package renders a static scene of spheres and a checkerboard ground
plane into an 8-bit RGB image:
- Closed-form ray intersection for spheres and tiled planes
- Per-point material model (albedo, specular, emissive, reflectance)
- Direct lighting where every scene object is a candidate light
- Hard shadows from one shadow ray per candidate light

Subpackages:
    core: Vector utilities, shader, and the per-pixel render driver
    geometry: Shape primitives and intersection algorithms
    materials: Surface material registry
    scene: Scene object storage, scene queries, and scene building
    camera: Pinhole camera with per-pixel ray generation
    preview: Image export and display utilities
"""

__version__ = "0.1.0"
