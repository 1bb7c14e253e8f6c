"""SoftRT: a Taichi-based sphere ray tracer.

This package renders scenes of spheres by casting one ray per pixel,
finding the sphere nearest to the camera and shading it with a directional
light, a shadow ray, a Blinn-Phong highlight and a bounded chain of bounce
rays.

Subpackages:
    core: Ray and vector utilities, shading configuration, integrator
    geometry: Sphere primitive and ray-sphere intersection
    materials: Surface material storage (color + roughness)
    scene: Scene model, scene-level queries and the demo scene
    camera: View-plane camera with per-pixel ray generation
"""

__version__ = "0.1.0"
