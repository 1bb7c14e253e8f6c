"""Geometry module for the sphere primitive.

Components:
    sphere: Sphere primitive with ray-sphere intersection

The intersection routine is a Taichi function (@ti.func) returning up to
two points ordered nearest first; intersect() wraps it for Python callers.
"""

from .sphere import Sphere, SphereHits, SphereInfo, intersect, intersect_sphere

__all__ = [
    "Sphere",
    "SphereHits",
    "SphereInfo",
    "intersect",
    "intersect_sphere",
]
