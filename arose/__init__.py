"""Procedural rose rendered by sphere-tracing a signed distance field."""

from .flower import DEFAULT_CONTROL_POINTS, Flower, rebuild_model
from .raymarch import Hit, raycast, raymarch
from .render import ProgressiveRenderer, RenderSettings, advance_frame
from .threed import Frame, Ray, Vector

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONTROL_POINTS",
    "Flower",
    "Frame",
    "Hit",
    "ProgressiveRenderer",
    "Ray",
    "RenderSettings",
    "Vector",
    "advance_frame",
    "raycast",
    "raymarch",
    "rebuild_model",
]
