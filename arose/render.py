"""Progressive, time-sliced raymarch renderer.

Each call to :meth:`ProgressiveRenderer.update` does a bounded amount of
work: it shades pixels from a saved cursor until a wall-clock deadline
passes, then returns so the caller can keep handling input. A full frame
usually takes many calls. Invalidating the scene redraws the static chrome
and restarts the scan from pixel 0.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence
import time

import numpy as np

from .flower import CULL_DISTANCE, rebuild_model
from .raymarch import raycast, raymarch
from .sdf import SMOOTH_K
from .surface import Surface
from .threed import Ray, Vector, Z_AXIS


# =============================================================================
# Constants
# =============================================================================

DEFAULT_BUDGET_MS = 10.0

# Orthographic camera: rays start this far in front of the z=0 plane
CAMERA_DEPTH = 100.0
OUTLINE_MARGIN = 1.5
AMBIENT = 0.25
DEFAULT_LIGHT_POS = Vector(-200.0, 900.0, -400.0)

# Multi-sample blur
BLUR_SPREAD = 1.0    # Half-width of the sample grid, in pixels
BLUR_SIGMA = 0.6
BLUR_JITTER = 0.3    # Jitter as a fraction of the grid spacing

BACKGROUND_COLOR = (250, 246, 240)
OUTLINE_COLOR = (28, 56, 30)
FLOWER_COLOR = (70, 150, 70)
GUIDE_COLOR = (170, 170, 200)
HANDLE_COLOR = (90, 90, 220)
HANDLE_HOVER_COLOR = (240, 120, 40)
HANDLE_SIZE = 7


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000.0


# =============================================================================
# Settings
# =============================================================================

@dataclass
class RenderSettings:
    """Per-render tuning knobs."""
    budget_ms: float = DEFAULT_BUDGET_MS
    blur_window: int = 1
    outline_margin: float = OUTLINE_MARGIN
    ambient: float = AMBIENT
    camera_depth: float = CAMERA_DEPTH
    light_pos: Vector = DEFAULT_LIGHT_POS
    seed: int = 0
    vein_depth: int = 1
    smooth_k: float = SMOOTH_K
    cull_distance: Optional[float] = CULL_DISTANCE
    background: tuple = BACKGROUND_COLOR
    outline: tuple = OUTLINE_COLOR
    color: tuple = FLOWER_COLOR
    _pattern: Optional[list] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.budget_ms <= 0:
            raise ValueError(f"budget_ms must be positive, got {self.budget_ms}")
        if self.blur_window < 1 or self.blur_window % 2 == 0:
            raise ValueError(
                f"blur_window must be 1 or an odd number >= 3, got {self.blur_window}"
            )
        if self.camera_depth <= 0:
            raise ValueError(f"camera_depth must be positive, got {self.camera_depth}")

    def sample_pattern(self) -> list:
        """Sub-pixel ``(dx, dy, weight)`` samples, computed once and cached."""
        if self._pattern is None:
            self._pattern = sample_pattern(self.blur_window, self.seed)
        return self._pattern

    def model_options(self) -> dict:
        return {
            "vein_depth": self.vein_depth,
            "k": self.smooth_k,
            "cull_distance": self.cull_distance,
        }


def sample_pattern(window: int, seed: int = 0) -> list:
    """Jittered ``window`` x ``window`` grid with normalized Gaussian weights.

    A window of 1 is a single centered sample, so no blur.
    """
    if window == 1:
        return [(0.0, 0.0, 1.0)]
    rng = np.random.default_rng(seed)
    grid = np.linspace(-BLUR_SPREAD, BLUR_SPREAD, window)
    dx, dy = np.meshgrid(grid, grid)
    spacing = 2.0 * BLUR_SPREAD / (window - 1)
    dx = dx + rng.uniform(-BLUR_JITTER, BLUR_JITTER, dx.shape) * spacing
    dy = dy + rng.uniform(-BLUR_JITTER, BLUR_JITTER, dy.shape) * spacing
    weights = np.exp(-(dx ** 2 + dy ** 2) / (2.0 * BLUR_SIGMA ** 2))
    weights /= weights.sum()
    return list(zip(dx.ravel().tolist(), dy.ravel().tolist(), weights.ravel().tolist()))


# =============================================================================
# Shading
# =============================================================================

def pixel_coords(index: int, width: int) -> tuple:
    """Map a linear raster index to ``(x, y)``; row 0 is the bottom row."""
    return index % width, index // width


def shade_sample(scene: Callable[[Vector], float], px: float, py: float,
                 light_pos: Vector, settings: RenderSettings) -> tuple:
    """Color seen by the camera ray through model point ``(px, py)``.

    The silhouette pass marches a field inflated by the outline margin; a
    miss there is background. The shading pass marches the true field from
    the silhouette hit; a miss there lands in the outline band.
    """
    ray = Ray(Vector(px, py, -settings.camera_depth), Z_AXIS)
    max_distance = 2.0 * settings.camera_depth

    margin = settings.outline_margin
    traveled = raymarch(ray, max_distance, lambda p: scene(p) - margin)
    if traveled is None:
        return settings.background

    inner = Ray(ray.sample(traveled), Z_AXIS)
    hit = raycast(inner, max_distance - traveled, scene)
    if hit is None:
        return settings.outline

    to_light = (light_pos - hit.point).unit()
    diffuse = max(0.0, hit.normal.dot(to_light))
    intensity = settings.ambient + (1.0 - settings.ambient) * diffuse
    return tuple(c * intensity for c in settings.color)


def shade_pixel(scene: Callable[[Vector], float], x: int, y: int,
                light_pos: Vector, settings: RenderSettings) -> tuple:
    """Weighted average of the blur samples around pixel ``(x, y)``."""
    r = g = b = 0.0
    for dx, dy, weight in settings.sample_pattern():
        sr, sg, sb = shade_sample(scene, x + 0.5 + dx, y + 0.5 + dy, light_pos, settings)
        r += sr * weight
        g += sg * weight
        b += sb * weight
    return (
        int(round(min(max(r, 0.0), 255.0))),
        int(round(min(max(g, 0.0), 255.0))),
        int(round(min(max(b, 0.0), 255.0))),
    )


def advance_frame(cursor: int, deadline: float, model, width: int, height: int,
                  light_pos: Vector, settings: Optional[RenderSettings] = None,
                  clock: Callable[[], float] = now_ms) -> tuple:
    """Shade pixels from ``cursor`` until the deadline passes or the frame wraps.

    At least one pixel is shaded per call. The clock is only checked between
    pixels.

    Args:
        cursor: Linear raster index to resume from
        deadline: Clock value (ms) after which no new pixel is started
        model: Anything with a ``distance(point)`` method
        width, height: Raster size in pixels
        light_pos: Point light position in model space
        settings: Render settings (defaults when None)
        clock: Millisecond clock

    Returns:
        Tuple of (new cursor, list of ((x, y), color))
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"raster size must be positive, got {width}x{height}")
    total = width * height
    if not 0 <= cursor < total:
        raise ValueError(f"cursor {cursor} outside raster of {total} pixels")
    settings = settings or RenderSettings()

    pixels = []
    scene = model.distance
    while True:
        x, y = pixel_coords(cursor, width)
        pixels.append(((x, y), shade_pixel(scene, x, y, light_pos, settings)))
        cursor = (cursor + 1) % total
        if cursor == 0 or clock() > deadline:
            break
    return cursor, pixels


# =============================================================================
# Scheduler
# =============================================================================

class ProgressiveRenderer:
    """Resumable raster scan over a surface, one time slice per update.

    State is the pixel ``cursor``, a ``needs_restart`` flag raised by
    :meth:`invalidate`, and ``frame_complete`` once the scan has wrapped.
    """

    def __init__(self, surface: Surface, settings: Optional[RenderSettings] = None,
                 clock: Callable[[], float] = now_ms):
        self.surface = surface
        self.settings = settings or RenderSettings()
        self.clock = clock

        self.cursor = 0
        self.needs_restart = True
        self.frame_complete = False

        self.calls = 0
        self.pixels_drawn = 0
        self.frames_completed = 0

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    @property
    def progress(self) -> float:
        """Fraction of the current frame already shaded."""
        if self.frame_complete:
            return 1.0
        return self.cursor / (self.width * self.height)

    @property
    def idle(self) -> bool:
        return self.frame_complete and not self.needs_restart

    def invalidate(self):
        """Discard the current scan; the next update redraws and restarts."""
        self.needs_restart = True

    def update(self, control_points: Sequence[Vector], handles: Sequence = ()) -> int:
        """Run one time slice and return the number of pixels written."""
        deadline = self.clock() + self.settings.budget_ms
        self.calls += 1

        if self.needs_restart:
            self.draw_chrome(handles)
            self.cursor = 0
            self.needs_restart = False
            self.frame_complete = False
            return 0

        if self.frame_complete:
            return 0

        model = rebuild_model(control_points, **self.settings.model_options())
        self.cursor, pixels = advance_frame(
            self.cursor, deadline, model, self.width, self.height,
            self.settings.light_pos, self.settings, self.clock,
        )
        for (x, y), color in pixels:
            self.surface.set_pixel(x, y, color)
        self.pixels_drawn += len(pixels)

        if self.cursor == 0:
            self.frame_complete = True
            self.frames_completed += 1
        return len(pixels)

    def draw_chrome(self, handles: Sequence = ()):
        """Background, guide lines between handles, and the handles."""
        self.surface.fill(self.settings.background)
        positions = [(h.position.x, h.position.y) for h in handles]
        for start, end in zip(positions, positions[1:]):
            self.surface.stroke_line(start, end, GUIDE_COLOR)
        half = HANDLE_SIZE // 2
        for handle, (x, y) in zip(handles, positions):
            color = HANDLE_HOVER_COLOR if handle.hovered else HANDLE_COLOR
            self.surface.fill_rect(int(round(x)) - half, int(round(y)) - half,
                                   HANDLE_SIZE, HANDLE_SIZE, color)
