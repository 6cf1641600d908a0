#!/usr/bin/env python3
"""Interactive rose viewer - pygame frontend over the progressive renderer.

Controls:
    Drag handle    Move a stem control point
    B              Cycle blur window (1, 3, 5)
    D              Reset control points
    F              Toggle status line
    H/?            Toggle help
    Q/ESC          Quit
"""

from dataclasses import replace
import argparse

import pygame

from .interaction import Interaction, window_to_model
from .render import (
    DEFAULT_BUDGET_MS,
    HANDLE_COLOR,
    HANDLE_HOVER_COLOR,
    HANDLE_SIZE,
    ProgressiveRenderer,
    RenderSettings,
)
from .surface import ArraySurface


# =============================================================================
# Constants
# =============================================================================

BLUR_WINDOWS = (1, 3, 5)
TICK_FPS = 60

FONT_SIZE = 18
PADDING = 8
HELP_OVERLAY_ALPHA = 200


HELP_LINES = [
    "Keybindings:",
    "",
    "  Drag handle    Move stem control point",
    "  B              Cycle blur window",
    "  D              Reset control points",
    "  F              Toggle status line",
    "  H / ?          This help",
    "  Q / ESC        Quit",
]


# =============================================================================
# Main Viewer Class
# =============================================================================

class RoseViewer:
    """Pygame window that feeds input to the handles and blits each slice."""

    def __init__(self, width: int = 400, height: int = 600,
                 settings: RenderSettings = None):
        self.width = width
        self.height = height

        self.surface = ArraySurface(width, height)
        self.renderer = ProgressiveRenderer(self.surface, settings)
        self.interaction = Interaction()

        # UI state
        self.show_status = True
        self.show_help = False
        self.running = True

        # Timing
        self.slice_times = []

        # Pygame objects (initialized in run())
        self.screen = None
        self.clock = None
        self.font = None

    def run(self):
        """Main entry point - initialize pygame and run the event loop."""
        self._init_pygame()

        while self.running:
            self._handle_events()
            self._tick()
            self.clock.tick(TICK_FPS)

        self._print_stats()
        pygame.quit()

    def _init_pygame(self):
        pygame.init()
        self.screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption("arose")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", FONT_SIZE)

    def _print_stats(self):
        """Print rendering statistics on exit."""
        if self.slice_times:
            avg_ms = sum(self.slice_times) / len(self.slice_times)
            print(f"\nRan {len(self.slice_times)} render slices, "
                  f"{self.renderer.pixels_drawn} pixels shaded")
            print(f"Average slice time: {avg_ms:.1f}ms")
            print(f"Frames completed: {self.renderer.frames_completed}")

    # =========================================================================
    # Event Handling
    # =========================================================================

    def _handle_events(self):
        """Process all pygame events."""
        for event in pygame.event.get():
            self.dispatch(event)

    def dispatch(self, event):
        handler = self._event_handlers.get(event.type)
        if handler:
            handler(self, event)

    @property
    def _event_handlers(self) -> dict:
        """Map event types to handler methods."""
        return {
            pygame.QUIT: lambda self, e: setattr(self, 'running', False),
            pygame.KEYDOWN: RoseViewer._on_keydown,
            pygame.MOUSEBUTTONDOWN: RoseViewer._on_mouse_down,
            pygame.MOUSEBUTTONUP: RoseViewer._on_mouse_up,
            pygame.MOUSEMOTION: RoseViewer._on_mouse_motion,
        }

    def _on_keydown(self, event):
        self.interaction.key_press(pygame.key.name(event.key))
        handler = self._key_handlers.get(event.key)
        if handler:
            handler(self, event)

    @property
    def _key_handlers(self) -> dict:
        """Map keys to handler methods."""
        return {
            pygame.K_ESCAPE: lambda s, e: setattr(s, 'running', False),
            pygame.K_q: lambda s, e: setattr(s, 'running', False),
            pygame.K_f: RoseViewer._toggle_status,
            pygame.K_h: RoseViewer._toggle_help,
            pygame.K_QUESTION: RoseViewer._toggle_help,
            pygame.K_SLASH: RoseViewer._toggle_help,
            pygame.K_b: RoseViewer._cycle_blur,
            pygame.K_d: RoseViewer._reset_defaults,
        }

    def _toggle_status(self, event):
        self.show_status = not self.show_status

    def _toggle_help(self, event):
        self.show_help = not self.show_help

    def _cycle_blur(self, event):
        current = self.renderer.settings.blur_window
        idx = BLUR_WINDOWS.index(current) if current in BLUR_WINDOWS else -1
        window = BLUR_WINDOWS[(idx + 1) % len(BLUR_WINDOWS)]
        self.renderer.settings = replace(self.renderer.settings, blur_window=window)
        print(f"Blur window: {window}")

    def _reset_defaults(self, event):
        self.interaction.reset()
        print("Control points reset to defaults")

    def _pointer(self, event):
        return window_to_model(event.pos, self.height)

    def _on_mouse_down(self, event):
        if event.button != 1:  # Left click only
            return
        self.interaction.pointer_down(self._pointer(event))

    def _on_mouse_up(self, event):
        if event.button == 1:
            self.interaction.pointer_up(self._pointer(event))

    def _on_mouse_motion(self, event):
        self.interaction.pointer_move(self._pointer(event))

    # =========================================================================
    # Rendering
    # =========================================================================

    def _tick(self):
        """Run one render slice and present the surface."""
        if self.interaction.consume_invalidation():
            self.renderer.invalidate()

        if not self.renderer.idle:
            t0 = pygame.time.get_ticks()
            self.renderer.update(self.interaction.control_points(), self.interaction.handles)
            self.slice_times.append(pygame.time.get_ticks() - t0)

        frame = pygame.surfarray.make_surface(self.surface.rgb.swapaxes(0, 1))
        self.screen.blit(frame, (0, 0))

        self._draw_handles()
        if self.show_status:
            self._draw_status()
        if self.show_help:
            self._draw_help_overlay()

        pygame.display.flip()

    def _draw_handles(self):
        """Keep the handles visible above pixels the scan has overwritten."""
        half = HANDLE_SIZE // 2
        for handle in self.interaction.handles:
            color = HANDLE_HOVER_COLOR if handle.hovered else HANDLE_COLOR
            x = int(round(handle.position.x))
            y = self.height - 1 - int(round(handle.position.y))
            pygame.draw.rect(self.screen, color, (x - half, y - half, HANDLE_SIZE, HANDLE_SIZE), 1)

    def _draw_status(self):
        r = self.renderer
        state = "done" if r.idle else f"{r.progress * 100:.0f}%"
        text = f"{state} | blur {r.settings.blur_window} | frames {r.frames_completed}"
        self._draw_text(text, PADDING, PADDING // 2)

    def _draw_text(self, text: str, x: int, y: int, color=(255, 255, 255)) -> int:
        """Render text at position and return new x position."""
        surf = self.font.render(text, True, color, (0, 0, 0))
        self.screen.blit(surf, (x, y))
        return x + surf.get_width()

    def _draw_help_overlay(self):
        """Draw help text overlay."""
        line_height = self.font.get_linesize()
        help_width = max(self.font.size(line)[0] for line in HELP_LINES) + PADDING * 2
        help_height = len(HELP_LINES) * line_height + PADDING * 2

        help_bg = pygame.Surface((help_width, help_height))
        help_bg.set_alpha(HELP_OVERLAY_ALPHA)
        help_bg.fill((0, 0, 0))
        help_y = line_height + PADDING
        self.screen.blit(help_bg, (PADDING, help_y))

        for i, line in enumerate(HELP_LINES):
            text_surface = self.font.render(line, True, (255, 255, 255))
            self.screen.blit(text_surface, (PADDING * 2, help_y + PADDING + i * line_height))


# =============================================================================
# Entry Point
# =============================================================================

def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--dims",
        type=int,
        default=[400, 600],
        nargs=2,
        help="The window dimensions, in pixels",
    )
    parser.add_argument(
        "--budget-ms",
        type=float,
        default=DEFAULT_BUDGET_MS,
        help="wall-clock time spent rendering per frame tick",
    )
    parser.add_argument(
        "--blur-window",
        type=int,
        default=1,
        choices=BLUR_WINDOWS,
        help="size of the multi-sample blur grid",
    )
    args = parser.parse_args()

    settings = RenderSettings(budget_ms=args.budget_ms, blur_window=args.blur_window)
    viewer = RoseViewer(*args.dims, settings=settings)
    viewer.run()


if __name__ == "__main__":
    main()
