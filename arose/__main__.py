import argparse
import sys

from PIL import Image

from .flower import DEFAULT_CONTROL_POINTS
from .interaction import Handle
from .render import (
    DEFAULT_BUDGET_MS,
    DEFAULT_LIGHT_POS,
    OUTLINE_MARGIN,
    ProgressiveRenderer,
    RenderSettings,
)
from .surface import ArraySurface
from .threed import Vector


def render_still(control_points, dims, settings, max_calls=None, progress=None):
    """Drive the progressive renderer until the frame completes.

    Returns the surface, or None if ``max_calls`` ran out first.
    """
    surface = ArraySurface(*dims)
    renderer = ProgressiveRenderer(surface, settings)
    handles = [Handle(p) for p in control_points]

    while not renderer.idle:
        if max_calls is not None and renderer.calls >= max_calls:
            return None
        renderer.update(control_points, handles)
        if progress is not None:
            progress(renderer)
    return surface


def parse_control_points(values):
    if len(values) != 12:
        raise ValueError(f"expected 12 coordinates (4 points x, y, z), got {len(values)}")
    return [Vector(*values[i:i + 3]) for i in range(0, 12, 3)]


def main(argv=None):
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-o",
        "--out-file",
        default="rose.png",
        help="The output file to write to",
    )
    parser.add_argument(
        "--dims",
        type=int,
        default=[400, 600],
        nargs=2,
        help="The dimensions of the output image, in pixels",
    )
    parser.add_argument(
        "--budget-ms",
        type=float,
        default=DEFAULT_BUDGET_MS,
        help="wall-clock time per renderer call",
    )
    parser.add_argument(
        "--blur-window",
        type=int,
        default=1,
        help="size of the multi-sample blur grid (1 or an odd number >= 3)",
    )
    parser.add_argument(
        "--outline",
        type=float,
        default=OUTLINE_MARGIN,
        help="width of the dark outline around the silhouette",
    )
    parser.add_argument(
        "--light",
        type=float,
        default=list(DEFAULT_LIGHT_POS),
        nargs=3,
        help="position of the point light",
    )
    parser.add_argument(
        "--control-points",
        type=float,
        default=[c for p in DEFAULT_CONTROL_POINTS for c in p],
        nargs=12,
        help="the four stem control points as x y z triples",
    )
    parser.add_argument(
        "--max-calls",
        type=int,
        default=None,
        help="give up after this many renderer calls",
    )

    args = parser.parse_args(argv)

    try:
        settings = RenderSettings(
            budget_ms=args.budget_ms,
            blur_window=args.blur_window,
            outline_margin=args.outline,
            light_pos=Vector(*args.light),
        )
        control_points = parse_control_points(args.control_points)
        if args.dims[0] <= 0 or args.dims[1] <= 0:
            raise ValueError(f"dims must be positive, got {args.dims}")
    except ValueError as err:
        parser.error(str(err))

    print(f"img_name: {args.out_file}")
    print(f"dims: {args.dims}")
    print(f"budget: {args.budget_ms}ms")
    print(f"blur window: {args.blur_window}")
    print(f"control points: {', '.join(str(p) for p in control_points)}")

    last_reported = [-1]

    def report(renderer):
        percent = int(renderer.progress * 100)
        if percent // 10 != last_reported[0] // 10:
            last_reported[0] = percent
            print(f"  {percent}% after {renderer.calls} calls")

    surface = render_still(control_points, args.dims, settings, args.max_calls, report)
    if surface is None:
        print(f"Frame not complete after {args.max_calls} calls", file=sys.stderr)
        return 1

    Image.fromarray(surface.rgb).save(args.out_file)
    print(f"Saved: {args.out_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
