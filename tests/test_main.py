"""Tests for the still-image command line renderer."""

import pytest
from PIL import Image

from arose import __version__
from arose.__main__ import main, parse_control_points, render_still
from arose.flower import DEFAULT_CONTROL_POINTS
from arose.render import BACKGROUND_COLOR, RenderSettings
from arose.threed import Vector


def test_version():
    """Test that the version is defined."""
    assert __version__ == "0.1.0"


def test_render_still_completes():
    """Rendering a small corner of the canvas finishes with background pixels."""
    surface = render_still(DEFAULT_CONTROL_POINTS, (6, 4), RenderSettings(budget_ms=50.0))
    assert surface is not None
    assert surface.get_pixel(0, 0) == BACKGROUND_COLOR


def test_render_still_gives_up_after_max_calls():
    """Running out of calls returns None."""
    assert render_still(DEFAULT_CONTROL_POINTS, (6, 4), RenderSettings(), max_calls=1) is None


def test_main_writes_png(tmp_path, capsys):
    """The CLI renders the frame and saves it with the requested size."""
    out = tmp_path / "rose.png"
    assert main(["-o", str(out), "--dims", "6", "4", "--budget-ms", "50"]) == 0
    with Image.open(out) as img:
        assert img.size == (6, 4)
    captured = capsys.readouterr()
    assert f"Saved: {out}" in captured.out


def test_main_rejects_even_blur_window(tmp_path):
    """Invalid settings exit through argparse."""
    with pytest.raises(SystemExit):
        main(["-o", str(tmp_path / "x.png"), "--dims", "4", "4", "--blur-window", "2"])


def test_main_incomplete_frame(tmp_path, capsys):
    """Hitting --max-calls reports failure and writes nothing."""
    out = tmp_path / "rose.png"
    assert main(["-o", str(out), "--dims", "6", "4", "--max-calls", "1"]) == 1
    assert not out.exists()
    assert "not complete" in capsys.readouterr().err


def test_parse_control_points():
    """Twelve numbers become four points."""
    points = parse_control_points([float(i) for i in range(12)])
    assert points[0] == Vector(0.0, 1.0, 2.0)
    assert points[3] == Vector(9.0, 10.0, 11.0)
    with pytest.raises(ValueError):
        parse_control_points([1.0, 2.0])
