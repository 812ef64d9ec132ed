"""Tests for the pygame preview window (headless)."""

import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from crooksfield.field import FieldConfig, FieldRenderer
from crooksfield.preview import frame_to_surface, run_preview, surface_to_array


@pytest.fixture(autouse=True)
def headless(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")


def test_surface_orientation():
    frame = np.zeros((6, 10, 3), dtype=np.uint8)
    frame[1, 7] = (10, 20, 30)
    surface = frame_to_surface(frame)
    assert surface.get_size() == (10, 6)
    assert tuple(surface.get_at((7, 1)))[:3] == (10, 20, 30)
    np.testing.assert_array_equal(surface_to_array(surface), frame)


def test_run_preview_stops_after_max_frames():
    cfg = FieldConfig(width=20, height=10, terms=4, workers=2, fps=1000)
    with FieldRenderer(cfg) as renderer:
        shown = run_preview(renderer, max_frames=3)
        assert shown == 3
        assert renderer.time == pytest.approx(3 * cfg.time_step)


def test_run_preview_quits_on_escape(monkeypatch):
    escape = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)
    monkeypatch.setattr(pygame.event, "get", lambda: [escape])
    cfg = FieldConfig(width=8, height=8, terms=2, workers=1)
    with FieldRenderer(cfg) as renderer:
        assert run_preview(renderer, max_frames=10) == 0
        assert renderer.time == cfg.start_time
