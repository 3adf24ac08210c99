import numpy as np
import pytest

from config.config import TrackerConfig
from modules.feature_selection import select_features
from modules.optical_flow import pixel_velocities, track_features

from conftest import make_texture, shift


def test_pixel_velocity_axes_are_remapped() -> None:
    old = np.array([[100.0, 100.0], [50.0, 20.0]], dtype=np.float32)
    new = np.array([[100.0, 108.0], [53.0, 20.0]], dtype=np.float32)

    vx, vy = pixel_velocities(old, new, 0.1)

    np.testing.assert_allclose(vx, [80.0, 0.0])
    np.testing.assert_allclose(vy, [0.0, -30.0], atol=1e-9)


def test_pixel_velocities_of_empty_set() -> None:
    empty = np.empty((0, 2), dtype=np.float32)

    vx, vy = pixel_velocities(empty, empty, 0.1)

    assert vx.shape == vy.shape == (0,)


def test_tracked_shift_gives_expected_pixel_velocity() -> None:
    cfg = TrackerConfig()
    frame_a = make_texture(seed=8)
    frame_b = shift(frame_a, dx=-3, dy=6)
    pts = select_features(frame_a, cfg)

    new_pts, valid = track_features(frame_a, frame_b, pts, cfg)
    vx, vy = pixel_velocities(pts[valid], new_pts[valid], 0.05)

    assert valid.dtype == bool
    assert len(valid) == len(pts)
    assert np.median(vx) == pytest.approx(6 / 0.05, abs=1.0)
    assert np.median(vy) == pytest.approx(3 / 0.05, abs=1.0)


def test_track_empty_point_set(frame: np.ndarray) -> None:
    pts, valid = track_features(
        frame, frame, np.empty((0, 2), dtype=np.float32), TrackerConfig()
    )

    assert pts.shape == (0, 2)
    assert valid.shape == (0,)
