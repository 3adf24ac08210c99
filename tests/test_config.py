import cv2
import pytest

from config.config import TrackerConfig, get_config
from utils.enums import FeatureDetector, TrackingMethod, resolve_method


def test_defaults() -> None:
    cfg = TrackerConfig()

    assert cfg.max_corners == 1000
    assert cfg.quality_level == 0.1
    assert cfg.min_distance == 8.0
    assert cfg.lk_win_size == (16, 16)
    assert cfg.lk_max_level == 2
    assert cfg.detector is FeatureDetector.SHI_TOMASI
    assert cfg.camera.focal_length == 0.004


def test_lk_criteria() -> None:
    criteria = TrackerConfig().lk_criteria()

    assert criteria == (cv2.TERM_CRITERIA_COUNT | cv2.TERM_CRITERIA_EPS, 8, 0.03)


@pytest.mark.parametrize("camera", ["default", "raspicam_v2", "sim"])
def test_presets(camera: str) -> None:
    cfg = get_config(camera)

    assert cfg.camera.focal_length > 0
    assert cfg.camera.sensor_width > cfg.camera.sensor_height > 0


def test_presets_do_not_share_state() -> None:
    a = get_config("default")
    a.camera.focal_length = 1.0

    assert get_config("default").camera.focal_length == 0.004


def test_unknown_preset() -> None:
    with pytest.raises(ValueError, match="Unknown camera preset"):
        get_config("gopro")


def test_resolve_method() -> None:
    assert resolve_method(TrackingMethod.LUCAS_KANADE) is TrackingMethod.LUCAS_KANADE
    assert resolve_method(100) is TrackingMethod.LUCAS_KANADE
    with pytest.raises(ValueError):
        resolve_method(2)
