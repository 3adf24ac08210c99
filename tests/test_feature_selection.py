import cv2
import numpy as np

from config.config import TrackerConfig
from modules.feature_selection import select_features, to_grayscale
from utils.enums import FeatureDetector

from conftest import make_texture


def test_features_are_capped_and_shaped(frame: np.ndarray) -> None:
    pts = select_features(frame, TrackerConfig())

    assert pts.dtype == np.float32
    assert pts.ndim == 2
    assert pts.shape[1] == 2
    assert 0 < len(pts) <= 1000


def test_custom_cap_is_respected(frame: np.ndarray) -> None:
    cfg = TrackerConfig(max_corners=25)

    assert len(select_features(frame, cfg)) == 25


def test_min_distance_between_features(frame: np.ndarray) -> None:
    pts = select_features(frame, TrackerConfig())

    diffs = pts[:, None, :] - pts[None, :, :]
    dist = np.linalg.norm(diffs, axis=2)
    np.fill_diagonal(dist, np.inf)
    assert dist.min() >= 8.0 - 1e-3


def test_features_lie_inside_image(frame: np.ndarray) -> None:
    pts = select_features(frame, TrackerConfig())

    assert np.all(pts[:, 0] >= 0) and np.all(pts[:, 0] < frame.shape[1])
    assert np.all(pts[:, 1] >= 0) and np.all(pts[:, 1] < frame.shape[0])


def test_featureless_image_gives_empty(blank: np.ndarray) -> None:
    pts = select_features(blank, TrackerConfig())

    assert pts.shape == (0, 2)


def test_single_corner_is_found() -> None:
    img = np.zeros((120, 160), dtype=np.uint8)
    cv2.rectangle(img, (60, 40), (159, 119), 255, thickness=-1)

    pts = select_features(img, TrackerConfig())

    assert len(pts) >= 1
    assert np.min(np.linalg.norm(pts - [60, 40], axis=1)) < 3.0


def test_color_input_matches_gray(frame: np.ndarray) -> None:
    bgr = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
    cfg = TrackerConfig()

    np.testing.assert_array_equal(select_features(bgr, cfg), select_features(frame, cfg))


def test_to_grayscale_handles_channel_layouts(frame: np.ndarray) -> None:
    assert to_grayscale(frame) is frame
    assert to_grayscale(frame[..., None]).shape == frame.shape
    assert to_grayscale(cv2.cvtColor(frame, cv2.COLOR_GRAY2BGRA)).shape == frame.shape


def test_harris_detector() -> None:
    img = make_texture(seed=11)
    cfg = TrackerConfig(detector=FeatureDetector.HARRIS)

    pts = select_features(img, cfg)

    assert 0 < len(pts) <= cfg.max_corners


def test_mask_restricts_selection(frame: np.ndarray) -> None:
    mask = np.zeros(frame.shape, dtype=np.uint8)
    mask[:, :320] = 255

    pts = select_features(frame, TrackerConfig(), mask=mask)

    assert len(pts) > 0
    assert np.all(pts[:, 0] < 320)
