import cv2
import numpy as np

from config.config import TrackerConfig
from utils.enums import FeatureDetector


def to_grayscale(img: np.ndarray) -> np.ndarray:
    """Convert a BGR or BGRA image to single channel luminance."""
    if img.ndim == 3 and img.shape[2] == 1:
        return img[..., 0]
    if img.ndim == 3 and img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
    if img.ndim == 3 and img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2GRAY)
    return img


def select_features(
    img: np.ndarray, config: TrackerConfig, mask: np.ndarray | None = None
) -> np.ndarray:
    """
    Select corner-like points that are well conditioned for tracking.

    Args:
        img: Grayscale or BGR image.
        config: Configuration object containing detector settings.
        mask: Optional mask restricting where corners may be found.

    Returns:
        (N, 2) float32 array of [u, v] pixel coordinates ordered by
        decreasing corner strength, with N <= config.max_corners.
        Empty when no corner passes the quality threshold.

    """
    gray = to_grayscale(img)

    corners = cv2.goodFeaturesToTrack(
        gray,
        maxCorners=config.max_corners,
        qualityLevel=config.quality_level,
        minDistance=config.min_distance,
        mask=mask,
        blockSize=config.block_size,
        useHarrisDetector=config.detector == FeatureDetector.HARRIS,
        k=config.harris_k,
    )

    if corners is None:
        return np.empty((0, 2), dtype=np.float32)
    return corners.reshape(-1, 2).astype(np.float32)
