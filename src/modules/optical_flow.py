import cv2
import numpy as np

from config.config import TrackerConfig


def track_features(
    img1: np.ndarray,
    img2: np.ndarray,
    pts1: np.ndarray,
    config: TrackerConfig,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Track points from one frame into the next with pyramidal Lucas-Kanade.

    Args:
        img1: Previous grayscale frame.
        img2: Current grayscale frame.
        pts1: Points in previous frame (N, 2).
        config: Configuration object with window, pyramid and criteria.

    Returns:
        Tuple containing tracked points (N, 2) and boolean validity mask (N,).

    """
    if len(pts1) == 0:
        return np.empty((0, 2), dtype=np.float32), np.zeros(0, dtype=bool)

    p1 = pts1.reshape(-1, 1, 2).astype(np.float32)
    pts2, status, _ = cv2.calcOpticalFlowPyrLK(
        img1,
        img2,
        p1,
        None,
        winSize=config.lk_win_size,
        maxLevel=config.lk_max_level,
        criteria=config.lk_criteria(),
    )

    # status == 1 means flow was found
    return pts2.reshape(-1, 2), status.ravel() == 1


def pixel_velocities(
    old_pts: np.ndarray, new_pts: np.ndarray, frame_interval: float
) -> tuple[np.ndarray, np.ndarray]:
    """
    Convert point displacements into body-axis pixel velocities.

    The camera is mounted with image rows along the vehicle's forward axis,
    so image v maps to forward (x) and image -u maps to lateral (y).

    Args:
        old_pts: (N, 2) locations in the previous frame.
        new_pts: (N, 2) locations in the current frame.
        frame_interval: Seconds between the frames.

    Returns:
        vx: (N,) forward pixel velocities (px/s).
        vy: (N,) lateral pixel velocities (px/s).

    """
    disp = new_pts.astype(np.float64) - old_pts.astype(np.float64)
    dx = disp[:, 0]
    dy = disp[:, 1]

    with np.errstate(divide="ignore", invalid="ignore"):
        vx = dy / frame_interval
        vy = -dx / frame_interval
    return vx, vy
