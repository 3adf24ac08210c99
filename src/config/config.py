from dataclasses import dataclass, field

import cv2

from utils.enums import FeatureDetector


@dataclass
class CameraConfig:
    """Physical parameters of the downward-facing camera (meters)."""

    focal_length: float = 0.004
    sensor_width: float = 0.0064
    sensor_height: float = 0.0048


@dataclass
class TrackerConfig:
    """Configuration data class for the optical flow velocity tracker."""

    camera: CameraConfig = field(default_factory=CameraConfig)

    # feature selection
    max_corners: int = 1000
    quality_level: float = 0.1
    min_distance: float = 8.0
    block_size: int = 2
    detector: FeatureDetector = FeatureDetector.SHI_TOMASI
    harris_k: float = 0.04  # only used by the harris detector

    # optical flow
    lk_win_size: tuple[int, int] = (16, 16)
    lk_max_level: int = 2
    lk_max_iter: int = 8
    lk_epsilon: float = 0.03  # pixels

    # fixed output size of the frame driver
    output_capacity: int = 1000

    def lk_criteria(self) -> tuple[int, int, float]:
        """Termination criteria for the iterative flow search."""
        return (
            cv2.TERM_CRITERIA_COUNT | cv2.TERM_CRITERIA_EPS,
            self.lk_max_iter,
            self.lk_epsilon,
        )


def get_config(camera: str) -> TrackerConfig:
    """
    Return the tracker configuration for a camera.

    Args:
        camera: Name of the camera preset (default, raspicam_v2, sim).

    Returns:
        The configuration object with camera-specific overrides.

    Raises:
        ValueError: If the camera preset is unknown.

    """
    cfg = TrackerConfig()

    if camera == "default":
        pass

    elif camera == "raspicam_v2":
        # Sony IMX219, 3.68 x 2.76 mm active area
        cfg.camera = CameraConfig(
            focal_length=0.00304, sensor_width=0.00368, sensor_height=0.00276
        )
        cfg.min_distance = 10.0
        cfg.lk_win_size = (21, 21)

    elif camera == "sim":
        cfg.camera = CameraConfig(
            focal_length=0.0036, sensor_width=0.0072, sensor_height=0.0054
        )
        cfg.quality_level = 0.05
        cfg.lk_max_level = 3

    else:
        msg = f"Unknown camera preset: {camera}"
        raise ValueError(msg)

    return cfg
