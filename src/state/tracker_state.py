from dataclasses import dataclass, field

import numpy as np

from utils.enums import TrackingMethod


@dataclass
class TrackerState:
    """Persistent state of the optical flow tracker."""

    method: TrackingMethod
    frame_interval: float  # seconds between previous and current frame

    # camera optics (meters / radians), fixed after construction
    focal_length: float
    sensor_width: float
    sensor_height: float
    horizontal_fov: float
    vertical_fov: float

    # size of the reference frame in pixels
    frame_width: int = 0
    frame_height: int = 0

    # grayscale reference frame, None until the first successful extraction
    previous_frame: np.ndarray | None = None

    # (N, 2) float32 features detected on previous_frame
    active_features: np.ndarray = field(
        default_factory=lambda: np.empty((0, 2), dtype=np.float32)
    )

    # number of tracking steps performed
    frame_count: int = 0
