import logging

import cv2
import numpy as np

from config.config import TrackerConfig
from modules.feature_selection import select_features, to_grayscale
from modules.optical_flow import pixel_velocities, track_features
from modules.velocity_conversion import field_of_view, real_velocities
from state.tracker_state import TrackerState
from utils.enums import TrackingMethod, resolve_method

logger = logging.getLogger(__name__)

VelocityResult = tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, bool]


def _empty_result() -> VelocityResult:
    return (
        np.empty(0),
        np.empty(0),
        np.empty((0, 2), dtype=np.float32),
        np.empty((0, 2), dtype=np.float32),
        True,
    )


class OpticalFlowTracker:
    """
    Ground velocity from a downward-facing camera.

    Tracks corners from the previous frame into the current one, turns their
    pixel displacement into angular rates through the field of view, and
    scales those to ground velocity with the height above ground.

    The tracker is UNSEEDED until a frame yields features, then TRACKING.
    Every velocity computation re-seeds features and reference frame from the
    frame it was given. Instances hold no locks; serialize calls per instance.
    """

    def __init__(
        self,
        method: TrackingMethod | int,
        frame_interval: float,
        focal_length: float,
        sensor_width: float,
        sensor_height: float,
        config: TrackerConfig | None = None,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            method: Optical flow family (only LUCAS_KANADE).
            frame_interval: Initial seconds between consecutive frames.
            focal_length: Camera focal length (m).
            sensor_width: Physical sensor width (m).
            sensor_height: Physical sensor height (m).
            config: Detector and flow settings; defaults to TrackerConfig().

        Raises:
            ValueError: On an unsupported method or non-positive optics.

        """
        for name, value in (
            ("focal_length", focal_length),
            ("sensor_width", sensor_width),
            ("sensor_height", sensor_height),
        ):
            if not value > 0:
                msg = f"{name} must be positive, got {value}"
                raise ValueError(msg)

        self.cfg = config or TrackerConfig()
        self.state = TrackerState(
            method=resolve_method(method),
            frame_interval=float(frame_interval),
            focal_length=float(focal_length),
            sensor_width=float(sensor_width),
            sensor_height=float(sensor_height),
            horizontal_fov=field_of_view(sensor_width, focal_length),
            vertical_fov=field_of_view(sensor_height, focal_length),
        )

    @classmethod
    def from_config(
        cls, config: TrackerConfig, frame_interval: float = 1.0
    ) -> "OpticalFlowTracker":
        """Build a Lucas-Kanade tracker from the camera in a config."""
        return cls(
            TrackingMethod.LUCAS_KANADE,
            frame_interval,
            config.camera.focal_length,
            config.camera.sensor_width,
            config.camera.sensor_height,
            config=config,
        )

    @property
    def phase(self) -> str:
        """UNSEEDED before the first reference frame, TRACKING afterwards."""
        return "UNSEEDED" if self.state.previous_frame is None else "TRACKING"

    def set_frame_interval(self, frame_interval: float) -> None:
        """Set the seconds between frames used by the next computation."""
        self.state.frame_interval = float(frame_interval)

    def has_features(self) -> bool:
        """Whether the last re-seed found features, independent of phase."""
        return len(self.state.active_features) > 0

    def extract_features(self, img: np.ndarray) -> None:
        """
        Re-seed the feature set and reference frame from an image.

        The previous feature set is always discarded. The reference frame is
        only replaced when at least one feature was found.
        """
        gray = to_grayscale(img)
        self.state.active_features = select_features(gray, self.cfg)

        if not self.has_features():
            logger.debug("No features found, keeping previous reference frame")
            return

        self.state.previous_frame = gray
        self.state.frame_height, self.state.frame_width = gray.shape[:2]

    def compute_velocity(self, img: np.ndarray, height: float) -> VelocityResult:
        """
        Estimate ground velocity of every tracked feature.

        Args:
            img: Current frame (grayscale or BGR).
            height: Camera height above ground (m).

        Returns:
            Tuple containing:
            - v_x: (M,) forward velocities (m/s).
            - v_y: (M,) lateral velocities (m/s).
            - new_features: (M, 2) feature locations in the current frame.
            - old_features: (M, 2) the same features in the previous frame.
            - success: True once the step completed, also on a caught error.

        """
        dt = self.state.frame_interval

        try:
            # nothing to track against on the first call
            if self.state.previous_frame is None:
                self.extract_features(img)
                return _empty_result()

            gray = to_grayscale(img)

            # flow needs equal frame sizes, start over on a resolution change
            if gray.shape != self.state.previous_frame.shape:
                logger.warning(
                    "Frame size changed from %s to %s, re-seeding",
                    self.state.previous_frame.shape,
                    gray.shape,
                )
                self.extract_features(gray)
                return _empty_result()

            if not dt > 0:
                logger.warning(
                    "Non-positive frame interval %s, velocities undefined", dt
                )

            old_pts = self.state.active_features

            new_pts, valid = track_features(
                self.state.previous_frame, gray, old_pts, self.cfg
            )
            old_pts = old_pts[valid]
            new_pts = new_pts[valid]
            vels_x, vels_y = pixel_velocities(old_pts, new_pts, dt)

            self.state.frame_count += 1

            # fresh features for the next step, regardless of survivors
            self.extract_features(gray)
        except cv2.error as e:
            logger.warning("Optical flow step failed: %s", e)
            return _empty_result()

        v_x, v_y = real_velocities(
            vels_x,
            vels_y,
            self.state.horizontal_fov,
            self.state.vertical_fov,
            self.state.frame_width,
            self.state.frame_height,
            height,
            dt,
        )
        return v_x, v_y, new_pts, old_pts, True
