"""Optics for turning image motion into ground velocity."""

import numpy as np


def field_of_view(sensor_size: float, focal_length: float) -> float:
    """
    Angular field of view along one sensor axis.

    Args:
        sensor_size: Physical sensor extent along the axis (m).
        focal_length: Lens focal length (m).

    Returns:
        Field of view in radians, 2 * atan(size / (2 * f)).

    """
    return float(2.0 * np.arctan(sensor_size / (2.0 * focal_length)))


def pixel_to_angular(
    pixel_velocity: np.ndarray, fov: float, frame_size: int
) -> np.ndarray:
    """Scale pixel velocity (px/s) to angular velocity (rad/s)."""
    return pixel_velocity * fov / float(frame_size)


def angular_to_linear(
    angular_velocity: np.ndarray, height: float, frame_interval: float
) -> np.ndarray:
    """
    Project angular velocity onto the ground plane.

    The angle swept during one frame interval subtends
    height * tan(angle) meters on the ground below the camera.

    Args:
        angular_velocity: (N,) angular velocities (rad/s).
        height: Camera height above ground (m), used as a pure scale.
        frame_interval: Seconds between the frames.

    Returns:
        (N,) ground velocities (m/s).

    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return height * np.tan(angular_velocity * frame_interval) / frame_interval


def real_velocities(
    vx_px: np.ndarray,
    vy_px: np.ndarray,
    fov_h: float,
    fov_v: float,
    frame_width: int,
    frame_height: int,
    height: float,
    frame_interval: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Convert body-axis pixel velocities into ground velocities.

    Forward motion runs along image rows, so it is scaled with the vertical
    field of view and the frame height; lateral motion with the horizontal
    field of view and the frame width.

    Returns:
        v_x: (N,) forward velocities (m/s).
        v_y: (N,) lateral velocities (m/s).

    """
    ang_x = pixel_to_angular(vx_px, fov_v, frame_height)
    ang_y = pixel_to_angular(vy_px, fov_h, frame_width)

    v_x = angular_to_linear(ang_x, height, frame_interval)
    v_y = angular_to_linear(ang_y, height, frame_interval)
    return v_x, v_y
