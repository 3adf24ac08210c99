import time
from dataclasses import dataclass

import numpy as np

from modules.tracker import OpticalFlowTracker


@dataclass
class StepResult:
    """Fixed-size output of one processing step."""

    velocities: np.ndarray  # (2, capacity) forward row 0, lateral row 1
    num_valid: int  # number of filled columns
    computation_time: float  # seconds spent in the tracker
    new_features: np.ndarray  # (M, 2) survivors in the current frame
    old_features: np.ndarray  # (M, 2) survivors in the previous frame

    @property
    def mean_velocity(self) -> tuple[float, float]:
        if self.num_valid == 0:
            return 0.0, 0.0
        valid = self.velocities[:, : self.num_valid]
        return float(np.mean(valid[0])), float(np.mean(valid[1]))


def normalized_to_uint8(image: np.ndarray) -> np.ndarray:
    """
    Convert intensities in [0, 1] to an 8 bit image.

    8 bit images are returned unchanged, other integer images are clamped
    to [0, 255]. Float values outside [0, 1] are clamped.
    """
    if image.dtype == np.uint8:
        return image
    if np.issubdtype(image.dtype, np.integer):
        return np.clip(image, 0, 255).astype(np.uint8)
    return np.clip(image * 255.0, 0.0, 255.0).astype(np.uint8)


def pack_velocities(
    vel_x: np.ndarray, vel_y: np.ndarray, capacity: int
) -> tuple[np.ndarray, int]:
    """
    Write velocities into a zero-padded (2, capacity) array.

    Samples past the capacity are dropped, keeping tracking order.

    Returns:
        packed: (2, capacity) array, row 0 forward and row 1 lateral.
        count: number of valid columns.

    """
    count = min(len(vel_x), capacity)
    packed = np.zeros((2, capacity), dtype=np.float64)
    packed[0, :count] = vel_x[:count]
    packed[1, :count] = vel_y[:count]
    return packed, count


def run_step(
    tracker: OpticalFlowTracker,
    frame: np.ndarray,
    frame_interval: float,
    height: float,
    capacity: int,
) -> StepResult:
    """
    Run one tracker step on a raw frame and pack its result.

    Args:
        tracker: The tracker owned by the caller.
        frame: Image, either 8 bit or normalized floats.
        frame_interval: Seconds since the previous frame.
        height: Camera height above ground (m).
        capacity: Number of velocity columns in the output.

    Returns:
        The packed StepResult.

    """
    start = time.perf_counter()

    tracker.set_frame_interval(frame_interval)
    vel_x, vel_y, new_features, old_features, _ = tracker.compute_velocity(
        normalized_to_uint8(frame), height
    )

    packed, count = pack_velocities(vel_x, vel_y, capacity)
    elapsed = time.perf_counter() - start

    return StepResult(
        velocities=packed,
        num_valid=count,
        computation_time=elapsed,
        new_features=new_features,
        old_features=old_features,
    )
