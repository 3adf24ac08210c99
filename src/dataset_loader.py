"""Frame sources for running the tracker over recorded data."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path

import cv2
import numpy as np


class BaseSequence(ABC):
    """Abstract base class for a frame source."""

    def __init__(self, base_path: Path) -> None:
        """
        Initialize the frame source.

        Args:
            base_path: File or directory holding the recording.

        """
        self.base_path = base_path
        self.frame_interval: float = 1.0 / 30.0
        self.intervals: np.ndarray | None = None
        self.heights: np.ndarray | None = None

    @abstractmethod
    def load(self) -> None:
        """Load recording metadata (frame list, timing, heights)."""
        pass

    @abstractmethod
    def frames(self) -> Iterator[tuple[int, np.ndarray]]:
        """Yield (index, grayscale image) pairs in recording order."""
        pass

    def interval_for(self, index: int) -> float:
        """Seconds between frame index - 1 and frame index."""
        if self.intervals is not None and 0 < index <= len(self.intervals):
            return float(self.intervals[index - 1])
        return self.frame_interval

    def height_for(self, index: int, default: float) -> float:
        """Height above ground at frame index, or default if not recorded."""
        if self.heights is not None and index < len(self.heights):
            return float(self.heights[index])
        return default


class ImageFolderSequence(BaseSequence):
    """
    Loader for a directory of frames.

    Optional companion files, one value per frame:
        timestamps.txt: capture time in seconds.
        heights.txt: height above ground in meters.
    """

    def __init__(self, base_path: Path, frame_rate: float = 30.0) -> None:
        super().__init__(base_path)
        self.frame_interval = 1.0 / frame_rate
        self.image_files: list[Path] = []
        self.load()

    def load(self) -> None:
        """Load image paths, timestamps and heights."""
        self.image_files = sorted(
            [*self.base_path.glob("*.png"), *self.base_path.glob("*.jpg")]
        )

        ts_path = self.base_path / "timestamps.txt"
        if ts_path.exists():
            timestamps = np.atleast_1d(np.loadtxt(ts_path))
            self.intervals = np.diff(timestamps)

        height_path = self.base_path / "heights.txt"
        if height_path.exists():
            self.heights = np.atleast_1d(np.loadtxt(height_path))

        print(f"Loaded {len(self.image_files)} image paths from {self.base_path}")

    def frames(self) -> Iterator[tuple[int, np.ndarray]]:
        for i, path in enumerate(self.image_files):
            img = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
            if img is None:
                continue
            yield i, img


class VideoSequence(BaseSequence):
    """Loader for a video file, timed by the container frame rate."""

    def __init__(self, base_path: Path) -> None:
        super().__init__(base_path)
        self.load()

    def load(self) -> None:
        """Read the frame rate from the video container."""
        vidcap = cv2.VideoCapture(str(self.base_path))
        if not vidcap.isOpened():
            print(f"Error: Could not open {self.base_path.name}")
            return

        fps = vidcap.get(cv2.CAP_PROP_FPS)
        if fps > 0:
            self.frame_interval = 1.0 / fps
        vidcap.release()

        height_path = self.base_path.with_suffix(".heights.txt")
        if height_path.exists():
            self.heights = np.atleast_1d(np.loadtxt(height_path))

    def frames(self) -> Iterator[tuple[int, np.ndarray]]:
        vidcap = cv2.VideoCapture(str(self.base_path))

        count = 0
        while vidcap.isOpened():
            success, image = vidcap.read()
            if not success:
                break
            yield count, cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
            count += 1

        vidcap.release()
