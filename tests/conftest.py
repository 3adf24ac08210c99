import cv2
import numpy as np
import pytest


def make_texture(shape: tuple[int, int] = (480, 640), seed: int = 0) -> np.ndarray:
    """Smooth random texture with plenty of trackable corners."""
    rng = np.random.default_rng(seed)
    noise = rng.random(shape).astype(np.float32)
    smooth = cv2.GaussianBlur(noise, (0, 0), 3)
    smooth = cv2.normalize(smooth, None, 0, 255, cv2.NORM_MINMAX)
    return smooth.astype(np.uint8)


def shift(img: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Move image content by dx columns and dy rows."""
    return np.roll(img, shift=(dy, dx), axis=(0, 1))


@pytest.fixture
def frame() -> np.ndarray:
    return make_texture()


@pytest.fixture
def blank() -> np.ndarray:
    return np.full((480, 640), 128, dtype=np.uint8)
