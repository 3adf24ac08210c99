from enum import Enum


class TrackingMethod(Enum):
    """Enum for the optical flow family used to track features."""

    LUCAS_KANADE = 100


def resolve_method(method: TrackingMethod | int) -> TrackingMethod:
    """
    Coerce a method identifier to a TrackingMethod.

    Args:
        method: Enum member or its integer value.

    Returns:
        The matching TrackingMethod.

    Raises:
        ValueError: If the method is not supported.

    """
    if isinstance(method, TrackingMethod):
        return method
    try:
        return TrackingMethod(method)
    except ValueError:
        msg = f"Unsupported tracking method: {method}"
        raise ValueError(msg) from None


class FeatureDetector(Enum):
    """Enum for corner response used in feature selection."""

    SHI_TOMASI = 0
    HARRIS = 1
