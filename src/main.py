import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import numpy as np
import rerun as rr
import tyro

from config.config import CameraConfig, get_config
from dataset_loader import BaseSequence, ImageFolderSequence, VideoSequence
from modules.output import StepResult, run_step
from modules.tracker import OpticalFlowTracker


def init_rerun() -> None:
    """Initialize Rerun logging."""
    rr.init("Optical Flow Velocity", spawn=True)


def log_frame_rerun(image: np.ndarray, frame_id: int, result: StepResult) -> None:
    rr.set_time("frame", sequence=frame_id)

    rr.log("camera/image", rr.Image(image))

    if len(result.new_features) > 0:
        rr.log(
            "camera/image/features",
            rr.Points2D(result.new_features, colors=[0, 255, 0], radii=2),
        )
        # flow from previous to current location
        rr.log(
            "camera/image/flow_vectors",
            rr.Arrows2D(
                origins=result.old_features,
                vectors=result.new_features - result.old_features,
                colors=[0, 255, 255],
            ),
        )

    v_fwd, v_lat = result.mean_velocity
    rr.log("velocity/forward", rr.Scalars(v_fwd))
    rr.log("velocity/lateral", rr.Scalars(v_lat))
    rr.log("diagnostics/num_valid", rr.Scalars(result.num_valid))


@dataclass
class Args:
    source: Literal["images", "video"] = "images"
    path: Path = Path("data")
    camera: Literal["default", "raspicam_v2", "sim"] = "default"
    frame_rate: float = 30.0  # used when images have no timestamps.txt
    height: float = 1.0  # meters, used when no heights are recorded
    focal_length: float | None = None
    sensor_width: float | None = None
    sensor_height: float | None = None
    headless: bool = False
    verbose: bool = False


def main(args: Args) -> None:
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    # setup
    cfg = get_config(args.camera)
    cfg.camera = CameraConfig(
        focal_length=args.focal_length or cfg.camera.focal_length,
        sensor_width=args.sensor_width or cfg.camera.sensor_width,
        sensor_height=args.sensor_height or cfg.camera.sensor_height,
    )

    print(f"Opening {args.source} from {args.path}...")
    loader: BaseSequence
    if args.source == "images":
        loader = ImageFolderSequence(args.path, frame_rate=args.frame_rate)
    else:
        loader = VideoSequence(args.path)

    tracker = OpticalFlowTracker.from_config(cfg, frame_interval=loader.frame_interval)

    if not args.headless:
        init_rerun()

    mean_fwd = []
    mean_lat = []
    for i, img in loader.frames():
        result = run_step(
            tracker,
            img,
            frame_interval=loader.interval_for(i),
            height=loader.height_for(i, args.height),
            capacity=cfg.output_capacity,
        )
        v_fwd, v_lat = result.mean_velocity

        print(
            f"Frame {i:04d} | "
            f"Tracked: {result.num_valid:04d} | "
            f"Seeds: {len(tracker.state.active_features):04d} | "
            f"V fwd: {v_fwd:+.3f} m/s | "
            f"V lat: {v_lat:+.3f} m/s | "
            f"Time: {result.computation_time * 1000:.2f} ms"
        )

        if result.num_valid > 0:
            mean_fwd.append(v_fwd)
            mean_lat.append(v_lat)

        if not args.headless:
            log_frame_rerun(img, i, result)

    if mean_fwd:
        print(
            f"Mean velocity over {len(mean_fwd)} frames: "
            f"fwd {np.mean(mean_fwd):+.3f} m/s, lat {np.mean(mean_lat):+.3f} m/s"
        )
    print("Done.")


if __name__ == "__main__":
    args = tyro.cli(Args)
    main(args)
