"""
CLI entry point for the Crooks field renderer.

Usage:
    crooksfield [-o out.mp4|out.png] [options]
    crooksfield --preview [options]
    python -m crooksfield [options]
"""

import argparse
import sys
import time
from pathlib import Path

from crooksfield.encoder import encode_video, save_snapshot
from crooksfield.field import FieldConfig, FieldRenderer

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff"}

PROFILES = {
    "low": {"width": 640, "height": 480, "fps": 24, "quality": "fast"},
    "medium": {"width": 1024, "height": 768, "fps": 30, "quality": "medium"},
    "high": {"width": 1920, "height": 1080, "fps": 60, "quality": "high"},
}


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crooksfield",
        description="Animated Crooks fluctuation field renderer",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("crooks_field.mp4"),
        help="Output path: .mp4 for video, image suffix for a single frame "
             "(default: crooks_field.mp4)",
    )
    parser.add_argument(
        "--preview", action="store_true",
        help="Open an interactive window instead of writing a file (Esc quits)",
    )

    # Resolution & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=sorted(PROFILES),
        help="Target profile (low: 640x480 24fps, medium: 1024x768 30fps, high: 1080p 60fps)",
    )
    parser.add_argument("--width", type=int, default=None, help="Frame width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Frame height (overrides profile)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (overrides profile)")

    # Animation
    parser.add_argument(
        "-n", "--frames", type=int, default=300,
        help="Number of video frames to render (default: 300)",
    )
    parser.add_argument("--start-time", type=float, default=0.0, help="Initial time parameter (default: 0.0)")
    parser.add_argument("--time-step", type=float, default=0.05, help="Time advance per frame (default: 0.05)")

    # Series
    parser.add_argument("--terms", type=int, default=100, help="Series term count (default: 100)")
    parser.add_argument("--coefficient", type=float, default=2.0, help="Series coefficient (default: 2.0)")
    parser.add_argument("--exponent", type=float, default=3.0, help="Series exponent (default: 3.0)")
    parser.add_argument("--scale", type=float, default=1e3, help="Series scale factor (default: 1000)")

    # Jitter & parallelism
    parser.add_argument(
        "--seed", type=int, default=12345,
        help="Seed for every worker's random stream, 0-900000000 (default: 12345)",
    )
    parser.add_argument(
        "-j", "--workers", type=int, default=None,
        help="Worker threads; the image depends on this count (default: CPU count, max 8)",
    )

    # Quality
    parser.add_argument(
        "-q", "--quality", type=str, default=None,
        choices=["high", "medium", "fast"],
        help="Encoding quality (defaults to profile quality)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> FieldConfig:
    """Resolve profile defaults and overrides into a FieldConfig."""
    p_cfg = PROFILES[args.profile]

    config = FieldConfig(
        width=args.width or p_cfg["width"],
        height=args.height or p_cfg["height"],
        fps=args.fps or p_cfg["fps"],
        terms=args.terms,
        coefficient=args.coefficient,
        exponent=args.exponent,
        scale_factor=args.scale,
        start_time=args.start_time,
        time_step=args.time_step,
        seed=args.seed,
    )
    if args.workers is not None:
        config.workers = args.workers
    return config


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = config_from_args(args)
    quality = args.quality or PROFILES[args.profile]["quality"]

    try:
        renderer = FieldRenderer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    with renderer:
        if args.preview:
            from crooksfield.preview import run_preview

            print(f"Previewing {config.width}x{config.height} @ {config.fps}fps (Esc to quit)")
            shown = run_preview(renderer)
            print(f"  Shown {shown} frames, final time {renderer.time:.2f}")
            return

        output = args.output
        t0 = time.time()

        if output.suffix.lower() in IMAGE_SUFFIXES:
            print(f"Rendering frame at t={config.start_time} ({config.width}x{config.height})")
            save_snapshot(renderer.render_frame(), output)
            print(f"  Took {time.time() - t0:.1f}s")
            print(f"  Output: {output}")
            return

        if args.frames < 1:
            print(f"Error: --frames must be at least 1, got {args.frames}", file=sys.stderr)
            sys.exit(1)

        print(f"Rendering {args.frames} frames at {config.width}x{config.height} @ {config.fps}fps")
        print(f"  Workers: {config.workers}, Seed: {config.seed}, Quality: {quality}")

        frame_gen = renderer.render_frames(args.frames, progress_callback=_progress_bar)

        try:
            encode_video(
                frame_iterator=frame_gen,
                output_path=output,
                width=config.width,
                height=config.height,
                fps=config.fps,
                quality=quality,
                total_frames=args.frames,
            )
        except (RuntimeError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    elapsed = time.time() - t0
    file_size_mb = output.stat().st_size / 1024 / 1024

    print(f"\nDone! {file_size_mb:.1f} MB")
    print(f"  Render+encode took {elapsed:.1f}s ({args.frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {output}")


if __name__ == "__main__":
    main()
