"""
Frame renderer for the Crooks scalar field.

Each pixel's phase drives the oscillatory series; the result is folded
into [0, 1] and combined with three jitter values from the worker's own
random stream to give an RGB triple. Row bands are fanned out across a
thread pool, one generator per band, so no random state is ever shared.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Tuple

import numpy as np

from crooksfield.series import series_field
from crooksfield.unirand import StreamGenerator, decompose_seed, initialise


def _default_workers() -> int:
    return max(1, min(os.cpu_count() or 1, 8))


@dataclass
class FieldConfig:
    """Configuration for the field renderer."""

    width: int = 1024
    height: int = 768
    fps: int = 30

    # Series
    terms: int = 100
    coefficient: float = 2.0
    exponent: float = 3.0
    scale_factor: float = 1e3
    position_scale: float = 100.0  # phase = t + x/s + y/s

    # Animation
    start_time: float = 0.0
    time_step: float = 0.05

    # Jitter
    seed: int = 12345
    workers: int = field(default_factory=_default_workers)

    def validate(self):
        """Raise ValueError on settings the renderer cannot use."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"frame size must be positive, got {self.width}x{self.height}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.terms < 0:
            raise ValueError(f"terms must be non-negative, got {self.terms}")
        if self.position_scale == 0:
            raise ValueError("position_scale must be non-zero")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


def clamp_u8(values: np.ndarray) -> np.ndarray:
    """Saturate to [0, 255] and truncate to uint8 (never wraps)."""
    values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(values, 0.0, 255.0).astype(np.uint8)


def normalise(values: np.ndarray) -> np.ndarray:
    """Fold series values into [0, 1]; non-finite input maps to 0.5."""
    with np.errstate(invalid="ignore"):
        n = np.sin(values) * 0.5 + 0.5
    return np.where(np.isfinite(n), n, 0.5)


def map_colours(n: np.ndarray, jitter: np.ndarray) -> np.ndarray:
    """
    Combine normalised field values with per-channel jitter.

    Args:
        n: (H, W) array in [0, 1].
        jitter: (H, W, 3) array in [0, 1), one (r, g, b) draw per pixel.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    rgb = np.empty(n.shape + (3,), dtype=np.uint8)
    rgb[..., 0] = clamp_u8(n * jitter[..., 0] * 255.0)
    rgb[..., 1] = clamp_u8((1.0 - n) * jitter[..., 1] * 255.0)
    rgb[..., 2] = clamp_u8((0.5 - np.abs(n - 0.5)) * 2.0 * jitter[..., 2] * 255.0)
    return rgb


def pack_rgb(frame: np.ndarray) -> np.ndarray:
    """Pack an (H, W, 3) uint8 frame into (H, W) uint32 0xRRGGBB pixels."""
    f = frame.astype(np.uint32)
    return (f[..., 0] << 16) | (f[..., 1] << 8) | f[..., 2]


class FieldRenderer:
    """
    Renders frames of the Crooks field on a pool of worker threads.

    The frame is split into ``workers`` contiguous row bands and band k
    always draws its jitter from generator k. Output is therefore fixed
    for a given config, but changes with the worker count.

    A renderer is not itself thread-safe: render one frame at a time.
    """

    def __init__(self, config: FieldConfig | None = None):
        self.cfg = config or FieldConfig()
        self.cfg.validate()
        cfg = self.cfg

        # Raises SeedOutOfRange before any threads exist
        self.generators: List[StreamGenerator] = [
            initialise(cfg.seed) for _ in range(cfg.workers)
        ]
        self.bands: List[Tuple[int, int]] = [
            (int(rows[0]), int(rows[-1]) + 1)
            for rows in np.array_split(np.arange(cfg.height), cfg.workers)
            if len(rows)
        ]

        self._xs = np.arange(cfg.width, dtype=np.float64) / cfg.position_scale
        self._ys = np.arange(cfg.height, dtype=np.float64) / cfg.position_scale
        self._pool = ThreadPoolExecutor(
            max_workers=cfg.workers, thread_name_prefix="crooksfield"
        )

        self.time = cfg.start_time

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Shut down the worker pool."""
        self._pool.shutdown(wait=True)

    def reset(self):
        """Rewind time and re-seed every worker stream."""
        sub_seeds = decompose_seed(self.cfg.seed)
        for generator in self.generators:
            generator.start(*sub_seeds)
        self.time = self.cfg.start_time

    def scalar_band(self, time: float, start: int, stop: int) -> np.ndarray:
        """Scaled series values for rows [start, stop) at ``time``."""
        cfg = self.cfg
        phase = (time + self._xs)[np.newaxis, :] + self._ys[start:stop, np.newaxis]
        return series_field(cfg.terms, cfg.coefficient, cfg.exponent, phase) * cfg.scale_factor

    def _render_band(
        self,
        out: np.ndarray,
        time: float,
        start: int,
        stop: int,
        generator: StreamGenerator,
    ):
        n = normalise(self.scalar_band(time, start, stop))
        # Row-major pixel order, three draws (r, g, b) per pixel
        jitter = generator.generate_array(3 * n.size).reshape(n.shape + (3,))
        out[start:stop] = map_colours(n, jitter)

    def render_frame(self, time: float | None = None) -> np.ndarray:
        """
        Render one frame.

        Args:
            time: Time parameter (defaults to the renderer's current time).

        Returns:
            (H, W, 3) uint8 RGB numpy array.
        """
        if time is None:
            time = self.time

        frame = np.empty((self.cfg.height, self.cfg.width, 3), dtype=np.uint8)
        futures = [
            self._pool.submit(self._render_band, frame, time, start, stop, generator)
            for (start, stop), generator in zip(self.bands, self.generators)
        ]
        for future in futures:
            future.result()

        return frame

    def advance(self) -> np.ndarray:
        """Render at the current time, then step time forward."""
        frame = self.render_frame(self.time)
        self.time += self.cfg.time_step
        return frame

    def render_frames(
        self,
        n_frames: int,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Iterator[np.ndarray]:
        """
        Render consecutive frames as a generator.

        Args:
            n_frames: Number of frames to yield.
            progress_callback: Optional callback(current, total).

        Yields:
            (H, W, 3) uint8 RGB arrays, one per frame.
        """
        for i in range(n_frames):
            yield self.advance()

            if progress_callback:
                progress_callback(i + 1, n_frames)
