"""
Interactive pygame preview of the animated field.

Opens a fixed-size window and shows frames as fast as the renderer
produces them, capped at the configured fps. Escape or closing the
window ends the preview.
"""

import numpy as np
import pygame

from crooksfield.field import FieldRenderer

DEFAULT_TITLE = "Crooks Fluctuation Theorem Simulation"


def frame_to_surface(frame: np.ndarray) -> pygame.Surface:
    """Convert an (H, W, 3) uint8 frame into a pygame Surface."""
    # pygame uses (width, height) but numpy frames are (height, width)
    return pygame.surfarray.make_surface(np.transpose(frame, (1, 0, 2)))


def surface_to_array(surface: pygame.Surface) -> np.ndarray:
    """Convert a pygame Surface back into an (H, W, 3) uint8 frame."""
    return np.transpose(pygame.surfarray.array3d(surface), (1, 0, 2))


def _should_quit(events) -> bool:
    for event in events:
        if event.type == pygame.QUIT:
            return True
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return True
    return False


def run_preview(
    renderer: FieldRenderer,
    title: str = DEFAULT_TITLE,
    max_frames: int | None = None,
) -> int:
    """
    Show the renderer's frames in a window until the user quits.

    Args:
        renderer: Renderer to pull frames from (time advances per frame).
        title: Window caption.
        max_frames: Stop after this many frames (None runs until quit).

    Returns:
        Number of frames shown.
    """
    cfg = renderer.cfg

    pygame.init()
    try:
        screen = pygame.display.set_mode((cfg.width, cfg.height))
        pygame.display.set_caption(title)
        clock = pygame.time.Clock()

        shown = 0
        while max_frames is None or shown < max_frames:
            if _should_quit(pygame.event.get()):
                break

            screen.blit(frame_to_surface(renderer.advance()), (0, 0))
            pygame.display.flip()
            shown += 1

            clock.tick(cfg.fps)
    finally:
        pygame.quit()

    return shown
