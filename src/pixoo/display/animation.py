"""Multi-frame animations.

Frames are drawn with the regular Canvas API and pushed to the device as
one GIF sequence.
"""

import logging
from typing import Callable, Iterator

from ..core.errors import FrameCountError, FrameIndexError
from .canvas import DEFAULT_SIZE, Canvas

logger = logging.getLogger(__name__)

# The device becomes unreliable with longer sequences
MAX_STABLE_FRAMES = 40

RenderFn = Callable[[Canvas, int, int], None]


class Animation:
    """A fixed-speed sequence of equally sized canvases.

    Usage:
        anim = Animation(20, speed=80)
        anim.render(lambda canvas, i, total: canvas.fill_circle(i * 3, 32, 5, "red"))
        await client.push_animation(anim.frames, anim.speed)
    """

    def __init__(self, frame_count: int, speed: int = 100, size: int | None = None) -> None:
        """Pre-allocate blank frames.

        Args:
            frame_count: Number of frames (must be positive)
            speed: Milliseconds per frame
            size: Edge length of every frame (default 64)

        Raises:
            FrameCountError: If frame_count is not positive
        """
        if frame_count <= 0:
            raise FrameCountError(
                "frame_count must be positive", details={"frame_count": frame_count}
            )
        if frame_count > MAX_STABLE_FRAMES:
            logger.warning(
                "Animation has %d frames; the device may become unstable above %d",
                frame_count,
                MAX_STABLE_FRAMES,
            )
        self.size = size if size is not None else DEFAULT_SIZE
        self.speed = speed
        self.frames: list[Canvas] = [Canvas(self.size) for _ in range(frame_count)]

    def frame(self, index: int) -> Canvas:
        """Get a frame canvas for drawing.

        Raises:
            FrameIndexError: If index is outside 0..len-1
        """
        if not 0 <= index < len(self.frames):
            raise FrameIndexError(
                f"Frame index {index} out of range (0-{len(self.frames) - 1})",
                details={"index": index},
            )
        return self.frames[index]

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[Canvas]:
        return iter(self.frames)

    def render(self, fn: RenderFn) -> "Animation":
        """Call ``fn(canvas, index, total)`` for every frame, in order."""
        total = len(self.frames)
        for i, canvas in enumerate(self.frames):
            fn(canvas, i, total)
        return self

    def add_frame(self) -> Canvas:
        """Append a blank frame and return it."""
        canvas = Canvas(self.size)
        self.frames.append(canvas)
        return canvas


def build_animation(
    frame_count: int, speed: int, fn: RenderFn, size: int | None = None
) -> Animation:
    """Create an animation and render every frame with ``fn``."""
    return Animation(frame_count, speed, size).render(fn)
