"""Output capture for Laminate rendering.

`capture()` runs a content block with the current frame's output redirected
into a fresh `OutputSink` and returns what the block wrote. The caller's
own output is untouched; the only visible effect is the returned string.

StringBuilder Pattern:
`OutputSink` collects chunks in a list and joins once in `getvalue()`,
which is O(n) in the output size instead of O(n²) for repeated
string concatenation.

Example:
    >>> with render_context(env.resolver) as ctx:
    ...     ctx.write("before ")
    ...     inner = capture(ctx, lambda c: c.write("captured"))
    ...     ctx.write("after")
    >>> inner
    'captured'
    >>> ctx.getvalue()
    'before after'

"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from laminate.exceptions import CaptureError, TemplateError

if TYPE_CHECKING:
    from laminate.render_context import RenderContext

# A deferred chunk of template output: writes through ctx, return value ignored.
ContentBlock = Callable[["RenderContext"], object]


class OutputSink:
    """Appendable destination for rendered text.

    Thread-Safety:
        Not shared between renders; each frame and each capture owns one.
    """

    __slots__ = ("_buf", "_length")

    def __init__(self) -> None:
        self._buf: list[str] = []
        self._length = 0

    def write(self, text: str) -> None:
        if text:
            self._buf.append(text)
            self._length += len(text)

    def getvalue(self) -> str:
        return "".join(self._buf)

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"<OutputSink {self._length} chars>"


def capture(ctx: RenderContext, block: ContentBlock) -> str:
    """Run ``block`` once and return everything it wrote.

    The frame's previous output target is restored on every exit path.
    Template errors raised by the block propagate unchanged; any other
    exception is raised as `CaptureError` chained to the original, and no
    partial output is returned.

    Args:
        ctx: Render context whose current frame is redirected
        block: Callable taking the context and writing through ``ctx.write``

    Returns:
        Concatenation of every write the block performed
    """
    buffer = OutputSink()
    with ctx.redirect(buffer):
        try:
            block(ctx)
        except TemplateError:
            raise
        except Exception as e:
            raise CaptureError(
                f"{type(e).__name__}: {e}",
                template_name=ctx.frame.template_name,
                lineno=ctx.frame.line or None,
                template_stack=ctx.template_stack,
            ) from e
    return buffer.getvalue()
