"""Nested layout composition.

`compose_layout()` is what ``{% inside_layout 'outer' %}...{% end %}``
runs. It wraps a block of the current template in an outer layout and
splices the result into the current output, exactly where the call sits:

1. Capture the block. Slots registered while it runs (``content_for``)
   land in the slot map handed to the layout, in the same single pass.
2. Resolve the layout name.
3. Render the layout in a new frame whose ``yield`` is the captured block
   and whose named yields read the slot map.
4. Append the layout's output to the caller's output.

The layout may call `compose_layout()` itself, so layouts chain to any
depth. Each call is independent: slots registered inside a layout only
reach the next layout out if that layout registers them again.

Example:
    layouts/inner.html:
        {% content_for 'menu' %}<ul>...</ul>{% end %}
        {% inside_layout 'outer' %}<div class="hello">{{ yield }}</div>{% end %}

    layouts/outer.html:
        <html><nav>{{ yield 'menu' }}</nav><body>{{ yield }}</body></html>

"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING

from laminate.capture import capture
from laminate.exceptions import LayoutRenderError, TemplateError
from laminate.render_context import Frame, RenderState

if TYPE_CHECKING:
    from laminate.capture import ContentBlock
    from laminate.render_context import RenderContext, SlotMap

logger = logging.getLogger(__name__)


def compose_layout(
    ctx: RenderContext,
    layout: str,
    block: ContentBlock,
    slots: SlotMap | None = None,
) -> None:
    """Render ``layout`` around the output of ``block`` into the current output.

    Args:
        ctx: Render context of the calling template
        layout: Layout name; unqualified names live in the layouts namespace
        block: Content to wrap; executed exactly once
        slots: Slot map that collects registrations made while ``block``
            runs. Defaults to the calling frame's own map, so slots
            registered earlier in the same template are included. New
            registrations reach it only once the call has spliced; a
            failing call leaves it as it was.

    Raises:
        TemplateNotFoundError: If ``layout`` does not resolve
        CaptureError: If ``block`` fails with a non-template error
        LayoutRenderError: If the layout fails with a non-template error
        TemplateRuntimeError: If the layout chain is nested too deeply
    """
    caller = ctx.frame
    if slots is None:
        slots = caller.registered

    # Registrations land in a working copy until the call has spliced.
    pending = dict(slots)
    with ctx.collect_slots(pending):
        content = capture(ctx, block)

    template = ctx.resolver.resolve(layout)
    frame = Frame(
        template_name=template.name,
        content=content,
        slots=MappingProxyType(dict(pending)),
        variables=dict(caller.variables),
    )

    logger.debug(
        "Composing layout %r (depth %d): %d chars, slots %s",
        template.name,
        ctx.depth + 1,
        len(content),
        sorted(pending),
    )

    with ctx.push_frame(frame):
        try:
            template.render_into(ctx)
        except TemplateError:
            raise
        except Exception as e:
            raise LayoutRenderError(
                f"{type(e).__name__}: {e}",
                layout=template.name or layout,
                template_name=template.name,
                lineno=frame.line or None,
                template_stack=ctx.template_stack,
            ) from e

    slots.update(pending)
    ctx.write(frame.sink.getvalue())
    frame.state = RenderState.SPLICED
