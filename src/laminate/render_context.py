"""Laminate RenderContext — per-render state for nested layout composition.

One `RenderContext` exists per top-level render call. It is passed
explicitly to every template and content block; there is no module-level
or thread-local render state, so concurrent renders never share anything
but immutable cached templates.

Frames:
The context holds a stack of `Frame` objects. The root frame belongs to
the page being rendered. Every composer call (``{% inside_layout %}``)
pushes a child frame for the layout it renders and pops it once the
layout's output has been spliced into the caller:

    ```
    root   page.html              sink → final output
    └── 1  layouts/inner.html     sink → spliced into root
        └── 2  layouts/outer.html sink → spliced into frame 1
    ```

Each frame owns its output sink, the content it was given (``yield``), a
read-only table of the slots it was given (``yield 'name'``), the slots it
registers for the next layout out, and its variables.

Lifecycle per composer call:
``IDLE → CAPTURING → COMPOSING → SPLICED``. The caller's frame is
``CAPTURING`` while the wrapped block runs; the layout's frame is
``COMPOSING`` while the layout renders and ``SPLICED`` once its output has
been appended to the caller.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from laminate.capture import OutputSink, capture
from laminate.exceptions import TemplateRuntimeError, UndefinedError

if TYPE_CHECKING:
    from laminate.capture import ContentBlock
    from laminate.resolver import LayoutResolver

SlotMap = dict[str, str]

_EMPTY_SLOTS: Mapping[str, str] = MappingProxyType({})


class RenderState(Enum):
    """Phase of a frame within a composer call."""

    IDLE = "idle"
    CAPTURING = "capturing"
    COMPOSING = "composing"
    SPLICED = "spliced"


@dataclass
class Frame:
    """One level of the layout chain.

    Attributes:
        template_name: Template rendering into this frame (for error traces)
        sink: Current output target; swapped while a block is captured
        content: Primary content handed to this frame (``{{ yield }}``)
        slots: Read-only named content handed to this frame (``{{ yield 'x' }}``)
        registered: Slots registered here for the next layout out
        variables: Variables visible to templates rendering in this frame
        line: Current source line (updated while nodes render)
        state: Lifecycle phase
    """

    template_name: str | None = None
    sink: OutputSink = field(default_factory=OutputSink)
    content: str = ""
    slots: Mapping[str, str] = field(default_factory=lambda: _EMPTY_SLOTS)
    registered: SlotMap = field(default_factory=dict)
    variables: dict[str, Any] = field(default_factory=dict)
    line: int = 0
    state: RenderState = RenderState.IDLE


@dataclass
class RenderContext:
    """Per-render state: the frame stack plus the layout resolver.

    Attributes:
        resolver: Resolves layout names to templates
        frames: Frame stack, root first
        max_depth: Maximum number of nested layout frames. 50 is deeper than
            any real layout chain while catching circular layouts
            (A → B → A) early.
    """

    resolver: LayoutResolver
    frames: list[Frame] = field(default_factory=lambda: [Frame()])
    max_depth: int = 50

    @property
    def frame(self) -> Frame:
        """The innermost (currently rendering) frame."""
        return self.frames[-1]

    @property
    def depth(self) -> int:
        """Number of layout frames above the root."""
        return len(self.frames) - 1

    @property
    def state(self) -> RenderState:
        return self.frame.state

    @property
    def template_stack(self) -> list[tuple[str, int]]:
        """(template_name, line) for every named frame, outermost caller first."""
        return [(f.template_name, f.line) for f in self.frames if f.template_name]

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, text: str) -> None:
        """Append text to the current output target."""
        self.frame.sink.write(text)

    def getvalue(self) -> str:
        """Output accumulated by the root frame."""
        return self.frames[0].sink.getvalue()

    @contextmanager
    def redirect(self, sink: OutputSink) -> Iterator[OutputSink]:
        """Send the current frame's writes to ``sink`` for the with block."""
        frame = self.frame
        previous_sink, previous_state = frame.sink, frame.state
        frame.sink = sink
        frame.state = RenderState.CAPTURING
        try:
            yield sink
        finally:
            frame.sink = previous_sink
            frame.state = previous_state

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    @contextmanager
    def collect_slots(self, slots: SlotMap) -> Iterator[SlotMap]:
        """Route slot registrations on the current frame into ``slots``."""
        frame = self.frame
        previous = frame.registered
        frame.registered = slots
        try:
            yield slots
        finally:
            frame.registered = previous

    def content_for(self, name: str, content: str) -> None:
        """Register content under a slot name for the next layout out.

        Registering the same name again appends to what is already there.
        """
        registered = self.frame.registered
        registered[name] = registered.get(name, "") + content

    def capture_for(self, name: str, block: ContentBlock) -> None:
        """Capture ``block`` and register its output under ``name``."""
        self.content_for(name, capture(self, block))

    def yield_content(self, name: str | None = None) -> str:
        """Primary content (no name) or a named slot of the current frame.

        Unknown slot names render as an empty string.
        """
        frame = self.frame
        if name is None:
            return frame.content
        return frame.slots.get(name, "")

    # ------------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Any:
        variables = self.frame.variables
        try:
            return variables[name]
        except KeyError:
            raise UndefinedError(
                name,
                template=self.frame.template_name,
                lineno=self.frame.line or None,
                available_names=frozenset(variables),
                template_stack=[
                    (f.template_name, f.line) for f in self.frames[:-1] if f.template_name
                ],
            ) from None

    def set(self, name: str, value: Any) -> None:
        self.frame.variables[name] = value

    # ------------------------------------------------------------------
    # Layout frames
    # ------------------------------------------------------------------

    def check_depth(self, template_name: str) -> None:
        """Raise if pushing another layout frame would exceed ``max_depth``."""
        if self.depth >= self.max_depth:
            raise TemplateRuntimeError(
                f"Maximum layout depth exceeded ({self.max_depth}) "
                f"when wrapping in '{template_name}'",
                template_name=self.frame.template_name,
                template_stack=self.template_stack,
                suggestion="Check for circular layouts: A → B → A",
            )

    @contextmanager
    def push_frame(self, frame: Frame) -> Iterator[Frame]:
        """Make ``frame`` current for the with block, then pop it."""
        self.check_depth(frame.template_name or "<layout>")
        frame.state = RenderState.COMPOSING
        self.frames.append(frame)
        try:
            yield frame
        finally:
            self.frames.pop()

    def inside_layout(
        self,
        layout: str,
        block: ContentBlock,
        slots: SlotMap | None = None,
    ) -> None:
        """Wrap the output of ``block`` in ``layout`` at the current position."""
        from laminate.composer import compose_layout

        compose_layout(self, layout, block, slots)


@contextmanager
def render_context(
    resolver: LayoutResolver,
    template_name: str | None = None,
    variables: dict[str, Any] | None = None,
    max_depth: int = 50,
) -> Iterator[RenderContext]:
    """Create the context for one top-level render.

    Example:
        with render_context(env.resolver, "page.html", {"user": user}) as ctx:
            template.render_into(ctx)
            html = ctx.getvalue()
    """
    root = Frame(template_name=template_name, variables=dict(variables or {}))
    yield RenderContext(resolver=resolver, frames=[root], max_depth=max_depth)
