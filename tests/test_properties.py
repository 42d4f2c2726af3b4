"""Property-based tests for capture and layout composition.

Invariants that must hold for *all* block outputs and layout chains:

- Captured content is exactly what the block wrote; none of it leaks
- The caller's sink is restored even when the block fails
- A composition splices at the call site, between earlier and later writes
- A chain of any depth nests innermost first
- Slots reach the layout of the call they were registered in
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from laminate import CaptureError, Environment, capture, render_context

from .helpers import Boom, layout_from, write_all
from .strategies import chunks, layout_chain, slot_name


def _env_with_chain(chain: list[tuple[str, str]]) -> Environment:
    """Register l0 → l1 → ... where each layout wraps itself in the next."""
    env = Environment(max_depth=len(chain))
    last = len(chain) - 1
    for i, (prefix, suffix) in enumerate(chain):
        if i == last:
            env.add_template(f"layouts/l{i}", layout_from(prefix, suffix))
        else:

            def layout(ctx, prefix=prefix, suffix=suffix, outer=f"l{i + 1}"):
                ctx.inside_layout(
                    outer,
                    lambda c: c.write(prefix + c.yield_content() + suffix),
                )

            env.add_template(f"layouts/l{i}", layout)
    return env


class TestCaptureProperties:
    """Capture isolation and restore-on-failure."""

    @given(before=chunks, inside=chunks, after=chunks)
    @settings(max_examples=200)
    def test_capture_isolation(self, before, inside, after) -> None:
        env = Environment()
        with render_context(env.resolver) as ctx:
            write_all(*before)(ctx)
            captured = capture(ctx, write_all(*inside))
            write_all(*after)(ctx)
            assert captured == "".join(inside)
            assert ctx.getvalue() == "".join(before) + "".join(after)

    @given(before=chunks, inside=chunks)
    @settings(max_examples=100)
    def test_restore_on_failure(self, before, inside) -> None:
        env = Environment()

        def failing(ctx):
            write_all(*inside)(ctx)
            raise Boom("fail")

        with render_context(env.resolver) as ctx:
            write_all(*before)(ctx)
            original = ctx.frame.sink
            with pytest.raises(CaptureError):
                capture(ctx, failing)
            assert ctx.frame.sink is original
            ctx.write("!")
            assert ctx.getvalue() == "".join(before) + "!"


class TestCompositionProperties:
    """Splice placement, arbitrary depth and slot visibility."""

    @given(before=chunks, content=chunks, after=chunks, wrap=st.tuples(chunks, chunks))
    @settings(max_examples=200)
    def test_splice_placement(self, before, content, after, wrap) -> None:
        prefix, suffix = "".join(wrap[0]), "".join(wrap[1])
        env = Environment()
        env.add_template("layouts/wrap", layout_from(prefix, suffix))
        with render_context(env.resolver) as ctx:
            write_all(*before)(ctx)
            ctx.inside_layout("wrap", write_all(*content))
            write_all(*after)(ctx)
            expected = "".join(before) + prefix + "".join(content) + suffix + "".join(after)
            assert ctx.getvalue() == expected

    @given(chain=layout_chain, content=chunks)
    @settings(max_examples=100)
    def test_arbitrary_depth(self, chain, content) -> None:
        env = _env_with_chain(chain)
        expected = "".join(content)
        for prefix, suffix in chain:
            expected = prefix + expected + suffix
        assert env.render_layout("l0", "".join(content)) == expected

    @given(name=slot_name, value=chunks)
    @settings(max_examples=100)
    def test_slot_reaches_own_layout_only(self, name, value) -> None:
        value = "".join(value)
        env = Environment()
        env.add_template(
            "layouts/show",
            lambda ctx: ctx.write(f"[{ctx.yield_content(name)}]{ctx.yield_content()}"),
        )

        def registers(ctx):
            ctx.content_for(name, value)
            ctx.write(ctx.yield_content())

        env.add_template("layouts/registers", registers)
        with render_context(env.resolver) as ctx:
            ctx.inside_layout("show", lambda c: c.inside_layout("registers", write_all("x")))
            assert ctx.getvalue() == "[]x"

        with render_context(env.resolver) as ctx:
            ctx.inside_layout("show", lambda c: c.content_for(name, value))
            assert ctx.getvalue() == f"[{value}]"
