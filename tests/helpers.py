"""Content-block builders shared by the Laminate tests."""

from __future__ import annotations


def write_all(*chunks: str):
    """Content block writing each chunk in order."""

    def block(ctx):
        for chunk in chunks:
            ctx.write(chunk)

    return block


def layout_from(prefix: str, suffix: str):
    """Layout callable wrapping its primary content in prefix/suffix."""

    def layout(ctx):
        ctx.write(prefix)
        ctx.write(ctx.yield_content())
        ctx.write(suffix)

    return layout


class Boom(Exception):
    """Marker exception raised deliberately by test blocks."""
