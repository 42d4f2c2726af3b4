"""Shared hypothesis strategies for Laminate property-based testing.

Two levels:

- **Lexer**: template fragments with valid delimiter patterns
- **Composition**: output chunks and layout chains for the composer

Individual test modules compose them into property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Lexer strategies
# ---------------------------------------------------------------------------

# Plain text that does NOT contain delimiters (no { or })
plain_text = st.text(
    alphabet=st.characters(
        blacklist_categories=("Cs",),  # no surrogates
        blacklist_characters="{}\x00",
    ),
    min_size=1,
    max_size=200,
)

identifier = st.from_regex(r"[a-z_][a-z0-9_]{0,12}", fullmatch=True).filter(
    lambda name: name != "yield"
)

# {{ identifier }}
laminate_variable = identifier.map(lambda name: f"{{{{ {name} }}}}")

# {# text #}
_comment_body = st.from_regex(r"[a-zA-Z0-9_ ]{0,30}", fullmatch=True)
laminate_comment = _comment_body.map(lambda body: f"{{# {body} #}}")

# {{ yield }} / {{ yield 'slot' }}
laminate_yield = st.one_of(
    st.just("{{ yield }}"),
    identifier.map(lambda name: f"{{{{ yield '{name}' }}}}"),
)

# Plain text interleaved with variables, yields and comments
template_fragment = st.lists(
    st.one_of(plain_text, laminate_variable, laminate_yield, laminate_comment),
    min_size=1,
    max_size=5,
).map("".join)

# Arbitrary text that might stress the lexer (fuzz-like)
arbitrary_template_source = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    min_size=0,
    max_size=300,
)

# ---------------------------------------------------------------------------
# Composition strategies
# ---------------------------------------------------------------------------

# Raw output written through ctx.write(); never parsed, so any text goes
chunk = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",)),
    max_size=20,
)

chunks = st.lists(chunk, max_size=6)

# Slot names registered with content_for()
slot_name = identifier

# (prefix, suffix) pairs wrapping a layout's primary content
wrapper = st.tuples(chunk, chunk)

# Layout chains, innermost first
layout_chain = st.lists(wrapper, min_size=1, max_size=25)
