"""Pytest configuration and fixtures for Laminate tests."""

import pytest

from laminate import DictLoader, Environment

LAYOUTS = {
    "layouts/outer.html": "<outer>{{ yield }}</outer>",
    "layouts/mid.html": "{% inside_layout 'outer' %}<mid>{{ yield }}</mid>{% end %}",
    "layouts/div.html": "<div>{{ yield }}</div>",
    "layouts/menu.html": "{{ yield 'menu' }}|{{ yield }}",
    "layouts/missing_slot.html": "[{{ yield 'missing' }}]{{ yield }}",
    "layouts/inner.html": (
        "{% content_for 'menu' %}<ul></ul>{% end %}"
        "{% inside_layout 'menu' %}<p>{{ yield }}</p>{% end %}"
    ),
    "shared/plain.html": "<plain>{{ yield }}</plain>",
    "hello.html": "Hello, {{ name }}!",
}


@pytest.fixture
def env():
    """Create a basic Laminate Environment without a loader."""
    return Environment()


@pytest.fixture
def env_with_layouts():
    """Create an Environment whose DictLoader holds a set of test layouts."""
    return Environment(loader=DictLoader(dict(LAYOUTS)))


@pytest.fixture
def ctx(env_with_layouts):
    """A fresh RenderContext bound to the test layouts."""
    from laminate import render_context

    with render_context(env_with_layouts.resolver, template_name="page.html") as render_ctx:
        yield render_ctx


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace."""
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )
