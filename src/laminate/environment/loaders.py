"""Template loaders for the Laminate environment.

A loader maps a template name to its source. The environment asks for
each candidate name in turn (``layouts/inner``, then
``layouts/inner.html``), so a loader only ever answers exact names.

Built-in Loaders:
- `FileSystemLoader`: layouts and pages in directories on disk
- `DictLoader`: an in-memory mapping (tests, embedded layouts)

With the default environment settings this tree works out of the box:

    templates/
        page.html
        layouts/
            inner.html
            outer.html

Thread-Safety:
Loaders only read their sources and are safe for concurrent use.

"""

from __future__ import annotations

from collections.abc import Mapping
from difflib import get_close_matches
from pathlib import Path, PurePosixPath

from laminate.exceptions import TemplateNotFoundError

# How many names a "not found" message lists when nothing is close.
_MAX_LISTED = 10


class BaseLoader:
    """Exact-name lookup with helpful misses.

    Subclasses implement `_load(name)`, returning ``(source, filename)`` or
    None, and `list_templates()`. A miss raises `TemplateNotFoundError`
    naming the closest known template, so ``layouts/ouer.html`` points at
    ``layouts/outer.html``.
    """

    __slots__ = ()

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Return ``(source, filename)`` for ``name``.

        Raises:
            TemplateNotFoundError: If no template has exactly this name
        """
        found = self._load(name)
        if found is None:
            raise TemplateNotFoundError(self._miss_message(name))
        return found

    def list_templates(self) -> list[str]:
        """Sorted names this loader can serve. Subclasses implement this."""
        raise NotImplementedError(f"{type(self).__name__} does not implement list_templates()")

    def _load(self, name: str) -> tuple[str, str | None] | None:
        # Subclasses implement: (source, filename) for an exact name, else None.
        raise NotImplementedError(f"{type(self).__name__} does not implement _load()")

    def _miss_message(self, name: str) -> str:
        known = self.list_templates()
        message = f"Template '{name}' not found"
        close = get_close_matches(name, known, n=1, cutoff=0.6)
        if close:
            return f"{message}. Did you mean '{close[0]}'?"
        if known:
            listed = ", ".join(known[:_MAX_LISTED])
            if len(known) > _MAX_LISTED:
                listed += f" ... ({len(known)} total)"
            return f"{message}. Available: {listed}"
        return message


class FileSystemLoader(BaseLoader):
    """Load templates from one or more directories, first match wins.

    Later directories act as fallbacks, so an application can override a
    few shared layouts:

        >>> loader = FileSystemLoader(["app/templates", "shared/templates"])
        >>> loader.get_source("layouts/outer.html")[1]
        'app/templates/layouts/outer.html'

    Names are ``/``-separated and relative; names that are absolute or
    contain ``..`` never leave the search directories and simply miss.
    """

    __slots__ = ("_encoding", "_roots")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._roots = [Path(p) for p in paths]
        self._encoding = encoding

    @property
    def search_path(self) -> list[Path]:
        return list(self._roots)

    def _load(self, name: str) -> tuple[str, str] | None:
        relative = PurePosixPath(name)
        if relative.is_absolute() or ".." in relative.parts:
            return None
        for root in self._roots:
            path = root.joinpath(*relative.parts)
            if path.is_file():
                return path.read_text(self._encoding), str(path)
        return None

    def _miss_message(self, name: str) -> str:
        searched = ", ".join(str(root) for root in self._roots)
        return f"{super()._miss_message(name)} (searched: {searched})"

    def list_templates(self) -> list[str]:
        """Every visible file below the search directories."""
        names: set[str] = set()
        for root in self._roots:
            if not root.is_dir():
                continue
            for path in root.rglob("*"):
                if path.is_file() and not path.name.startswith("."):
                    names.add(path.relative_to(root).as_posix())
        return sorted(names)


class DictLoader(BaseLoader):
    """Serve templates from a mapping of name to source.

    The mapping is read on every lookup, so entries added later are seen
    once the environment cache is cleared.

        >>> env = Environment(loader=DictLoader({
        ...     "layouts/outer.html": "<body>{{ yield }}</body>",
        ...     "layouts/inner.html": (
        ...         "{% inside_layout 'outer' %}<main>{{ yield }}</main>{% end %}"
        ...     ),
        ... }))
        >>> env.render_layout("inner", "Hi")
        '<body><main>Hi</main></body>'

    Filenames are None; these templates are not file-backed.
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[str, str]):
        self._templates = templates

    def _load(self, name: str) -> tuple[str, None] | None:
        source = self._templates.get(name)
        if source is None:
            return None
        return source, None

    def list_templates(self) -> list[str]:
        return sorted(self._templates)
