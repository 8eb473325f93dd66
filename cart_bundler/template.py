"""Template rendering.

Templates are plain text files with ``__BUNDLE_<NAME>__`` placeholders. All
placeholders are substituted in a single pass, so bound values (which may be
arbitrary runtime JS) are never scanned for placeholders themselves.
"""

import pathlib
import re
from typing import Mapping, Protocol

from cart_bundler.errors import BundleError
from cart_bundler.fsutil import read_text

_PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"__BUNDLE_([A-Z0-9_]+?)__")


class TemplateRenderer(Protocol):
    """Anything that can render a named template with string bindings."""

    def render(self, template_id: str, bindings: Mapping[str, str]) -> str: ...


class TemplateError(BundleError):
    """Raised when a template references a binding that was not supplied."""


def substitute(template: str, bindings: Mapping[str, str], *, template_id: str = "<string>") -> str:
    """Replace every ``__BUNDLE_<NAME>__`` placeholder with ``bindings[NAME]``.

    :param template: Template text.
    :param bindings: Placeholder values keyed by ``NAME``.
    :param template_id: Template name used in error messages.
    :returns: Rendered text.
    :raises TemplateError: If a placeholder has no binding.
    """

    def _replace(m: re.Match[str]) -> str:
        name: str = m.group(1)
        value: str | None = bindings.get(name)
        if value is None:
            raise TemplateError(f"Template {template_id} references unbound placeholder {m.group(0)}.")
        return value

    return _PLACEHOLDER_RE.sub(_replace, template)


class FileTemplateRenderer:
    """Renders ``<template_dir>/<template_id>.html`` templates."""

    def __init__(self, template_dir: pathlib.Path) -> None:
        self.template_dir: pathlib.Path = template_dir

    def template_path(self, template_id: str) -> pathlib.Path:
        return self.template_dir / f"{template_id}.html"

    def render(self, template_id: str, bindings: Mapping[str, str]) -> str:
        """Load and render a template.

        :param template_id: Template name (file stem).
        :param bindings: Placeholder values.
        :returns: Rendered text.
        :raises InputReadError: If the template file cannot be read.
        :raises TemplateError: If a placeholder has no binding.
        """

        source: str = read_text(self.template_path(template_id), what="page template")
        return substitute(source, bindings, template_id=template_id)
