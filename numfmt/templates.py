"""Helpers that wire the number formatter into Jinja2 environments."""
from __future__ import annotations

from typing import Any

from fastapi.templating import Jinja2Templates
from jinja2 import Environment

from numfmt.extension import NumberFormatterExtension


def create_environment(**options: Any) -> Environment:
    """Build a Jinja2 ``Environment`` with the number formatter loaded.

    Keyword arguments are passed to ``Environment``; extra extensions are kept.
    """
    extensions = list(options.pop("extensions", ()))
    extensions.append(NumberFormatterExtension)
    return Environment(extensions=extensions, **options)


def configure_templates(templates: Jinja2Templates) -> Jinja2Templates:
    """Install the number formatter on a FastAPI ``Jinja2Templates`` instance."""

    if NumberFormatterExtension.identifier not in templates.env.extensions:
        templates.env.add_extension(NumberFormatterExtension)
    return templates
