"""Locale-aware number, currency and percent formatting for Jinja2 templates."""

from .core import get_logger, get_settings
from .extension import NumberFormatterExtension
from .templates import configure_templates, create_environment

__all__ = [
    "NumberFormatterExtension",
    "configure_templates",
    "create_environment",
    "get_logger",
    "get_settings",
]
