"""CLI command handlers."""

from .convert import convert_templates

__all__ = ['convert_templates']
