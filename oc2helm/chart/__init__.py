"""Helm chart emission."""

from .emitter import ChartEmitter, ChartSettings, provenance_header, template_filename

__all__ = ['ChartEmitter', 'ChartSettings', 'provenance_header', 'template_filename']
