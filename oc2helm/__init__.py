"""
oc2helm: generate Helm charts from OpenShift templates.

Public API:
- decode(text, source) -> TemplateDocument
- encode(node) -> str
- TemplateTransformer / convert_template(path, settings) -> Path
"""

from .diagnostics import Diagnostic, Diagnostics
from .document import encode, encode_all
from .exceptions import ParseError, TemplateValidationError, ValidationError, VariableMatchError
from .loader import TemplateDocument, TemplateLoader, decode
from .transformer import TemplateTransformer, convert_template

__all__ = [
    'Diagnostic',
    'Diagnostics',
    'encode',
    'encode_all',
    'ParseError',
    'TemplateValidationError',
    'ValidationError',
    'VariableMatchError',
    'TemplateDocument',
    'TemplateLoader',
    'decode',
    'TemplateTransformer',
    'convert_template',
]
