"""Converter exceptions."""

from typing import List, Optional
from dataclasses import dataclass


@dataclass
class ValidationError:
    """A problem found in one part of a template."""
    message: str
    path: str = ""


class ParseError(ValueError):
    """Raised when template text cannot be decoded into a document tree."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot parse '{source}': {reason}")


class TemplateValidationError(Exception):
    """
    Raised when a decoded template does not have the shape of an OpenShift
    Template. The message names the input and the kind found at its root.
    """

    exit_code = 2

    def __init__(self, source: str, kind: Optional[str], errors: List[ValidationError]):
        self.source = source
        self.kind = kind
        self.errors = errors
        details = "".join(f"\n  - {error.message}" for error in errors)
        super().__init__(f"Invalid template '{source}' (kind '{kind}'):{details}")


class VariableMatchError(RuntimeError):
    """Raised when variable references in a string cannot be grouped."""

    def __init__(self, text: str, detail: str = "does not match variable group"):
        self.text = text
        super().__init__(f"Line '{text}' {detail}")
