"""
Variable substitution over template object trees.

Finds ``$VAR`` / ``${VAR}`` references in every string of an object tree and
rewrites them in place into Helm value lookups (``{{ .Values.var }}``).
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from oc2helm.exceptions import VariableMatchError
from .registry import VariableRegistry


logger = logging.getLogger(__name__)

Reference = Tuple[str, str, str]


class NodeKind(str, Enum):
    """Shape of a node in a decoded object tree."""
    SCALAR = "scalar"
    STRING = "string"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


def node_kind(node: Any) -> NodeKind:
    """Classify a decoded YAML node."""
    if isinstance(node, str):
        return NodeKind.STRING
    if isinstance(node, dict):
        return NodeKind.MAPPING
    if isinstance(node, list):
        return NodeKind.SEQUENCE
    # Numbers, booleans, null and timestamps
    return NodeKind.SCALAR


def group_matches(tokens: Sequence[str], text: str) -> List[Reference]:
    """
    Group flat match tokens into (leading braces, name, trailing braces) triples.

    Raises:
        VariableMatchError: If the tokens cannot form complete triples, or a
            reference opens more braces than it closes
    """
    if len(tokens) % 3 != 0:
        raise VariableMatchError(text)

    references = []
    for i in range(0, len(tokens), 3):
        leading, name, trailing = tokens[i], tokens[i + 1], tokens[i + 2]
        if len(leading) > len(trailing):
            raise VariableMatchError(text, f"has an unterminated reference to '{name}'")
        references.append((leading, name, trailing))
    return references


class TreeSubstitutor:
    """Rewrites variable references in object trees using a VariableRegistry."""

    VAR_PATTERN = re.compile(r'\$(\{*)([A-Z_]+)(\}*)')
    REPLACEMENT_TEMPLATE = "{{{{ .Values.{name} }}}}"

    def __init__(self, registry: VariableRegistry):
        """Initialize the substitutor."""
        self.registry = registry

    def rewrite(self, node: Any) -> Any:
        """
        Rewrite all variable references below ``node``.

        Mappings and sequences are updated in place and returned; strings are
        returned rewritten; other scalars are returned unchanged.
        """
        kind = node_kind(node)
        if kind == NodeKind.STRING:
            return self._rewrite_string(node)
        elif kind == NodeKind.MAPPING:
            return self._rewrite_mapping(node)
        elif kind == NodeKind.SEQUENCE:
            return self._rewrite_sequence(node)
        else:
            return node

    def rewrite_objects(self, objects: Optional[List[Any]]) -> Optional[List[Any]]:
        """Rewrite every object of a template."""
        return self._rewrite_sequence(objects)

    def find_references(self, text: str) -> List[Reference]:
        """Return the references in ``text`` in left-to-right order."""
        tokens: List[str] = []
        for match in self.VAR_PATTERN.finditer(text):
            tokens.extend(match.groups())
        return group_matches(tokens, text)

    def _rewrite_string(self, text: str) -> str:
        references = self.find_references(text)
        if not references:
            return text

        logger.debug(f"In Object '{text}':")
        replacements: Dict[str, str] = {}
        for _, name, _ in references:
            logger.debug(f"  Found '{name}'")
            if name not in replacements:
                self.registry.resolve(name, context=text)
                variable = self.registry.ensure_replacement_name(name)
                replacements[name] = self.REPLACEMENT_TEMPLATE.format(name=variable.replacement)

        return self.VAR_PATTERN.sub(lambda m: self._replace_match(m, replacements), text)

    @staticmethod
    def _replace_match(match: re.Match, replacements: Dict[str, str]) -> str:
        # Closing braces beyond the opening ones belong to the surrounding text
        leading, name, trailing = match.groups()
        return replacements[name] + trailing[len(leading):]

    def _rewrite_mapping(self, mapping: Dict[Any, Any]) -> Dict[Any, Any]:
        for key, value in mapping.items():
            mapping[key] = self.rewrite(value)
        return mapping

    def _rewrite_sequence(self, sequence: Optional[List[Any]]) -> Optional[List[Any]]:
        if not sequence:
            return sequence
        for i, item in enumerate(sequence):
            sequence[i] = self.rewrite(item)
        return sequence
