"""
Template variables.
Declared parameters, override merging and reference substitution.
"""

from .registry import Variable, VariableRegistry, derive_replacement_name
from .substitution import NodeKind, TreeSubstitutor, group_matches, node_kind
from .overrides import load_properties, override_paths, parse_properties, unescape

__all__ = [
    'Variable',
    'VariableRegistry',
    'derive_replacement_name',
    'NodeKind',
    'TreeSubstitutor',
    'group_matches',
    'node_kind',
    'load_properties',
    'override_paths',
    'parse_properties',
    'unescape',
]
