"""
YAML encoding for generated chart files.

Output is always block style with a four space indent, keeps mapping keys in
insertion order and never folds long scalars.
"""

from typing import Any, Iterable
import yaml


DOCUMENT_BOUNDARY = "---"
INDENT = 4


class BlockDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors or aliases."""

    def ignore_aliases(self, data):
        return True


def encode(node: Any) -> str:
    """Encode one object tree as YAML text."""
    return yaml.dump(
        node,
        Dumper=BlockDumper,
        default_flow_style=False,
        indent=INDENT,
        width=float('inf'),
        sort_keys=False,
        allow_unicode=True,
    )


def encode_all(nodes: Iterable[Any]) -> str:
    """Encode several object trees separated by document boundary markers."""
    return f"{DOCUMENT_BOUNDARY}\n".join(encode(node) for node in nodes)
