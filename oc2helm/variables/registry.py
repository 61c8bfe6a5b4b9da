"""
Variable registry.

Stores the template's declared parameters together with the Helm value name
each one is rewritten to, and merges default values from override sources.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional

from oc2helm.diagnostics import (
    Diagnostics,
    DUPLICATE_PARAMETER,
    OVERRIDE_IGNORED,
    UNDECLARED_VARIABLE,
)


logger = logging.getLogger(__name__)

_UNDERSCORE_PATTERN = re.compile(r'_([a-z0-9])')


def derive_replacement_name(name: str) -> str:
    """
    Derive the Helm value name for a template parameter.

    The name is lowercased and every underscore followed by a letter or digit
    is dropped while that character is uppercased: ``DB_HOST`` -> ``dbHost``.
    """
    return _UNDERSCORE_PATTERN.sub(lambda m: m.group(1).upper(), name.lower())


def _is_unset(value: Any) -> bool:
    return value is None or value == ""


@dataclass
class Variable:
    """
    A template parameter.

    Attributes:
        name: Declared identifier (e.g. 'DB_HOST')
        description: Optional human readable text
        value: Default value, from the template or an override source
        replacement: Helm value name, derived on first use
    """
    name: str
    description: Optional[str] = None
    value: Optional[Any] = None
    replacement: Optional[str] = None

    @property
    def has_value(self) -> bool:
        return not _is_unset(self.value)


class VariableRegistry:
    """Registry of template variables keyed by declared name."""

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self._variables: Dict[str, Variable] = {}
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def declare(self, name: str, description: Optional[str] = None,
                value: Optional[Any] = None) -> Variable:
        """Insert or overwrite a declared variable."""
        if name in self._variables:
            self.diagnostics.warn(
                DUPLICATE_PARAMETER,
                f"Parameter '{name}' is declared more than once, keeping the last declaration",
                subject=name, log=logger
            )
        variable = Variable(name=name, description=description, value=value)
        self._variables[name] = variable
        return variable

    def declare_all(self, parameters: List[Dict[str, Any]]) -> None:
        """Declare every parameter mapping of a template in document order."""
        for parameter in parameters:
            self.declare(
                parameter['name'],
                description=parameter.get('description'),
                value=parameter.get('value'),
            )

    def ensure_replacement_name(self, name: str) -> Variable:
        """Derive the replacement name of a variable unless already set."""
        variable = self._variables[name]
        if not variable.replacement:
            variable.replacement = derive_replacement_name(name)
            logger.info(f"{name} -> {variable.replacement}")
        return variable

    def resolve(self, name: str, context: Optional[str] = None) -> Variable:
        """
        Return the variable for ``name``, creating a bare entry if undeclared.

        Args:
            name: Variable name found in a template string
            context: The text the reference was found in, for the warning

        Returns:
            The existing or newly created variable
        """
        variable = self._variables.get(name)
        if variable is None:
            where = f" in '{context}'" if context is not None else ""
            self.diagnostics.warn(
                UNDECLARED_VARIABLE,
                f"Parameter '{name}'{where} is not declared",
                subject=name, log=logger
            )
            variable = Variable(name=name)
            self._variables[name] = variable
        return variable

    def apply_overrides(self, overrides: Mapping[str, str], source: str = "<overrides>") -> List[str]:
        """
        Merge override values into declared variables.

        A variable that already carries a value keeps it; the override is
        ignored with a warning. Override keys without a matching variable are
        ignored silently.

        Returns:
            Names of the variables whose value was set by this call
        """
        applied = []
        for name, variable in self._variables.items():
            override = overrides.get(name)
            if _is_unset(override):
                continue
            if variable.has_value:
                self.diagnostics.warn(
                    OVERRIDE_IGNORED,
                    f"Not overriding value '{name}' with current content '{variable.value}' "
                    f"with new value '{override}' from '{source}'",
                    subject=name, log=logger
                )
            else:
                variable.value = override
                applied.append(name)
        if applied:
            logger.debug(f"Applied overrides from '{source}': {applied}")
        return applied

    def get(self, name: str) -> Optional[Variable]:
        return self._variables.get(name)

    def sorted_variables(self) -> List[Variable]:
        """Variables ordered lexicographically by declared name."""
        return [self._variables[name] for name in sorted(self._variables)]

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables.values())

    def __len__(self) -> int:
        return len(self._variables)
