"""Template loader and structural validation for OpenShift template documents."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union
import yaml

from oc2helm.exceptions import ParseError, ValidationError, TemplateValidationError


logger = logging.getLogger(__name__)


class PreservingLoader(yaml.SafeLoader):
    """Custom YAML loader that preserves strings like 'on' instead of converting to bool."""
    pass


# Template strings such as 'on', 'off', 'yes' and 'no' must survive a round trip
# unchanged, so drop the implicit bool resolvers that would catch them.
PreservingLoader.yaml_implicit_resolvers = dict(PreservingLoader.yaml_implicit_resolvers)
for _first in ('o', 'O', 'y', 'Y', 'n', 'N'):
    if _first in PreservingLoader.yaml_implicit_resolvers:
        PreservingLoader.yaml_implicit_resolvers[_first] = [
            (tag, regexp) for tag, regexp in PreservingLoader.yaml_implicit_resolvers[_first]
            if tag != 'tag:yaml.org,2002:bool'
        ]


@dataclass
class TemplateDocument:
    """
    A decoded and validated template.

    Attributes:
        source: Name of the input the document came from
        kind: Root kind (always 'Template' once validated)
        parameters: Declared parameters in document order
        objects: Object definitions; mutated by normalization and substitution
        raw: The complete root mapping
    """
    source: str
    kind: str
    parameters: List[Dict[str, Any]] = field(default_factory=list)
    objects: List[Any] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)


def parse_yaml(text: str, source: str = "<string>") -> Any:
    """Decode YAML text into plain Python containers."""
    try:
        return yaml.load(text, Loader=PreservingLoader)
    except yaml.YAMLError as e:
        raise ParseError(source, str(e)) from e


class TemplateLoader:
    """Loads template YAML and enforces the expected document shape."""

    TEMPLATE_KIND = "Template"

    def __init__(self):
        """Initialize loader."""
        self.errors: List[ValidationError] = []

    def load(self, template_path: Union[str, Path]) -> TemplateDocument:
        """Load and validate a template file."""
        template_path = Path(template_path)
        logger.info(f"Loading OC Template '{template_path}'")
        with open(template_path, 'r', encoding='utf-8') as f:
            text = f.read()
        return self.loads(text, source=str(template_path))

    def loads(self, text: str, source: str = "<string>") -> TemplateDocument:
        """Decode and validate template text."""
        self.errors = []
        template = parse_yaml(text, source)

        if template is None or not isinstance(template, dict):
            found = type(template).__name__ if template is not None else "empty document"
            raise ParseError(source, f"template root must be a mapping, got {found}")

        kind = template.get('kind')
        if kind != self.TEMPLATE_KIND:
            self._add_error(
                f"Cannot transform kind '{kind}' from input file '{source}'", path="kind"
            )

        objects = template.get('objects')
        if not objects:
            self._add_error(f"Template file '{source}' does not contain any objects", path="objects")
        elif not isinstance(objects, list):
            self._add_error(
                f"Template file '{source}': 'objects' must be a list, got {type(objects).__name__}",
                path="objects"
            )

        parameters = template.get('parameters')
        if parameters is None:
            parameters = []
        self._validate_parameters(parameters, source)

        if self.errors:
            self._raise_validation_errors(source, kind)

        return TemplateDocument(
            source=source,
            kind=kind,
            parameters=parameters,
            objects=objects,
            raw=template,
        )

    def _validate_parameters(self, parameters: Any, source: str):
        """Validate the parameter declarations."""
        if not isinstance(parameters, list):
            self._add_error(f"Template file '{source}': 'parameters' must be a list", path="parameters")
            return

        for i, parameter in enumerate(parameters):
            if not isinstance(parameter, dict):
                self._add_error(f"Template file '{source}': parameter {i} must be a mapping",
                                path=f"parameters[{i}]")
            elif not parameter.get('name'):
                self._add_error(f"Template file '{source}': parameter {i} missing required 'name' field",
                                path=f"parameters[{i}]")
            elif not isinstance(parameter['name'], str):
                self._add_error(f"Template file '{source}': parameter {i} name must be a string",
                                path=f"parameters[{i}].name")

    def _add_error(self, message: str, path: str = ""):
        self.errors.append(ValidationError(message, path))

    def _raise_validation_errors(self, source: str, kind: Any):
        raise TemplateValidationError(source, kind, self.errors)


def decode(text: str, source: str = "<string>") -> TemplateDocument:
    """Decode template text into a validated TemplateDocument."""
    return TemplateLoader().loads(text, source=source)
