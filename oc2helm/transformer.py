"""
Template to chart transformation pipeline.

One TemplateTransformer converts one template file: load, merge overrides,
normalize kinds, substitute variables, emit the chart.
"""

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from oc2helm.chart.emitter import ChartEmitter, ChartSettings
from oc2helm.diagnostics import Diagnostics
from oc2helm.kinds.normalizer import KindNormalizer
from oc2helm.loader import TemplateDocument, TemplateLoader
from oc2helm.variables.overrides import load_properties, override_paths
from oc2helm.variables.registry import VariableRegistry
from oc2helm.variables.substitution import TreeSubstitutor


logger = logging.getLogger(__name__)


class TemplateTransformer:
    """Converts a single OpenShift template into a Helm chart."""

    def __init__(self, document: TemplateDocument, chart_name: str,
                 diagnostics: Optional[Diagnostics] = None):
        """
        Initialize the transformer from a decoded template.

        Args:
            document: Validated template document
            chart_name: Name of the generated chart and its directory
            diagnostics: Sink for non-fatal findings
        """
        self.document = document
        self.chart_name = chart_name
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.registry = VariableRegistry(self.diagnostics)
        self.registry.declare_all(document.parameters)

    @classmethod
    def from_file(cls, template_path: Union[str, Path], use_overrides: bool = True,
                  diagnostics: Optional[Diagnostics] = None) -> 'TemplateTransformer':
        """Load a template file and merge its override property files."""
        template_path = Path(template_path)
        document = TemplateLoader().load(template_path)
        transformer = cls(document, template_path.stem, diagnostics)
        if use_overrides:
            for properties_path in override_paths(template_path):
                transformer.merge_overrides(load_properties(properties_path), str(properties_path))
        return transformer

    @property
    def objects(self) -> List[Any]:
        return self.document.objects

    def merge_overrides(self, overrides: Mapping[str, str], source: str = "<overrides>") -> List[str]:
        return self.registry.apply_overrides(overrides, source)

    def fix_kinds(self) -> None:
        KindNormalizer().normalize(self.document.objects)

    def replace_parameters(self) -> None:
        substitutor = TreeSubstitutor(self.registry)
        self.document.objects = substitutor.rewrite_objects(self.document.objects)

    def dump(self, settings: Optional[ChartSettings] = None) -> Path:
        """Write the chart; returns the chart directory."""
        emitter = ChartEmitter(self.chart_name, self.registry, settings, self.diagnostics)
        return emitter.emit(self.document.objects)

    def run(self, settings: Optional[ChartSettings] = None) -> Path:
        """Normalize, substitute and emit in that order."""
        self.fix_kinds()
        self.replace_parameters()
        return self.dump(settings)


def convert_template(template_path: Union[str, Path], settings: Optional[ChartSettings] = None,
                     use_overrides: bool = True,
                     diagnostics: Optional[Diagnostics] = None) -> Path:
    """Convert one template file into a chart directory."""
    transformer = TemplateTransformer.from_file(template_path, use_overrides, diagnostics)
    return transformer.run(settings)
