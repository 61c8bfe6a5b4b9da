"""
Helm chart emission.

Writes Chart.yaml, values.yaml (plus values-template.yaml when some value
still has to be provided per environment) and one file per object kind
below templates/.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from oc2helm.diagnostics import Diagnostics, MISSING_KIND, UNUSED_VARIABLE
from oc2helm.document import encode, encode_all
from oc2helm.variables.registry import Variable, VariableRegistry


logger = logging.getLogger(__name__)

DEFAULT_TARGET_DIR = "generated-helmcharts"
GENERATOR_URL = "https://github.com/ascheman/oc-templates2helm.git"

CHART_FILE = "Chart.yaml"
VALUES_FILE = "values.yaml"
VALUES_TEMPLATE_FILE = "values-template.yaml"
TEMPLATES_DIR = "templates"

EDIT_WITH_CARE = "This file is generated automatically - edit with care!"
DO_NOT_EDIT = ("This file is generated automatically - DO NOT EDIT - "
               "Use it as template for your value overrides in different environments")

TO_BE_REPLACED = "# TO_BE_REPLACED"
INSERT_VALUE_HERE = "# Insert environment specific value here"

_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9_.-]')


@dataclass
class ChartSettings:
    """Settings for generated charts."""
    target_dir: Path = Path(DEFAULT_TARGET_DIR)
    api_version: str = "v1"
    app_version: str = "1.0"
    chart_version: str = "0.0.1"
    icon: str = "http://acme.org/replaceme.jpg"
    generator_url: str = GENERATOR_URL
    clock: Callable[[], datetime] = field(default=datetime.now)


def provenance_header(notice: str, generated_at: datetime, generator_url: str = GENERATOR_URL) -> str:
    """Comment block placed at the top of every generated file."""
    return (
        f"# {notice}\n"
        f"# Generation date {generated_at.isoformat(timespec='seconds')}\n"
        f"# Cf. {generator_url} for generator details\n"
        "\n"
    )


def template_filename(kind: str) -> str:
    """File name for the objects of one kind."""
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', kind)}.yaml"


def _comment(text: Any) -> str:
    return "".join(f"# {line}\n" for line in str(text).splitlines() or [""])


def _value_line(name: str, value: Any) -> str:
    return encode({name: value})


class ChartEmitter:
    """Writes the files of one chart."""

    def __init__(self, chart_name: str, registry: VariableRegistry,
                 settings: Optional[ChartSettings] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.chart_name = chart_name
        self.registry = registry
        self.settings = settings or ChartSettings()
        self.diagnostics = diagnostics if diagnostics is not None else registry.diagnostics

    @property
    def chart_dir(self) -> Path:
        return Path(self.settings.target_dir) / self.chart_name

    def emit(self, objects: List[Any]) -> Path:
        """Write the complete chart and return its directory."""
        chart_dir = self.chart_dir
        chart_dir.mkdir(parents=True, exist_ok=True)

        self.write_manifest(chart_dir)
        self.write_values(chart_dir)
        self.write_templates(chart_dir, objects)
        return chart_dir

    def _header(self, notice: str = EDIT_WITH_CARE) -> str:
        return provenance_header(notice, self.settings.clock(), self.settings.generator_url)

    def write_manifest(self, chart_dir: Path) -> Path:
        """Write Chart.yaml."""
        chart_file = Path(chart_dir) / CHART_FILE
        logger.info(f"Dumping chart for '{self.chart_name}' to '{chart_file}'")

        settings = self.settings
        content = (
            f"apiVersion: {settings.api_version}\n"
            f"appVersion: \"{settings.app_version}\"\n"
            f"description: A Helm chart for the {self.chart_name} application\n"
            f"name: {self.chart_name}\n"
            "# The effective version will be computed during Helm generation\n"
            f"version: {settings.chart_version}\n"
            "# This is only added to make `helm lint` happy - configure your own icon!\n"
            f"icon: {settings.icon}\n"
        )
        chart_file.write_text(self._header() + content, encoding='utf-8')
        return chart_file

    def write_values(self, chart_dir: Path) -> Path:
        """
        Write values.yaml, and values-template.yaml when any used variable
        has no default value.
        """
        chart_dir = Path(chart_dir)
        values_file = chart_dir / VALUES_FILE
        values_template_file = chart_dir / VALUES_TEMPLATE_FILE
        logger.info(f"Dumping values for '{self.chart_name}' to '{values_file}'")

        values: List[str] = []
        overrides: List[str] = []
        for variable in self.registry.sorted_variables():
            values.append(self._values_entry(variable))
            if variable.replacement and not variable.has_value:
                overrides.append(self._override_entry(variable))

        values_file.write_text(self._header() + "".join(values), encoding='utf-8')

        if overrides:
            values_template_file.write_text(
                self._header(DO_NOT_EDIT) + "".join(overrides), encoding='utf-8'
            )
        elif values_template_file.exists():
            logger.info(f"Removing stale '{values_template_file}', every value has a default")
            values_template_file.unlink()
        return values_file

    def _values_entry(self, variable: Variable) -> str:
        entry = _comment(variable.description) if variable.description else ""
        if not variable.replacement:
            self.diagnostics.warn(
                UNUSED_VARIABLE, f"Parameter '{variable.name}' was never used?",
                subject=variable.name, log=logger
            )
            return entry + f"# Variable '{variable.name}' was never used\n"
        if variable.has_value:
            return entry + _value_line(variable.replacement, variable.value)
        return entry + f"{variable.replacement}: {TO_BE_REPLACED}\n"

    def _override_entry(self, variable: Variable) -> str:
        entry = _comment(variable.description) if variable.description else ""
        return entry + f"{variable.replacement}: {INSERT_VALUE_HERE}\n"

    def group_by_kind(self, objects: List[Any]) -> Dict[str, List[Any]]:
        """Group objects by kind in first-seen order, skipping objects without one."""
        kinds: Dict[str, List[Any]] = {}
        for obj in objects or []:
            kind = obj.get('kind') if isinstance(obj, dict) else None
            if not kind:
                self.diagnostics.warn(
                    MISSING_KIND,
                    f"Skipping object without kind in chart '{self.chart_name}'",
                    subject=_describe(obj), log=logger
                )
                continue
            kinds.setdefault(str(kind), []).append(obj)
        return kinds

    def write_templates(self, chart_dir: Path, objects: List[Any]) -> List[Path]:
        """Write one file per object kind below templates/."""
        templates_dir = Path(chart_dir) / TEMPLATES_DIR
        templates_dir.mkdir(parents=True, exist_ok=True)

        written = []
        for kind, kind_objects in self.group_by_kind(objects).items():
            template_file = templates_dir / template_filename(kind)
            logger.info(
                f"Dumping #{len(kind_objects)} objects of kind '{kind}' to file '{template_file}'"
            )
            template_file.write_text(self._header() + encode_all(kind_objects), encoding='utf-8')
            written.append(template_file)
        return written


def _describe(obj: Any) -> Optional[str]:
    if isinstance(obj, dict) and isinstance(obj.get('metadata'), dict):
        return obj['metadata'].get('name')
    return None
