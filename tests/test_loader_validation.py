"""Tests for template loading and structural validation."""

import pytest
import tempfile
from pathlib import Path

from oc2helm.loader import TemplateLoader, decode
from oc2helm.exceptions import ParseError, TemplateValidationError


VALID_TEMPLATE = """
apiVersion: v1
kind: Template
metadata:
  name: shop
parameters:
  - name: DB_HOST
    description: Database host
    value: localhost
  - name: REPLICAS
objects:
  - kind: Service
    apiVersion: v1
    metadata:
      name: shop
"""


class TestLoaderValidation:
    """Test template shape validation in the loader."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.workspace = Path(self.temp_dir)
        self.loader = TemplateLoader()

    def write_template(self, content: str, name: str = "shop.yaml") -> Path:
        """Helper to write template YAML."""
        path = self.workspace / name
        path.write_text(content)
        return path

    def test_valid_template_loads(self):
        path = self.write_template(VALID_TEMPLATE)

        document = self.loader.load(path)

        assert document.kind == "Template"
        assert document.source == str(path)
        assert [p['name'] for p in document.parameters] == ['DB_HOST', 'REPLICAS']
        assert document.objects[0]['kind'] == 'Service'
        assert document.raw['metadata']['name'] == 'shop'

    def test_wrong_kind_rejected_with_filename_and_kind(self):
        path = self.write_template("""
kind: List
objects:
  - kind: Service
""")

        with pytest.raises(TemplateValidationError) as exc_info:
            self.loader.load(path)

        assert exc_info.value.exit_code == 2
        message = str(exc_info.value)
        assert "'List'" in message
        assert str(path) in message

    def test_error_carries_source_and_found_kind(self):
        with pytest.raises(TemplateValidationError) as exc_info:
            decode("kind: Template\nobjects: []\n", source="empty.yaml")

        error = exc_info.value
        assert error.source == "empty.yaml"
        assert error.kind == "Template"
        assert str(error).startswith("Invalid template 'empty.yaml' (kind 'Template')")
        assert [e.path for e in error.errors] == ["objects"]

    def test_missing_kind_rejected(self):
        with pytest.raises(TemplateValidationError) as exc_info:
            decode("objects:\n  - kind: Service\n", source="nokind.yaml")

        assert "Cannot transform kind 'None'" in str(exc_info.value)

    def test_missing_objects_rejected(self):
        with pytest.raises(TemplateValidationError) as exc_info:
            decode("kind: Template\nparameters: []\n", source="empty.yaml")

        assert any("does not contain any objects" in err.message
                   for err in exc_info.value.errors)

    def test_empty_objects_rejected(self):
        with pytest.raises(TemplateValidationError):
            decode("kind: Template\nobjects: []\n")

    def test_errors_are_accumulated(self):
        """Wrong kind and missing objects are reported together."""
        with pytest.raises(TemplateValidationError) as exc_info:
            decode("kind: ConfigMap\n")

        assert len(exc_info.value.errors) == 2

    def test_parameter_without_name_rejected(self):
        with pytest.raises(TemplateValidationError) as exc_info:
            decode("""
kind: Template
parameters:
  - description: no name here
objects:
  - kind: Service
""")

        assert any("missing required 'name'" in err.message for err in exc_info.value.errors)

    def test_parameters_must_be_a_list(self):
        with pytest.raises(TemplateValidationError):
            decode("""
kind: Template
parameters:
  DB_HOST: x
objects:
  - kind: Service
""")

    def test_missing_parameters_allowed(self):
        document = decode("kind: Template\nobjects:\n  - kind: Service\n")

        assert document.parameters == []

    def test_invalid_yaml_raises_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            decode("kind: Template\nobjects: [unclosed\n", source="broken.yaml")

        assert "broken.yaml" in str(exc_info.value)

    def test_non_mapping_root_raises_parse_error(self):
        with pytest.raises(ParseError):
            decode("- just\n- a list\n")

    def test_on_off_strings_preserved(self):
        """Words like 'on' and 'yes' stay strings."""
        document = decode("""
kind: Template
objects:
  - kind: ConfigMap
    data:
      feature: on
      confirm: yes
      enabled: true
""")

        data = document.objects[0]['data']
        assert data['feature'] == 'on'
        assert data['confirm'] == 'yes'
        assert data['enabled'] is True

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            self.loader.load(self.workspace / "missing.yaml")
