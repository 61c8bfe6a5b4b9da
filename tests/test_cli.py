"""Tests for the oc2helm command line interface."""

import os
import shutil
import tempfile
from pathlib import Path
from unittest import TestCase

import pytest

from oc2helm.cli.main import create_parser, main


TEMPLATE = """
kind: Template
parameters:
  - name: DB_HOST
    value: localhost
objects:
  - kind: Service
    metadata:
      name: ${DB_HOST}
"""


class TestCLI(TestCase):
    """Test argument handling and exit codes."""

    def setUp(self):
        """Set up test environment."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.template = self.test_dir / 'shop.yaml'
        self.template.write_text(TEMPLATE)
        self.target = self.test_dir / 'charts'

        self.original_cwd = Path.cwd()
        os.chdir(self.test_dir)

    def tearDown(self):
        """Clean up test environment."""
        os.chdir(self.original_cwd)
        shutil.rmtree(self.test_dir)

    def test_no_templates_is_an_error(self):
        self.assertEqual(main([]), 1)

    def test_help_exits_successfully(self):
        with pytest.raises(SystemExit) as exc_info:
            main(['-h'])
        self.assertEqual(exc_info.value.code, 0)

    def test_default_target_dir(self):
        args = create_parser().parse_args(['shop.yaml'])
        self.assertEqual(args.target_dir, 'generated-helmcharts')

    def test_convert_to_default_target(self):
        self.assertEqual(main(['shop.yaml', '--quiet']), 0)
        self.assertTrue((self.test_dir / 'generated-helmcharts' / 'shop' / 'Chart.yaml').exists())

    def test_convert_to_custom_target(self):
        self.assertEqual(main([str(self.template), '-t', str(self.target), '--quiet']), 0)

        service = (self.target / 'shop' / 'templates' / 'Service.yaml').read_text()
        self.assertIn("name: '{{ .Values.dbHost }}'", service)

    def test_missing_template_file(self):
        self.assertEqual(main(['absent.yaml', '-t', str(self.target), '--quiet']), 1)

    def test_invalid_template_exit_code(self):
        (self.test_dir / 'list.yaml').write_text("kind: List\n")
        self.assertEqual(main(['list.yaml', '-t', str(self.target), '--quiet']), 2)

    def test_unparseable_template_exit_code(self):
        (self.test_dir / 'broken.yaml').write_text("kind: [\n")
        self.assertEqual(main(['broken.yaml', '-t', str(self.target), '--quiet']), 2)

    def test_first_failure_stops_processing(self):
        (self.test_dir / 'list.yaml').write_text("kind: List\n")

        code = main(['list.yaml', 'shop.yaml', '-t', str(self.target), '--quiet'])

        self.assertEqual(code, 2)
        self.assertFalse((self.target / 'shop').exists())

    def test_continue_on_error(self):
        (self.test_dir / 'list.yaml').write_text("kind: List\n")

        code = main(['list.yaml', 'shop.yaml', '-t', str(self.target), '--quiet', '--continue-on-error'])

        self.assertEqual(code, 2)
        self.assertTrue((self.target / 'shop' / 'Chart.yaml').exists())

    def test_existing_chart_directory_overwritten(self):
        (self.target / 'shop').mkdir(parents=True)
        (self.target / 'shop' / 'Chart.yaml').write_text('old')

        self.assertEqual(main(['shop.yaml', '-t', str(self.target), '--quiet']), 0)
        self.assertNotEqual((self.target / 'shop' / 'Chart.yaml').read_text(), 'old')

    def test_malformed_override_file_fails_that_template(self):
        (self.test_dir / 'shop.properties').write_text("DB_HOST=\\uZZZZ\n")

        self.assertEqual(main(['shop.yaml', '-t', str(self.target), '--quiet']), 1)
        self.assertEqual(main(['shop.yaml', '-t', str(self.target), '--quiet', '--no-overrides']), 0)
