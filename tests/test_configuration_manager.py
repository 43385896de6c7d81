"""
Unit tests for summary configuration management
"""

import json
import unittest
import tempfile
from pathlib import Path

from infrastructure.configuration_manager import (
    ColorSpec, ConfigurationError, ConfigurationManager, SummaryConfiguration
)
from infrastructure.parameter_labels import PARAMETER_LABELS, get_parameter_label


class TestConfigurationManager(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.workspace = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_default_config(self):
        config = ConfigurationManager().create_default_config('chla_n')

        self.assertEqual(config.parameter, 'chla_n')
        self.assertIsNone(config.years)
        self.assertEqual(config.fill_mode, 'none')
        self.assertEqual(config.output_mode, 'combined')
        self.assertIsNone(config.max_gap)
        self.assertEqual(config.colors, ColorSpec())
        self.assertEqual(config.validate(), [])

    def test_yaml_round_trip(self):
        manager = ConfigurationManager('yaml')
        config = SummaryConfiguration(
            parameter='do_mgl', years=[2008, 2012], fill_mode='interpolate', max_gap=96,
            colors=ColorSpec(left=('white', 'black'), mid='grey', right=('blue', 'white', 'red'))
        )
        path = manager.save_config(config, self.workspace / 'nested' / 'summary.yaml')
        loaded = manager.load_config(path)

        self.assertEqual(loaded.parameter, 'do_mgl')
        self.assertEqual(loaded.years, [2008, 2012])
        self.assertEqual(loaded.max_gap, 96)
        self.assertEqual(loaded.colors.right, ('blue', 'white', 'red'))
        self.assertIn('last_modified', loaded.metadata)

    def test_json_config(self):
        path = self.workspace / 'summary.json'
        path.write_text(json.dumps({'parameter': 'atemp', 'output_mode': 'data', 'colors': {'mid': 'red'}}))

        config = ConfigurationManager.for_file(path).load_config(path)

        self.assertEqual(config.output_mode, 'data')
        self.assertEqual(config.colors.mid, 'red')
        self.assertEqual(config.colors.left, ColorSpec().left)

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            ConfigurationManager().load_config(self.workspace / 'absent.yaml')

    def test_unknown_key(self):
        path = self.workspace / 'summary.yaml'
        path.write_text('parameter: sal\nplt_sep: true\n')
        with self.assertRaises(ConfigurationError):
            ConfigurationManager().load_config(path)

    def test_not_a_mapping(self):
        path = self.workspace / 'summary.yaml'
        path.write_text('- sal\n- temp\n')
        with self.assertRaises(ConfigurationError):
            ConfigurationManager().load_config(path)

    def test_invalid_format(self):
        with self.assertRaises(ValueError):
            ConfigurationManager('toml')

    def test_validate_reports_problems(self):
        config = SummaryConfiguration(
            parameter='sal', years=[2013, 2012], fill_mode='spline', output_mode='both',
            max_gap=-1, base_size=0, colors=ColorSpec(left=('red',), mid='nope')
        )
        errors = ConfigurationManager().validate_config(config)

        self.assertEqual(len(errors), 6)
        self.assertTrue(any('after end year' in e for e in errors))
        self.assertTrue(any('base_size' in e for e in errors))

    def test_validate_uses_request_rules(self):
        config = SummaryConfiguration(parameter='sal', fill_mode='monoclim', output_mode='DATA')
        self.assertEqual(config.validate(), [])

        config = SummaryConfiguration(parameter='sal', colors=ColorSpec(mid='nope'))
        self.assertEqual(config.validate(), ["'nope' is not a recognised colour"])


class TestParameterLabels(unittest.TestCase):

    def test_known_and_unknown_labels(self):
        self.assertEqual(get_parameter_label('sal'), 'Salinity (psu)')
        self.assertEqual(get_parameter_label('cumprcp'), 'Cumulative precipitation (mm)')
        self.assertEqual(get_parameter_label('pco2'), 'pco2')

    def test_labels_are_read_only(self):
        with self.assertRaises(TypeError):
            PARAMETER_LABELS['sal'] = 'Salt'


if __name__ == '__main__':
    unittest.main()
