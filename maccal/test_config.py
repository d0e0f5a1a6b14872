import json
import os
import tempfile
import unittest
from unittest import mock

from maccal import config

class TestConfig(unittest.TestCase):
    def setUp(self):
        self.data_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.data_dir.cleanup)
        patcher = mock.patch.dict(os.environ, {'maccal_data': self.data_dir.name})
        patcher.start()
        self.addCleanup(patcher.stop)
        self.config_file = os.path.join(self.data_dir.name, 'config.json')

    def test_defaults_when_missing(self):
        self.assertEqual(config.load_config(), config.DEFAULT_CONFIG)
        self.assertFalse(config.get_testing_mode())

    def test_round_trip(self):
        config.save_config({'default_calendar': 'Work', 'testing_mode': True})
        loaded = config.load_config()
        self.assertEqual(loaded['default_calendar'], 'Work')
        self.assertTrue(config.get_testing_mode())

    def test_corrupted_file(self):
        with open(self.config_file, 'w') as f:
            f.write('{not json')
        self.assertEqual(config.load_config(), config.DEFAULT_CONFIG)

    def test_partial_file_keeps_defaults(self):
        with open(self.config_file, 'w') as f:
            json.dump({'default_calendar': 'Home'}, f)
        self.assertEqual(config.load_config(), {'default_calendar': 'Home', 'testing_mode': False})

    def test_data_dir_from_environment(self):
        self.assertEqual(config.get_data_dir(), self.data_dir.name)

    def test_reading_does_not_create_data_dir(self):
        """Only writing the config creates the data directory"""
        nested = os.path.join(self.data_dir.name, 'nested', 'MacCal')
        with mock.patch.dict(os.environ, {'maccal_data': nested}):
            self.assertEqual(config.load_config(), config.DEFAULT_CONFIG)
            self.assertFalse(config.get_testing_mode())
            self.assertFalse(os.path.exists(nested))

            config.save_config({'default_calendar': 'Work'})
            self.assertTrue(os.path.isfile(os.path.join(nested, 'config.json')))

if __name__ == '__main__':
    unittest.main()
