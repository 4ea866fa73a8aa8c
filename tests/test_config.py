import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import importlib
import unittest
from unittest.mock import patch
import linewriter.config

class TestConfig(unittest.TestCase):
    def tearDown(self):
        importlib.reload(linewriter.config)

    def _load(self, env):
        with patch.dict(os.environ, env, clear=True), \
             patch('dotenv.load_dotenv'):
            return importlib.reload(linewriter.config).Config

    def test_defaults(self):
        Config = self._load({})
        self.assertEqual(Config.INFLUXDB_URL, "http://localhost:8086")
        self.assertEqual(Config.INFLUXDB_DATABASE, "")
        self.assertEqual(Config.INFLUXDB_PRECISION, "ms")
        self.assertEqual(Config.FLUSH_INTERVAL_MS, 500)
        self.assertEqual(Config.FLUSH_LENGTH, 5)
        self.assertFalse(Config.FLUSH_ON_STOP)
        self.assertFalse(Config.INFLUXDB_VERIFY_SSL)
        self.assertEqual(Config.INFLUXDB_TIMEOUT_SECONDS, 10.0)

    def test_environment_overrides(self):
        Config = self._load({
            'INFLUXDB_URL': 'https://influx:8086',
            'INFLUXDB_DATABASE': 'telemetry',
            'INFLUXDB_PRECISION': 's',
            'FLUSH_INTERVAL_MS': '1000',
            'FLUSH_LENGTH': '50',
            'FLUSH_ON_STOP': 'TRUE',
            'INFLUXDB_VERIFY_SSL': 'true',
        })
        self.assertEqual(Config.INFLUXDB_URL, 'https://influx:8086')
        self.assertEqual(Config.INFLUXDB_DATABASE, 'telemetry')
        self.assertEqual(Config.INFLUXDB_PRECISION, 's')
        self.assertEqual(Config.FLUSH_INTERVAL_MS, 1000)
        self.assertEqual(Config.FLUSH_LENGTH, 50)
        self.assertTrue(Config.FLUSH_ON_STOP)
        self.assertTrue(Config.INFLUXDB_VERIFY_SSL)

    def test_validate_rejects_bad_interval(self):
        Config = self._load({'FLUSH_INTERVAL_MS': '0'})
        with self.assertRaises(ValueError):
            Config.validate()

    def test_validate_rejects_negative_flush_length(self):
        Config = self._load({'FLUSH_LENGTH': '-1'})
        with self.assertRaises(ValueError):
            Config.validate()

    def test_validate_accepts_zero_flush_length(self):
        Config = self._load({'FLUSH_LENGTH': '0'})
        Config.validate()

    def test_validate_accepts_defaults(self):
        Config = self._load({})
        Config.validate()

if __name__ == '__main__':
    unittest.main()
