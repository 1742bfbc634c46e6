"""
Tests for configuration loading, environment overrides and validation.
"""

import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import yaml

from src.garage_watch.config import (
    ConfigValidationError,
    format_duration,
    load_config,
    load_config_with_env,
    parse_duration,
)
from src.garage_watch.utils.constants import DEFAULT_IMAGE_PATH


class TestDurations(unittest.TestCase):
    def test_units(self):
        self.assertEqual(parse_duration("30s"), 30)
        self.assertEqual(parse_duration("10m"), 600)
        self.assertEqual(parse_duration("2h"), 7200)
        self.assertEqual(parse_duration("1d"), 86400)
        self.assertEqual(parse_duration("500ms"), 0.5)
        self.assertEqual(parse_duration("2 minutes"), 120)

    def test_bare_numbers_are_seconds(self):
        self.assertEqual(parse_duration(45), 45)
        self.assertEqual(parse_duration("45"), 45)
        self.assertEqual(parse_duration(1.5), 1.5)

    def test_invalid(self):
        for value in ["soon", "10 parsecs", "-5s", -1, True]:
            with self.assertRaises(ValueError, msg=value):
                parse_duration(value)

    def test_format(self):
        self.assertEqual(format_duration(30), "30 seconds")
        self.assertEqual(format_duration(1), "1 second")
        self.assertEqual(format_duration(600), "10 minutes")
        self.assertEqual(format_duration(3600), "1 hour")


class TestConfigLoading(unittest.TestCase):
    """Test YAML loading with environment overrides."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "garage-watch.yaml")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_config(self, config):
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config, f)
        return self.config_path

    def get_valid_config(self):
        """Return a minimal valid configuration."""
        return {
            "camera": {"url": "rtsp://camera.local/stream"},
            "model": {"path": "models/garage-cls.pt"},
        }

    def test_minimal_config_gets_defaults(self):
        config = load_config(self.write_config(self.get_valid_config()), environ={})

        self.assertEqual(config.camera.image_path, DEFAULT_IMAGE_PATH)
        self.assertEqual(config.polling.interval, 30)
        self.assertEqual(config.polling.max_retries, 5)
        self.assertEqual(config.decision.confidence_threshold, 75)
        self.assertFalse(config.decision.grace_enabled)
        self.assertEqual(config.notifications.cooldown, 600)
        self.assertEqual(config.notifications.notifiers, [])
        self.assertTrue(config.broadcast.enabled)

    def test_durations_in_yaml(self):
        data = self.get_valid_config()
        data["polling"] = {"interval": "1m"}
        data["decision"] = {"grace_period": "2m", "confidence_threshold": 65}
        data["notifications"] = {"cooldown": "15m"}
        config = load_config(self.write_config(data), environ={})

        self.assertEqual(config.polling.interval, 60)
        self.assertEqual(config.decision.grace_period, 120)
        self.assertTrue(config.decision.grace_enabled)
        self.assertEqual(config.notifications.cooldown, 900)

    def test_environment_overrides_file(self):
        environ = {
            "RTSP_URL": "rtsp://other/stream",
            "GARAGE_CHECK_INTERVAL": "45s",
            "CONFIDENCE_THRESHOLD": "70",
            "GRACE_PERIOD": "3m",
            "MAX_RETRIES": "3",
            "IMAGE_PATH": "/tmp/shot.jpg",
        }
        config = load_config(self.write_config(self.get_valid_config()), environ=environ)

        self.assertEqual(config.camera.url, "rtsp://other/stream")
        self.assertEqual(config.camera.image_path, "/tmp/shot.jpg")
        self.assertEqual(config.polling.interval, 45)
        self.assertEqual(config.polling.max_retries, 3)
        self.assertEqual(config.decision.confidence_threshold, 70)
        self.assertEqual(config.decision.grace_period, 180)

    def test_environment_only(self):
        environ = {"RTSP_URL": "rtsp://cam/stream", "MODEL_PATH": "/models/door.pt"}
        with patch("src.garage_watch.config.loader.find_config_file", return_value=None):
            config = load_config(environ=environ)

        self.assertEqual(config.model.path, "/models/door.pt")

    def test_pushover_from_environment(self):
        environ = {"PUSHOVER_TOKEN": "tok", "PUSHOVER_USER": "usr", "NTFY_TOPIC": "garage"}
        config = load_config(self.write_config(self.get_valid_config()), environ=environ)

        notifiers = {n.type: n for n in config.notifications.notifiers}
        self.assertEqual(notifiers["pushover"].token, "tok")
        self.assertEqual(notifiers["ntfy"].topic, "garage")

    def test_file_notifier_not_duplicated_by_environment(self):
        data = self.get_valid_config()
        data["notifications"] = {
            "notifiers": [{"id": "phone", "type": "pushover", "token": "a", "user": "b"}]
        }
        environ = {"PUSHOVER_TOKEN": "tok", "PUSHOVER_USER": "usr"}
        config = load_config(self.write_config(data), environ=environ)

        self.assertEqual([n.id for n in config.notifications.notifiers], ["phone"])

    def test_missing_camera_fails(self):
        data = self.get_valid_config()
        del data["camera"]
        with self.assertRaises(ConfigValidationError) as ctx:
            load_config(self.write_config(data), environ={})
        self.assertIn("camera", str(ctx.exception))

    def test_invalid_threshold_fails(self):
        data = self.get_valid_config()
        data["decision"] = {"confidence_threshold": 150}
        with self.assertRaises(ConfigValidationError):
            load_config(self.write_config(data), environ={})

    def test_model_must_be_pt(self):
        data = self.get_valid_config()
        data["model"] = {"path": "model.json"}
        with self.assertRaises(ConfigValidationError):
            load_config(self.write_config(data), environ={})

    def test_unknown_field_rejected(self):
        data = self.get_valid_config()
        data["camera"]["fps"] = 5
        with self.assertRaises(ConfigValidationError):
            load_config(self.write_config(data), environ={})

    def test_pushover_requires_credentials(self):
        data = self.get_valid_config()
        data["notifications"] = {"notifiers": [{"id": "p", "type": "pushover"}]}
        with self.assertRaises(ConfigValidationError):
            load_config(self.write_config(data), environ={})

    def test_missing_explicit_file_fails(self):
        with self.assertRaises(ConfigValidationError):
            load_config(os.path.join(self.temp_dir, "nope.yaml"), environ={})

    def test_invalid_yaml_fails(self):
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write("camera: [unclosed\n")
        with self.assertRaises(ConfigValidationError):
            load_config(self.config_path, environ={})

    def test_load_config_with_env_leaves_unset_values(self):
        config = load_config_with_env({"camera": {"url": "x"}}, environ={"RTSP_URL": ""})
        self.assertEqual(config["camera"]["url"], "x")


if __name__ == "__main__":
    unittest.main()
