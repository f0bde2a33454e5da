import json
import os
import tempfile
import unittest

from timeline_workload.utils.config import (
    ConfigError,
    get_default_config,
    load_config,
    merge_config,
)


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def write(self, name, content):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_defaults(self):
        config = get_default_config()
        self.assertEqual(config["workload"]["default_task_hours"], 4.0)
        self.assertEqual(config["workload"]["default_capacity_hours"], 8.0)
        self.assertEqual(config["timeline"]["progress_fallback_duration_days"], 30)
        self.assertEqual(config["timeline"]["critical_task_ratio"], 0.2)

    def test_merge_is_deep_and_leaves_defaults_alone(self):
        config = merge_config({"severity": {"low_max_days": 3}})
        self.assertEqual(config["severity"]["low_max_days"], 3)
        self.assertEqual(config["severity"]["medium_max_days"], 21)
        self.assertEqual(get_default_config()["severity"]["low_max_days"], 7)

    def test_merge_copies_overrides(self):
        overrides = {"calendar": {"high_risk_peak_percent": 150}}
        config = merge_config(overrides)
        config["calendar"]["high_risk_peak_percent"] = 1
        self.assertEqual(overrides["calendar"]["high_risk_peak_percent"], 150)

    def test_load_yaml(self):
        path = self.write(
            "config.yaml",
            "workload:\n  default_task_hours: 2\ntimeline:\n  critical_task_ratio: 0.5\n",
        )
        config = load_config(path)
        self.assertEqual(config["workload"]["default_task_hours"], 2)
        self.assertEqual(config["workload"]["default_capacity_hours"], 8.0)
        self.assertEqual(config["timeline"]["critical_task_ratio"], 0.5)

    def test_load_empty_yaml(self):
        path = self.write("empty.yml", "")
        self.assertEqual(load_config(path), get_default_config())

    def test_load_json(self):
        path = self.write("config.json", json.dumps({"load_levels": {"high_percent": 90}}))
        self.assertEqual(load_config(path)["load_levels"]["high_percent"], 90)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(os.path.join(self.tmpdir.name, "nope.yaml"))

    def test_unsupported_format(self):
        path = self.write("config.toml", "[workload]\n")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_malformed_files(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("bad.json", "{not json"))
        with self.assertRaises(ConfigError):
            load_config(self.write("bad.yaml", "workload: [unclosed\n"))

    def test_non_mapping_file(self):
        with self.assertRaises(ConfigError):
            load_config(self.write("list.yaml", "- a\n- b\n"))


if __name__ == "__main__":
    unittest.main()
