"""Tests for engine.config -- probe configuration and persistence."""

import os
import tempfile
import unittest
from dataclasses import FrozenInstanceError
from unittest import mock

from engine.config import (
    DEFAULTS,
    Endpoints,
    ProbeConfig,
    load_config,
    probe_config_from_settings,
    save_config,
)


class TestProbeConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = ProbeConfig()
        self.assertEqual(cfg.download_size_bytes, 100_000_000)
        self.assertEqual(cfg.upload_size_bytes, 20_000_000)
        self.assertEqual(cfg.request_timeout, 30.0)
        self.assertEqual(cfg.latency_sample_count, 3)
        self.assertEqual(cfg.jitter_sample_count, 10)
        self.assertEqual(cfg.jitter_delay_ms, 100)
        self.assertEqual(cfg.endpoints.server_id, "cloudflare")

    def test_frozen(self):
        with self.assertRaises(FrozenInstanceError):
            ProbeConfig().request_timeout = 1.0

    def test_download_url(self):
        self.assertEqual(
            Endpoints().download_for(5_000_000),
            "https://speed.cloudflare.com/__down?bytes=5000000",
        )

    def test_from_settings_converts_megabytes(self):
        settings = dict(DEFAULTS, download_size=25, upload_size=10, timeout=5, jitter_delay=0)
        cfg = probe_config_from_settings(settings)
        self.assertEqual(cfg.download_size_bytes, 25_000_000)
        self.assertEqual(cfg.upload_size_bytes, 10_000_000)
        self.assertEqual(cfg.request_timeout, 5.0)
        self.assertEqual(cfg.jitter_delay_ms, 0)

    def test_defaults_match(self):
        self.assertEqual(probe_config_from_settings(DEFAULTS), ProbeConfig())


class TestLoadSaveConfig(unittest.TestCase):
    def test_load_defaults_when_missing(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with mock.patch("engine.config._config_path", return_value=path):
                cfg = load_config()
                self.assertEqual(cfg["download_size"], 100)
                self.assertEqual(cfg["format"], "text")

    def test_save_and_load(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "nested", "config.json")
            with mock.patch("engine.config._config_path", return_value=path):
                self.assertEqual(save_config({"upload_size": 10, "format": "json"}), path)
                cfg = load_config()
                self.assertEqual(cfg["upload_size"], 10)
                self.assertEqual(cfg["format"], "json")
                # Defaults still present
                self.assertEqual(cfg["timeout"], 30.0)

    def test_corrupt_file_returns_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w") as f:
                f.write("NOT JSON")
            with mock.patch("engine.config._config_path", return_value=path):
                self.assertEqual(load_config(), DEFAULTS)

    def test_non_dict_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w") as f:
                f.write("[1, 2, 3]")
            with mock.patch("engine.config._config_path", return_value=path):
                self.assertEqual(load_config(), DEFAULTS)


if __name__ == "__main__":
    unittest.main()
