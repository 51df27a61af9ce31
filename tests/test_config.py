"""
Tests for xrpl_core.config — TOML configuration and environment overrides.

Covers:
  - Default values for all dataclass sections
  - TOML parsing and section merging
  - Environment variable overrides (precedence over TOML)
  - _merge helper edge cases
  - Missing TOML files
  - Eager rejection of unknown key algorithms
"""

from __future__ import annotations

import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from xrpl_core.algorithms import KeyAlgorithm
from xrpl_core.config import CoreConfig, KeysConfig, LoggingConfig, _merge, load_config
from xrpl_core.exceptions import UnsupportedAlgorithm


def _load_toml(content: str):
    with tempfile.NamedTemporaryFile(mode="w", suffix=".toml", delete=False) as f:
        f.write(textwrap.dedent(content))
        f.flush()
        path = f.name
    try:
        return load_config(path)
    finally:
        os.unlink(path)


# ═══════════════════════════════════════════════════════════════════
#  Defaults
# ═══════════════════════════════════════════════════════════════════

class TestDefaults(unittest.TestCase):

    def test_keys_defaults(self):
        k = KeysConfig()
        self.assertEqual(k.default_algorithm, "ed25519")
        self.assertIs(k.algorithm(), KeyAlgorithm.ED25519)

    def test_logging_defaults(self):
        lg = LoggingConfig()
        self.assertEqual(lg.level, "INFO")
        self.assertEqual(lg.format, "human")
        self.assertIsNone(lg.file)

    def test_sections_are_independent(self):
        a, b = CoreConfig(), CoreConfig()
        a.keys.default_algorithm = "secp256k1"
        self.assertEqual(b.keys.default_algorithm, "ed25519")


# ═══════════════════════════════════════════════════════════════════
#  _merge
# ═══════════════════════════════════════════════════════════════════

class TestMerge(unittest.TestCase):

    def test_merge_updates_fields(self):
        lg = LoggingConfig()
        _merge(lg, {"level": "DEBUG", "format": "json"})
        self.assertEqual(lg.level, "DEBUG")
        self.assertEqual(lg.format, "json")

    def test_merge_ignores_unknown_keys(self):
        lg = LoggingConfig()
        _merge(lg, {"colour": "always"})
        self.assertFalse(hasattr(lg, "colour"))

    def test_merge_hyphenated_keys(self):
        k = KeysConfig()
        _merge(k, {"default-algorithm": "secp256k1"})
        self.assertEqual(k.default_algorithm, "secp256k1")


# ═══════════════════════════════════════════════════════════════════
#  TOML loading
# ═══════════════════════════════════════════════════════════════════

class TestLoadConfig(unittest.TestCase):

    def test_load_no_file(self):
        cfg = load_config(None)
        self.assertEqual(cfg.logging.format, "human")

    def test_load_missing_file(self):
        """Non-existent TOML file returns defaults (no crash)."""
        cfg = load_config("/tmp/__nonexistent_xrpl_core__.toml")
        self.assertEqual(cfg.keys.default_algorithm, "ed25519")

    def test_load_toml_file(self):
        cfg = _load_toml("""\
            [keys]
            default_algorithm = "secp256k1"

            [logging]
            level = "WARNING"
            format = "json"
            file = "/tmp/xrpl_core.log"
        """)
        self.assertIs(cfg.keys.algorithm(), KeyAlgorithm.SECP256K1)
        self.assertEqual(cfg.logging.level, "WARNING")
        self.assertEqual(cfg.logging.format, "json")
        self.assertEqual(cfg.logging.file, "/tmp/xrpl_core.log")

    def test_unknown_algorithm_in_toml(self):
        with self.assertRaises(UnsupportedAlgorithm):
            _load_toml("""\
                [keys]
                default_algorithm = "rsa"
            """)


# ═══════════════════════════════════════════════════════════════════
#  Environment variable overrides
# ═══════════════════════════════════════════════════════════════════

class TestEnvOverrides(unittest.TestCase):

    @patch.dict(os.environ, {"XRPL_CORE_KEY_ALGORITHM": "SECP256K1"}, clear=False)
    def test_env_key_algorithm(self):
        cfg = load_config(None)
        self.assertEqual(cfg.keys.default_algorithm, "secp256k1")

    @patch.dict(os.environ, {"XRPL_CORE_LOG_LEVEL": "debug"}, clear=False)
    def test_env_log_level_uppercased(self):
        cfg = load_config(None)
        self.assertEqual(cfg.logging.level, "DEBUG")

    @patch.dict(os.environ, {"XRPL_CORE_LOG_FMT": "json"}, clear=False)
    def test_env_log_format(self):
        cfg = load_config(None)
        self.assertEqual(cfg.logging.format, "json")

    @patch.dict(os.environ, {"XRPL_CORE_LOG_FILE": "/tmp/core.log"}, clear=False)
    def test_env_log_file(self):
        cfg = load_config(None)
        self.assertEqual(cfg.logging.file, "/tmp/core.log")

    @patch.dict(os.environ, {"XRPL_CORE_KEY_ALGORITHM": "dsa"}, clear=False)
    def test_env_unknown_algorithm(self):
        with self.assertRaises(UnsupportedAlgorithm):
            load_config(None)

    @patch.dict(os.environ, {"XRPL_CORE_KEY_ALGORITHM": "ed25519"}, clear=False)
    def test_env_wins_over_toml(self):
        cfg = _load_toml("""\
            [keys]
            default_algorithm = "secp256k1"
        """)
        self.assertIs(cfg.keys.algorithm(), KeyAlgorithm.ED25519)


if __name__ == "__main__":
    unittest.main()
