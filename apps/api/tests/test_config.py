"""Settings loading and startup configuration faults."""

from __future__ import annotations

import os
import tempfile
import unittest

from speakerline.core.config import ConfigurationError, Settings, get_settings
from speakerline.main import create_app


class SettingsTests(unittest.TestCase):
    _env_keys = (
        "ASSEMBLY_API_KEY",
        "SPEAKERLINE_ASSEMBLYAI_API_KEY",
        "SPEAKERLINE_PROVIDER",
        "SPEAKERLINE_PORT",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        for key in self._env_keys:
            os.environ.pop(key, None)
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def test_missing_credential_is_a_startup_fault(self) -> None:
        with self.assertRaises(ConfigurationError):
            Settings(_env_file=None)

    def test_app_factory_refuses_to_start_without_credential(self) -> None:
        # Settings read .env from the working directory; run where none exists.
        previous_cwd = os.getcwd()
        with tempfile.TemporaryDirectory() as tmp:
            os.chdir(tmp)
            try:
                with self.assertRaises(ConfigurationError):
                    create_app()
            finally:
                os.chdir(previous_cwd)

    def test_credential_and_port_come_from_environment(self) -> None:
        os.environ["ASSEMBLY_API_KEY"] = "key-from-env"
        os.environ["SPEAKERLINE_PORT"] = "8080"

        settings = Settings(_env_file=None)

        self.assertEqual(settings.assemblyai_api_key, "key-from-env")
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.retention_ttl_seconds, 3600.0)
        self.assertEqual(settings.max_upload_bytes, 100 * 1024 * 1024)

    def test_mock_provider_needs_no_credential(self) -> None:
        os.environ["SPEAKERLINE_PROVIDER"] = "mock"

        settings = Settings(_env_file=None)

        self.assertEqual(settings.provider, "mock")
        self.assertIsNone(settings.assemblyai_api_key)


if __name__ == "__main__":
    unittest.main()
