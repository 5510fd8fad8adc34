import importlib
import logging
import os
import unittest
from unittest.mock import patch

import bot


class LogLevelTests(unittest.TestCase):
    def test_resolve_log_level(self) -> None:
        self.assertEqual(bot.resolve_log_level("debug"), "DEBUG")
        self.assertEqual(bot.resolve_log_level(" warning "), "WARNING")
        self.assertEqual(bot.resolve_log_level("loud"), "INFO")
        self.assertEqual(bot.resolve_log_level(""), "INFO")

    def test_import_survives_unknown_level(self) -> None:
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        root.handlers = []
        try:
            with patch.dict(os.environ, {"WEAPONBOT_LOG_LEVEL": "loud"}):
                importlib.reload(bot)
            self.assertEqual(root.level, logging.INFO)
        finally:
            root.handlers = handlers
            root.setLevel(level)

    def test_main_reports_unknown_level_as_config_error(self) -> None:
        with patch.dict(os.environ, {"WEAPONBOT_LOG_LEVEL": "loud"}, clear=True):
            with self.assertLogs("weaponbot", level="ERROR") as logs:
                with self.assertRaises(SystemExit) as ctx:
                    bot.main()
        self.assertEqual(ctx.exception.code, 1)
        output = "\n".join(logs.output)
        self.assertIn("DISCORD_TOKEN", output)
        self.assertIn("WEAPONBOT_LOG_LEVEL", output)


if __name__ == "__main__":
    unittest.main()
