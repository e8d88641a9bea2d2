"""Tests for wc.common.logger."""

import logging
import os
import shutil
import tempfile
import unittest
from logging.handlers import RotatingFileHandler
from pathlib import Path

os.environ.setdefault("WEEKCLOCK_HOME", tempfile.mkdtemp(prefix="weekclock_test_"))

from wc.common.logger import LOG_BACKUP_COUNT, LOG_MAX_BYTES, get_logger


class TestGetLogger(unittest.TestCase):

    def setUp(self):
        self.tmpdir = Path(tempfile.mkdtemp())
        self.name = f"weekclock_test_{id(self)}"

    def tearDown(self):
        logger = logging.getLogger(self.name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_rotating_handler_uses_module_limits(self):
        logger = get_logger(self.name, log_dir=self.tmpdir)
        rotating = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        self.assertEqual(len(rotating), 1)
        self.assertEqual(rotating[0].maxBytes, LOG_MAX_BYTES)
        self.assertEqual(rotating[0].backupCount, LOG_BACKUP_COUNT)
        self.assertTrue((self.tmpdir / f"{self.name}.log").exists())
        self.assertTrue((self.tmpdir / "latest.log").exists())

    def test_repeat_calls_do_not_duplicate_handlers(self):
        first = len(get_logger(self.name, log_dir=self.tmpdir, console=True).handlers)
        second = len(get_logger(self.name, log_dir=self.tmpdir, console=True).handlers)
        self.assertEqual(first, 4)
        self.assertEqual(first, second)

    def test_old_debug_runs_are_pruned(self):
        debug_dir = self.tmpdir / "debug"
        debug_dir.mkdir()
        for i in range(5):
            path = debug_dir / f"{self.name}_old{i}.log"
            path.write_text("x")
            os.utime(path, (i, i))
        get_logger(self.name, log_dir=self.tmpdir, historical_debugs=2)
        self.assertEqual(len(list(debug_dir.glob(f"{self.name}_*.log"))), 2)


if __name__ == "__main__":
    unittest.main()
