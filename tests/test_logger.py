#!/usr/bin/env python3
"""
Step Logging Tests
"""

import logging
import tempfile
import unittest
from pathlib import Path

from step1_recipes.logger import setup_logger


class TestSetupLogger(unittest.TestCase):
    """Each step writes its own log file, even within one process"""

    def tearDown(self):
        for name in ('step2_shopping', 'step3_export'):
            step_logger = logging.getLogger(name)
            for handler in list(step_logger.handlers):
                if isinstance(handler, logging.FileHandler):
                    handler.close()
                    step_logger.removeHandler(handler)

    def test_one_log_file_per_step(self):
        with tempfile.TemporaryDirectory() as tmp:
            setup_logger(log_dir=Path(tmp) / 'step2' / 'logs', log_name='step2_shopping')
            setup_logger(log_dir=Path(tmp) / 'step3' / 'logs', log_name='step3_export')

            logging.getLogger('step3_export.main').info('exported')
            for handler in logging.getLogger('step3_export').handlers:
                handler.flush()

            self.assertTrue((Path(tmp) / 'step2' / 'logs' / 'step2_shopping.log').exists())
            step3_log = Path(tmp) / 'step3' / 'logs' / 'step3_export.log'
            self.assertIn('exported', step3_log.read_text())

    def test_repeated_setup_does_not_duplicate_handlers(self):
        with tempfile.TemporaryDirectory() as tmp:
            setup_logger(log_dir=Path(tmp), log_name='step2_shopping')
            step_logger = setup_logger(log_dir=Path(tmp), log_name='step2_shopping')

            file_handlers = [h for h in step_logger.handlers if isinstance(h, logging.FileHandler)]
            self.assertEqual(len(file_handlers), 1)


if __name__ == '__main__':
    unittest.main()
