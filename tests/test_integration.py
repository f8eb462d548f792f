"""Integration tests: a full shift written to the event log"""

import unittest
import tempfile
import csv
import json
import os
import shutil
import sys

# Add the project root so the modules can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.capture import CodeCapture
from core.directory import DemoOperatorDirectory, demo_catalog
from core.kiosk import KioskController
from core.models import DowntimeReason, Phase
from core.session import SessionStateMachine
from utils.logger import EventLogger
from fakes import FakeDecoder, FakeFrameSource, ManualClock, ManualScheduler


class TestIntegration(unittest.TestCase):
    """Capture, session, totals and event log wired like the kiosk program"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_path = os.path.join(self.temp_dir, 'kiosk_event_log_DVN-0001.csv')
        self.clock = ManualClock()
        self.scheduler = ManualScheduler()
        self.source = FakeFrameSource()
        self.event_logger = EventLogger(self.log_path, device_id='DVN-0001')
        self.capture = CodeCapture(self.scheduler, lambda: self.source, FakeDecoder, clock=self.clock)
        self.machine = SessionStateMachine(self.clock, device_id='DVN-0001', event_logger=self.event_logger)
        self.catalog = demo_catalog()
        self.controller = KioskController(self.machine, DemoOperatorDirectory(), self.catalog,
                                          self.capture, self.scheduler, clock=self.clock)
        self.controller.boot()

    def tearDown(self):
        self.controller.shutdown()
        self.event_logger.stop_logger()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _rows(self):
        self.event_logger.flush()
        with open(self.log_path, 'r', encoding='utf-8', newline='') as f:
            return list(csv.DictReader(f))

    def _work(self, seconds, pieces):
        for _ in range(pieces):
            self.clock.advance(seconds / pieces)
            self.controller.add_piece()

    def test_two_sessions_in_one_shift(self):
        # Camera login, one break
        self.source.frames = ["blank", "code:000000001"]
        self.controller.start_camera()
        self.scheduler.advance(100)
        self.controller.select_work_order(self.catalog.find('1'))
        self.controller.start()
        self._work(1800, 20)
        self.controller.pause(DowntimeReason.BREAK)
        self.clock.advance(900)
        self.controller.resume()
        self._work(1800, 25)
        first = self.controller.finish()

        # Keyboard login, fault left open at finish
        for char in "lider\r":
            self.capture.feed_key(char)
        self.controller.select_work_order(self.catalog.find('2'))
        self.controller.start()
        self._work(600, 10)
        self.controller.pause(DowntimeReason.FAULT)
        self.clock.advance(300)
        second = self.controller.finish()

        self.assertEqual((first.produced, first.elapsed_text, first.pph), (45, "01:00:00", 45))
        self.assertEqual((second.produced, second.elapsed_text, second.pph), (10, "00:10:00", 60))
        self.assertEqual(self.machine.phase, Phase.IDLE)

        totals = self.controller.stats.current()
        self.assertEqual(totals.produced, 55)
        self.assertEqual(totals.break_minutes, 15)
        self.assertEqual(totals.fault_minutes, 5)

        rows = self._rows()
        finished = [r for r in rows if r['event_type'] == 'WORK_FINISHED']
        self.assertEqual([r['operator'] for r in finished], ['Ahmet', 'Lider'])
        self.assertEqual(json.loads(finished[0]['detail'])['work_order'], 'WO-1001')
        self.assertEqual(sum(r['event_type'] == 'PIECE_ADDED' for r in rows), 55)
        # After finish the operator column is empty again
        self.assertEqual(rows[-1]['operator'], 'Lider')
        self.assertEqual(self.event_logger.operator, '')

    def test_logout_mid_session(self):
        for char in "ahmet\r":
            self.capture.feed_key(char)
        self.controller.select_work_order(self.catalog.find('3'))
        self.controller.start()
        self.controller.add_piece()
        self.assertFalse(self.controller.start_camera())
        self.controller.reset()

        self.assertEqual(self.machine.phase, Phase.IDLE)
        self.assertFalse(self.source.is_open)
        rows = self._rows()
        self.assertEqual(rows[-1]['event_type'], 'SESSION_RESET')
        self.assertEqual(json.loads(rows[-1]['detail']), {'from_phase': 'running'})
        self.assertEqual(self.controller.stats.current().produced, 0)


class TestSystemHealth(unittest.TestCase):
    """Module imports"""

    def test_core_modules_import(self):
        import core.capture
        import core.clock
        import core.directory
        import core.kiosk
        import core.models
        import core.rate
        import core.scheduler
        import core.session
        import core.stats
        self.assertTrue(hasattr(core.session, 'SessionStateMachine'))

    def test_utils_modules_import(self):
        import utils.config_manager
        import utils.exceptions
        import utils.file_handler
        import utils.logger
        self.assertTrue(issubclass(utils.exceptions.DeviceUnavailableError, utils.exceptions.KioskError))


if __name__ == '__main__':
    unittest.main()
