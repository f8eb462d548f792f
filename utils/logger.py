"""Logging utility module"""

import csv
import datetime
import json
import logging
import os
import queue
import threading
from typing import Dict, Optional

logger = logging.getLogger(__name__)

EVENT_LOG_FIELDS = ['timestamp', 'device_id', 'operator', 'event_type', 'detail']


def configure_logging(level: str = "INFO") -> None:
    """Configure the kiosk loggers with a single stream handler."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if root_logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s"))
    root_logger.addHandler(handler)


class EventLogger:
    """Writes kiosk events to a CSV file from a background thread"""

    def __init__(self, log_file_path: str, device_id: str = ""):
        self.log_file_path = log_file_path
        self.device_id = device_id
        self.operator = ""
        self.log_queue: queue.Queue = queue.Queue()
        self.log_writer_running = True
        self._writer_thread = self._start_log_writer_thread()

    def _start_log_writer_thread(self) -> threading.Thread:
        """Start the log writer thread."""
        log_thread = threading.Thread(target=self._event_log_writer, daemon=True)
        log_thread.start()
        return log_thread

    def _event_log_writer(self):
        """Drain the queue into the CSV file."""
        while self.log_writer_running:
            try:
                log_entry = self.log_queue.get(timeout=1)
            except queue.Empty:
                continue

            try:
                if log_entry is None:
                    break
                self._write_row(log_entry)
            except OSError as e:
                logger.error("Event log write error: %s", e)
            finally:
                self.log_queue.task_done()

    def _write_row(self, log_entry: Dict[str, str]):
        file_exists = os.path.exists(self.log_file_path) and os.stat(self.log_file_path).st_size > 0
        with open(self.log_file_path, mode='a', newline='', encoding='utf-8') as csvfile:
            writer = csv.DictWriter(csvfile, fieldnames=EVENT_LOG_FIELDS)
            if not file_exists:
                writer.writeheader()
            writer.writerow(log_entry)

    def set_operator(self, operator_name: str):
        """Attach the operator name to subsequent events."""
        self.operator = operator_name or ""

    def log_event(self, event_type: str, detail: Optional[Dict] = None):
        """Queue an event for writing."""
        if not self.log_writer_running:
            return
        log_entry = {
            'timestamp': datetime.datetime.now().isoformat(timespec='seconds'),
            'device_id': self.device_id,
            'operator': self.operator,
            'event_type': event_type,
            'detail': json.dumps(detail, ensure_ascii=False) if detail else ""
        }
        self.log_queue.put(log_entry)

    def flush(self):
        """Block until every queued event has been written."""
        self.log_queue.join()

    def stop_logger(self, timeout: float = 2.0):
        """Stop the writer after the queued events are written."""
        if not self.log_writer_running:
            return
        self.log_queue.put(None)
        self._writer_thread.join(timeout=timeout)
        self.log_writer_running = False
