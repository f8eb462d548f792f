import tkinter as tk
from tkinter import ttk
import datetime
import logging
import os
import sys
from typing import Optional

# Split-out modules
from core.capture import CameraFrameSource, CodeCapture, PyzbarDecoder
from core.clock import SystemClock
from core.directory import DemoOperatorDirectory, WorkOrderCatalog, demo_catalog, load_catalog_from_csv
from core.kiosk import KioskController
from core.models import DisplaySnapshot, DowntimeReason, Phase, SessionSummary
from core.scheduler import TkScheduler
from core.session import SessionStateMachine
from core.stats import ShiftTotalsTracker
from ui.base_ui import StyleManager, UIUtils
from ui.components import (CameraPreviewComponent, ProductionPanelComponent, ScannerInputComponent,
                           ShiftTotalsComponent, WorkOrderListComponent)
from utils.config_manager import ConfigManager
from utils.exceptions import ConfigurationError
from utils.file_handler import ensure_directory_exists, get_safe_filename, resource_path
from utils.logger import EventLogger, configure_logging
from utils.sound import SoundPlayer

logger = logging.getLogger(__name__)

# Global config manager instance
config = ConfigManager()


def event_log_path(device_id: str, today: Optional[datetime.date] = None) -> str:
    """Daily event log file of this device."""
    today = today or datetime.date.today()
    base, ext = os.path.splitext(config.get('logging.log_file', 'kiosk_event_log.csv'))
    return resource_path(f"{base}_{get_safe_filename(device_id)}_{today.strftime('%Y%m%d')}{ext or '.csv'}")


def load_work_order_catalog() -> WorkOrderCatalog:
    """Load the configured work order file, falling back to the demo catalog."""
    path = config.get('kiosk.work_orders_file', '')
    if not path:
        return demo_catalog()
    try:
        return load_catalog_from_csv(resource_path(path))
    except ConfigurationError as e:
        logger.error("%s; using demo work orders", e)
        return demo_catalog()


class KioskProgram:
    """Main GUI application of the work order kiosk."""
    STATUS_RESET_MS = 4000

    def __init__(self, device_id: Optional[str] = None):
        self.device_id = device_id or config.get('kiosk.device_id', 'DVN-0001')
        self.root = tk.Tk()
        app_title = f"{config.get('ui.window_title', 'MESAI Kiosk')} ({config.get('app.version', 'v2.1.0')})"
        self.root.title(app_title)
        self.root.geometry(config.get('ui.window_geometry', '1280x800'))
        if config.get('ui.fullscreen', False):
            self.root.attributes('-fullscreen', True)
        self.root.configure(bg=StyleManager.COLOR_BG)

        self.event_logger: Optional[EventLogger] = None
        if config.get('logging.enabled', True):
            log_path = event_log_path(self.device_id)
            ensure_directory_exists(os.path.dirname(log_path))
            self.event_logger = EventLogger(log_path, device_id=self.device_id)

        self.sound = SoundPlayer(config.get('sound.success_file', 'assets/success.wav'),
                                 config.get('sound.error_file', 'assets/error.wav'),
                                 enabled=config.get('sound.enabled', True))

        clock = SystemClock()
        scheduler = TkScheduler(self.root)
        self.catalog = load_work_order_catalog()
        self.capture = CodeCapture(
            scheduler,
            source_factory=lambda: CameraFrameSource(config.get('capture.camera_index', 0),
                                                     config.get('capture.resolution', [640, 480])),
            decoder_factory=PyzbarDecoder,
            frame_interval_ms=config.get('capture.frame_interval_ms', 33),
            visual_timeout_sec=config.get('capture.visual_timeout_sec', 0),
            clock=clock,
        )
        machine = SessionStateMachine(clock, device_id=self.device_id, event_logger=self.event_logger)
        self.controller = KioskController(
            machine, DemoOperatorDirectory(), self.catalog, self.capture, scheduler,
            stats=ShiftTotalsTracker(clock),
            tick_interval_ms=config.get('kiosk.tick_interval_ms', 1000),
            scan_delay_sec=config.get('capture.scan_delay_sec', 0.0),
            clock=clock,
        )

        self.status_message_job: Optional[str] = None
        self._setup_styles()
        self._build_screen()

        self.capture.visual.on_frame = self.camera_preview.show_frame
        self.controller.on_display(self._render)
        self.controller.on_summary(self._show_summary)
        self.controller.on_message(self.show_status_message)

        # RFID readers type like a keyboard: route raw keys into the capture buffer
        self.root.bind_all('<Key>', self._on_raw_key)
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

        if self.event_logger:
            self.event_logger.log_event('KIOSK_BOOT', detail={'work_orders': len(self.catalog)})
        self.controller.boot()

    def _setup_styles(self):
        self.style_manager = StyleManager()
        self.style_manager.setup_default_styles()

    def _build_screen(self):
        header = ttk.Frame(self.root, padding=(28, 20, 28, 0))
        header.pack(fill=tk.X)
        ttk.Label(header, text=config.get('ui.window_title', 'MESAI Kiosk'),
                  font=(self.style_manager.font_family, 24, 'bold'), background=StyleManager.COLOR_BG).pack(side=tk.LEFT)
        ttk.Label(header, text=f"Device ID: {self.device_id}",
                  background=StyleManager.COLOR_BG).pack(side=tk.RIGHT)

        status_bar = tk.Frame(self.root, bg=StyleManager.COLOR_CARD, bd=1, relief=tk.SUNKEN)
        status_bar.pack(side=tk.BOTTOM, fill=tk.X)
        self.status_label = tk.Label(status_bar, text="RFID Bekleniyor", anchor=tk.W,
                                     bg=StyleManager.COLOR_CARD, fg=StyleManager.COLOR_TEXT)
        self.status_label.pack(side=tk.LEFT, padx=10, pady=4)

        body = ttk.Frame(self.root, padding=28)
        body.pack(fill=tk.BOTH, expand=True)
        left = ttk.Frame(body)
        right = ttk.Frame(body)
        left.grid(row=0, column=0, sticky="nsew", padx=(0, 8))
        right.grid(row=0, column=1, sticky="nsew", padx=(8, 0))
        body.grid_columnconfigure(0, weight=1)
        body.grid_columnconfigure(1, weight=1)

        self.scanner_input = ScannerInputComponent(left).build()
        self.scanner_input.set_callback('submit', self.capture.feed_text)
        self.scanner_input.set_callback('camera', self.controller.start_camera)
        self.scanner_input.set_callback('logout', self.controller.reset)

        self.camera_preview = CameraPreviewComponent(left).build()

        self.work_order_list = WorkOrderListComponent(left, self.catalog.work_orders()).build()
        self.work_order_list.set_callback('select', self.controller.select_work_order)
        self.work_order_list.set_callback('start', self.controller.start)

        self.production_panel = ProductionPanelComponent(right).build()
        self.production_panel.set_callback('piece', self._add_piece)
        self.production_panel.set_callback('break', lambda: self.controller.pause(DowntimeReason.BREAK))
        self.production_panel.set_callback('fault', lambda: self.controller.pause(DowntimeReason.FAULT))
        self.production_panel.set_callback('resume', self.controller.resume)
        self.production_panel.set_callback('finish', self.controller.finish)

        self.shift_totals = ShiftTotalsComponent(right).build()

    def _on_raw_key(self, event):
        if isinstance(event.widget, tk.Entry):
            return
        if event.keysym in ('Return', 'KP_Enter'):
            self.capture.feed_key("\r")
        elif event.char and event.char.isprintable():
            self.capture.feed_key(event.char)

    def _add_piece(self):
        if self.controller.add_piece():
            self.sound.play_success()

    def _render(self, snapshot: DisplaySnapshot):
        if not self.root.winfo_exists():
            return
        self.scanner_input.update(snapshot)
        self.work_order_list.update(self.controller.can_pick_work_order, self.controller.can_start,
                                    self.controller.selected_work_order)
        self.production_panel.update(snapshot)
        self.shift_totals.update(self.controller.stats.current())
        if not self.capture.is_visual_active:
            self.camera_preview.clear()

    def _show_summary(self, summary: SessionSummary):
        # Blocking acknowledgement before the operator sees the idle screen
        UIUtils.show_info_message("İş Emri Bitti", summary.as_message(), parent=self.root)

    def show_status_message(self, message: str, level: str = "info", duration: Optional[int] = None):
        if not self.root.winfo_exists():
            return
        if level == "success":
            self.sound.play_success()
        elif level == "error":
            self.sound.play_error()
        if self.status_message_job:
            self.root.after_cancel(self.status_message_job)
        self.status_label['text'] = message
        self.status_label['fg'] = StyleManager.LEVEL_COLORS.get(level, StyleManager.COLOR_TEXT)
        self.status_message_job = self.root.after(duration or self.STATUS_RESET_MS, self._reset_status_message)

    def _reset_status_message(self):
        self.status_message_job = None
        if self.status_label.winfo_exists():
            idle = self.controller.phase == Phase.IDLE
            self.status_label['text'] = "RFID Bekleniyor" if idle else "Hazır"
            self.status_label['fg'] = StyleManager.COLOR_TEXT

    def _cancel_all_jobs(self):
        if self.status_message_job:
            self.root.after_cancel(self.status_message_job)
            self.status_message_job = None
        self.controller.shutdown()

    def on_closing(self):
        if self.controller.machine.state.is_active:
            if not UIUtils.confirm("Çıkış", "Devam eden iş emri kapanacak. Çıkılsın mı?", parent=self.root):
                return
        self.controller.reset()
        self._cancel_all_jobs()
        if self.event_logger:
            self.event_logger.log_event('KIOSK_SHUTDOWN')
            self.event_logger.stop_logger()
        self.sound.close()
        self.root.destroy()

    def run(self):
        self.root.mainloop()


if __name__ == "__main__":
    configure_logging(config.get('logging.level', 'INFO'))
    app = KioskProgram(device_id=sys.argv[1] if len(sys.argv) > 1 else None)
    app.run()
