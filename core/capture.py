"""Identity code capture from a keyboard-like stream or a live camera"""

import logging
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple

from core.clock import Clock, SystemClock
from core.scheduler import Scheduler
from utils.exceptions import DeviceUnavailableError

logger = logging.getLogger(__name__)

CodeHandler = Callable[[str], None]

TERMINATORS: Tuple[str, ...] = ("\r", "\n")


class KeyboardCodeReader:
    """Collects characters from an RFID/barcode reader that types like a keyboard"""

    def __init__(self, on_code: CodeHandler, terminators: Sequence[str] = TERMINATORS):
        self.on_code = on_code
        self.terminators = tuple(terminators)
        self.buffer = ""

    def feed(self, char: str):
        """Append a character; a terminator submits the buffer."""
        if char in self.terminators:
            self._submit()
            return
        self.buffer += char

    def feed_text(self, text: str):
        """Submit a whole code typed into the manual entry field."""
        self.buffer += text
        self._submit()

    def clear(self):
        self.buffer = ""

    def _submit(self):
        code = self.buffer.strip()
        self.buffer = ""
        if not code:
            logger.debug("Empty code ignored")
            return
        self.on_code(code)


class FrameSource(Protocol):
    def open(self) -> None:
        """Acquire the device; raise DeviceUnavailableError when impossible."""

    def read(self) -> Optional[Any]:
        """Return the current frame or None."""

    def close(self) -> None:
        """Release the device."""


class CodeDecoder(Protocol):
    def decode(self, frame: Any) -> List[str]:
        """Return the values of all symbols found in the frame."""


def _import_cv2():
    try:
        import cv2
    except ImportError as e:
        raise DeviceUnavailableError(f"OpenCV (cv2) is not available: {e}") from e
    return cv2


class CameraFrameSource:
    """OpenCV VideoCapture wrapper; only one handle is ever open"""

    def __init__(self, camera_index: int = 0, resolution: Sequence[int] = (640, 480)):
        self.camera_index = camera_index
        self.resolution = tuple(resolution)
        self._capture = None

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self):
        cv2 = _import_cv2()
        self.close()
        capture = cv2.VideoCapture(self.camera_index)
        if not capture.isOpened():
            capture.release()
            raise DeviceUnavailableError(f"Cannot open camera device {self.camera_index}")
        capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
        capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])
        self._capture = capture
        logger.info("Camera %s opened", self.camera_index)

    def read(self):
        if self._capture is None:
            return None
        ok, frame = self._capture.read()
        return frame if ok else None

    def close(self):
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Camera %s released", self.camera_index)


class PyzbarDecoder:
    """Single-frame barcode/QR decoder backed by zbar"""

    def __init__(self):
        self._cv2 = _import_cv2()
        try:
            from pyzbar import pyzbar
        except ImportError as e:
            # Also raised when the zbar shared library is missing
            raise DeviceUnavailableError(f"pyzbar/zbar is not available: {e}") from e
        self._pyzbar = pyzbar

    def decode(self, frame) -> List[str]:
        gray = self._cv2.cvtColor(frame, self._cv2.COLOR_BGR2GRAY)
        return [symbol.data.decode('utf-8', errors='replace') for symbol in self._pyzbar.decode(gray)]


class VisualCodeCapture:
    """Samples camera frames on the event loop until a code is decoded.

    One frame is read per scheduler turn. The first non-empty decoded value
    is emitted once, after the camera has been released. cancel() stops the
    loop at any point and is safe to call repeatedly.
    """

    def __init__(self, scheduler: Scheduler,
                 source_factory: Callable[[], FrameSource],
                 decoder_factory: Callable[[], CodeDecoder],
                 on_code: CodeHandler,
                 frame_interval_ms: int = 33,
                 timeout_sec: float = 0,
                 clock: Optional[Clock] = None):
        self.scheduler = scheduler
        self.source_factory = source_factory
        self.decoder_factory = decoder_factory
        self.on_code = on_code
        self.frame_interval_ms = frame_interval_ms
        self.timeout_sec = timeout_sec
        self.clock = clock or SystemClock()
        self.on_frame: Optional[Callable[[Any], None]] = None
        self.on_timeout: Optional[Callable[[], None]] = None
        self._source: Optional[FrameSource] = None
        self._decoder: Optional[CodeDecoder] = None
        self._job = None
        self._active = False
        self._started_at = 0.0
        self._preview_failed = False

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> bool:
        """Open the camera and begin sampling; False if already running."""
        if self._active:
            logger.debug("Visual capture already active")
            return False
        decoder = self.decoder_factory()
        source = self.source_factory()
        source.open()
        self._source, self._decoder = source, decoder
        self._active = True
        self._started_at = self.clock.now()
        self._preview_failed = False
        self._schedule_next()
        return True

    def cancel(self):
        self._teardown()

    def _schedule_next(self):
        if not self._active:
            return
        self._job = self.scheduler.after(self.frame_interval_ms, self._sample)

    def _sample(self):
        self._job = None
        if not self._active:
            return
        if self.timeout_sec and self.clock.now() - self._started_at >= self.timeout_sec:
            logger.info("Visual capture timed out after %ss", self.timeout_sec)
            self._teardown()
            if self.on_timeout:
                self.on_timeout()
            return

        code = self._read_code()
        if code:
            self._teardown()
            self.on_code(code)
            return
        self._schedule_next()

    def _read_code(self) -> Optional[str]:
        try:
            frame = self._source.read()
        except Exception as e:
            logger.debug("Frame read failed: %s", e)
            return None
        if frame is None:
            return None
        self._show_frame(frame)
        try:
            values = self._decoder.decode(frame)
        except Exception as e:
            # A bad frame is not an error; keep sampling
            logger.debug("Frame decode failed: %s", e)
            return None
        for value in values:
            if value and value.strip():
                return value.strip()
        return None

    def _show_frame(self, frame):
        if not self.on_frame or self._preview_failed:
            return
        try:
            self.on_frame(frame)
        except Exception:
            # Scanning goes on without a preview until the next start
            logger.exception("Camera preview failed")
            self._preview_failed = True

    def _teardown(self):
        self._active = False
        if self._job is not None:
            self.scheduler.cancel(self._job)
            self._job = None
        if self._source is not None:
            self._source.close()
            self._source = None
        self._decoder = None


class CodeCapture:
    """Both capture modalities behind one code callback"""

    def __init__(self, scheduler: Scheduler,
                 source_factory: Callable[[], FrameSource],
                 decoder_factory: Callable[[], CodeDecoder],
                 on_code: Optional[CodeHandler] = None,
                 frame_interval_ms: int = 33,
                 visual_timeout_sec: float = 0,
                 terminators: Sequence[str] = TERMINATORS,
                 clock: Optional[Clock] = None):
        self.on_code = on_code
        self.keyboard = KeyboardCodeReader(self._emit, terminators)
        self.visual = VisualCodeCapture(scheduler, source_factory, decoder_factory, self._emit,
                                        frame_interval_ms=frame_interval_ms,
                                        timeout_sec=visual_timeout_sec, clock=clock)

    def _emit(self, code: str):
        if self.on_code:
            self.on_code(code)

    def feed_key(self, char: str):
        self.keyboard.feed(char)

    def feed_text(self, text: str):
        self.keyboard.feed_text(text)

    def start_visual(self) -> bool:
        return self.visual.start()

    def cancel_visual(self):
        self.visual.cancel()

    @property
    def is_visual_active(self) -> bool:
        return self.visual.is_active

    def shutdown(self):
        """Release the camera and drop any half-typed code."""
        self.visual.cancel()
        self.keyboard.clear()
