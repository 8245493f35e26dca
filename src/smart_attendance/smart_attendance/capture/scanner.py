from __future__ import annotations

import logging
import time
from enum import Enum
from functools import partial
from typing import Any, Callable, Iterable, Optional, Sequence

import cv2

logger = logging.getLogger(__name__)

CAMERA_UNAVAILABLE = "Unable to access camera. Please ensure you have granted camera permissions."

Decoder = Callable[[Any], Sequence[Any]]


class ScannerState(str, Enum):
    IDLE = "idle"
    REQUESTING_CAMERA = "requesting_camera"
    STREAMING = "streaming"
    DECODING = "decoding"
    RECOGNIZED = "recognized"
    CANCELLED = "cancelled"
    FAILED = "failed"


def default_decoder() -> Decoder:
    """pyzbar restricted to QR symbols (loads the zbar shared library)."""
    from pyzbar.pyzbar import ZBarSymbol, decode

    return partial(decode, symbols=[ZBarSymbol.QRCODE])


def first_payload(symbols: Sequence[Any]) -> Optional[str]:
    """Text of the first decoded symbol that is not blank."""
    for symbol in symbols or ():
        data = getattr(symbol, "data", symbol)
        text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else str(data)
        text = text.strip()
        if text:
            return text
    return None


class QRScanner:
    """Reads frames from a camera until one carries a QR payload.

    Single-shot: after RECOGNIZED, CANCELLED or FAILED the camera is
    released and :meth:`start` must be called again.
    """

    def __init__(
        self,
        *,
        camera_factory: Callable[[int], Any] = cv2.VideoCapture,
        decoder: Optional[Decoder] = None,
        camera_index: int = 0,
        fallback_indices: Iterable[int] = (),
        frame_interval: float = 1 / 30,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._camera_factory = camera_factory
        self._decoder = decoder or default_decoder()
        self._indices = [camera_index] + [i for i in fallback_indices if i != camera_index]
        self._frame_interval = frame_interval
        self._sleep = sleep

        self._camera = None
        self.state = ScannerState.IDLE
        self.error: Optional[str] = None
        self.payload: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Any, **kwargs) -> "QRScanner":
        return cls(
            camera_index=int(getattr(settings, "CAMERA_INDEX", 0)),
            fallback_indices=getattr(settings, "CAMERA_FALLBACK_INDICES", ()),
            frame_interval=float(getattr(settings, "SCAN_FRAME_INTERVAL", 1 / 30)),
            **kwargs,
        )

    @property
    def active(self) -> bool:
        return self.state in (ScannerState.STREAMING, ScannerState.DECODING)

    def start(self) -> bool:
        """Open the preferred camera, then the fallbacks. No retry on failure."""
        self.error = None
        self.payload = None
        self.state = ScannerState.REQUESTING_CAMERA

        for index in self._indices:
            try:
                camera = self._camera_factory(index)
            except Exception as e:
                logger.warning("camera %s could not be created: %s", index, e)
                continue
            if camera is not None and camera.isOpened():
                self._camera = camera
                self.state = ScannerState.STREAMING
                logger.info("camera %s streaming", index)
                return True
            if camera is not None:
                camera.release()

        self.state = ScannerState.FAILED
        self.error = CAMERA_UNAVAILABLE
        logger.error("no camera available (tried %s)", self._indices)
        return False

    def poll(self) -> Optional[str]:
        """Grab one frame and decode it; returns the payload once recognised."""
        if self.state != ScannerState.STREAMING or self._camera is None:
            return None

        ok, frame = self._camera.read()
        if not ok or frame is None:
            return None

        self.state = ScannerState.DECODING
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if getattr(frame, "ndim", 2) == 3 else frame
        payload = first_payload(self._decoder(gray))

        if self.state != ScannerState.DECODING:
            # cancelled while decoding
            return None
        if not payload:
            self.state = ScannerState.STREAMING
            return None

        self.payload = payload
        self.state = ScannerState.RECOGNIZED
        self._release()
        logger.info("QR recognised")
        return payload

    def run(self, on_scan: Callable[[str], Any]) -> Optional[str]:
        """Poll until a code is recognised, the scan is cancelled or the camera fails."""
        if not self.active and not self.start():
            return None

        while self.active:
            payload = self.poll()
            if payload is not None:
                on_scan(payload)
                return payload
            if self.active:
                self._sleep(self._frame_interval)
        return None

    def cancel(self) -> None:
        if self.state in (ScannerState.RECOGNIZED, ScannerState.FAILED):
            return
        self.state = ScannerState.CANCELLED
        self._release()
        logger.info("scan cancelled")

    def _release(self) -> None:
        if self._camera is not None:
            self._camera.release()
            self._camera = None

    def __enter__(self) -> "QRScanner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
