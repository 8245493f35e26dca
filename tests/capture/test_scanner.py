from __future__ import annotations

import numpy as np

from smart_attendance.capture.scanner import CAMERA_UNAVAILABLE, QRScanner, ScannerState


class FakeCamera:
    def __init__(self, frames=(), opened=True):
        self.frames = list(frames)
        self.opened = opened
        self.released = False
        self.reads = 0

    def isOpened(self):
        return self.opened

    def read(self):
        self.reads += 1
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


class FakeSymbol:
    def __init__(self, data: bytes):
        self.data = data


def _frame(label: str):
    return {"label": label}


class LabelDecoder:
    """Decodes frames tagged with a payload; records what it saw."""

    def __init__(self):
        self.seen = []

    def __call__(self, image):
        self.seen.append(image["label"])
        return [FakeSymbol(image["label"].encode())] if image["label"] else []


def _scanner(cameras: dict, decoder=None, **kwargs):
    opened = []

    def factory(index):
        opened.append(index)
        return cameras.get(index, FakeCamera(opened=False))

    kwargs.setdefault("sleep", lambda seconds: None)
    scanner = QRScanner(camera_factory=factory, decoder=decoder or LabelDecoder(), **kwargs)
    return scanner, opened


def test_start_prefers_configured_camera_then_falls_back():
    rear = FakeCamera()
    scanner, opened = _scanner({2: rear}, camera_index=1, fallback_indices=[2, 0])

    assert scanner.start() is True
    assert opened == [1, 2]
    assert scanner.state == ScannerState.STREAMING


def test_start_without_camera_fails_without_retry():
    scanner, opened = _scanner({}, camera_index=0, fallback_indices=[1])

    assert scanner.start() is False
    assert scanner.state == ScannerState.FAILED
    assert scanner.error == CAMERA_UNAVAILABLE
    assert opened == [0, 1]
    assert scanner.poll() is None


def test_poll_recognizes_payload_and_releases_camera():
    camera = FakeCamera([_frame(""), _frame("  STU1 ")])
    scanner, _ = _scanner({0: camera})
    scanner.start()

    assert scanner.poll() is None
    assert scanner.state == ScannerState.STREAMING

    assert scanner.poll() == "STU1"
    assert scanner.state == ScannerState.RECOGNIZED
    assert camera.released is True
    assert scanner.poll() is None


def test_run_is_single_shot():
    camera = FakeCamera([_frame(""), _frame(""), _frame("STU2"), _frame("STU3")])
    scanner, _ = _scanner({0: camera})
    scans = []

    assert scanner.run(scans.append) == "STU2"

    assert scans == ["STU2"]
    assert camera.frames and camera.frames[0]["label"] == "STU3"


def test_cancel_releases_camera_and_stops_decoding():
    camera = FakeCamera([_frame("STU1")])
    decoder = LabelDecoder()
    scanner, _ = _scanner({0: camera}, decoder=decoder)
    scanner.start()

    scanner.cancel()

    assert scanner.state == ScannerState.CANCELLED
    assert camera.released is True
    assert scanner.poll() is None
    assert decoder.seen == []


def test_context_manager_cancels_on_exit():
    camera = FakeCamera([_frame("")] * 3)
    with _scanner({0: camera})[0] as scanner:
        scanner.start()
        scanner.poll()

    assert scanner.state == ScannerState.CANCELLED
    assert camera.released is True


def test_run_stops_when_cancelled_from_callback_loop():
    camera = FakeCamera([_frame("")] * 5)
    polls = []

    def sleep(_):
        polls.append(1)
        if len(polls) == 2:
            scanner.cancel()

    scanner, _ = _scanner({0: camera}, sleep=sleep)

    assert scanner.run(lambda payload: None) is None
    assert scanner.state == ScannerState.CANCELLED
    assert camera.reads == 2


def test_color_frames_are_decoded_in_grayscale():
    seen = []

    def decoder(image):
        seen.append(image.shape)
        return [FakeSymbol(b"STU1")]

    camera = FakeCamera([np.zeros((8, 6, 3), dtype=np.uint8)])
    scanner, _ = _scanner({0: camera}, decoder=decoder)
    scanner.start()

    assert scanner.poll() == "STU1"
    assert seen == [(8, 6)]
