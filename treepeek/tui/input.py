"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and SGR mouse events (clicks, right clicks,
button-held motion, releases and wheel).
"""

from __future__ import annotations

import os
import select
from dataclasses import dataclass

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []
_CONTROL_KEYS = {
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\x15": "CTRL_U",
    b"\x03": "CTRL_C",
    b"\r": "ENTER",
    b"\n": "ENTER",
}
_ARROWS = {b"A": "UP", b"B": "DOWN", b"C": "RIGHT", b"D": "LEFT", b"H": "HOME", b"F": "END"}
_BUTTON_NAMES = {0: "LEFT", 1: "MIDDLE", 2: "RIGHT"}


@dataclass(frozen=True)
class MouseEvent:
    """Decoded mouse token; ``col``/``row`` are 1-based terminal cells."""

    action: str
    col: int
    row: int


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def has_pending_input() -> bool:
    """Return whether bytes were pushed back by a previous ``read_key``."""
    return bool(_PENDING_BYTES)


def _read_utf8_tail(fd: int, first: bytes) -> str:
    lead = first[0]
    extra = 3 if lead >= 0xF0 else 2 if lead >= 0xE0 else 1 if lead >= 0xC0 else 0
    data = first
    for _ in range(extra):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data.decode("utf-8", errors="replace")


def _decode_sgr_mouse(fd: int) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M/m)
    payload = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload.append(part)
        if len(payload) > 64:
            return "ESC"
    try:
        btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    button = btn & 0b11
    if btn & 0b0100_0000:
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
        return "MOUSE"
    name = _BUTTON_NAMES.get(button)
    if btn & 0b0010_0000:
        return f"MOUSE_{name}_DRAG:{col}:{row}" if name else "MOUSE"
    if name is None:
        # X10 style release without button info
        return f"MOUSE_LEFT_UP:{col}:{row}" if part == b"m" else "MOUSE"
    suffix = "DOWN" if part == b"M" else "UP"
    return f"MOUSE_{name}_{suffix}:{col}:{row}"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; ``""`` means nothing arrived."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch in _CONTROL_KEYS:
        return _CONTROL_KEYS[ch]
    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch)

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq in _ARROWS:
        return _ARROWS[seq]
    if seq == b"Z":
        return "SHIFT_TAB"
    if seq == b"<":
        return _decode_sgr_mouse(fd)
    return "ESC"


def parse_mouse_event(key: str) -> MouseEvent | None:
    """Split a ``MOUSE_<ACTION>:<col>:<row>`` token."""
    if not key.startswith("MOUSE_"):
        return None
    parts = key.split(":")
    if len(parts) != 3:
        return None
    try:
        col, row = int(parts[1]), int(parts[2])
    except ValueError:
        return None
    return MouseEvent(parts[0][len("MOUSE_"):], col, row)


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "MouseEvent",
    "has_pending_input",
    "read_key",
    "parse_mouse_event",
]
