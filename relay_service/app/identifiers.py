"""Time-sortable conversation identifiers: ``session_<unixMillis>_<suffix>``."""
from __future__ import annotations

import secrets
import string
import time
from typing import Callable, Optional

PREFIX = "session"
SUFFIX_LENGTH = 9
_ALPHABET = string.ascii_lowercase + string.digits


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdentifierGenerator:
    def __init__(self, clock: Optional[Callable[[], int]] = None) -> None:
        self._clock = clock or _now_ms

    def __call__(self) -> str:
        return self.generate()

    def generate(self) -> str:
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(SUFFIX_LENGTH))
        return f"{PREFIX}_{self._clock()}_{suffix}"


def parse_timestamp(session_id: str) -> Optional[int]:
    """Return the creation time in unix millis, or None if ``session_id`` is foreign."""
    parts = session_id.split("_")
    if len(parts) < 3 or parts[0] != PREFIX:
        return None
    raw = parts[1]
    if not raw.isdigit():
        return None
    return int(raw)
