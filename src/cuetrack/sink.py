"""Plain-text caption sink (e.g. an OBS text source file).

Best-effort: writes happen on a background worker and any OSError is
logged and dropped; captioning never waits on or fails because of it.
"""

from __future__ import annotations

import logging
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import suppress
from pathlib import Path
from typing import Sequence

from cuetrack.errors import DOWNSTREAM_WRITE_FAILURE

logger = logging.getLogger(__name__)


class PlainTextSink:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cuetrack-sink")

    @property
    def path(self) -> Path:
        return self._path

    def publish(self, lines: Sequence[str]) -> Future:
        return self._executor.submit(self._write, "\n".join(lines))

    def clear(self) -> Future:
        return self._executor.submit(self._write, "")

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _write(self, text: str) -> bool:
        tmp = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self._path.parent), prefix=".cuetrack-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp, self._path)
        except OSError as exc:
            logger.warning("%s: caption sink write to %s failed: %s", DOWNSTREAM_WRITE_FAILURE, self._path, exc)
            if tmp is not None:
                with suppress(OSError):
                    os.unlink(tmp)
            return False
        return True
