"""Persistence layer for busy intervals."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, Sequence

import portalocker

from .exceptions import PersistenceError
from .models import BusyInterval
from .paths import intervals_path


class IntervalsRepository:
    """Stores busy intervals as JSON lines guarded by file locks."""

    def __init__(
        self,
        path: Path | None = None,
        logger: logging.Logger | None = None,
        lock_timeout: float = 10.0,
    ) -> None:
        self._path = Path(path) if path is not None else intervals_path()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock_timeout = lock_timeout
        self._logger = logger or logging.getLogger("busy_calendar.repository")
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Public API
    def get_all(self) -> list[BusyInterval]:
        self._logger.debug("Loading all intervals", extra={"event": "intervals_load_all"})
        return self._deserialize(self._read_lines())

    def add(self, interval: BusyInterval) -> BusyInterval:
        self._logger.info(
            "Adding interval",
            extra={
                "event": "intervals_add",
                "interval_id": interval.interval_id,
                "start": interval.start.isoformat(),
                "end": interval.end.isoformat(),
            },
        )
        line = json.dumps(interval.to_json_dict(), separators=(",", ":"))
        try:
            with portalocker.Lock(
                self._path,
                mode="a+",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.EXCLUSIVE,
                encoding="utf-8",
            ) as locked_file:
                locked_file.seek(0, os.SEEK_END)
                locked_file.write(line)
                locked_file.write("\n")
                locked_file.flush()
                os.fsync(locked_file.fileno())
        except Exception as exc:
            self._logger.exception("Failed to append interval", extra={"event": "intervals_add_failed"})
            raise PersistenceError("Unable to persist interval") from exc
        return interval

    def remove(self, interval_id: str) -> bool:
        try:
            with portalocker.Lock(
                self._path,
                mode="r+",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.EXCLUSIVE,
                encoding="utf-8",
            ) as locked_file:
                locked_file.seek(0)
                lines = [line.rstrip("\n") for line in locked_file if line.strip()]
                intervals = self._deserialize(lines)
                remaining = [interval for interval in intervals if interval.interval_id != interval_id]
                if len(remaining) == len(intervals):
                    return False

                locked_file.seek(0)
                locked_file.truncate()
                self._write(locked_file, remaining)
        except Exception as exc:
            self._logger.exception(
                "Failed to remove interval",
                extra={"event": "intervals_remove_failed", "interval_id": interval_id},
            )
            raise PersistenceError("Unable to remove interval") from exc

        self._logger.info("Removed interval", extra={"event": "intervals_remove", "interval_id": interval_id})
        return True

    def replace_all(self, intervals: Sequence[BusyInterval]) -> None:
        ordered = sorted(intervals, key=BusyInterval.sort_key)
        try:
            with portalocker.Lock(
                self._path,
                mode="w",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.EXCLUSIVE,
                encoding="utf-8",
            ) as locked_file:
                self._write(locked_file, ordered)
        except Exception as exc:
            self._logger.exception("Failed to replace intervals", extra={"event": "intervals_replace_failed"})
            raise PersistenceError("Unable to persist intervals") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    def _ensure_file(self) -> None:
        if not self._path.exists():
            self._logger.debug(
                "Creating intervals file",
                extra={"event": "intervals_file_init", "path": str(self._path)},
            )
            self._path.touch()

    def _write(self, handle, intervals: Iterable[BusyInterval]) -> None:
        for interval in intervals:
            handle.write(json.dumps(interval.to_json_dict(), separators=(",", ":")))
            handle.write("\n")
        handle.flush()
        os.fsync(handle.fileno())

    def _read_lines(self) -> list[str]:
        try:
            with portalocker.Lock(
                self._path,
                mode="r",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.SHARED,
                encoding="utf-8",
            ) as locked_file:
                return [line.rstrip("\n") for line in locked_file if line.strip()]
        except FileNotFoundError:
            self._ensure_file()
            return []
        except Exception as exc:  # pragma: no cover - filesystem dependent
            self._logger.exception("Failed reading intervals file")
            raise PersistenceError("Unable to read intervals") from exc

    def _deserialize(self, lines: Iterable[str]) -> list[BusyInterval]:
        intervals: list[BusyInterval] = []
        for index, line in enumerate(lines, start=1):
            try:
                intervals.append(BusyInterval.from_json_dict(json.loads(line)))
            except (ValueError, KeyError, TypeError):
                self._logger.exception(
                    "Skipping malformed interval",
                    extra={"event": "intervals_skip_invalid", "line_index": index},
                )
        return intervals
