"""Retention sweeper for the upload directory.

A sweep lists the storage directory and deletes every entry whose
last-modified time is older than the retention window, except the sentinel
file. Sweeps are triggered by uploads and are never awaited by the request
that starts them, so several may run at once; each only deletes strictly-old
files, which makes overlapping sweeps harmless.

Usage:
    sweeper = RetentionSweeper(Path("uploads"), retention_seconds=300)
    sweeper.spawn()           # fire-and-forget from a request handler
    report = await sweeper.sweep()  # awaited, e.g. in tests
"""
import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from imagedrop.errors import SweepEntryError

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    """Outcome of one sweep over the storage directory."""
    scanned: int = 0
    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def kept(self) -> int:
        return self.scanned - len(self.deleted) - len(self.failed)


class RetentionSweeper:
    """Deletes expired uploads, one sweep per call."""

    def __init__(
        self,
        directory: Path,
        retention_seconds: float = 5 * 60,
        sentinel_name: str = ".keep",
    ) -> None:
        self.directory = Path(directory)
        self.retention_seconds = retention_seconds
        self.sentinel_name = sentinel_name
        self._tasks: Set[asyncio.Task] = set()

    async def sweep(self, now: Optional[float] = None) -> SweepReport:
        """Delete every non-sentinel entry older than the retention window.

        Args:
            now: Reference time in epoch seconds. Defaults to the current time.

        Returns:
            SweepReport listing deleted and failed entries.
        """
        now = time.time() if now is None else now
        report = SweepReport()

        try:
            names = await asyncio.to_thread(os.listdir, self.directory)
        except FileNotFoundError:
            logger.warning("Upload directory missing, nothing to sweep: %s", self.directory)
            return report

        for name in names:
            if name == self.sentinel_name:
                continue
            report.scanned += 1
            try:
                if await self._expire_entry(name, now):
                    report.deleted.append(name)
            except SweepEntryError as exc:
                logger.warning("Error deleting file %s: %s", exc.name, exc.cause)
                report.failed.append(name)

        if report.deleted or report.failed:
            logger.info(
                "Sweep finished: scanned=%d deleted=%d failed=%d",
                report.scanned,
                len(report.deleted),
                len(report.failed),
            )
        return report

    async def _expire_entry(self, name: str, now: float) -> bool:
        path = self.directory / name
        try:
            stat = await asyncio.to_thread(path.stat)
            if now - stat.st_mtime <= self.retention_seconds:
                return False
            logger.info(
                "Deleting file older than %d seconds: %s",
                self.retention_seconds,
                name,
            )
            await asyncio.to_thread(path.unlink)
        except OSError as exc:
            raise SweepEntryError(name, exc) from exc
        return True

    def spawn(self) -> asyncio.Task:
        """Start a sweep on the running loop without waiting for it.

        The task is referenced until it completes; its failures are logged
        here and never reach the caller.
        """
        task = asyncio.get_running_loop().create_task(self.sweep())
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Retention sweep failed: %s", exc, exc_info=exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every in-flight sweep to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
