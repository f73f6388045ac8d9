"""Fan-out execution engine for cron-job-list."""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Sequence

from .config import Destination, RunConfig
from .errors import CronJobListError
from .session import RemoteSession

logger = logging.getLogger(__name__)


class DestinationStatus(Enum):
    """Status of a destination's execution."""

    PENDING = "pending"
    CONNECTING = "connecting"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class DestinationResult:
    """Outcome of running the command on one destination."""

    index: int
    destination: Destination
    status: DestinationStatus = DestinationStatus.PENDING
    output: bytes | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == DestinationStatus.SUCCESS


# Type aliases for callbacks
StatusCallback = Callable[[int, DestinationStatus], None]  # (index, status) -> None
ResultCallback = Callable[[DestinationResult], None]
SessionFactory = Callable[[str, int, str, Path], Awaitable[RemoteSession]]


class Executor:
    """Runs the configured command on every destination concurrently."""

    def __init__(
        self,
        config: RunConfig,
        destinations: Sequence[Destination],
        on_status: StatusCallback | None = None,
        on_result: ResultCallback | None = None,
        session_factory: SessionFactory = RemoteSession.open,
    ):
        self.config = config
        self.destinations = list(destinations)
        self.on_status = on_status
        self.on_result = on_result
        self.session_factory = session_factory
        self.results: list[DestinationResult] = [
            DestinationResult(index=i, destination=dest)
            for i, dest in enumerate(self.destinations)
        ]
        self._semaphore: asyncio.Semaphore | None = None

    def _emit_status(self, result: DestinationResult, status: DestinationStatus) -> None:
        """Record and emit a status change for a destination."""
        result.status = status
        if self.on_status:
            self.on_status(result.index, status)

    async def run_all(self) -> list[DestinationResult]:
        """Run the command on all destinations and wait for every one."""
        if self.config.max_concurrency:
            self._semaphore = asyncio.Semaphore(self.config.max_concurrency)

        tasks = [
            asyncio.create_task(self._run_destination(result))
            for result in self.results
        ]
        if tasks:
            await asyncio.gather(*tasks)

        failed = sum(1 for result in self.results if not result.ok)
        logger.info(
            "Finished %d destination(s), %d failed", len(self.results), failed
        )
        return self.results

    async def _run_destination(self, result: DestinationResult) -> DestinationResult:
        """Run the command on a single destination, capturing any failure."""
        async with AsyncExitStack() as stack:
            if self._semaphore is not None:
                await stack.enter_async_context(self._semaphore)
            try:
                result.output = await self._execute(result)
            except CronJobListError as e:
                result.error = str(e)
                self._emit_status(result, DestinationStatus.FAILED)
                logger.warning("%s failed: %s", result.destination.label, e)
            else:
                self._emit_status(result, DestinationStatus.SUCCESS)
                logger.info("%s completed", result.destination.label)

        if self.on_result:
            self.on_result(result)
        return result

    async def _execute(self, result: DestinationResult) -> bytes:
        dest = result.destination
        self._emit_status(result, DestinationStatus.CONNECTING)
        logger.info("Connecting to %s:%d...", dest.label, self.config.port)

        session = await self.session_factory(
            dest.host, self.config.port, dest.user, self.config.key_path
        )
        async with session:
            self._emit_status(result, DestinationStatus.RUNNING)
            logger.info("Connected to %s, running '%s'", dest.label, self.config.command)
            return await session.run_command(self.config.command)
