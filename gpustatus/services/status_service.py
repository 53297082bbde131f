"""Sampling cycle: container inventory -> nvidia-smi -> parse -> attribute."""

import asyncio
import logging
import time
from typing import Optional

from gpustatus.core.attribution import build_container_records
from gpustatus.core.errors import GPUStatusError
from gpustatus.core.parser import parse_device_statuses
from gpustatus.models.schemas import StatusSnapshot
from gpustatus.services.docker_service import DockerService
from gpustatus.services.gpu_service import GPUService

logger = logging.getLogger(__name__)


class StatusCollector:
    """Runs sampling cycles and keeps the most recent snapshot."""

    def __init__(
        self,
        docker_service: DockerService,
        gpu_service: GPUService,
        interval: float = 10.0,
    ):
        self.docker_service = docker_service
        self.gpu_service = gpu_service
        self.interval = interval
        self.snapshot: Optional[StatusSnapshot] = None
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    async def collect(self) -> StatusSnapshot:
        """Run one cycle. Errors propagate; nothing partial is returned."""
        loop = asyncio.get_running_loop()
        # Docker SDK calls block
        entries = await loop.run_in_executor(None, self.docker_service.list_containers)
        if not entries:
            return StatusSnapshot(timestamp=time.time())

        output = await self.gpu_service.query()
        devices = parse_device_statuses(output)
        records = build_container_records(entries, devices)

        logger.debug(
            "Collected %d container record(s) from %d GPU(s)",
            len(records), len(devices),
        )
        return StatusSnapshot(
            timestamp=time.time(),
            containers=records,
            devices=devices,
        )

    async def run_cycle(self) -> StatusSnapshot:
        """Run one cycle and store the result, reporting failure in the snapshot."""
        async with self._lock:
            try:
                snapshot = await self.collect()
            except GPUStatusError as e:
                logger.warning("Sampling cycle failed: %s", e)
                snapshot = StatusSnapshot(timestamp=time.time(), ok=False, error=str(e))
            except Exception as e:
                logger.exception("Unexpected error in sampling cycle")
                snapshot = StatusSnapshot(timestamp=time.time(), ok=False, error=str(e))
            self.snapshot = snapshot
            return snapshot

    async def latest(self) -> StatusSnapshot:
        if self.snapshot is None:
            return await self.run_cycle()
        return self.snapshot

    async def _run(self):
        while True:
            await self.run_cycle()
            await asyncio.sleep(self.interval)

    def start(self):
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
