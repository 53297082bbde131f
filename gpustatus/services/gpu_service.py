import asyncio
import contextlib
import logging

from gpustatus.core.errors import GPUQueryError
from gpustatus.core.parser import QUERY_FIELDS

logger = logging.getLogger(__name__)


class GPUService:
    """Runs the nvidia-smi device query, directly or via nsenter."""

    NSENTER_PREFIX = ["nsenter", "-t", "1", "-m", "-u", "-i", "-n", "-p", "--"]

    def __init__(
        self,
        binary: str = "nvidia-smi",
        timeout: float = 10,
        use_nsenter: bool = False,
    ):
        self.binary = binary
        self.timeout = timeout
        self.use_nsenter = use_nsenter

    def build_command(self) -> list[str]:
        cmd = [
            self.binary,
            f"--query-gpu={','.join(QUERY_FIELDS)}",
            "--format=csv,noheader,nounits",
        ]
        if self.use_nsenter:
            return self.NSENTER_PREFIX + cmd
        return cmd

    async def query(self) -> str:
        """Return nvidia-smi's raw CSV output.

        Raises GPUQueryError when the tool is missing, hangs past the
        timeout or exits non-zero.
        """
        cmd = self.build_command()
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise GPUQueryError(f"{cmd[0]} not found") from e
        except OSError as e:
            raise GPUQueryError(f"Failed to run {cmd[0]}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            # The process may exit on its own as the timeout fires
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            raise GPUQueryError(
                f"nvidia-smi exceeded {self.timeout}s timeout"
            ) from e

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise GPUQueryError(
                f"nvidia-smi exited with code {proc.returncode}: {detail}"
            )

        return stdout.decode("utf-8", errors="replace")
