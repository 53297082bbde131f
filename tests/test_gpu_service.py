import asyncio

import pytest

from gpustatus.core.errors import GPUQueryError
from gpustatus.services.gpu_service import GPUService


class FakeProcess:
    def __init__(self, returncode=0, stdout=b"", stderr=b"", delay=0.0):
        self.returncode = returncode
        self._stdout = stdout
        self._stderr = stderr
        self._delay = delay
        self.killed = False

    async def communicate(self):
        await asyncio.sleep(self._delay)
        return self._stdout, self._stderr

    def kill(self):
        self.killed = True

    async def wait(self):
        return self.returncode


@pytest.fixture
def fake_exec(monkeypatch):
    calls = []

    def install(process):
        async def create_subprocess_exec(*cmd, **kwargs):
            calls.append(list(cmd))
            return process

        monkeypatch.setattr(asyncio, "create_subprocess_exec", create_subprocess_exec)
        return calls

    return install


def test_build_command():
    assert GPUService().build_command() == [
        "nvidia-smi",
        "--query-gpu=index,utilization.gpu,utilization.memory,temperature.gpu",
        "--format=csv,noheader,nounits",
    ]


def test_build_command_with_nsenter():
    cmd = GPUService(use_nsenter=True).build_command()

    assert cmd[:2] == ["nsenter", "-t"]
    assert cmd[cmd.index("--") + 1] == "nvidia-smi"


def test_query_returns_stdout(fake_exec):
    calls = fake_exec(FakeProcess(stdout=b"0, 10, 20, 60\n"))

    output = asyncio.run(GPUService().query())

    assert output == "0, 10, 20, 60\n"
    assert calls[0][0] == "nvidia-smi"


def test_nonzero_exit_raises(fake_exec):
    fake_exec(FakeProcess(returncode=9, stderr=b"NVIDIA-SMI has failed"))

    with pytest.raises(GPUQueryError, match="NVIDIA-SMI has failed"):
        asyncio.run(GPUService().query())


def test_timeout_kills_process(fake_exec):
    process = FakeProcess(delay=5)
    fake_exec(process)

    with pytest.raises(GPUQueryError, match="timeout"):
        asyncio.run(GPUService(timeout=0.01).query())
    assert process.killed


def test_missing_binary_raises():
    service = GPUService(binary="nvidia-smi-does-not-exist-on-this-host")

    with pytest.raises(GPUQueryError, match="not found"):
        asyncio.run(service.query())


def test_os_error_on_launch_raises(monkeypatch):
    async def create_subprocess_exec(*cmd, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(asyncio, "create_subprocess_exec", create_subprocess_exec)

    with pytest.raises(GPUQueryError, match="Permission denied"):
        asyncio.run(GPUService().query())


def test_timeout_when_process_already_exited(fake_exec):
    class ExitedProcess(FakeProcess):
        def kill(self):
            raise ProcessLookupError()

    fake_exec(ExitedProcess(delay=5))

    with pytest.raises(GPUQueryError, match="timeout"):
        asyncio.run(GPUService(timeout=0.01).query())
