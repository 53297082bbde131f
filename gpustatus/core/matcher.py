import re
from typing import Iterable, Optional, Sequence

from gpustatus.models.schemas import DeviceStatus

NVIDIA_DEVICE_PATTERN = re.compile(r"/dev/nvidia([0-9]+)")


def device_index_from_path(path: str) -> Optional[int]:
    """Extract N from a host path of the form /dev/nvidiaN, else None."""
    match = NVIDIA_DEVICE_PATTERN.fullmatch(path)
    if match is None:
        return None
    return int(match.group(1))


def match_devices(
    host_device_paths: Iterable[str], devices: Sequence[DeviceStatus]
) -> list[int]:
    """Return positions in ``devices`` granted through ``host_device_paths``.

    Positions follow the order of the paths. Non-GPU paths and indices not
    present in this cycle's device list are dropped. Duplicates are kept.
    """
    positions = []
    for path in host_device_paths:
        index = device_index_from_path(path)
        if index is not None and index < len(devices):
            positions.append(index)
    return positions
