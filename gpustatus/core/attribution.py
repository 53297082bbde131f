from typing import Iterable, Sequence

from gpustatus.core.aggregator import ContainerStatus
from gpustatus.core.matcher import match_devices
from gpustatus.models.schemas import (
    ContainerInventoryEntry,
    ContainerRecord,
    DeviceStatus,
    DeviceSummary,
    UtilizationSummary,
)


def normalize_container_name(name: str) -> str:
    """Docker reports the primary name with a leading slash."""
    return name[1:] if name.startswith("/") else name


def build_container_record(
    entry: ContainerInventoryEntry, devices: Sequence[DeviceStatus]
) -> ContainerRecord:
    status = ContainerStatus(devices)
    for position in match_devices(entry.host_device_paths, devices):
        status.add(position)

    return ContainerRecord(
        container_id=entry.container_id,
        container_name=normalize_container_name(entry.container_name),
        labels=dict(entry.labels),
        device=DeviceSummary(
            utilization=UtilizationSummary(
                gpu=status.gpu_utilization_sum(),
                memory=status.memory_utilization_sum(),
            ),
            temperature=status.temperature_average(),
        ),
    )


def build_container_records(
    entries: Iterable[ContainerInventoryEntry], devices: Sequence[DeviceStatus]
) -> list[ContainerRecord]:
    """One record per inventory entry, in inventory order."""
    return [build_container_record(entry, devices) for entry in entries]
