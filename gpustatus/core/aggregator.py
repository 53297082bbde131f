from typing import Callable, Sequence

from gpustatus.models.schemas import DeviceStatus

Selector = Callable[[DeviceStatus], int]


class ContainerStatus:
    """Devices attributed to one container for one sampling cycle.

    Holds positions into the cycle's device list rather than copies of the
    records, so it must not outlive that list.
    """

    def __init__(self, devices: Sequence[DeviceStatus]):
        self._arena = devices
        self._positions: list[int] = []

    def add(self, position: int):
        self._positions.append(position)

    @property
    def devices(self) -> list[DeviceStatus]:
        return [self._arena[p] for p in self._positions]

    def __len__(self) -> int:
        return len(self._positions)

    def prop_sum(self, selector: Selector) -> int:
        return sum(selector(device) for device in self.devices)

    def prop_average(self, selector: Selector) -> float:
        if not self._positions:
            return 0.0
        return self.prop_sum(selector) / len(self._positions)

    def gpu_utilization_sum(self) -> int:
        return self.prop_sum(lambda d: d.utilization.gpu)

    def memory_utilization_sum(self) -> int:
        return self.prop_sum(lambda d: d.utilization.memory)

    def temperature_average(self) -> float:
        return self.prop_average(lambda d: d.temperature)
