from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Utilization(BaseModel):
    model_config = ConfigDict(frozen=True)

    gpu: int = Field(ge=0)
    memory: int = Field(ge=0)


class DeviceStatus(BaseModel):
    """One GPU's reading for a single sampling cycle."""

    model_config = ConfigDict(frozen=True)

    index: Optional[int] = Field(default=None, ge=0)
    temperature: int = Field(ge=0)
    utilization: Utilization


class ContainerInventoryEntry(BaseModel):
    container_id: str
    container_name: str
    labels: dict[str, str] = Field(default_factory=dict)
    host_device_paths: list[str] = Field(default_factory=list)


class UtilizationSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    gpu: int = Field(default=0, alias="GPU")
    memory: int = Field(default=0, alias="Memory")


class DeviceSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    utilization: UtilizationSummary = Field(
        default_factory=UtilizationSummary, alias="Utilization"
    )
    temperature: float = Field(default=0.0, alias="Temperature")

    @property
    def utilization_gpu_sum(self) -> int:
        return self.utilization.gpu

    @property
    def utilization_memory_sum(self) -> int:
        return self.utilization.memory

    @property
    def temperature_average(self) -> float:
        return self.temperature


class ContainerRecord(BaseModel):
    """Published per-container event. Aliases are the wire field names."""

    model_config = ConfigDict(populate_by_name=True)

    container_id: str = Field(alias="containerid")
    container_name: str = Field(alias="containername")
    labels: dict[str, str] = Field(default_factory=dict)
    device: DeviceSummary = Field(default_factory=DeviceSummary)


class StatusSnapshot(BaseModel):
    timestamp: Optional[float] = None
    ok: bool = True
    error: Optional[str] = None
    containers: list[ContainerRecord] = Field(default_factory=list)
    devices: list[DeviceStatus] = Field(default_factory=list)
