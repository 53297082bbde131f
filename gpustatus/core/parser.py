"""Parse ``nvidia-smi --format=csv,noheader,nounits`` output into device records."""

from gpustatus.core.errors import MalformedNumericField
from gpustatus.models.schemas import DeviceStatus, Utilization

# Column order of the --query-gpu argument
QUERY_FIELDS = ("index", "utilization.gpu", "utilization.memory", "temperature.gpu")


def _parse_uint(value: str, line_number: int, field: str) -> int:
    value = value.strip()
    # ASCII digits only; int() also takes signs, underscores and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        raise MalformedNumericField(line_number, field, value)
    return int(value)


def parse_device_statuses(raw_text: str) -> list[DeviceStatus]:
    """Return one DeviceStatus per four-field line, in line order.

    Lines with any other field count are skipped. A non-numeric value on a
    four-field line raises MalformedNumericField and nothing is returned.
    """
    text = raw_text.strip()
    if not text:
        return []

    devices = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        parts = line.split(",")
        if len(parts) != len(QUERY_FIELDS):
            continue

        index, gpu_util, mem_util, temperature = (
            _parse_uint(part, line_number, field)
            for part, field in zip(parts, QUERY_FIELDS)
        )
        devices.append(DeviceStatus(
            index=index,
            temperature=temperature,
            utilization=Utilization(gpu=gpu_util, memory=mem_util),
        ))

    return devices
