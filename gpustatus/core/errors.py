class GPUStatusError(Exception):
    """Base class for errors that abort a sampling cycle."""


class MalformedNumericField(GPUStatusError, ValueError):
    """A four-field line carried a value that is not a non-negative integer."""

    def __init__(self, line_number: int, field: str, value: str):
        self.line_number = line_number
        self.field = field
        self.value = value
        super().__init__(
            f"line {line_number}: field '{field}' is not a non-negative integer: {value!r}"
        )


class GPUQueryError(GPUStatusError):
    """nvidia-smi could not be run or exited with an error."""


class InventoryError(GPUStatusError):
    """The container runtime could not be listed."""
