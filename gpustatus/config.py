from typing import Literal

from pydantic_settings import BaseSettings

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8586
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Docker
    DOCKER_SOCKET: str = "/var/run/docker.sock"
    DOCKER_TIMEOUT: int = 10

    # GPU query
    NVIDIA_SMI_PATH: str = "nvidia-smi"
    NVIDIA_SMI_TIMEOUT: int = 10
    # Run nvidia-smi in the host namespaces (container started with --pid=host)
    USE_NSENTER: bool = False

    # Sampling
    SAMPLE_INTERVAL: float = 10.0
    SAMPLER_ENABLED: bool = True

    model_config = {"env_prefix": "GPUSTATUS_"}


settings = Settings()
