import logging
from typing import Optional

import docker
import requests
from docker.errors import DockerException, NotFound, APIError
from docker.models.containers import Container

from gpustatus.core.errors import InventoryError
from gpustatus.models.schemas import ContainerInventoryEntry

logger = logging.getLogger(__name__)


class DockerService:
    """Docker SDK wrapper that supplies the running-container inventory."""

    def __init__(self, socket_path: str = "/var/run/docker.sock", timeout: int = 10):
        self._socket_path = socket_path
        self._timeout = timeout
        self.client: Optional[docker.DockerClient] = None
        self._available = False
        self._connect()

    def _connect(self):
        """Attempt to connect to the Docker daemon."""
        try:
            self.client = docker.DockerClient(
                base_url=f"unix://{self._socket_path}",
                timeout=self._timeout,
            )
            # Verify the connection actually works
            self.client.ping()
            self._available = True
        except Exception as e:
            logger.warning("Docker connection failed: %s", e)
            self.client = None
            self._available = False

    def _ensure_connected(self) -> bool:
        """Reconnect if the previous connection dropped."""
        if self._available:
            try:
                self.client.ping()
                return True
            except Exception:
                logger.warning("Docker ping failed, reconnecting...")
                self._available = False

        self._connect()
        return self._available

    @property
    def available(self) -> bool:
        return self._available

    @staticmethod
    def to_inventory_entry(container: Container) -> ContainerInventoryEntry:
        """Pull the fields attribution needs out of an inspected container."""
        attrs = container.attrs
        config = attrs.get("Config") or {}
        host_config = attrs.get("HostConfig") or {}
        devices = host_config.get("Devices") or []

        return ContainerInventoryEntry(
            container_id=container.id,
            container_name=attrs.get("Name", ""),
            labels=config.get("Labels") or {},
            host_device_paths=[
                d["PathOnHost"] for d in devices if d.get("PathOnHost")
            ],
        )

    def list_containers(self) -> list[ContainerInventoryEntry]:
        """Inspect every running container.

        Containers that disappear between listing and inspection are skipped.
        Raises InventoryError when the daemon cannot be listed at all.
        """
        if not self._ensure_connected():
            raise InventoryError(f"Docker daemon unavailable at {self._socket_path}")

        try:
            containers = self.client.containers.list(sparse=True)
        except (DockerException, requests.exceptions.RequestException) as e:
            raise InventoryError(f"Failed to list containers: {e}") from e

        result = []
        for summary in containers:
            try:
                container = self.client.containers.get(summary.id)
            except (NotFound, APIError) as e:
                logger.warning("Failed to inspect container %s: %s", summary.id, e)
                continue
            except (DockerException, requests.exceptions.RequestException) as e:
                raise InventoryError(
                    f"Failed to inspect container {summary.id}: {e}"
                ) from e
            result.append(self.to_inventory_entry(container))
        return result

    def close(self):
        if self.client:
            self.client.close()
