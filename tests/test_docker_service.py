from unittest.mock import MagicMock

import pytest
import requests
from docker.errors import APIError, DockerException, NotFound

from gpustatus.core.errors import InventoryError
from gpustatus.services import docker_service
from gpustatus.services.docker_service import DockerService


def make_container(container_id, name, devices=None, labels=None):
    return MagicMock(
        id=container_id,
        attrs={
            "Name": name,
            "Config": {"Labels": labels},
            "HostConfig": {"Devices": devices},
        },
    )


@pytest.fixture
def client(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr(
        docker_service.docker, "DockerClient", MagicMock(return_value=client)
    )
    return client


def test_to_inventory_entry():
    container = make_container(
        "abc",
        "/trainer",
        devices=[
            {"PathOnHost": "/dev/nvidia1", "PathInContainer": "/dev/nvidia0",
             "CgroupPermissions": "rwm"},
            {"PathOnHost": "/dev/nvidiactl", "PathInContainer": "/dev/nvidiactl",
             "CgroupPermissions": "rwm"},
        ],
        labels={"app": "train"},
    )

    entry = DockerService.to_inventory_entry(container)

    assert entry.container_id == "abc"
    assert entry.container_name == "/trainer"
    assert entry.labels == {"app": "train"}
    # Attribution uses the host side of the mapping
    assert entry.host_device_paths == ["/dev/nvidia1", "/dev/nvidiactl"]


def test_missing_labels_and_devices_are_empty():
    entry = DockerService.to_inventory_entry(make_container("abc", "/web"))

    assert entry.labels == {}
    assert entry.host_device_paths == []


def test_list_containers_skips_vanished_container(client):
    client.containers.list.return_value = [MagicMock(id="a"), MagicMock(id="b")]
    inspected = {"a": make_container("a", "/alpha")}

    def get(container_id):
        if container_id not in inspected:
            raise NotFound("No such container")
        return inspected[container_id]

    client.containers.get.side_effect = get

    entries = DockerService().list_containers()

    assert [e.container_id for e in entries] == ["a"]
    client.containers.list.assert_called_once_with(sparse=True)


def test_list_failure_raises_inventory_error(client):
    client.containers.list.side_effect = APIError("daemon error")

    with pytest.raises(InventoryError):
        DockerService().list_containers()


def test_unreachable_daemon_raises_inventory_error(client):
    client.ping.side_effect = ConnectionError("no socket")

    service = DockerService()

    assert not service.available
    with pytest.raises(InventoryError):
        service.list_containers()


def test_connection_lost_while_listing_raises_inventory_error(client):
    client.containers.list.side_effect = requests.exceptions.ConnectionError("reset")

    with pytest.raises(InventoryError, match="Failed to list containers"):
        DockerService().list_containers()


def test_timeout_while_inspecting_raises_inventory_error(client):
    client.containers.list.return_value = [MagicMock(id="a")]
    client.containers.get.side_effect = requests.exceptions.ReadTimeout("read timed out")

    with pytest.raises(InventoryError, match="Failed to inspect container a"):
        DockerService().list_containers()


def test_docker_exception_while_listing_raises_inventory_error(client):
    client.containers.list.side_effect = DockerException("bad response")

    with pytest.raises(InventoryError):
        DockerService().list_containers()
