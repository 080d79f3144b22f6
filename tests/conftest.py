from __future__ import annotations

from pathlib import Path

import pytest


class FakeServer:
    """Stands in for LocalServer; records lifecycle calls."""

    instances: list["FakeServer"] = []

    def __init__(self, directory, port):
        self.directory = Path(directory)
        self.port = port
        self.started = False
        self.ready = False
        self.terminated = False
        self.calls: list[str] = []
        FakeServer.instances.append(self)

    def start(self) -> None:
        self.started = True
        self.calls.append("start")

    def wait_until_ready(self, grace, timeout) -> None:
        self.ready = True
        self.calls.append("ready")

    def stop(self) -> None:
        if self.started:
            self.terminated = True
        self.calls.append("stop")


class FakeTunnel:
    """Stands in for TunnelClient; replays canned output lines."""

    output: list[str] = []
    instances: list["FakeTunnel"] = []

    def __init__(self, local_port, relay_host):
        self.local_port = local_port
        self.relay_host = relay_host
        self.started = False
        self.stopped = False
        FakeTunnel.instances.append(self)

    def start(self) -> None:
        self.started = True

    def lines(self):
        yield from self.output

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture(autouse=True)
def _reset_fakes():
    FakeServer.instances = []
    FakeTunnel.instances = []
    FakeTunnel.output = []
    yield


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """A cargo-style target/ tree holding one plugin build."""
    release = tmp_path / "target" / "wasm32-wasip1" / "release"
    release.mkdir(parents=True)
    (release / "plugin.wasm").write_bytes(b"\0asm\x01\0\0\0")
    (release / "plugin.d").write_text("deps")
    return tmp_path / "target"


@pytest.fixture
def fake_server() -> type[FakeServer]:
    return FakeServer


@pytest.fixture
def fake_tunnel() -> type[FakeTunnel]:
    return FakeTunnel
