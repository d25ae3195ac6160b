"""Registries that start the worker threads for cameras, modules and packets."""

from __future__ import annotations

import threading
from typing import Any, Protocol


class _CameraLike(Protocol):
    def start_camera(self) -> None: ...

    def update_src(self, stop: threading.Event) -> None: ...


class _ModuleLike(Protocol):
    def run(self) -> None: ...


class _PacketLike(Protocol):
    def send_data(self, port: Any, stop: threading.Event) -> None: ...

    def receive_data(self, port: Any, stop: threading.Event) -> None: ...


def _start(target: Any, *args: Any) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


class CameraManager:
    """Holds the cameras and runs each one's capture loop in its own thread."""

    def __init__(self) -> None:
        self.cameras: list[_CameraLike] = []

    def add_camera(self, camera: _CameraLike) -> None:
        self.cameras.append(camera)

    def load_tasks(self, stop: threading.Event) -> list[threading.Thread]:
        """Start every camera, then launch its capture loop; return the running threads."""
        threads = []
        for camera in self.cameras:
            camera.start_camera()
            threads.append(_start(camera.update_src, stop))
        return threads

    def size(self) -> int:
        return len(self.cameras)

    def __len__(self) -> int:
        return self.size()


class ModuleManager:
    """Holds the vision modules and runs each in its own thread."""

    def __init__(self) -> None:
        self.modules: list[_ModuleLike] = []

    def add_module(self, module: _ModuleLike) -> None:
        self.modules.append(module)

    def load_tasks(self) -> list[threading.Thread]:
        """Launch every module's ``run``; return the running threads."""
        return [_start(module.run) for module in self.modules]

    def size(self) -> int:
        return len(self.modules)

    def __len__(self) -> int:
        return self.size()


class PacketManager:
    """Holds the data packets and runs their send and receive loops."""

    def __init__(self) -> None:
        self.packets: list[_PacketLike] = []

    def add_packet(self, packet: _PacketLike) -> None:
        self.packets.append(packet)

    def load_send_tasks(self, port: Any, stop: threading.Event) -> list[threading.Thread]:
        """Launch each packet's send loop on ``port``; return the running threads."""
        return [_start(packet.send_data, port, stop) for packet in self.packets]

    def load_receive_tasks(self, port: Any, stop: threading.Event) -> list[threading.Thread]:
        """Launch each packet's receive loop on ``port``; return the running threads."""
        return [_start(packet.receive_data, port, stop) for packet in self.packets]

    def size(self) -> int:
        return len(self.packets)

    def __len__(self) -> int:
        return self.size()