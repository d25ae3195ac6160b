import struct
import threading

import pytest

from runepod.managers import CameraManager, ModuleManager, PacketManager
from runepod.packets import ReceiveDataPacket, SendDataPacket, crc8

TIMEOUT = 5


class FakeCamera:
    def __init__(self):
        self.started = False
        self.ran_with = None

    def start_camera(self):
        self.started = True

    def update_src(self, stop):
        self.ran_with = stop


class FakeModule:
    def __init__(self, log, name):
        self.log = log
        self.name = name

    def run(self):
        self.log.append(self.name)


class WritePort:
    def __init__(self, stop):
        self.stop = stop
        self.written = []

    def write(self, data):
        self.written.append(bytes(data))
        self.stop.set()
        return len(data)

    def read(self, size):
        return b""


class ReadPort:
    def __init__(self, stop, frame):
        self.stop = stop
        self.frame = frame

    def write(self, data):
        return len(data)

    def read(self, size):
        self.stop.set()
        return self.frame[:size]


def join_all(threads):
    for thread in threads:
        thread.join(TIMEOUT)
    return [thread.is_alive() for thread in threads]


def test_camera_manager_starts_and_runs_each_camera():
    manager = CameraManager()
    cameras = [FakeCamera(), FakeCamera()]
    for camera in cameras:
        manager.add_camera(camera)
    stop = threading.Event()
    threads = manager.load_tasks(stop)
    assert len(threads) == 2
    assert join_all(threads) == [False, False]
    assert all(camera.started for camera in cameras)
    assert all(camera.ran_with is stop for camera in cameras)


def test_camera_manager_size():
    manager = CameraManager()
    assert manager.size() == 0
    manager.add_camera(FakeCamera())
    assert manager.size() == 1
    assert len(manager) == 1


def test_module_manager_runs_modules():
    log = []
    manager = ModuleManager()
    manager.add_module(FakeModule(log, "buff"))
    manager.add_module(FakeModule(log, "test"))
    threads = manager.load_tasks()
    assert join_all(threads) == [False, False]
    assert sorted(log) == ["buff", "test"]
    assert manager.size() == 2


def test_packet_manager_send_tasks_write_frames():
    stop = threading.Event()
    port = WritePort(stop)
    packet = SendDataPacket(gun_id=0, head=0xA5, tail=0x5A, pitch=1.5, yaw=-2.0, distance=3.0)
    manager = PacketManager()
    manager.add_packet(packet)
    threads = manager.load_send_tasks(port, stop)
    assert join_all(threads) == [False]
    assert port.written[0] == packet.encode()
    assert port.written[0][0] == 0xA5
    assert port.written[0][-1] == 0x5A


def test_packet_manager_receive_tasks_decode_frames():
    payload = struct.pack("<ffBB", 0.5, 0.25, 1, 2)
    frame = bytes([0xA5]) + payload + bytes([crc8(payload), 0x5A, 0x00])
    stop = threading.Event()
    port = ReadPort(stop, frame)
    packet = ReceiveDataPacket(gun_id=0, head=0xA5, tail=0x5A)
    manager = PacketManager()
    manager.add_packet(packet)
    threads = manager.load_receive_tasks(port, stop)
    assert join_all(threads) == [False]
    assert packet.gain_pitch == pytest.approx(0.5)
    assert packet.gain_yaw == pytest.approx(0.25)
    assert packet.mode_selection() == 2


def test_packet_manager_size():
    manager = PacketManager()
    manager.add_packet(SendDataPacket(gun_id=0))
    manager.add_packet(ReceiveDataPacket(gun_id=0))
    assert manager.size() == 2
    assert len(manager) == 2