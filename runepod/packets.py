"""Serial data packets exchanged with the gimbal controller."""

from __future__ import annotations

import enum
import struct
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import load_config

CRC8_INIT = 0xFF
_CRC8_TABLE = bytes((
    0x00, 0x5e, 0xbc, 0xe2, 0x61, 0x3f, 0xdd, 0x83, 0xc2, 0x9c, 0x7e, 0x20, 0xa3, 0xfd, 0x1f, 0x41,
    0x9d, 0xc3, 0x21, 0x7f, 0xfc, 0xa2, 0x40, 0x1e, 0x5f, 0x01, 0xe3, 0xbd, 0x3e, 0x60, 0x82, 0xdc,
    0x23, 0x7d, 0x9f, 0xc1, 0x42, 0x1c, 0xfe, 0xa0, 0xe1, 0xbf, 0x5d, 0x03, 0x80, 0xde, 0x3c, 0x62,
    0xbe, 0xe0, 0x02, 0x5c, 0xdf, 0x81, 0x63, 0x3d, 0x7c, 0x22, 0xc0, 0x9e, 0x1d, 0x43, 0xa1, 0xff,
    0x46, 0x18, 0xfa, 0xa4, 0x27, 0x79, 0x9b, 0xc5, 0x84, 0xda, 0x38, 0x66, 0xe5, 0xbb, 0x59, 0x07,
    0xdb, 0x85, 0x67, 0x39, 0xba, 0xe4, 0x06, 0x58, 0x19, 0x47, 0xa5, 0xfb, 0x78, 0x26, 0xc4, 0x9a,
    0x65, 0x3b, 0xd9, 0x87, 0x04, 0x5a, 0xb8, 0xe6, 0xa7, 0xf9, 0x1b, 0x45, 0xc6, 0x98, 0x7a, 0x24,
    0xf8, 0xa6, 0x44, 0x1a, 0x99, 0xc7, 0x25, 0x7b, 0x3a, 0x64, 0x86, 0xd8, 0x5b, 0x05, 0xe7, 0xb9,
    0x8c, 0xd2, 0x30, 0x6e, 0xed, 0xb3, 0x51, 0x0f, 0x4e, 0x10, 0xf2, 0xac, 0x2f, 0x71, 0x93, 0xcd,
    0x11, 0x4f, 0xad, 0xf3, 0x70, 0x2e, 0xcc, 0x92, 0xd3, 0x8d, 0x6f, 0x31, 0xb2, 0xec, 0x0e, 0x50,
    0xaf, 0xf1, 0x13, 0x4d, 0xce, 0x90, 0x72, 0x2c, 0x6d, 0x33, 0xd1, 0x8f, 0x0c, 0x52, 0xb0, 0xee,
    0x32, 0x6c, 0x8e, 0xd0, 0x53, 0x0d, 0xef, 0xb1, 0xf0, 0xae, 0x4c, 0x12, 0x91, 0xcf, 0x2d, 0x73,
    0xca, 0x94, 0x76, 0x28, 0xab, 0xf5, 0x17, 0x49, 0x08, 0x56, 0xb4, 0xea, 0x69, 0x37, 0xd5, 0x8b,
    0x57, 0x09, 0xeb, 0xb5, 0x36, 0x68, 0x8a, 0xd4, 0x95, 0xcb, 0x29, 0x77, 0xf4, 0xaa, 0x48, 0x16,
    0xe9, 0xb7, 0x55, 0x0b, 0x88, 0xd6, 0x34, 0x6a, 0x2b, 0x75, 0x97, 0xc9, 0x4a, 0x14, 0xf6, 0xa8,
    0x74, 0x2a, 0xc8, 0x96, 0x15, 0x4b, 0xa9, 0xf7, 0xb6, 0xe8, 0x0a, 0x54, 0xd7, 0x89, 0x6b, 0x35,
))

_SEND_FRAME = struct.Struct("<BfffBBBBB")
_RECEIVE_PAYLOAD = struct.Struct("<ffBB")
RECEIVE_FRAME_SIZE = 1 + _RECEIVE_PAYLOAD.size + 2
RECEIVE_READ_SIZE = 14
DEFAULT_CONFIG_DIR = Path("../config/packet")


class Port(Protocol):
    def write(self, data: bytes) -> object: ...

    def read(self, size: int) -> bytes: ...


def crc8(data: bytes) -> int:
    """CRC-8 of ``data`` with the controller's table and an initial value of 0xFF."""
    crc = CRC8_INIT
    for byte in data:
        crc = _CRC8_TABLE[crc ^ byte]
    return crc


class ColorType(enum.Enum):
    RED = "red"
    BLUE = "blue"


@dataclass
class DataPacket:
    """A framed packet bound to one gun, delimited by head and tail bytes."""

    gun_id: int
    head: int = 0
    tail: int = 0

    def _outgoing_frame(self) -> bytes | None:
        return None

    def _incoming_size(self) -> int:
        return 0

    def _accept_frame(self, data: bytes) -> bool:
        return False

    def send_data(self, port: Port, stop: threading.Event) -> None:
        """Write outgoing frames until ``stop`` is set; ends at once if there are none."""
        while not stop.is_set():
            frame = self._outgoing_frame()
            if frame is None:
                return
            port.write(frame)

    def receive_data(self, port: Port, stop: threading.Event) -> None:
        """Read and apply incoming frames until ``stop`` is set; ends at once if none are expected."""
        size = self._incoming_size()
        while size and not stop.is_set():
            chunk = port.read(size)
            if chunk:
                self._accept_frame(bytes(chunk))


@dataclass
class SendDataPacket(DataPacket):
    """Aiming command sent to the controller as an 18-byte frame."""

    pitch: float = 0.0
    yaw: float = 0.0
    distance: float = 0.0
    armor_id: int = 0
    if_shoot: int = 0
    if_real_shoot: int = 0
    if_first_armor: int = 0

    def encode(self) -> bytes:
        """Return the wire frame: head, pitch, yaw, distance, flags, tail."""
        try:
            return _SEND_FRAME.pack(
                self.head, self.pitch, self.yaw, self.distance, self.armor_id,
                self.if_shoot, self.if_real_shoot, self.if_first_armor, self.tail,
            )
        except struct.error as exc:
            raise ValueError(f"packet field out of range: {exc}") from exc

    def _outgoing_frame(self) -> bytes | None:
        return self.encode()

    def update_shoot_mode(self) -> None:
        """Decide whether to really fire from aim error and distance bands."""
        pitch, yaw, distance = abs(self.pitch), abs(self.yaw), self.distance
        if pitch >= 1.2:
            self.if_real_shoot = 0
            return
        if self.if_shoot != 1:
            return
        bands = (
            (4.0, 1.2, 0.0, 1.7),
            (3.5, 1.0, 1.7, 3.5),
            (2.8, 0.6, 3.5, 5.0),
            (2.3, 0.4, 5.0, 10.5),
        )
        if any(yaw < max_yaw and pitch < max_pitch and low <= distance < high
               for max_yaw, max_pitch, low, high in bands):
            self.if_real_shoot = 1

    def send_data(self, port: Port, stop: threading.Event) -> None:
        """Write the current frame to ``port`` until ``stop`` is set."""
        super().send_data(port, stop)


@dataclass
class ReceiveDataPacket(DataPacket):
    """State reported by the controller in a 13-byte CRC-checked frame."""

    gain_pitch: float = 0.0
    gain_yaw: float = 0.0
    color: int = 0
    mode: int = 0

    def decode(self, data: bytes) -> bool:
        """Apply the first frame found in ``data``; return False if it is incomplete or invalid."""
        data = bytes(data)
        start = data.find(self.head)
        if start < 0 or len(data) < start + RECEIVE_FRAME_SIZE:
            return False
        payload = data[start + 1:start + 1 + _RECEIVE_PAYLOAD.size]
        checksum = data[start + 1 + _RECEIVE_PAYLOAD.size]
        tail = data[start + 2 + _RECEIVE_PAYLOAD.size]
        if checksum != crc8(payload) or tail != self.tail:
            return False
        self.gain_pitch, self.gain_yaw, self.color, self.mode = _RECEIVE_PAYLOAD.unpack(payload)
        return True

    def _incoming_size(self) -> int:
        return RECEIVE_READ_SIZE

    def _accept_frame(self, data: bytes) -> bool:
        return self.decode(data)

    def receive_data(self, port: Port, stop: threading.Event) -> None:
        """Read frames from ``port`` and apply them until ``stop`` is set."""
        super().receive_data(port, stop)

    def color_mode(self) -> ColorType:
        """The team colour reported by the controller."""
        return ColorType.RED if self.color else ColorType.BLUE

    def mode_selection(self) -> int:
        """The aiming mode reported by the controller."""
        return int(self.mode)


def _load_markers(gun_id: int, config_dir: str | Path, section: str) -> tuple[int, int]:
    config = load_config(Path(config_dir) / f"{gun_id}.yml")
    markers = config[section]
    return int(markers["Head"]), int(markers["Tail"])


def load_send_packet(gun_id: int, config_dir: str | Path = DEFAULT_CONFIG_DIR) -> SendDataPacket:
    """Build a send packet from ``<config_dir>/<gun_id>.yml``."""
    head, tail = _load_markers(gun_id, config_dir, "SendPacket")
    return SendDataPacket(gun_id=gun_id, head=head, tail=tail)


def load_receive_packet(
    gun_id: int, config_dir: str | Path = DEFAULT_CONFIG_DIR
) -> ReceiveDataPacket:
    """Build a receive packet from ``<config_dir>/<gun_id>.yml``."""
    head, tail = _load_markers(gun_id, config_dir, "ReceivePacket")
    return ReceiveDataPacket(gun_id=gun_id, head=head, tail=tail)