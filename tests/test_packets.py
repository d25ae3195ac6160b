import struct
import threading

import pytest

from runepod import packets
from runepod.packets import (
    ColorType,
    DataPacket,
    ReceiveDataPacket,
    SendDataPacket,
    crc8,
    load_receive_packet,
    load_send_packet,
)

HEAD, TAIL = 0xA5, 0x5A


class _Port:
    def __init__(self, stop, reads=()):
        self.stop = stop
        self.reads = list(reads)
        self.written = []

    def write(self, data):
        self.written.append(bytes(data))
        self.stop.set()

    def read(self, size):
        chunk = self.reads.pop(0) if self.reads else b""
        if not self.reads:
            self.stop.set()
        return chunk


def _frame(pitch, yaw, color, mode):
    payload = struct.pack("<ffBB", pitch, yaw, color, mode)
    return bytes([HEAD]) + payload + bytes([crc8(payload), TAIL])


def test_crc8_known_values():
    assert crc8(b"") == packets.CRC8_INIT
    assert crc8(b"\x00") == 0x35
    assert crc8(b"\xff") == 0x00


def test_encode_layout():
    packet = SendDataPacket(gun_id=0, head=HEAD, tail=TAIL, pitch=1.5, yaw=-2.0,
                            distance=3.25, armor_id=4, if_shoot=1, if_real_shoot=0,
                            if_first_armor=1)
    frame = packet.encode()
    assert len(frame) == 18
    assert frame[0] == HEAD and frame[17] == TAIL
    assert struct.unpack("<fff", frame[1:13]) == (1.5, -2.0, 3.25)
    assert list(frame[13:17]) == [4, 1, 0, 1]


def test_encode_rejects_out_of_range_byte():
    with pytest.raises(ValueError):
        SendDataPacket(gun_id=0, armor_id=300).encode()


@pytest.mark.parametrize(
    "pitch, yaw, distance, shoot, expected",
    [
        (0.5, 3.0, 1.0, 1, 1),
        (0.9, 3.0, 2.0, 1, 1),
        (0.5, 2.0, 4.0, 1, 1),
        (0.3, 2.0, 6.0, 1, 1),
        (0.5, 3.0, 1.0, 0, 0),
        (0.5, 3.0, 6.0, 1, 0),
        (0.3, 2.0, 11.0, 1, 0),
    ],
)
def test_update_shoot_mode_bands(pitch, yaw, distance, shoot, expected):
    packet = SendDataPacket(gun_id=0, pitch=pitch, yaw=yaw, distance=distance, if_shoot=shoot)
    packet.update_shoot_mode()
    assert packet.if_real_shoot == expected


def test_update_shoot_mode_large_pitch_clears_and_keeps_otherwise():
    packet = SendDataPacket(gun_id=0, pitch=-1.5, if_shoot=1, if_real_shoot=1)
    packet.update_shoot_mode()
    assert packet.if_real_shoot == 0
    kept = SendDataPacket(gun_id=0, pitch=0.1, yaw=10.0, if_shoot=1, if_real_shoot=1)
    kept.update_shoot_mode()
    assert kept.if_real_shoot == 1


def test_decode_valid_frame_with_leading_noise():
    packet = ReceiveDataPacket(gun_id=0, head=HEAD, tail=TAIL)
    assert packet.decode(b"\x01" + _frame(1.5, -2.25, 1, 3))
    assert packet.gain_pitch == 1.5
    assert packet.gain_yaw == -2.25
    assert packet.color_mode() is ColorType.RED
    assert packet.mode_selection() == 3


def test_decode_rejects_bad_crc_and_short_frames():
    packet = ReceiveDataPacket(gun_id=0, head=HEAD, tail=TAIL)
    bad = bytearray(_frame(1.5, 0.0, 1, 2))
    bad[11] ^= 0xFF
    assert packet.decode(bytes(bad)) is False
    assert packet.decode(_frame(1.5, 0.0, 1, 2)[:-1]) is False
    assert packet.decode(b"\x00" * 14) is False
    assert packet.gain_pitch == 0.0
    assert packet.color_mode() is ColorType.BLUE


def test_send_data_writes_frames_until_stopped():
    stop = threading.Event()
    port = _Port(stop)
    packet = SendDataPacket(gun_id=0, head=HEAD, tail=TAIL, yaw=2.0)
    packet.send_data(port, stop)
    assert port.written == [packet.encode()]


def test_receive_data_applies_frames():
    stop = threading.Event()
    port = _Port(stop, [b"", _frame(0.5, 0.75, 0, 2)])
    packet = ReceiveDataPacket(gun_id=0, head=HEAD, tail=TAIL)
    packet.receive_data(port, stop)
    assert (packet.gain_pitch, packet.gain_yaw, packet.mode) == (0.5, 0.75, 2)


def test_plain_packet_tasks_end_at_once():
    stop = threading.Event()
    port = _Port(stop, [b"\x00"])
    base = DataPacket(gun_id=1)
    base.send_data(port, stop)
    base.receive_data(port, stop)
    assert port.written == []
    assert port.reads == [b"\x00"]
    assert not stop.is_set()


def test_load_packets_from_config(tmp_path):
    (tmp_path / "2.yml").write_text(
        "%YAML:1.0\n---\nSendPacket:\n  Head: 165\n  Tail: 90\n"
        "ReceivePacket:\n  Head: 170\n  Tail: 187\n"
    )
    send = load_send_packet(2, tmp_path)
    receive = load_receive_packet(2, tmp_path)
    assert (send.gun_id, send.head, send.tail) == (2, 165, 90)
    assert (receive.head, receive.tail) == (170, 187)


def test_load_packet_missing_section(tmp_path):
    (tmp_path / "0.yml").write_text("SendPacket:\n  Head: 1\n  Tail: 2\n")
    with pytest.raises(KeyError):
        load_receive_packet(0, tmp_path)