"""Discovery and configuration of the controller's serial link."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable

import serial

from .config import load_config

log = logging.getLogger(__name__)

DEFAULT_DIRECTORY = "/dev"
DEFAULT_KEYWORD = "ttyACM"
DEFAULT_CONFIG_PATH = Path("../config/config.yml")

_BYTESIZES = {7: serial.SEVENBITS, 8: serial.EIGHTBITS}
_STOPBITS = {1: serial.STOPBITS_ONE, 2: serial.STOPBITS_TWO}
# "S" means "no parity" on this link, not space parity.
_PARITIES = {
    "N": serial.PARITY_NONE,
    "O": serial.PARITY_ODD,
    "E": serial.PARITY_EVEN,
    "S": serial.PARITY_NONE,
}


def _open_serial(path: str, baudrate: int) -> serial.Serial:
    return serial.Serial(path, baudrate=baudrate, timeout=0)


def list_devices(directory: str | Path = DEFAULT_DIRECTORY, keyword: str = DEFAULT_KEYWORD) -> list[str]:
    """Names of entries in ``directory`` containing ``keyword``, sorted.

    Raises OSError if the directory cannot be read.
    """
    return sorted(entry.name for entry in Path(directory).iterdir() if keyword in entry.name)


class SerialPort:
    """The serial connection to the controller, found by scanning a device directory."""

    def __init__(
        self,
        directory: str | Path = DEFAULT_DIRECTORY,
        keyword: str = DEFAULT_KEYWORD,
        opener: Callable[[str, int], Any] = _open_serial,
        max_attempts: int | None = None,
        retry_delay: float = 0.0,
    ) -> None:
        self.directory = Path(directory)
        self.keyword = keyword
        self.opener = opener
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.baud_speed = 0
        self.device_names: list[str] = []
        self.port: Any = None
        self.device_path: str | None = None

    def init(self, config_path: str | Path = DEFAULT_CONFIG_PATH) -> bool:
        """Read the baud rate from the config, then open and configure a device.

        Retries until it succeeds or ``max_attempts`` is spent (None retries forever).
        Returns False when no device is present or every attempt failed.
        """
        config = load_config(config_path)
        self.baud_speed = int(config["Settings"]["BaudSpeed"])
        log.info("serial port baud speed : %d", self.baud_speed)

        if not self.update_device_list():
            return False

        attempts = 0
        while self.max_attempts is None or attempts < self.max_attempts:
            attempts += 1
            if not self.open_device():
                log.error("can't open serial port")
                time.sleep(self.retry_delay)
                continue
            try:
                self.configure(8, 1, "N")
            except serial.SerialException as exc:
                log.error("set parity error: %s", exc)
                time.sleep(self.retry_delay)
                continue
            return True
        return False

    def update_device_list(self) -> bool:
        """Rescan the device directory; return whether any device was found."""
        try:
            found = list_devices(self.directory, self.keyword)
        except OSError as exc:
            log.error("could not open directory: %s (%s)", self.directory, exc)
            return False
        self.device_names = found
        if not found:
            log.info("no dev found")
            return False
        log.info("found dev: %s", " ".join(found))
        return True

    def open_device(self) -> bool:
        """Open the first known device that can be opened."""
        for name in self.device_names:
            path = str(self.directory / name)
            log.info("open dev:%s", path)
            try:
                self.port = self.opener(path, self.baud_speed)
            except (OSError, serial.SerialException) as exc:
                log.warning("failed to open %s: %s", path, exc)
                continue
            self.device_path = path
            return True
        return False

    def configure(self, databits: int, stopbits: int, parity: str) -> None:
        """Set data bits, stop bits and parity on the open port, flushing its buffers.

        Raises ValueError for unsupported settings and RuntimeError if no port is open.
        """
        if databits not in _BYTESIZES:
            raise ValueError(f"unsupported data size: {databits}")
        if parity not in _PARITIES:
            raise ValueError(f"unsupported parity: {parity!r}")
        if stopbits not in _STOPBITS:
            raise ValueError(f"unsupported stop bits: {stopbits}")
        if self.port is None:
            raise RuntimeError("serial port is not open")
        self.port.bytesize = _BYTESIZES[databits]
        self.port.parity = _PARITIES[parity]
        self.port.stopbits = _STOPBITS[stopbits]
        self.port.xonxoff = False
        self.port.reset_input_buffer()
        self.port.reset_output_buffer()

    def close(self) -> None:
        """Close the port if it is open."""
        if self.port is not None:
            self.port.close()
            self.port = None
            self.device_path = None


_instance: SerialPort | None = None
_instance_lock = threading.Lock()


def get_instance() -> SerialPort:
    """The process-wide serial port."""
    global _instance
    with _instance_lock:
        if _instance is None:
            _instance = SerialPort()
        return _instance