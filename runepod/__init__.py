"""Ballistics, serial packet framing, serial link, camera sources and thread managers for a turret controller."""

__version__ = "0.1.0"
__all__ = ["ballistics", "messages", "config", "packets", "serial_link", "camera", "managers"]