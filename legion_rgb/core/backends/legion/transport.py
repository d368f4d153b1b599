from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any, Final

from legion_rgb.core.utils.exceptions import (
    HidTransportError,
    is_device_busy,
    is_device_disconnected,
    is_permission_denied,
)

logger = logging.getLogger(__name__)

# HID class requests (USB HID 1.11, 7.2).
_REQ_TYPE_CLASS_OUT: Final[int] = 0x21
_REQ_SET_REPORT: Final[int] = 0x09
_REPORT_TYPE_FEATURE: Final[int] = 0x03

_WRITE_TIMEOUT_MS: Final[int] = 1000

_UDEV_HINT: Final[str] = (
    "Permission denied opening the Legion keyboard USB device. "
    "Add a udev rule granting access to 048d:<product> (e.g. TAG+=\"uaccess\"), "
    "then reload udev rules and log out/in."
)


class UsbHidTransport:
    """Send HID feature reports to a pyusb device via SET_REPORT control transfers."""

    def __init__(self, dev: Any, *, interface: int = 0) -> None:
        self._dev = dev
        self._interface = int(interface)
        self._reattach = False

    @property
    def interface(self) -> int:
        return self._interface

    def open(self) -> "UsbHidTransport":
        """Detach a bound kernel driver (usbhid) so control writes reach the device."""

        try:
            if self._dev.is_kernel_driver_active(self._interface):
                self._dev.detach_kernel_driver(self._interface)
                self._reattach = True
        except NotImplementedError:
            # Kernel driver detach is Linux-only in libusb.
            pass
        except Exception as exc:
            raise _wrap_usb_error("open", exc) from exc
        return self

    def send_feature_report(self, data: bytes) -> None:
        payload = bytes(data)
        w_value = (_REPORT_TYPE_FEATURE << 8) | payload[0]
        try:
            self._dev.ctrl_transfer(
                _REQ_TYPE_CLASS_OUT,
                _REQ_SET_REPORT,
                w_value,
                self._interface,
                payload,
                _WRITE_TIMEOUT_MS,
            )
        except Exception as exc:
            raise _wrap_usb_error("write", exc) from exc

    def close(self) -> None:
        import usb.util  # type: ignore

        with suppress(Exception):
            usb.util.dispose_resources(self._dev)
        if self._reattach:
            self._reattach = False
            try:
                self._dev.attach_kernel_driver(self._interface)
            except Exception as exc:
                logger.debug("Re-attaching kernel driver failed: %s", exc)


class HidapiTransport:
    """Send feature reports through hidapi to one HID collection, opened by path.

    hidapi enumerates every top-level collection separately, which is how the
    lighting collection is addressed where the keyboard exposes several.
    """

    def __init__(self, path: bytes) -> None:
        self._path = path
        self._dev: Any = None

    @property
    def path(self) -> bytes:
        return self._path

    def open(self) -> "HidapiTransport":
        import hid  # type: ignore

        dev = hid.device()
        try:
            dev.open_path(self._path)
        except Exception as exc:
            raise _wrap_usb_error("open", exc) from exc
        self._dev = dev
        return self

    def send_feature_report(self, data: bytes) -> None:
        if self._dev is None:
            raise HidTransportError("HID collection is not open")
        try:
            written = self._dev.send_feature_report(list(bytes(data)))
        except Exception as exc:
            raise _wrap_usb_error("write", exc) from exc
        if written is not None and written < 0:
            raise HidTransportError(f"HID write failed: send_feature_report returned {written}")

    def close(self) -> None:
        dev, self._dev = self._dev, None
        if dev is not None:
            try:
                dev.close()
            except Exception as exc:
                logger.debug("Closing HID collection failed: %s", exc)


def _wrap_usb_error(action: str, exc: Exception) -> HidTransportError:
    if is_permission_denied(exc):
        return HidTransportError(_UDEV_HINT)
    if is_device_disconnected(exc):
        return HidTransportError(f"Keyboard disconnected during {action}: {exc}")
    if is_device_busy(exc):
        return HidTransportError(f"Keyboard is busy during {action}, another program may hold it: {exc}")
    return HidTransportError(f"HID {action} failed: {exc}")
