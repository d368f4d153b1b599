from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Any, Final, Iterable, Optional, Sequence

from legion_rgb.core.config.paths import env_flag
from legion_rgb.core.utils.exceptions import DeviceNotFound, HidTransportError

from ..base import DeviceIdentifier, ProbeResult
from .device import Keyboard
from .transport import HidapiTransport, UsbHidTransport

logger = logging.getLogger(__name__)

VENDOR_ID: Final[int] = 0x048D
USAGE_PAGE: Final[int] = 0xFF89
USAGE: Final[int] = 0x00CC

KNOWN_DEVICES: Final[tuple[DeviceIdentifier, ...]] = (
    DeviceIdentifier(VENDOR_ID, 0xC985, USAGE_PAGE, USAGE, "2023"),
    DeviceIdentifier(VENDOR_ID, 0xC984, USAGE_PAGE, USAGE, "2023"),
    DeviceIdentifier(VENDOR_ID, 0xC975, USAGE_PAGE, USAGE, "2022"),
    DeviceIdentifier(VENDOR_ID, 0xC973, USAGE_PAGE, USAGE, "2022 IdeaPad"),
    DeviceIdentifier(VENDOR_ID, 0xC965, USAGE_PAGE, USAGE, "2021"),
    DeviceIdentifier(VENDOR_ID, 0xC963, USAGE_PAGE, USAGE, "2021 IdeaPad"),
    DeviceIdentifier(VENDOR_ID, 0xC955, USAGE_PAGE, USAGE, "2020"),
)


def match_usage_by_default() -> bool:
    """Whether discovery compares usage page/usage as well as VID/PID.

    Windows exposes one HID collection per usage, so the lighting collection has
    to be told apart from the keyboard's other collections there; those are
    enumerated through hidapi. Elsewhere the controller is addressed per USB
    interface with pyusb and VID/PID is enough.
    """

    return sys.platform == "win32"


@dataclass(frozen=True)
class Candidate:
    """A USB device, or one HID collection on it, seen during discovery.

    *handle* is the pyusb device for VID/PID discovery and the hidapi path for
    usage-aware discovery.
    """

    vendor_id: int
    product_id: int
    interface: int = 0
    usage_page: Optional[int] = None
    usage: Optional[int] = None
    handle: Any = None

    def key(self, *, with_usage: bool) -> tuple:
        if with_usage:
            return (self.vendor_id, self.product_id, self.usage_page, self.usage)
        return (self.vendor_id, self.product_id)


def match_candidate(
    candidates: Iterable[Candidate],
    *,
    known: Sequence[DeviceIdentifier] = KNOWN_DEVICES,
    with_usage: Optional[bool] = None,
) -> Optional[tuple[Candidate, DeviceIdentifier]]:
    """Return the first candidate whose identifier tuple is in *known*."""

    if with_usage is None:
        with_usage = match_usage_by_default()

    table = {ident.key(with_usage=with_usage): ident for ident in known}
    for cand in candidates:
        ident = table.get(cand.key(with_usage=with_usage))
        if ident is not None:
            return cand, ident
    return None


def iter_usb_candidates():
    """Yield a Candidate for every known product from the vendor, via pyusb."""

    import usb.core  # type: ignore

    product_ids = {ident.product_id for ident in KNOWN_DEVICES}
    for dev in usb.core.find(find_all=True, idVendor=VENDOR_ID):
        pid = int(dev.idProduct)
        if pid in product_ids:
            yield Candidate(vendor_id=int(dev.idVendor), product_id=pid, interface=0, handle=dev)


def iter_hid_candidates():
    """Yield a Candidate per HID top-level collection from the vendor, via hidapi."""

    import hid  # type: ignore

    for info in hid.enumerate(VENDOR_ID, 0):
        yield Candidate(
            vendor_id=int(info["vendor_id"]),
            product_id=int(info["product_id"]),
            interface=max(int(info.get("interface_number", 0) or 0), 0),
            usage_page=info.get("usage_page"),
            usage=info.get("usage"),
            handle=info["path"],
        )


class LegionBackend:
    name: str = "legion"

    def __init__(self, *, with_usage: Optional[bool] = None) -> None:
        self._with_usage = match_usage_by_default() if with_usage is None else bool(with_usage)

    def find(self) -> Optional[tuple[Candidate, DeviceIdentifier]]:
        # Respect the global USB-scan disable flag (keeps unit tests off real hardware).
        if env_flag("LEGION_RGB_DISABLE_USB_SCAN"):
            return None
        candidates = iter_hid_candidates() if self._with_usage else iter_usb_candidates()
        return match_candidate(candidates, with_usage=self._with_usage)

    def probe(self) -> ProbeResult:
        """Best-effort, non-opening check for a supported controller."""

        if env_flag("LEGION_RGB_DISABLE_USB_SCAN"):
            return ProbeResult(available=False, reason="usb scan disabled")

        try:
            found = self.find()
        except Exception as exc:
            return ProbeResult(available=False, reason=f"usb scan unavailable: {exc}")

        if found is None:
            return ProbeResult(available=False, reason="no matching usb device")

        cand, ident = found
        return ProbeResult(
            available=True,
            reason=f"usb device present (0x{cand.vendor_id:04x}:0x{cand.product_id:04x}, {ident.label})",
            identifiers={"usb_vid": f"0x{cand.vendor_id:04x}", "usb_pid": f"0x{cand.product_id:04x}"},
        )

    def get_keyboard(self, *, stop_event: Optional[threading.Event] = None) -> Keyboard:
        """Open the first matching controller and push the initial state.

        Raises DeviceNotFound when nothing matches and HidTransportError when
        opening or the first write fails.
        """

        try:
            found = self.find()
        except HidTransportError:
            raise
        except Exception as exc:
            raise HidTransportError(f"HID enumeration failed: {exc}") from exc

        if found is None:
            raise DeviceNotFound("No supported Legion keyboard controller found")

        cand, ident = found
        logger.info(
            "Using Legion keyboard 0x%04x:0x%04x (%s) interface %d",
            cand.vendor_id,
            cand.product_id,
            ident.label,
            cand.interface,
        )
        if self._with_usage:
            transport = HidapiTransport(cand.handle).open()
        else:
            transport = UsbHidTransport(cand.handle, interface=cand.interface).open()
        kb = Keyboard(transport, stop_event=stop_event)
        kb.refresh()
        return kb


def get_keyboard(*, stop_event: Optional[threading.Event] = None) -> Keyboard:
    return LegionBackend().get_keyboard(stop_event=stop_event)
