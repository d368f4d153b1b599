from __future__ import annotations

import sys
from types import SimpleNamespace

import pytest

import legion_rgb.core.backends.legion.backend as backend_mod
from legion_rgb.core.backends.legion.backend import Candidate, LegionBackend, match_candidate
from legion_rgb.core.backends.legion.transport import HidapiTransport, UsbHidTransport
from legion_rgb.core.utils.exceptions import DeviceNotFound, HidTransportError


class FakeUsbDevice:
    def __init__(self, *, kernel_driver_active: bool = True, fail: Exception | None = None) -> None:
        self.idVendor = 0x048D
        self.idProduct = 0xC965
        self.kernel_driver_active = kernel_driver_active
        self.detached: list[int] = []
        self.transfers: list[tuple] = []
        self.fail = fail

    def is_kernel_driver_active(self, interface: int) -> bool:
        return self.kernel_driver_active

    def detach_kernel_driver(self, interface: int) -> None:
        self.detached.append(interface)
        self.kernel_driver_active = False

    def attach_kernel_driver(self, interface: int) -> None:
        self.kernel_driver_active = True

    def ctrl_transfer(self, *args):
        if self.fail is not None:
            raise self.fail
        self.transfers.append(args)
        return len(args[4])


class FakeHidDevice:
    """hid.device stand-in recording feature reports per opened path."""

    def __init__(self, owner: "FakeHidModule") -> None:
        self._owner = owner
        self.path: bytes | None = None
        self.closed = False

    def open_path(self, path: bytes) -> None:
        if self._owner.open_error is not None:
            raise self._owner.open_error
        self.path = path
        self._owner.opened.append(self)

    def send_feature_report(self, data) -> int:
        self._owner.reports.append((self.path, bytes(data)))
        return len(data)

    def close(self) -> None:
        self.closed = True


class FakeHidModule:
    """Stands in for the `hid` module: one enumerate entry per top-level collection."""

    def __init__(self, collections, *, open_error: Exception | None = None) -> None:
        self._collections = list(collections)
        self.open_error = open_error
        self.opened: list[FakeHidDevice] = []
        self.reports: list[tuple] = []

    def enumerate(self, vendor_id: int = 0, product_id: int = 0):
        return [c for c in self._collections if vendor_id in (0, c["vendor_id"])]

    def device(self) -> FakeHidDevice:
        return FakeHidDevice(self)


def _collection(path: bytes, usage_page: int, usage: int, *, pid: int = 0xC965, interface: int = 0) -> dict:
    return {
        "path": path,
        "vendor_id": 0x048D,
        "product_id": pid,
        "usage_page": usage_page,
        "usage": usage,
        "interface_number": interface,
    }


class TestMatching:
    def test_vid_pid_match_without_usage(self) -> None:
        found = match_candidate([Candidate(0x048D, 0xC965)], with_usage=False)

        assert found is not None
        assert found[1].product_id == 0xC965
        assert found[1].label == "2021"

    def test_unknown_product_is_ignored(self) -> None:
        assert match_candidate([Candidate(0x048D, 0x6004)], with_usage=False) is None

    def test_first_matching_candidate_wins(self) -> None:
        cands = [Candidate(0x1234, 0x0001), Candidate(0x048D, 0xC975), Candidate(0x048D, 0xC985)]

        found = match_candidate(cands, with_usage=False)

        assert found is not None
        assert found[0].product_id == 0xC975

    def test_usage_must_match_when_compared(self) -> None:
        keyboard_collection = Candidate(0x048D, 0xC985, interface=0, usage_page=0x0001, usage=0x0006)
        lighting_collection = Candidate(0x048D, 0xC985, interface=1, usage_page=0xFF89, usage=0x00CC)

        assert match_candidate([keyboard_collection], with_usage=True) is None
        found = match_candidate([keyboard_collection, lighting_collection], with_usage=True)
        assert found is not None
        assert found[0].interface == 1



class TestBackend:
    def test_probe_respects_scan_disable(self, monkeypatch) -> None:
        monkeypatch.setenv("LEGION_RGB_DISABLE_USB_SCAN", "1")

        result = LegionBackend().probe()

        assert result.available is False
        assert "disabled" in result.reason

    def test_get_keyboard_without_device_raises(self, monkeypatch) -> None:
        monkeypatch.delenv("LEGION_RGB_DISABLE_USB_SCAN", raising=False)
        monkeypatch.setattr(backend_mod, "iter_usb_candidates", lambda: iter(()))

        with pytest.raises(DeviceNotFound):
            LegionBackend(with_usage=False).get_keyboard()

    def test_get_keyboard_opens_and_writes_initial_state(self, monkeypatch) -> None:
        dev = FakeUsbDevice()
        monkeypatch.delenv("LEGION_RGB_DISABLE_USB_SCAN", raising=False)
        monkeypatch.setattr(
            backend_mod,
            "iter_usb_candidates",
            lambda: iter([Candidate(0x048D, 0xC965, handle=dev)]),
        )

        kb = LegionBackend(with_usage=False).get_keyboard()

        assert dev.detached == [0]
        assert len(dev.transfers) == 1
        req_type, request, w_value, w_index, data, _timeout = dev.transfers[0]
        assert (req_type, request, w_value, w_index) == (0x21, 0x09, 0x03CC, 0)
        assert data[:5] == bytes([0xCC, 0x16, 0x01, 0x01, 0x01])
        assert kb.rgb_values == [0] * 12

        probe = LegionBackend(with_usage=False).probe()
        assert probe.available is True
        assert probe.identifiers["usb_pid"] == "0xc965"


class TestTransport:
    def test_permission_failure_carries_udev_hint(self) -> None:
        dev = FakeUsbDevice(fail=OSError(13, "Access denied (insufficient permissions)"))
        transport = UsbHidTransport(dev)

        with pytest.raises(HidTransportError) as info:
            transport.send_feature_report(bytes([0xCC] + [0] * 32))
        assert "udev" in str(info.value)
        assert isinstance(info.value.__cause__, OSError)

    def test_disconnect_is_reported(self) -> None:
        dev = FakeUsbDevice(fail=OSError(19, "No such device (it may have been disconnected)"))

        with pytest.raises(HidTransportError) as info:
            UsbHidTransport(dev).send_feature_report(bytes([0xCC] + [0] * 32))
        assert "disconnected" in str(info.value)

    def test_busy_device_is_reported(self) -> None:
        dev = FakeUsbDevice(fail=OSError(16, "Resource busy"))

        with pytest.raises(HidTransportError) as info:
            UsbHidTransport(dev).send_feature_report(bytes([0xCC] + [0] * 32))
        assert "busy" in str(info.value)

    def test_open_skips_detach_when_no_kernel_driver(self) -> None:
        dev = FakeUsbDevice(kernel_driver_active=False)

        UsbHidTransport(dev).open()

        assert dev.detached == []


class TestHidapiDiscovery:
    def test_lighting_collection_after_another_vendor_collection(self, monkeypatch) -> None:
        fake = FakeHidModule(
            [
                _collection(b"\\\\?\\hid#col01", 0xFF89, 0x0007),
                _collection(b"\\\\?\\hid#col02", 0xFF89, 0x00CC),
                _collection(b"\\\\?\\hid#col03", 0x0001, 0x0006),
            ]
        )
        monkeypatch.setitem(sys.modules, "hid", fake)
        monkeypatch.delenv("LEGION_RGB_DISABLE_USB_SCAN", raising=False)

        found = LegionBackend(with_usage=True).find()

        assert found is not None
        cand, ident = found
        assert cand.handle == b"\\\\?\\hid#col02"
        assert (cand.usage_page, cand.usage) == (0xFF89, 0x00CC)
        assert ident.label == "2021"

    def test_get_keyboard_writes_through_hidapi(self, monkeypatch) -> None:
        fake = FakeHidModule(
            [
                _collection(b"col-kbd", 0x0001, 0x0006),
                _collection(b"col-rgb", 0xFF89, 0x00CC, interface=1),
            ]
        )
        monkeypatch.setitem(sys.modules, "hid", fake)
        monkeypatch.delenv("LEGION_RGB_DISABLE_USB_SCAN", raising=False)

        kb = LegionBackend(with_usage=True).get_keyboard()
        kb.close()

        assert [d.path for d in fake.opened] == [b"col-rgb"]
        path, data = fake.reports[0]
        assert path == b"col-rgb"
        assert len(data) == 33
        assert data[:5] == bytes([0xCC, 0x16, 0x01, 0x01, 0x01])
        assert fake.opened[0].closed is True

    def test_only_other_collections_is_not_found(self, monkeypatch) -> None:
        fake = FakeHidModule([_collection(b"col-kbd", 0x0001, 0x0006)])
        monkeypatch.setitem(sys.modules, "hid", fake)
        monkeypatch.delenv("LEGION_RGB_DISABLE_USB_SCAN", raising=False)

        with pytest.raises(DeviceNotFound):
            LegionBackend(with_usage=True).get_keyboard()

    def test_open_failure_is_wrapped(self, monkeypatch) -> None:
        fake = FakeHidModule([], open_error=OSError("open failed"))
        monkeypatch.setitem(sys.modules, "hid", fake)

        with pytest.raises(HidTransportError) as info:
            HidapiTransport(b"col-rgb").open()
        assert "open failed" in str(info.value)

    def test_negative_write_result_raises(self) -> None:
        transport = HidapiTransport(b"col-rgb")
        transport._dev = SimpleNamespace(send_feature_report=lambda data: -1, close=lambda: None)

        with pytest.raises(HidTransportError):
            transport.send_feature_report(bytes([0xCC] + [0] * 32))

    def test_write_before_open_raises(self) -> None:
        with pytest.raises(HidTransportError):
            HidapiTransport(b"col-rgb").send_feature_report(bytes([0xCC] + [0] * 32))
