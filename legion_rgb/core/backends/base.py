from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class HidTransport(Protocol):
    """Minimal surface the driver needs from an opened HID device."""

    def send_feature_report(self, data: bytes) -> None: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class DeviceIdentifier:
    """One known controller revision.

    `usage_page`/`usage` are only compared where the platform exposes them.
    """

    vendor_id: int
    product_id: int
    usage_page: int
    usage: int
    label: str = ""

    def key(self, *, with_usage: bool) -> tuple[int, ...]:
        if with_usage:
            return (self.vendor_id, self.product_id, self.usage_page, self.usage)
        return (self.vendor_id, self.product_id)


@dataclass(frozen=True)
class ProbeResult:
    """Result of probing for a supported controller on this system.

    `available` is True only when a known controller was seen on the bus.
    """

    available: bool
    reason: str = ""
    identifiers: dict[str, str] = field(default_factory=dict)
