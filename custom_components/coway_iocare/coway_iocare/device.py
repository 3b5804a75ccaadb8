"""Device identity supplied by configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceIdentity:
    """Parameters every IoCare request is made with.

    Attributes:
        barcode: Vendor device identifier (`devId` / `barcode`).
        brand_code: Vendor brand code (`dvcBrandCd`).
        type_code: Vendor device type code (`dvcTypeCd`).
        product_name: Vendor product name (`prodName`).
        nickname: User-facing name.
        model: Device model, when known.
    """

    barcode: str
    brand_code: str
    type_code: str
    product_name: str
    nickname: str = ""
    model: str | None = None

    @property
    def display_name(self) -> str:
        return self.nickname.strip() or f"Coway {self.barcode}"
