# binpick/api/routers/bins_schemas.py
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Camel(BaseModel):
    # wire format is camelCase (scanner client), python side snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==========================
# Request models
# ==========================


class BinResolveIn(_Camel):
    # blank / missing is a domain error (missing_bin), not a 422
    bin_code: Optional[str] = Field(None, description="scanned bin label")


class BinAssignIn(_Camel):
    variant_gid: Optional[str] = Field(None, description="gid://shopify/ProductVariant/...")
    bin_code: Optional[str] = Field(None, description="scanned bin label")


class VariantLookupIn(_Camel):
    barcode: Optional[str] = Field(None, description="scanned product barcode")


# ==========================
# Response models
# ==========================


class BinOut(_Camel):
    id: int
    code: str

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class BinResolveOut(_Camel):
    ok: bool = True
    bin: BinOut


class BinAssignOut(_Camel):
    ok: bool = True
    status: Literal["unchanged", "created", "updated"]
    bin_code: str
    previous_bin_code: Optional[str] = None


class VariantOut(_Camel):
    id: str
    barcode: Optional[str] = None
    sku: Optional[str] = None
    title: Optional[str] = None
    product_title: Optional[str] = None
    image_url: Optional[str] = None
    image_alt: Optional[str] = None


class VariantLookupOut(_Camel):
    ok: bool = True
    shop: str
    variant: VariantOut
