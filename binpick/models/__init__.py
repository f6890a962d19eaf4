# binpick/models/__init__.py
from binpick.models.bin_location import BinLocation
from binpick.models.variant_bin import VariantBin

__all__ = ["BinLocation", "VariantBin"]
