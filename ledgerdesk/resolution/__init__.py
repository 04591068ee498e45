"""Classification and currency/side resolution package."""

from ledgerdesk.resolution.classifier import classify
from ledgerdesk.resolution.instruments import resolve_instrument
from ledgerdesk.resolution.lookup import LookupMaps, build_lookup_maps
from ledgerdesk.resolution.sides import ResolvedSides, resolve_sides

__all__ = [
    "LookupMaps",
    "ResolvedSides",
    "build_lookup_maps",
    "classify",
    "resolve_instrument",
    "resolve_sides",
]
