"""
Display names for opaque game identifiers.

The overlay reports units and items by API name ("TFT16_Kindred",
"TFT_Item_GuinsoosRageblade"). NameResolver maps them to display names from
tables loaded once at process start and read-only afterwards. Unknown ids
go through a deterministic fallback that strips the id prefix.

Example:
    >>> resolver = NameResolver()
    >>> resolver.resolve("champion", "TFT16_Kindred")
    'Kindred'
    >>> resolver.resolve("item", "TFT_Item_GuinsoosRageblade")
    'Guinsoos Rageblade'
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Literal, Protocol

from tftsight.core.constants import CHAMPION_ID_PATTERN, ITEM_ID_PATTERN, TRAIT_ID_PATTERN

logger = logging.getLogger(__name__)

NameKind = Literal["champion", "item", "trait"]

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


class NameLookup(Protocol):
    """What the tracker pipeline needs from a name source."""

    def resolve(self, kind: NameKind, opaque_id: str) -> str: ...


def fallback_champion_name(api_name: str) -> str:
    """TFT16_Kindred -> Kindred"""
    match = CHAMPION_ID_PATTERN.search(api_name)
    return match.group(1) if match else api_name


def fallback_trait_name(api_name: str) -> str:
    match = TRAIT_ID_PATTERN.search(api_name)
    return match.group(1) if match else api_name


def fallback_item_name(api_name: str) -> str:
    """TFT_Item_GuinsoosRageblade -> Guinsoos Rageblade"""
    match = ITEM_ID_PATTERN.search(api_name)
    if match:
        return _CAMEL_BOUNDARY.sub(r" \1", match.group(1)).strip()
    return api_name


_FALLBACKS = {
    "champion": fallback_champion_name,
    "item": fallback_item_name,
    "trait": fallback_trait_name,
}


class NameResolver:
    """
    Lookup tables for champion, item and trait names.

    Keys are matched case-insensitively. The tables are populated through
    the constructor or load_tables() and are not changed afterwards.
    """

    def __init__(
        self,
        champions: Mapping[str, str] | None = None,
        items: Mapping[str, str] | None = None,
        traits: Mapping[str, str] | None = None,
    ):
        self._tables: dict[str, dict[str, str]] = {
            "champion": _lower_keys(champions),
            "item": _lower_keys(items),
            "trait": _lower_keys(traits),
        }

    @property
    def is_loaded(self) -> bool:
        return any(self._tables.values())

    def table_sizes(self) -> dict[str, int]:
        return {kind: len(table) for kind, table in self._tables.items()}

    def resolve(self, kind: NameKind, opaque_id: str) -> str:
        """
        Display name for an identifier.

        Args:
            kind: "champion", "item" or "trait"
            opaque_id: API name as reported by the overlay

        Returns:
            Display name from the tables, or the fallback name
        """
        if not opaque_id:
            return opaque_id
        table = self._tables.get(kind)
        if table is None:
            raise ValueError(f"Unknown name kind: {kind}")
        name = table.get(opaque_id.lower())
        if name is not None:
            return name
        return _FALLBACKS[kind](opaque_id)

    def champion(self, opaque_id: str) -> str:
        return self.resolve("champion", opaque_id)

    def item(self, opaque_id: str) -> str:
        return self.resolve("item", opaque_id)

    @classmethod
    def from_cdragon(cls, data: Mapping[str, Any]) -> NameResolver:
        """
        Build a resolver from a CommunityDragon TFT export.

        Champions and traits come from the latest set (highest set key);
        items are global.
        """
        champions: dict[str, str] = {}
        traits: dict[str, str] = {}
        items: dict[str, str] = {}

        sets = data.get("sets")
        if isinstance(sets, Mapping) and sets:
            latest_key = max(sets, key=_set_number)
            set_data = sets[latest_key] or {}
            for champ in set_data.get("champions") or []:
                if champ.get("apiName") and champ.get("name"):
                    champions[champ["apiName"]] = champ["name"]
            for trait in set_data.get("traits") or []:
                if trait.get("apiName") and trait.get("name"):
                    traits[trait["apiName"]] = trait["name"]

        for item in data.get("items") or []:
            if item.get("apiName") and item.get("name"):
                items[item["apiName"]] = item["name"]

        return cls(champions=champions, items=items, traits=traits)


def load_cdragon_resolver(url: str, session=None, timeout: float = 15.0) -> NameResolver:
    """
    Download the CommunityDragon export and build a NameResolver.

    Any failure is logged and yields a resolver with empty tables, so every
    name goes through the fallback.

    Args:
        url: CommunityDragon TFT json URL
        session: requests-compatible session (a new requests.Session when None)
        timeout: HTTP timeout in seconds
    """
    if session is None:
        import requests

        session = requests.Session()

    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        resolver = NameResolver.from_cdragon(response.json())
    except Exception as e:
        logger.error(f"Failed to load CommunityDragon names, using fallback names: {e}")
        return NameResolver()

    sizes = resolver.table_sizes()
    logger.info(
        f"CommunityDragon loaded: {sizes['champion']} champions, "
        f"{sizes['item']} items, {sizes['trait']} traits"
    )
    return resolver


def _lower_keys(table: Mapping[str, str] | None) -> dict[str, str]:
    if not table:
        return {}
    return {str(key).lower(): str(value) for key, value in table.items()}


def _set_number(key: Any) -> int:
    """Numeric set key ("16" -> 16); non-numeric keys sort first."""
    text = str(key)
    return int(text) if text.isdigit() else -1
