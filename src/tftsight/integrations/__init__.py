"""
TFTSight Integrations - collaborators outside the tracker core.

- names: opaque id -> display name (CommunityDragon tables + fallback)
- metatft: tracker snapshot byte source (MetaTFT profile API + storage)
"""

from tftsight.integrations.metatft import AppMatch, MetaTFTClient
from tftsight.integrations.names import NameLookup, NameResolver, load_cdragon_resolver

__all__ = [
    "AppMatch",
    "MetaTFTClient",
    "NameLookup",
    "NameResolver",
    "load_cdragon_resolver",
]
