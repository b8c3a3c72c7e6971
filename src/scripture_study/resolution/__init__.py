"""Entity-link resolution for scripture_study.

Submodules:
- linker: verse uid → LinkedEntitySet, dispatching on the closed category set
"""

from scripture_study.resolution.linker import (
    EntityLinkResolver,
    LinkSource,
    category_fetchers,
    link_matches_category,
)

__all__ = [
    "EntityLinkResolver",
    "LinkSource",
    "category_fetchers",
    "link_matches_category",
]
