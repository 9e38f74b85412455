"""Listing extractors keyed by organization name."""

from __future__ import annotations

from .base import MAX_CANDIDATES, ExtractionContext, SiteExtractor, TextPattern
from .generic import GenericExtractor
from .interactive import SeadlinnngExtractor
from .sites import (
    ChocoproExtractor,
    DianaExtractor,
    EvolutionExtractor,
    GokigenproExtractor,
    IceRibbonExtractor,
    JtoExtractor,
    MarigoldExtractor,
    MarvelousExtractor,
    OzAcademyExtractor,
    PurejExtractor,
    SendaigirlsExtractor,
    StardomExtractor,
    TjpwExtractor,
    WaveExtractor,
)

GENERIC_EXTRACTOR = GenericExtractor()

EXTRACTORS: dict[str, SiteExtractor] = {
    extractor.name: extractor
    for extractor in (
        StardomExtractor(),
        TjpwExtractor(),
        IceRibbonExtractor(),
        WaveExtractor(),
        ChocoproExtractor(),
        SendaigirlsExtractor(),
        DianaExtractor(),
        OzAcademyExtractor(),
        SeadlinnngExtractor(),
        MarigoldExtractor(),
        MarvelousExtractor(),
        PurejExtractor(),
        GokigenproExtractor(),
        JtoExtractor(),
        EvolutionExtractor(),
    )
}


def get_extractor(name: str) -> SiteExtractor:
    """Dedicated extractor for ``name``, or the selector-driven default."""
    return EXTRACTORS.get(name, GENERIC_EXTRACTOR)


__all__ = [
    "EXTRACTORS",
    "ExtractionContext",
    "GENERIC_EXTRACTOR",
    "GenericExtractor",
    "MAX_CANDIDATES",
    "SiteExtractor",
    "TextPattern",
    "get_extractor",
]
