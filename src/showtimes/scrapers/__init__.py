"""Theater sources and the registry that maps theater ids to them."""

from showtimes.scrapers.base import BaseSource
from showtimes.scrapers.cinemagic import CinemagicSource
from showtimes.scrapers.clinton_street import ClintonStreetSource
from showtimes.scrapers.models import RawCandidate
from showtimes.scrapers.registry import SourceRegistry


def build_default_registry() -> SourceRegistry:
    """Registry holding every source this package ships."""
    return SourceRegistry([CinemagicSource(), ClintonStreetSource()])


__all__ = [
    "BaseSource",
    "CinemagicSource",
    "ClintonStreetSource",
    "RawCandidate",
    "SourceRegistry",
    "build_default_registry",
]
