"""Directory service - Provider search for the directory and map views"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Profile, Service
from ...shared.validators import has_map_coordinates
from ..catalog.repository import CatalogRepository
from ..profiles.repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass
class DirectoryFilters:
    """
    Directory query filters. Filters are ANDed together, the values inside
    ``services`` and ``location_types`` are ORed. Empty filters are inactive.
    """

    search: Optional[str] = None
    services: Optional[list[str]] = None
    location_types: Optional[list[str]] = None


@dataclass
class DirectoryEntry:
    profile: Profile
    services: list[Service]


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def matches_search(entry: DirectoryEntry, term: str) -> bool:
    """Case-insensitive substring match on username, bio, location or any service"""
    term = term.lower()
    profile = entry.profile
    if _contains(profile.username, term) or _contains(profile.bio, term) or _contains(profile.location, term):
        return True
    return any(
        _contains(service.name, term) or _contains(service.description, term)
        for service in entry.services
    )


def matches_services(entry: DirectoryEntry, wanted: list[str]) -> bool:
    wanted = [name.lower() for name in wanted]
    return any(
        _contains(service.name, name) for service in entry.services for name in wanted
    )


def matches_location_types(entry: DirectoryEntry, wanted: list[str]) -> bool:
    location_type = entry.profile.location_type
    return location_type is not None and location_type in wanted


def matches(entry: DirectoryEntry, filters: DirectoryFilters) -> bool:
    search = (filters.search or "").strip()
    if search and not matches_search(entry, search):
        return False
    if filters.services and not matches_services(entry, filters.services):
        return False
    if filters.location_types and not matches_location_types(entry, filters.location_types):
        return False
    return True


def is_mappable(entry: DirectoryEntry) -> bool:
    """Fixed-location providers with usable coordinates"""
    profile = entry.profile
    if profile.location_type == "mobile":
        return False
    return has_map_coordinates(profile.latitude, profile.longitude)


class DirectoryService:
    """Service layer for the public provider directory"""

    def __init__(self, db: Session):
        self.db = db

    def _candidates(self) -> list[DirectoryEntry]:
        providers = ProfileRepository.get_providers(self.db)
        services = CatalogRepository.get_services_by_providers(self.db, [p.id for p in providers])
        return [DirectoryEntry(profile=p, services=services.get(p.id, [])) for p in providers]

    def list_providers(self, filters: DirectoryFilters) -> list[DirectoryEntry]:
        entries = [entry for entry in self._candidates() if matches(entry, filters)]
        logger.debug(f"🔎 Directory query {filters} matched {len(entries)} provider(s)")
        return entries

    def map_providers(self, filters: DirectoryFilters) -> list[DirectoryEntry]:
        return [entry for entry in self.list_providers(filters) if is_mappable(entry)]
