"""
Geo lookup collaborators.

The core never resolves locations itself; a resolver is injected. Addresses
that cannot be located publicly (loopback, private ranges, garbage) resolve to
the Unknown location without calling the resolver at all.
"""

import ipaddress
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from shortlinks_app.models import Location, UNKNOWN_LOCATION

logger = logging.getLogger(__name__)


class GeoResolver(ABC):
    """
    Abstract base class for geo resolvers.
    
    Async because real resolvers usually do I/O (a database file or a
    remote service).
    """
    
    @abstractmethod
    async def lookup(self, ip: str) -> Optional[Location]:
        """
        Resolve a public IP address.
        
        Returns:
            Location, or None if the resolver has no data for the address
        """
        pass


class NullGeoResolver(GeoResolver):
    """
    Null Object Pattern - resolver that knows nothing.
    
    Every click gets the Unknown location.
    """
    
    async def lookup(self, ip: str) -> Optional[Location]:
        return None


class StaticGeoResolver(GeoResolver):
    """Resolver backed by a fixed ip -> Location table"""
    
    def __init__(self, table: Dict[str, Location]):
        self.table = dict(table)
    
    async def lookup(self, ip: str) -> Optional[Location]:
        return self.table.get(ip)


def is_locatable(ip: Optional[str]) -> bool:
    """True for well-formed, globally routable addresses."""
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return not (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_unspecified
    )


async def resolve_location(ip: Optional[str], resolver: GeoResolver) -> Location:
    """
    Resolve ``ip`` through ``resolver``, falling back to Unknown.
    
    Lookup failures are logged and never propagate: enrichment must not fail
    a redirect.
    """
    if not is_locatable(ip):
        logger.debug("Local or unparseable IP, using default location: %r", ip)
        return UNKNOWN_LOCATION
    
    try:
        location = await resolver.lookup(ip)
    except Exception:
        logger.exception("Geo lookup failed for %s", ip)
        return UNKNOWN_LOCATION
    
    if location is None:
        logger.debug("No geographical information found for %s", ip)
        return UNKNOWN_LOCATION
    
    return location
