"""
Click analytics recorder.

Turns raw redirect provenance into an enriched ClickEvent and appends it to
the registry.
"""

import logging
import uuid
from typing import Callable, Optional

from shortlinks_app.models import ClickEvent, Location, UNKNOWN_LOCATION
from shortlinks_app.services.clock import Clock, SystemClock
from shortlinks_app.services.geo import GeoResolver, NullGeoResolver, resolve_location
from shortlinks_app.services.user_agent import UserAgentClassifier
from shortlinks_app.storage.strategies import RegistryStore

logger = logging.getLogger(__name__)


def new_click_id() -> str:
    """Random 128-bit identifier"""
    return str(uuid.uuid4())


class AnalyticsRecorder:
    """
    Builds click events and hands them to the registry.
    
    Collaborators are injected so tests can pin time, ids and locations.
    """
    
    def __init__(
        self,
        registry: RegistryStore,
        geo_resolver: Optional[GeoResolver] = None,
        clock: Optional[Clock] = None,
        id_factory: Callable[[], str] = new_click_id,
        classifier: Optional[UserAgentClassifier] = None,
    ):
        self.registry = registry
        self.geo_resolver = geo_resolver or NullGeoResolver()
        self.clock = clock or SystemClock()
        self.id_factory = id_factory
        self.classifier = classifier or UserAgentClassifier()
    
    def build_event(
        self,
        source_ip: Optional[str],
        user_agent: Optional[str],
        referrer: Optional[str],
        location: Optional[Location] = None,
    ) -> ClickEvent:
        """Assemble a ClickEvent from already-resolved inputs."""
        browser, os_name = self.classifier.classify(user_agent)
        return ClickEvent(
            id=self.id_factory(),
            timestamp=self.clock.now(),
            source_ip=source_ip,
            user_agent=user_agent,
            referrer=referrer,
            browser=browser,
            os=os_name,
            location=location or UNKNOWN_LOCATION,
        )
    
    async def record(
        self,
        shortcode: str,
        source_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
    ) -> bool:
        """
        Resolve the location, build the event and append it.
        
        Returns:
            False if the record disappeared before the click was appended
        """
        location = await resolve_location(source_ip, self.geo_resolver)
        event = self.build_event(source_ip, user_agent, referrer, location)
        
        recorded = self.registry.record_click(shortcode, event)
        if recorded:
            logger.debug(
                "Click recorded for %s (browser=%s, os=%s, country=%s)",
                shortcode, event.browser, event.os, event.location.country,
            )
        return recorded
