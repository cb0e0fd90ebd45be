import logging
from typing import Any, List, Optional

from shortlinks_app.errors import (
    ExpiredError,
    InvalidShortcodeError,
    InvalidUrlError,
    InvalidValidityError,
    NotFoundError,
    ShortcodeTakenError,
)
from shortlinks_app.models import ShortenResult, StatsView, UrlRecord, UrlSummary
from shortlinks_app.services.analytics import AnalyticsRecorder
from shortlinks_app.services.clock import Clock, SystemClock
from shortlinks_app.services.expiration import (
    DEFAULT_VALIDITY_MINUTES,
    compute_expiry,
    is_expired,
)
from shortlinks_app.services.short_code_strategies import (
    RandomShortCodeStrategy,
    ShortCodeStrategy,
)
from shortlinks_app.storage.strategies import RegistryStore
from shortlinks_app.validators import (
    validate_shortcode,
    validate_url,
    validate_validity_minutes,
)

logger = logging.getLogger(__name__)


class URLService:
    """
    Short link service with injected registry and collaborators.

    This follows the Dependency Injection pattern:
    - The registry, generator, recorder and clock are passed in
    - Easy to test (inject a FixedClock or a fresh registry)
    - No hidden global state: whoever builds the service owns the registry

    Errors are raised as ShortenerError subclasses; the HTTP layer maps them
    to status codes.
    """

    def __init__(
        self,
        registry: RegistryStore,
        short_code_strategy: Optional[ShortCodeStrategy] = None,
        analytics: Optional[AnalyticsRecorder] = None,
        clock: Optional[Clock] = None,
        base_url: str = "http://localhost:5000",
        default_validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    ):
        """
        Initialize the service with its dependencies.

        Args:
            registry: Store holding records and clicks
            short_code_strategy: Generator for codes when none is requested
            analytics: Click recorder (built on the same registry and clock if omitted)
            clock: Time source for creation, expiry and clicks
            base_url: Prefix for the short links handed back to callers
            default_validity_minutes: Validity applied when the caller gives none
        """
        self.registry = registry
        self.clock = clock or SystemClock()
        self.short_code_strategy = short_code_strategy or RandomShortCodeStrategy()
        self.analytics = analytics or AnalyticsRecorder(registry, clock=self.clock)
        self.base_url = base_url.rstrip("/")
        self.default_validity_minutes = default_validity_minutes

    def build_short_link(self, shortcode: str) -> str:
        return f"{self.base_url}/{shortcode}"

    async def shorten(
        self,
        url: Any,
        validity_minutes: Any = None,
        shortcode: Optional[str] = None,
        created_by: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> ShortenResult:
        """Create a new short link

        Process:
        1. Validate the URL, the validity period and the requested code
        2. Compute creation and expiry instants from the clock
        3. Insert atomically (custom code) or retry random codes until an
           insert succeeds

        An empty requested shortcode counts as no shortcode.

        Raises:
            InvalidUrlError, InvalidValidityError, InvalidShortcodeError,
            ShortcodeTakenError, ShortCodeGenerationError
        """
        if not validate_url(url):
            raise InvalidUrlError()

        if not validate_validity_minutes(validity_minutes):
            raise InvalidValidityError()

        if shortcode and not validate_shortcode(shortcode):
            raise InvalidShortcodeError()

        created_at = self.clock.now()
        if validity_minutes is None:
            validity_minutes = self.default_validity_minutes
        expires_at = compute_expiry(created_at, int(validity_minutes))

        def make_record(code: str) -> UrlRecord:
            return UrlRecord(
                shortcode=code,
                original_url=url,
                created_at=created_at,
                expires_at=expires_at,
                created_by=created_by,
                creator_user_agent=user_agent,
            )

        if shortcode:
            if not self.registry.create(shortcode, make_record(shortcode)):
                logger.info("Shortcode already taken: %s", shortcode)
                raise ShortcodeTakenError()
            record_code = shortcode
        else:
            record_code = self._create_with_generated_code(make_record)

        logger.info(
            "Short URL created: %s -> %s (expires %s)",
            record_code, url, expires_at.isoformat(),
        )
        return ShortenResult(
            shortcode=record_code,
            short_link=self.build_short_link(record_code),
            expiry=expires_at,
        )

    def _create_with_generated_code(self, make_record) -> str:
        """Insert under the first random code the registry accepts"""

        def claim_failed(candidate: str) -> bool:
            return not self.registry.create(candidate, make_record(candidate))

        return self.short_code_strategy.generate(claim_failed)

    async def resolve(
        self,
        shortcode: str,
        source_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
    ) -> str:
        """
        Get the original URL for a redirect and record the click.

        Flow:
        1. Look the record up
        2. Refuse it if it is past its expiry
        3. Record the click; if the record was swept in the meantime the
           append fails and the link is reported as not found

        Raises:
            NotFoundError, ExpiredError
        """
        record = self.registry.get(shortcode)
        if record is None:
            logger.info("Redirect failed, shortcode not found: %s", shortcode)
            raise NotFoundError()

        if is_expired(record.expires_at, self.clock.now()):
            logger.info(
                "Redirect failed, shortcode expired: %s (expired %s)",
                shortcode, record.expires_at.isoformat(),
            )
            raise ExpiredError()

        recorded = await self.analytics.record(
            shortcode,
            source_ip=source_ip,
            user_agent=user_agent,
            referrer=referrer,
        )
        if not recorded:
            logger.info("Redirect failed, shortcode removed during redirect: %s", shortcode)
            raise NotFoundError()

        logger.info("Redirecting %s -> %s", shortcode, record.original_url)
        return record.original_url

    async def get_stats(self, shortcode: str) -> StatsView:
        """Get a record with its clicks

        Expired records still answer, flagged with ``is_expired``.

        Raises:
            NotFoundError
        """
        stored = self.registry.get_stats(shortcode)
        if stored is None:
            raise NotFoundError()

        record = stored.record
        expired = is_expired(record.expires_at, self.clock.now())
        if expired:
            logger.info("Stats retrieved for expired URL: %s", shortcode)

        return StatsView(
            shortcode=record.shortcode,
            original_url=record.original_url,
            created_at=record.created_at,
            expires_at=record.expires_at,
            created_by=record.created_by,
            creator_user_agent=record.creator_user_agent,
            total_clicks=stored.total_clicks,
            is_expired=expired,
            clicks=list(stored.clicks),
        )

    async def list_urls(self) -> List[UrlSummary]:
        """Summaries of every record still held, expired or not"""
        return self.registry.list_all()

    async def sweep_expired(self) -> int:
        """Remove expired records and their clicks as of the clock's now"""
        removed = self.registry.sweep_expired(self.clock.now())
        logger.info("Expired URLs cleaned: %d", removed)
        return removed
