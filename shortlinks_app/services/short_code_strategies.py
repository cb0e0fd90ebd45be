"""
Short code generation strategies for the short link registry.
Uses Strategy Pattern to allow different generation algorithms.
"""

import logging
import random
import string
from abc import ABC, abstractmethod
from typing import Callable, Iterator

from shortlinks_app.errors import ShortCodeGenerationError
from shortlinks_app.validators import RESERVED_SHORTCODES

logger = logging.getLogger(__name__)


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""
    
    max_retries: int = 1
    
    @abstractmethod
    def generate_candidate(self) -> str:
        """
        Produce one candidate code.
        
        Candidates are not guaranteed to be free: the registry decides
        uniqueness when the record is inserted.
        """
        pass
    
    def candidates(self) -> Iterator[str]:
        """
        Yield at most ``max_retries`` candidates, skipping reserved words.
        
        The caller tries each one against the registry and stops at the
        first successful insert.
        """
        for _ in range(self.max_retries):
            candidate = self.generate_candidate()
            if candidate.lower() in RESERVED_SHORTCODES:
                continue
            yield candidate
    
    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """
        Return the first candidate for which ``is_taken`` is false.
        
        ``is_taken`` may also claim the code (e.g. an atomic insert that
        reports failure), so a code grabbed by a concurrent caller just costs
        one attempt.
        
        Raises:
            ShortCodeGenerationError: every candidate was taken
        """
        for attempt, candidate in enumerate(self.candidates(), start=1):
            if not is_taken(candidate):
                return candidate
            logger.debug("Generated shortcode collided on attempt %d: %s", attempt, candidate)
        
        logger.error("Shortcode generation exhausted after %d attempts", self.max_retries)
        raise ShortCodeGenerationError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Uniform random codes over the 62-character alphanumeric alphabet.
    
    Pros: Simple, unpredictable, no shared counter
    Cons: Collisions possible, handled by retrying against the registry
    
    Not cryptographically secure. With the default length of 6 the keyspace
    is 62^6 (about 56.8 billion codes), so retries are rare.
    """
    
    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    
    def __init__(self, length: int = 6, max_retries: int = 256, rng: random.Random = None):
        if length < 1:
            raise ValueError("length must be positive")
        if max_retries < 1:
            raise ValueError("max_retries must be positive")
        self.length = length
        self.max_retries = max_retries
        self._random = rng or random.Random()
    
    def generate_candidate(self) -> str:
        """Generate a random string of the configured length"""
        return ''.join(self._random.choice(self.ALPHABET) for _ in range(self.length))
