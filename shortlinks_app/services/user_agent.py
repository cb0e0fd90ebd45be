"""
User agent classification.

A deliberately simple substring heuristic: the first entry in each ordered
table that appears in the user agent wins. The order matters (Chrome user
agents also mention Safari, Android ones mention Linux) and is kept stable so
stored analytics stay comparable over time.
"""

from typing import Optional, Tuple

UNKNOWN = "Unknown"

BROWSER_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("Chrome", "Chrome"),
    ("Firefox", "Firefox"),
    ("Safari", "Safari"),
    ("Edge", "Edge"),
    ("Opera", "Opera"),
)

OS_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("Windows", "Windows"),
    ("Mac", "macOS"),
    ("Linux", "Linux"),
    ("Android", "Android"),
    ("iOS", "iOS"),
)


def _first_match(user_agent: Optional[str], patterns: Tuple[Tuple[str, str], ...]) -> str:
    if not user_agent:
        return UNKNOWN
    for needle, label in patterns:
        if needle in user_agent:
            return label
    return UNKNOWN


def classify_browser(user_agent: Optional[str]) -> str:
    """Browser family for a user agent, or "Unknown"."""
    return _first_match(user_agent, BROWSER_PATTERNS)


def classify_os(user_agent: Optional[str]) -> str:
    """Operating system for a user agent, or "Unknown"."""
    return _first_match(user_agent, OS_PATTERNS)


class UserAgentClassifier:
    """Default classifier used by the analytics recorder"""
    
    def classify(self, user_agent: Optional[str]) -> Tuple[str, str]:
        """Return ``(browser, os)`` for a user agent."""
        return classify_browser(user_agent), classify_os(user_agent)
