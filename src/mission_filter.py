"""Skip rules for scraped fragments that are not missions."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# phrase -> reason; matched as a case-sensitive substring
SKIP_RULES: dict[str, str] = {
    'Use code "iFeral"': "support-a-creator banner",
}


def should_skip(fragment: str, rules: dict[str, str] | None = None) -> bool:
    """Return True if *fragment* matches any skip rule."""
    active = SKIP_RULES if rules is None else rules
    for phrase, reason in active.items():
        if phrase in fragment:
            logger.debug("Skipping fragment (%s): %s", reason, fragment[:80])
            return True
    return False
