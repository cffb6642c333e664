"""Fetch active silences and filter them by subscription and check patterns."""

import logging
import re
from typing import Any, Dict, List, Optional

from . import client as api
from .client import SensuClient
from .errors import SensuError

MATCH_ALL = ".*"

logger = logging.getLogger(__name__)


def compile_pattern(pattern: Optional[str], label: str) -> re.Pattern:
    """Compile a filter regex, falling back to match-all on bad input."""
    if pattern is None:
        return re.compile(MATCH_ALL)
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.warning("Invalid %s pattern %r (%s); matching everything", label, pattern, e)
        return re.compile(MATCH_ALL)


def field(silence: Dict[str, Any], key: str, default: str) -> str:
    """String field of a silence, or the default when absent or not a string."""
    value = silence.get(key)
    return value if isinstance(value, str) else default


def filter_silences(silences: List[Any], subscription: Optional[str] = None,
                    check: Optional[str] = None) -> List[Dict[str, Any]]:
    """Keep silences whose subscription and check both match, in server order."""
    sub_re = compile_pattern(subscription, "subscription")
    chk_re = compile_pattern(check, "check")
    return [s for s in silences
            if isinstance(s, dict)
            and sub_re.search(field(s, "subscription", "all"))
            and chk_re.search(field(s, "check", "all"))]


def describe_expiration(silence: Dict[str, Any]) -> str:
    """Render the expiry of a silence object."""
    if silence.get("expire_on_resolve") is True:
        return "Expires on resolve"
    expire = silence.get("expire")
    if isinstance(expire, bool) or not isinstance(expire, int) or expire < 0:
        return "Expires never"
    return f"Expires in {expire} seconds"


def format_silences(silences: List[Dict[str, Any]]) -> str:
    """Render silences as the listing text."""
    if not silences:
        return "No active silences"
    entries = [
        f"\tSubscription: {field(s, 'subscription', 'all')}\n"
        f"\tCheck: {field(s, 'check', 'all')}\n"
        f"\t{describe_expiration(s)}\n"
        f"\tCreator: {field(s, 'creator', 'unknown')}"
        for s in silences
    ]
    return "Active silences:\n\n" + "\n\n".join(entries)


def list_silences(client: SensuClient, subscription: Optional[str] = None,
                  check: Optional[str] = None) -> str:
    """GET /silenced and render the matching entries; API errors propagate."""
    silences = client.get(api.SILENCED)
    if silences is None:
        silences = []
    if not isinstance(silences, list):
        raise SensuError(f"Expected a JSON array from {api.SILENCED}", body=repr(silences))
    return format_silences(filter_silences(silences, subscription, check))
