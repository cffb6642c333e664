"""Silence expiration policies and the parser for the `-e/--expire` flag."""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from .errors import ConfigurationError

DEFAULT_EXPIRE_SECONDS = 2 * 60 * 60

UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60, "s": 1}
UNIT_TOKEN = re.compile(r"(?P<num>[0-9]+)(?P<unit>[dhms])")
DIGITS = re.compile(r"[0-9]+")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoExpiration:
    expire_on_resolve: bool = False

    def __str__(self) -> str:
        if self.expire_on_resolve:
            return "not expire until resolution"
        return "never expire"


@dataclass(frozen=True)
class ExpireAfter:
    seconds: int
    expire_on_resolve: bool = False

    def __str__(self) -> str:
        if self.expire_on_resolve:
            return f"expire in {self.seconds} seconds or on resolution"
        return f"expire in {self.seconds} seconds"


Expiration = Union[NoExpiration, ExpireAfter]


def _parse_clock(expire: str) -> int:
    fields = expire.split(":")
    if len(fields) > 3:
        raise ConfigurationError(f"Expiration {expire!r} has more than three clock fields")
    total = 0
    for multiplier, field in zip((1, 60, 3600), reversed(fields)):
        if not DIGITS.fullmatch(field):
            raise ConfigurationError(f"Expiration {expire!r} has a non-numeric field {field!r}")
        total += int(field) * multiplier
    return total


def _parse_units(expire: str) -> int:
    return sum(int(m.group("num")) * UNIT_SECONDS[m.group("unit")]
               for m in UNIT_TOKEN.finditer(expire))


def parse_expiration(expire: Optional[str], expire_on_resolve: bool = False) -> Expiration:
    """
    Turn the `-e` value into an expiration policy.

    Accepted forms: ``none``, ``HH:MM:SS`` (leading fields optional),
    ``1d2h3m4s`` and a plain number of seconds. Without ``-e`` the silence
    lasts two hours, or until resolution when ``-o`` is given.
    """
    if expire is None:
        if expire_on_resolve:
            return NoExpiration(True)
        return ExpireAfter(DEFAULT_EXPIRE_SECONDS, False)

    expire = expire.strip()
    if expire == "none":
        return NoExpiration(expire_on_resolve)
    if ":" in expire:
        return ExpireAfter(_parse_clock(expire), expire_on_resolve)
    if any(unit in expire for unit in UNIT_SECONDS):
        return ExpireAfter(_parse_units(expire), expire_on_resolve)
    if DIGITS.fullmatch(expire):
        return ExpireAfter(int(expire), expire_on_resolve)

    logger.warning("Could not parse expiration %r; defaulting to %d seconds",
                   expire, DEFAULT_EXPIRE_SECONDS)
    return ExpireAfter(DEFAULT_EXPIRE_SECONDS, expire_on_resolve)
