"""Expand resources x checks into individual silence or clear requests."""

import itertools
import json
import logging
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from . import client as api
from .client import SensuClient
from .errors import BatchAborted, NoTargetsError, SensuError
from .expire import Expiration
from .payload import SilencePayload
from .resources import ResolvedResource

logger = logging.getLogger(__name__)

Target = Tuple[Optional[ResolvedResource], Optional[str]]


class Action(Enum):
    SILENCE = api.SILENCED
    CLEAR = api.SILENCED_CLEAR


def expand_targets(resources: Optional[Sequence[ResolvedResource]],
                   checks: Optional[Sequence[str]]) -> List[Target]:
    """
    Pair every resource with every check, resources outermost.

    None on an axis means "all"; an empty list means the operator named
    targets on that axis and none of them survived validation.
    """
    if resources is None and checks is None:
        raise NoTargetsError("No targets specified")
    if (resources is not None and not resources) or (checks is not None and not checks):
        raise NoTargetsError("No valid targets remain after validation")

    if resources is not None and checks is not None:
        return list(itertools.product(resources, checks))
    if resources is not None:
        return [(r, None) for r in resources]
    return [(None, c) for c in checks]


def describe(action: Action, resource: Optional[ResolvedResource], check: Optional[str],
             expiration: Optional[Expiration]) -> str:
    """Human readable status line for one request."""
    chk = f"check {check}" if check is not None else "all checks"
    res = f"resource {resource}" if resource is not None else "all resources"
    if action is Action.SILENCE:
        return f"Silencing {chk} on {res} and will {expiration}"
    return f"Clearing silences on {chk} on {res}"


class BatchRunner:
    """Issue one POST per target, in order, stopping at the first failure."""

    def __init__(self, client: SensuClient, dry_run: bool = False):
        self.client = client
        self.dry_run = dry_run

    def payloads(self, action: Action, targets: List[Target],
                 expiration: Optional[Expiration]) -> Iterator[SilencePayload]:
        for resource, check in targets:
            yield SilencePayload(
                resource=resource,
                check=check,
                expiration=expiration if action is Action.SILENCE else None,
            )

    def execute(self, action: Action, resources: Optional[Sequence[ResolvedResource]],
                checks: Optional[Sequence[str]],
                expiration: Optional[Expiration] = None) -> int:
        """Run the batch and return the number of requests issued."""
        targets = expand_targets(resources, checks)
        total = len(targets)
        for issued, payload in enumerate(self.payloads(action, targets, expiration)):
            logger.info(describe(action, payload.resource, payload.check, payload.expiration))
            if self.dry_run:
                logger.info("[dry-run] Would POST %s with %s", action.value,
                            json.dumps(payload.to_dict()))
                continue
            try:
                self.client.post(action.value, payload)
            except SensuError as e:
                raise BatchAborted(issued, total, e) from e
        return total
