"""Request bodies for `POST /silenced` and `POST /silenced/clear`."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .expire import Expiration, ExpireAfter
from .resources import ResolvedResource

DEFAULT_CREATOR = "shush"


def current_user() -> str:
    """Creator recorded on silences."""
    return os.getenv("USER") or DEFAULT_CREATOR


@dataclass(frozen=True)
class SilencePayload:
    resource: Optional[ResolvedResource] = None
    check: Optional[str] = None
    expiration: Optional[Expiration] = None

    def to_dict(self, creator: Optional[str] = None) -> Dict[str, Any]:
        """Build the JSON object; absent fields mean "all" to the server."""
        payload: Dict[str, Any] = {"creator": creator or current_user()}
        if self.resource is not None:
            payload["subscription"] = self.resource.wire
        if self.check is not None:
            payload["check"] = self.check

        if isinstance(self.expiration, ExpireAfter):
            payload["expire"] = self.expiration.seconds
        if self.expiration is not None and self.expiration.expire_on_resolve:
            payload["expire_on_resolve"] = True
        return payload
