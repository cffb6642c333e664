"""Turn operator supplied identifiers into resources the Sensu server knows."""

import logging
from typing import Any, Dict, List, Optional, Set

from . import client as api
from .client import SensuClient
from .errors import NotFoundError, SensuError
from .resources import ResolvedResource, ResourceKind, ResourceSpec

logger = logging.getLogger(__name__)


def build_client_directory(clients: Any) -> Dict[str, str]:
    """Map instance_id -> client name; clients missing either field are skipped."""
    directory: Dict[str, str] = {}
    for item in clients if isinstance(clients, list) else []:
        if not isinstance(item, dict):
            continue
        instance_id, name = item.get("instance_id"), item.get("name")
        if isinstance(instance_id, str) and isinstance(name, str):
            directory[instance_id] = name
    return directory


def collect_subscriptions(clients: List[Any]) -> Set[str]:
    """Union of every client's subscriptions."""
    subscriptions: Set[str] = set()
    for item in clients:
        subs = item.get("subscriptions") if isinstance(item, dict) else None
        if isinstance(subs, list):
            subscriptions.update(s for s in subs if isinstance(s, str))
    return subscriptions


def collect_check_names(results: List[Any]) -> Set[str]:
    """Names of every check that has reported a result."""
    names: Set[str] = set()
    for item in results:
        check = item.get("check") if isinstance(item, dict) else None
        name = check.get("name") if isinstance(check, dict) else None
        if isinstance(name, str):
            names.add(name)
    return names


class ResourceResolver:
    """
    Validates resources and checks against live server state.

    Unknown identifiers are warned about and dropped. Failing to list clients
    for fleet node mapping propagates; a client lookup that errors with
    anything but 404 keeps the client, and subscription and check validation
    fail open and keep the input as given.
    """

    def __init__(self, client: SensuClient):
        self.client = client

    def resolve(self, spec: ResourceSpec) -> Optional[List[ResolvedResource]]:
        """Return validated resources in input order, or None for all resources."""
        logger.debug("Resolving %s", spec)
        if spec.kind is ResourceKind.WILDCARD:
            return None
        if spec.kind is ResourceKind.FLEET_NODE:
            return self.resolve_fleet_nodes(spec.identifiers)
        if spec.kind is ResourceKind.CLIENT:
            return [ResolvedResource.client(name) for name in spec.identifiers
                    if self.client_exists(name)]
        return [ResolvedResource.subscription(name)
                for name in self.validate_subscriptions(spec.identifiers)]

    def resolve_fleet_nodes(self, instance_ids: List[str]) -> List[ResolvedResource]:
        directory = build_client_directory(self.client.get(api.CLIENTS))
        resolved = []
        seen = set()
        for instance_id in instance_ids:
            if instance_id in seen:
                logger.warning('Instance ID "%s" was given more than once; skipping repeat',
                               instance_id)
                continue
            seen.add(instance_id)
            name = directory.pop(instance_id, None)
            if name is None:
                logger.warning('Instance ID "%s" is not associated with a Sensu client. '
                               "If it was provisioned recently, wait for it to register "
                               "with Sensu", instance_id)
                continue
            if self.client_exists(name):
                resolved.append(ResolvedResource.client(name))
        return resolved

    def client_exists(self, name: str) -> bool:
        try:
            self.client.get(api.client_endpoint(name))
        except NotFoundError:
            logger.warning('Sensu client "%s" does not exist; skipping', name)
            return False
        except SensuError as e:
            logger.warning('Could not verify Sensu client "%s" (%s); keeping it', name, e)
        return True

    def validate_subscriptions(self, subscriptions: List[str]) -> List[str]:
        try:
            clients = self.client.get(api.CLIENTS)
        except SensuError as e:
            logger.warning("Failed to pull subscriptions from the API (%s); "
                           "proceeding without subscription validation", e)
            return list(subscriptions)
        if not isinstance(clients, list):
            logger.warning("Unexpected response from %s; proceeding without "
                           "subscription validation", api.CLIENTS)
            return list(subscriptions)

        known = collect_subscriptions(clients)
        return self._retain(subscriptions, known, "Subscription")

    def validate_checks(self, checks: List[str]) -> List[str]:
        try:
            results = self.client.get(api.RESULTS)
        except SensuError as e:
            logger.warning("Failed to pull check results from the API (%s); "
                           "proceeding without check validation", e)
            return list(checks)
        if not isinstance(results, list):
            logger.warning("Unexpected response from %s; proceeding without "
                           "check validation", api.RESULTS)
            return list(checks)

        known = collect_check_names(results)
        return self._retain(checks, known, "Check")

    @staticmethod
    def _retain(requested: List[str], known: Set[str], label: str) -> List[str]:
        kept = []
        for name in requested:
            if name in known:
                kept.append(name)
            else:
                logger.warning('%s "%s" not found on the server (possible misspelling); '
                               "skipping", label, name)
        return kept
