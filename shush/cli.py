"""
Create, clear, or list silences on a Sensu server.

Features:
- Silence mode (default) silences checks on resources for a TTL
- `-r/--remove` clears the silences silence mode would create
- `-l/--list` lists active silences, `-s`/`-c` are then regular expressions
- Resources are AWS instance IDs (`-n`), Sensu client names (`-i`) or
  subscriptions (`-s`); at most one kind per invocation
- Instance IDs are mapped to Sensu clients through the clients' `instance_id`
  field; clients, subscriptions and checks are validated against the server
- `creator` is taken from the USER environment variable
- `--dry-run` resolves targets but prints requests instead of sending them
- YAML config supports:
    api (string, base URL of the Sensu API, ${VAR} references expanded)
    timeout (number, seconds per request)
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .batch import Action, BatchRunner
from .client import SensuClient
from .config import DEFAULT_CONFIG_LOCATIONS, check_timeout, load_config
from .errors import ConfigurationError, NoTargetsError, ShushError
from .expire import parse_expiration
from .listing import list_silences
from .resolver import ResourceResolver
from .resources import ResourceKind, ResourceSpec, split_csv

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stdout so warnings interleave with progress."""
    logging.basicConfig(
        stream=sys.stdout,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the shush argument parser."""
    parser = argparse.ArgumentParser(prog="shush", description="Sensu silencing tool")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    targets = parser.add_mutually_exclusive_group()
    targets.add_argument("-n", "--aws-nodes", metavar="NODE1,NODE2,...",
                         help="Comma separated list of instance IDs")
    targets.add_argument("-i", "--client-ids", metavar="ID1,ID2,...",
                         help="Comma separated list of client IDs")
    targets.add_argument("-s", "--subscriptions", metavar="SUB1,SUB2,...",
                         help="Comma separated list of subscriptions (a regex with -l)")
    parser.add_argument("-c", "--checks", metavar="CHK1,CHK2,...",
                        help="Comma separated list of checks (a regex with -l)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-r", "--remove", action="store_true", help="Remove specified silences")
    mode.add_argument("-l", "--list", action="store_true", help="List silences")

    parser.add_argument("-e", "--expire", metavar="EXPIRATION_TTL",
                        help='Time until silence expires (2h, 1h30m, 01:30:00, 5400) '
                             'or "none" for unlimited TTL (default: 2h)')
    parser.add_argument("-o", "--expire-on-resolve", action="store_true",
                        help="On resolution of alert, clear silence")
    parser.add_argument("-f", "--config-file", metavar="FILE_PATH",
                        help=f"YAML config path (default search: "
                             f"{', '.join(DEFAULT_CONFIG_LOCATIONS)})")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each API request")
    parser.add_argument("--dry-run", action="store_true",
                        help="Resolve targets but do not create or clear silences")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resource_spec(args: argparse.Namespace) -> ResourceSpec:
    """Build the resource spec from whichever of -n, -i or -s was given."""
    if args.aws_nodes is not None:
        return ResourceSpec.from_csv(ResourceKind.FLEET_NODE, args.aws_nodes)
    if args.client_ids is not None:
        return ResourceSpec.from_csv(ResourceKind.CLIENT, args.client_ids)
    if args.subscriptions is not None:
        return ResourceSpec.from_csv(ResourceKind.SUBSCRIPTION, args.subscriptions)
    return ResourceSpec.wildcard()


def check_list(args: argparse.Namespace) -> Optional[List[str]]:
    """Split -c into check names; None means all checks."""
    if args.checks is None:
        return None
    checks = split_csv(args.checks)
    if not checks:
        raise ConfigurationError("-c/--checks was given without any check names")
    return checks


def run(args: argparse.Namespace) -> None:
    """Execute one invocation; errors propagate to main()."""
    if args.expire is not None and args.expire_on_resolve:
        raise ConfigurationError("-e/--expire and -o/--expire-on-resolve are mutually exclusive")
    if args.list and (args.aws_nodes is not None or args.client_ids is not None):
        raise ConfigurationError("-l/--list only filters on -s/--subscriptions and -c/--checks")

    cfg = load_config(args.config_file)
    timeout = check_timeout(args.timeout) if args.timeout is not None else cfg["timeout"]

    with SensuClient(cfg["api"], timeout=timeout) as client:
        if args.list:
            print(list_silences(client, args.subscriptions, args.checks))
            return

        action = Action.CLEAR if args.remove else Action.SILENCE
        spec = resource_spec(args)
        checks = check_list(args)
        expiration = None
        if action is Action.SILENCE:
            expiration = parse_expiration(args.expire, args.expire_on_resolve)
        if spec.kind is ResourceKind.WILDCARD and checks is None:
            raise NoTargetsError("No targets specified")

        resolver = ResourceResolver(client)
        resources = resolver.resolve(spec)
        if checks is not None:
            checks = resolver.validate_checks(checks)

        runner = BatchRunner(client, dry_run=args.dry_run)
        issued = runner.execute(action, resources, checks, expiration)
        logger.info("%s %d request(s)", "Prepared" if args.dry_run else "Sent", issued)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        run(args)
    except ShushError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
