"""
CLI entry point for siren-nav.

Usage:
    python -m siren_nav https://api.example.com/ --follow orders --follow latest
    python -m siren_nav https://api.example.com/ --follow-each item --accept application/json
    python -m siren_nav --profile navigations.yml --name first-order
"""

import argparse
import asyncio
import json
import logging
import sys

import structlog

from siren_nav.core.errors import ConfigError, SirenNavError, TransportError

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging (to stderr, stdout carries the result)."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


class StepAction(argparse.Action):
    """Collect step options into one list, keeping command-line order."""

    def __init__(self, option_strings, dest, kind=None, **kwargs):
        self.kind = kind
        super().__init__(option_strings, "steps", **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        steps = getattr(namespace, "steps", None) or []
        steps.append((self.kind, values))
        setattr(namespace, "steps", steps)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="siren-nav",
        description="Navigate a Siren hypermedia API by relation names",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Follow two relations and print the resulting entity
  python -m siren_nav https://api.example.com/ --follow orders --follow latest

  # Fan out over every item of a collection
  python -m siren_nav https://api.example.com/orders --follow-each item

  # Authenticate, prefer Siren, choose the second match
  python -m siren_nav https://api.example.com/ --auth "Bearer $TOKEN" \\
      --accept application/vnd.siren+json --follow order --pick 1

  # Run a navigation defined in a YAML profile
  python -m siren_nav --profile navigations.yml --name first-order
        """,
    )

    parser.add_argument("url", nargs="?", help="Absolute entry point URL")

    steps = parser.add_argument_group("steps (applied in command-line order)")
    steps.add_argument("--follow", action=StepAction, kind="follow", metavar="REL",
                       help="Follow a relation that must match once (see --pick)")
    steps.add_argument("--follow-each", action=StepAction, kind="follow_each", metavar="REL",
                       help="Follow every match of a relation")
    steps.add_argument("--follow-location", action=StepAction, kind="follow_location", nargs=0,
                       help="Request the current URL and move to its Location header")
    steps.add_argument("--header", action=StepAction, kind="header", metavar="NAME=VALUE",
                       help="Set a request header")
    steps.add_argument("--accept", action=StepAction, kind="accept", metavar="TYPE",
                       help="Prepend a media type to the Accept header")
    steps.add_argument("--content-type", action=StepAction, kind="content_type", metavar="TYPE",
                       help="Set the Content-Type header")
    steps.add_argument("--auth", action=StepAction, kind="auth", metavar="'SCHEME TOKEN'",
                       help="Set the Authorization header")
    steps.add_argument("--pick", action=StepAction, kind="pick", type=int, metavar="N",
                       help="Choose the N-th match (0-based) of the preceding --follow")

    parser.add_argument(
        "--profile",
        type=str,
        help="Path to a YAML file of navigation profiles",
    )

    parser.add_argument(
        "--name",
        type=str,
        help="Navigation to run from --profile",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for production)",
    )

    parser.add_argument(
        "--rate-limit",
        type=float,
        default=None,
        help="Requests per second per domain (default: unlimited)",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args(argv)
    if not hasattr(args, "steps") or args.steps is None:
        args.steps = []
    return args


def profile_from_args(args):
    """Build a NavigationProfile from parsed arguments."""
    from .config.loader import load_profile
    from .config.profile import NavigationProfile, StepSpec

    if args.profile:
        if not args.name:
            raise ConfigError("--profile requires --name")
        profile = load_profile(args.profile, args.name)
    else:
        if not args.url:
            raise ConfigError("A URL or --profile is required")
        profile = NavigationProfile(name="cli", url=args.url)

    if args.url and args.profile:
        profile.url = args.url

    for kind, value in args.steps:
        if kind == "pick":
            if not profile.steps or profile.steps[-1].kind != "follow":
                raise ConfigError("--pick must come right after --follow")
            profile.steps[-1].pick = value
        elif kind == "header":
            name, sep, header_value = value.partition("=")
            if not sep:
                raise ConfigError(f"--header expects NAME=VALUE, got: {value}")
            profile.steps.extend(StepSpec.from_dict({"header": {name: header_value}}))
        else:
            profile.steps.extend(StepSpec.from_dict({kind: value if value != [] else True}))

    return profile


async def main_async(args):
    """Async main function."""
    from .config.profile import build_navigation
    from .core.http_client import HttpClient
    from .navigator import SirenNavEach

    logger = structlog.get_logger(__name__)

    profile = profile_from_args(args)

    logger.info(
        "starting_navigation",
        name=profile.name,
        url=profile.url,
        steps=len(profile.steps),
    )

    async with HttpClient(
        requests_per_second=args.rate_limit,
        timeout=args.timeout,
    ) as client:
        nav = build_navigation(profile, client=client)
        if isinstance(nav, SirenNavEach):
            entities = await nav.as_siren()
            result = [e.to_dict() for e in entities]
        else:
            result = (await nav.as_siren()).to_dict()

        logger.info("navigation_complete", requests=client.request_count)

    return result


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"siren-nav {__version__}")
        sys.exit(0)

    setup_logging(args.log_level, args.json_logs)

    try:
        result = asyncio.run(main_async(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except (SirenNavError, TransportError) as e:
        logger = structlog.get_logger(__name__)
        logger.error("navigation_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)
    except Exception as e:
        logger = structlog.get_logger(__name__)
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
    sys.exit(0)


if __name__ == "__main__":
    main()
