#!/usr/bin/env python3
# ================================================================================
# Setup Automation CLI
# ================================================================================
#
# Command line entry point for applying Salesforce Setup configuration through
# UI automation.
#
# Commands:
#   - apply:   apply a JSON/YAML batch file
#   - session: configure session settings
#   - sharing: configure organization-wide defaults for one object
#   - flow:    activate or deactivate a Flow
#
# Usage:
#   sf-ui-setup apply -f setup.yaml --continue-on-error
#   sf-ui-setup session --timeout 120 --lock-ip
#   sf-ui-setup flow --flow-name Case_Assignment --activate
#
# The org is given with --instance-url / --access-token or the SF_INSTANCE_URL
# and SF_ACCESS_TOKEN environment variables. Exit code is 0 only when every
# operation was applied.
#
# ================================================================================

import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from loguru import logger

from .common import init_logger
from .errors import ConfigurationFileInvalidError
from .framework.browser_manager import BrowserOptions, OrgTarget
from .orchestration.batch_loader import parse_operation
from .orchestration.operations import (
    EXTERNAL_ACCESS_LEVELS,
    INTERNAL_ACCESS_LEVELS,
    ConfigurationBatch,
    OperationKind,
)
from .orchestration.orchestrator import ConfigurationOrchestrator, resolve_batch
from .orchestration.result_aggregator import BatchResult, render_summary


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--instance-url",
        default=os.getenv("SF_INSTANCE_URL"),
        help="Org instance URL (default: $SF_INSTANCE_URL)"
    )
    common.add_argument(
        "--access-token",
        default=os.getenv("SF_ACCESS_TOKEN"),
        help="Pre-obtained access token (default: $SF_ACCESS_TOKEN)"
    )
    common.add_argument(
        "--no-headless",
        action="store_true",
        help="Run browser in visible mode (for debugging)"
    )
    common.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON"
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    parser = argparse.ArgumentParser(
        prog="sf-ui-setup",
        description="Apply Salesforce Setup configuration through UI automation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Apply a batch file, keep going after failures
  sf-ui-setup apply -f config/setup.yaml --continue-on-error

  # Shorten the session timeout and lock sessions to IP
  sf-ui-setup session --timeout 30 --lock-ip

  # Make Accounts private
  sf-ui-setup sharing --object Account --internal Private --no-hierarchy

  # Deactivate a Flow with a visible browser
  sf-ui-setup flow --flow-name Case_Assignment --deactivate --no-headless
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    apply_parser = subparsers.add_parser(
        "apply", parents=[common], help="Apply multiple settings from a JSON/YAML file"
    )
    apply_parser.add_argument(
        "--config-file", "-f",
        required=True,
        help="Path to the batch configuration file"
    )
    apply_parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Continue with remaining settings if one fails"
    )

    session_parser = subparsers.add_parser(
        "session", parents=[common], help="Configure session settings"
    )
    session_parser.add_argument("--timeout", "-t", type=int, help="Session timeout in minutes")
    session_parser.add_argument(
        "--force-logout", action=argparse.BooleanOptionalAction, default=None,
        help="Force logout on session timeout"
    )
    session_parser.add_argument(
        "--lock-ip", action=argparse.BooleanOptionalAction, default=None,
        help="Lock sessions to the IP address from which they originated"
    )
    session_parser.add_argument(
        "--http-only", action=argparse.BooleanOptionalAction, default=None,
        help="Require HttpOnly attribute on session cookies"
    )
    session_parser.add_argument(
        "--secure-connections", action=argparse.BooleanOptionalAction, default=None,
        help="Require secure connections (HTTPS)"
    )

    sharing_parser = subparsers.add_parser(
        "sharing", parents=[common], help="Configure organization-wide defaults for an object"
    )
    sharing_parser.add_argument("--object", required=True, help="API name of the object to configure")
    sharing_parser.add_argument("--internal", choices=INTERNAL_ACCESS_LEVELS, help="Internal access level")
    sharing_parser.add_argument("--external", choices=EXTERNAL_ACCESS_LEVELS, help="External access level")
    sharing_parser.add_argument(
        "--hierarchy", action=argparse.BooleanOptionalAction, default=None,
        help='Grant Access Using Hierarchies'
    )

    flow_parser = subparsers.add_parser(
        "flow", parents=[common], help="Activate or deactivate a Flow"
    )
    flow_parser.add_argument("--flow-name", required=True, help="API name of the Flow")
    state = flow_parser.add_mutually_exclusive_group(required=True)
    state.add_argument("--activate", dest="activate", action="store_true", help="Activate the Flow")
    state.add_argument("--deactivate", dest="activate", action="store_false", help="Deactivate the Flow")

    return parser


def batch_from_args(args: argparse.Namespace) -> ConfigurationBatch:
    """Build the batch a command applies (validated before any browser work)."""
    if args.command == "apply":
        return resolve_batch(args.config_file)

    if args.command == "session":
        operation = parse_operation(OperationKind.SESSION_SETTINGS, {
            "sessionTimeout": args.timeout,
            "forceLogoutOnSessionTimeout": args.force_logout,
            "lockSessionsToIp": args.lock_ip,
            "requireHttpOnly": args.http_only,
            "requireSecureConnections": args.secure_connections,
        })
    elif args.command == "sharing":
        operation = parse_operation(OperationKind.SHARING_SETTINGS, {
            "objectName": args.object,
            "internalAccess": args.internal,
            "externalAccess": args.external,
            "grantAccessUsingHierarchies": args.hierarchy,
        })
    elif args.command == "flow":
        operation = parse_operation(OperationKind.FLOW_ACTIVATION, {
            "flowApiName": args.flow_name,
            "activate": args.activate,
        })
    else:
        raise ConfigurationFileInvalidError(f"Unknown command: {args.command}")

    return ConfigurationBatch.of(operation)


def _report(result: BatchResult, as_json: bool, error: Optional[BaseException] = None) -> None:
    if as_json:
        payload = result.to_dict()
        if error is not None:
            payload["error"] = str(error)
        print(json.dumps(payload, indent=2))
        return
    logger.info(render_summary(result))


async def _run(args: argparse.Namespace) -> int:
    target = OrgTarget(instance_url=args.instance_url, access_token=args.access_token)

    try:
        batch = batch_from_args(args)
    except ConfigurationFileInvalidError as e:
        logger.error(f"Invalid configuration: {e}")
        _report(BatchResult(), args.json, e)
        return 1

    orchestrator = ConfigurationOrchestrator(
        target,
        options=BrowserOptions.from_config(headless=False if args.no_headless else None),
    )
    continue_on_error = getattr(args, "continue_on_error", False)

    try:
        result = await orchestrator.run(batch, continue_on_error=continue_on_error)
    except Exception as e:
        logger.error(f"Configuration aborted: {e or type(e).__name__}")
        _report(orchestrator.result, args.json, e)
        return 1

    _report(result, args.json)
    if result.success:
        logger.info(f"✅ {result.message}")
        return 0
    logger.warning(f"⚠️ {result.message}")
    return 1


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the command and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    init_logger(level="DEBUG" if args.verbose else None)
    return asyncio.run(_run(args))


def main():
    """Main entry point."""
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
