#!/usr/bin/env python3
"""
SkillSwap admin client - Main Entry Point

Usage:
    skillswap messages --status pending            # Help & Support inbox
    skillswap reports --type account --status all  # User reports
    skillswap applications --status pending        # Recruitment applications
    skillswap visitors --period weekly --date 2024-05-08
    skillswap reply <id> "Thanks, fixed now"       # Reply to a help message
    skillswap --help                               # Show help
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, Optional

from rich.console import Console
from rich.prompt import Prompt

from skillswap import __version__
from skillswap.api_client import SkillSwapAPIClient
from skillswap.config import ClientConfig
from skillswap.endpoints import ENDPOINTS, REPORT_TYPES
from skillswap.exceptions import SkillSwapError, ValidationError
from skillswap.filters import TimePeriod
from skillswap.logging_config import logger, setup_logging
from skillswap.renderer import ListRenderer, to_json
from skillswap.screens import (
    AdminScreen,
    HelpSupportScreen,
    RecruitmentScreen,
    ReportsScreen,
    open_screen,
)


LIST_COMMANDS = tuple(ENDPOINTS)


def _add_list_arguments(parser: argparse.ArgumentParser, statuses) -> None:
    parser.add_argument("--status", choices=statuses, help="Status filter")
    parser.add_argument("--search", "-q", help="Free-text search (name, email, message)")
    parser.add_argument(
        "--period",
        choices=[p.value for p in TimePeriod],
        help="Date window around --date (default: overall)"
    )
    parser.add_argument("--date", help="Date for --period, YYYY-MM-DD")
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Pages to load, 0 for all (default: 1)"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="skillswap",
        description="SkillSwap Hub admin client - browse and act on admin lists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skillswap messages --status pending --search refund
  skillswap reports --type video --period monthly --date 2024-05-01
  skillswap applications --status pending --pages 0
  skillswap set-status 665f0c... resolved
  skillswap reject 665f0c... "Missing degree certificate"
  skillswap delete-video 665f0c...

Authentication:
  Log in through the web portal and pass the session cookie with --cookie
  or SKILLSWAP_SESSION_COOKIE.
        """
    )

    parser.add_argument(
        "--server-url",
        type=str,
        help="Backend server URL (default: from config, http://localhost:4000)"
    )
    parser.add_argument("--cookie", type=str, help="Admin session cookie value")
    parser.add_argument("--config", type=str, help="Path to config file")
    parser.add_argument(
        "--output-format",
        choices=["text", "json"],
        help="Output format (default: text)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    for name, endpoint in ENDPOINTS.items():
        list_parser = subparsers.add_parser(name, help=f"List {name}")
        _add_list_arguments(list_parser, endpoint.statuses)
        if name == "reports":
            list_parser.add_argument("--type", choices=REPORT_TYPES, default="video", help="Report type tab")

    subparsers.add_parser("stats", help="Show help & support counters")

    reply_parser = subparsers.add_parser("reply", help="Reply to a help message")
    reply_parser.add_argument("id")
    reply_parser.add_argument("text")

    status_parser = subparsers.add_parser("set-status", help="Change a help message status")
    status_parser.add_argument("id")
    status_parser.add_argument("status", choices=HelpSupportScreen.message_statuses)

    resolve_parser = subparsers.add_parser("resolve", help="Mark a report resolved")
    resolve_parser.add_argument("id")

    approve_parser = subparsers.add_parser("approve", help="Approve a recruitment application")
    approve_parser.add_argument("id")
    approve_parser.add_argument("--employee-id", required=True)
    approve_parser.add_argument("--password", help="Password for the new employee (prompted when omitted)")

    reject_parser = subparsers.add_parser("reject", help="Reject a recruitment application")
    reject_parser.add_argument("id")
    reject_parser.add_argument("reason")

    delete_video_parser = subparsers.add_parser("delete-video", help="Delete a reported video and resolve the report")
    delete_video_parser.add_argument("id", help="Report ID")

    delete_account_parser = subparsers.add_parser(
        "delete-account", help="Delete a reported user account and resolve the report"
    )
    delete_account_parser.add_argument("id", help="Report ID")

    return parser


def build_config(args: argparse.Namespace) -> ClientConfig:
    config = ClientConfig.load_default(args.config)
    if args.server_url:
        config.api_base_url = args.server_url
    if args.cookie:
        config.session_cookie = args.cookie
    if args.output_format:
        config.output_format = args.output_format
    if args.verbose:
        config.verbose = True
    return config


def filters_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    partial: Dict[str, Any] = {}
    if args.status:
        partial["status"] = args.status
    if args.search:
        partial["search_query"] = args.search
    if args.period:
        partial["time_period"] = args.period
    if args.date:
        partial["selected_date"] = args.date
    if getattr(args, "type", None):
        partial["extra"] = {"type": args.type}
    return partial


def show(screen: AdminScreen, config: ClientConfig, console: Console) -> int:
    controller = screen.controller
    if config.output_format == "json":
        print(to_json(controller))
    else:
        renderer = ListRenderer(console)
        if isinstance(screen, HelpSupportScreen):
            renderer.render_stats(screen.stats)
        renderer.render(controller)
    return 1 if controller.error else 0


async def run_list(name: str, args: argparse.Namespace, api: SkillSwapAPIClient,
                   config: ClientConfig, console: Console) -> int:
    screen = open_screen(name, api)
    partial = filters_from_args(args)
    if partial:
        await screen.apply_filter(**partial)
    else:
        await screen.load()

    await screen.controller.load_all(max_pages=args.pages or None)
    return show(screen, config, console)


async def run_action(args: argparse.Namespace, api: SkillSwapAPIClient,
                     config: ClientConfig, console: Console) -> int:
    screen: Optional[AdminScreen] = None

    if args.command == "stats":
        help_screen = HelpSupportScreen(api)
        await help_screen.fetch_stats(keep_previous=False)
        if config.output_format == "json":
            print(json.dumps(help_screen.stats))
        else:
            ListRenderer(console).render_stats(help_screen.stats)
        return 0

    if args.command in ("reply", "set-status"):
        screen = HelpSupportScreen(api)
        if args.command == "reply":
            await screen.reply(args.id, args.text)
            console.print("[green]Reply sent successfully![/green]")
        else:
            await screen.update_status(args.id, args.status)
            console.print(f"[green]Status updated to {args.status}[/green]")
    elif args.command == "resolve":
        screen = ReportsScreen(api)
        await screen.resolve(args.id)
        console.print("[green]Report resolved[/green]")
    elif args.command in ("delete-video", "delete-account"):
        screen = ReportsScreen(api)
        if args.command == "delete-video":
            report = await screen.find_report(args.id, "video")
            await screen.delete_video(report)
            console.print("[green]Video deleted and report resolved[/green]")
        else:
            report = await screen.find_report(args.id, "account")
            await screen.delete_account(report)
            console.print("[green]User account deleted and report resolved[/green]")
    elif args.command in ("approve", "reject"):
        screen = RecruitmentScreen(api)
        if args.command == "approve":
            password = args.password or Prompt.ask("Password for the new employee", password=True)
            await screen.approve(args.id, args.employee_id, password)
            console.print("[green]Application approved and employee created successfully![/green]")
        else:
            await screen.reject(args.id, args.reason)
            console.print("[green]Application rejected successfully[/green]")

    return show(screen, config, console)


async def run(args: argparse.Namespace, config: ClientConfig) -> int:
    console = Console()
    try:
        async with SkillSwapAPIClient(config) as api:
            if args.command in LIST_COMMANDS:
                return await run_list(args.command, args, api, config, console)
            return await run_action(args, api, config, console)
    except ValidationError as e:
        console.print(f"[yellow]{e.message}[/yellow]")
        return 2
    except SkillSwapError as e:
        console.print(f"[red]{e.message}[/red]")
        return 1


def main(argv=None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    config = build_config(args)
    setup_logging(config)
    logger.debug(f"Using backend {config.api_base_url}")

    try:
        return asyncio.run(run(args, config))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
