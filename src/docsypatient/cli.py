#!/usr/bin/env python3
"""
Command line front end for the patient client.

Usage examples:
    docsy-patient otp-request 9876543210
    docsy-patient otp-verify 9876543210 1234
    docsy-patient profiles
    docsy-patient use-profile P-102
    docsy-patient list appointments --pages 2
    docsy-patient seo --dist client/dist
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .application.otp_entry import OtpEntry
from .application.profile_switcher import ProfileSwitcher
from .core.config import get_settings
from .core.container import Container, build_container
from .core.exceptions import AuthError, DocsyPatientException
from .core.structured_logger import configure_logging
from .domain.enums.resource import ResourceType, is_cancellable
from .domain.errors import DomainError
from .seo.html_pages import generate_pages

logger = logging.getLogger("docsypatient.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_AUTH = 2


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


async def cmd_otp_request(container: Container, args: argparse.Namespace) -> int:
    await container.auth_client.request_otp(args.mobile)
    print(f"OTP sent to {args.mobile}")
    return EXIT_OK


async def cmd_otp_verify(container: Container, args: argparse.Namespace) -> int:
    entry = OtpEntry(lambda code: container.auth_client.verify_otp(args.mobile, code))
    if len(args.otp) != entry.length or not args.otp.isdigit():
        print(f"OTP must have {entry.length} digits")
        return EXIT_FAILURE
    result = await entry.set_text(args.otp)
    if result is None:
        print(f"OTP must have {entry.length} digits")
        return EXIT_FAILURE
    if not result.get("token"):
        print("Invalid OTP")
        return EXIT_AUTH
    boot = await container.session_store.bootstrap_profiles()
    print(f"Logged in. {len(boot.profiles)} patient profile(s) available.")
    if boot.default_profile is not None:
        print(f"Active profile: {boot.default_profile.label}")
    else:
        print("No active profile; choose one with 'use-profile'.")
    return EXIT_OK


async def cmd_profiles(container: Container, args: argparse.Namespace) -> int:
    store = container.session_store
    if args.refresh:
        boot = await store.bootstrap_profiles()
        profiles, active = boot.profiles, boot.default_profile
    else:
        profiles, active = await ProfileSwitcher(store).load()
    if not profiles:
        print("No patient profiles linked to this account")
        return EXIT_OK
    for profile in profiles:
        marker = "*" if active is not None and profile.id == active.id else " "
        print(f"{marker} {profile.id:<12} {profile.label}")
    return EXIT_OK


async def cmd_use_profile(container: Container, args: argparse.Namespace) -> int:
    switcher = ProfileSwitcher(container.session_store)
    profile = await switcher.find(args.profile)
    if profile is None:
        print(f"No stored profile matches '{args.profile}'")
        return EXIT_FAILURE
    await switcher.select(profile)
    print(f"Active profile: {profile.label}")
    return EXIT_OK


async def cmd_list(container: Container, args: argparse.Namespace) -> int:
    resource = ResourceType(args.resource)
    if await container.session_store.get_active_profile() is None:
        print("No active profile; choose one with 'use-profile'.")
        return EXIT_FAILURE

    loader = container.create_loader(resource)
    await loader.mount()
    pages_loaded = 1
    while pages_loaded < args.pages and loader.state.has_more:
        if not await loader.on_end_reached():
            break
        pages_loaded += 1
    loader.unmount()

    _print_json(loader.items)
    print(
        f"# {len(loader.items)} {resource.value}, "
        f"page {loader.state.current_page}/{loader.state.total_pages}",
        file=sys.stderr,
    )
    return EXIT_OK


async def cmd_show(container: Container, args: argparse.Namespace) -> int:
    item = await container.api.get_resource(ResourceType(args.resource), args.id)
    _print_json(item)
    return EXIT_OK


async def cmd_cancel(container: Container, args: argparse.Namespace) -> int:
    appointment = await container.api.get_appointment(args.id)
    if not is_cancellable(appointment if isinstance(appointment, dict) else {}):
        print(f"Appointment {args.id} cannot be cancelled")
        return EXIT_FAILURE
    await container.api.cancel_appointment(args.id)
    print(f"Appointment {args.id} cancelled")
    return EXIT_OK


async def cmd_status(container: Container, args: argparse.Namespace) -> int:
    snapshot = await container.session_store.init()
    print(f"State: {snapshot.state.value}")
    print(f"Profiles: {len(snapshot.profiles)}")
    if snapshot.active_profile is not None:
        print(f"Active profile: {snapshot.active_profile.label}")
    return EXIT_OK


async def cmd_logout(container: Container, args: argparse.Namespace) -> int:
    await container.session_store.logout()
    print("Logged out")
    return EXIT_OK


async def cmd_seo(container: Container, args: argparse.Namespace) -> int:
    try:
        written = generate_pages(Path(args.dist))
    except OSError as e:
        logger.error(f"SEO page generation failed: {e}")
        print(f"Error: cannot generate SEO pages from {args.dist}: {e}")
        return EXIT_FAILURE
    for path in written:
        print(path)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsy-patient", description="Docsy ERP patient client"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("otp-request", help="Send an OTP to a mobile number")
    p.add_argument("mobile")
    p.set_defaults(handler=cmd_otp_request)

    p = sub.add_parser("otp-verify", help="Log in with the received OTP")
    p.add_argument("mobile")
    p.add_argument("otp")
    p.set_defaults(handler=cmd_otp_verify)

    p = sub.add_parser("profiles", help="List patient profiles")
    p.add_argument("--refresh", action="store_true", help="Fetch profiles from the server again")
    p.set_defaults(handler=cmd_profiles)

    p = sub.add_parser("use-profile", help="Switch the active patient profile")
    p.add_argument("profile", help="Profile id or display id")
    p.set_defaults(handler=cmd_use_profile)

    resources = [r.value for r in ResourceType]
    p = sub.add_parser("list", help="List records for the active profile")
    p.add_argument("resource", choices=resources)
    p.add_argument("--pages", type=int, default=1, help="Number of pages to load")
    p.set_defaults(handler=cmd_list)

    p = sub.add_parser("show", help="Show one record")
    p.add_argument("resource", choices=resources)
    p.add_argument("id")
    p.set_defaults(handler=cmd_show)

    p = sub.add_parser("cancel", help="Cancel an appointment")
    p.add_argument("id")
    p.set_defaults(handler=cmd_cancel)

    p = sub.add_parser("status", help="Show the stored session state")
    p.set_defaults(handler=cmd_status)

    p = sub.add_parser("logout", help="Clear the stored session")
    p.set_defaults(handler=cmd_logout)

    p = sub.add_parser("seo", help="Generate per-route SEO pages for the web build")
    p.add_argument("--dist", default="dist", help="Web build output directory")
    p.set_defaults(handler=cmd_seo)

    return parser


async def run(args: argparse.Namespace, container: Optional[Container] = None) -> int:
    container = container or build_container()
    try:
        return await args.handler(container, args)
    except AuthError as e:
        logger.warning(f"Authentication required: {e.message}")
        print("Session expired or not logged in. Run 'otp-request' to log in again.")
        return EXIT_AUTH
    except (DocsyPatientException, DomainError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}")
        return EXIT_FAILURE
    finally:
        await container.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().logging)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
