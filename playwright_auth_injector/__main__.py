#!/usr/bin/env python3
"""
Command-line entry point
========================
Run with: python -m playwright_auth_injector <command>

Commands:
    setup   Inject auth into a fresh browser and save its storage state
    check   Load and validate the config file (no network calls)
    init    Write a sample ``playwright_auth_config.py``

A ``.env`` file in the working directory is loaded first so config files
can read secrets from ``os.environ``.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import CONFIG_FILE_NAMES, _DEFAULTS, ConfigStore
from .errors import AuthError

logger = logging.getLogger(__name__)


SAMPLE_CONFIG = '''"""playwright-auth-injector configuration.

Secrets are read from the environment (or a .env file).
"""

import os

from playwright_auth_injector import define_config

config = define_config({
    # Provider to use: "firebase" | "supabase"
    "provider": "firebase",

    # Log every pipeline step at INFO
    "debug": False,

    "firebase": {
        # Service-account JSON, as a string
        "serviceAccount": os.environ.get("FIREBASE_SERVICE_ACCOUNT", ""),
        # Firebase Web API key
        "apiKey": os.environ.get("FIREBASE_API_KEY", ""),
        # UID of the test user
        "uid": os.environ.get("TEST_USER_UID", ""),
    },

    # Alternate test users, selected with inject_auth(page, profile="admin")
    # "profiles": {
    #     "admin": {"uid": os.environ.get("ADMIN_UID", "")},
    # },
})
'''


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_setup(args: argparse.Namespace) -> int:
    from .auth_setup import auth_setup

    path = asyncio.run(auth_setup(
        config_path=args.config,
        output_dir=args.output_dir,
        base_url=args.base_url,
        storage_state_file=args.file,
        profile=args.profile,
        headless=not args.headed,
        wait_after=args.wait_after,
    ))
    print(f"\n  Storage state saved: {path}")
    print(f"\n  To reuse it in tests:")
    print(f"    browser.new_context(storage_state=\"{path}\")\n")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    config = ConfigStore().load(path=args.config)
    print(f"\n  Config:    {config.source_path}")
    print(f"  Provider:  {config.provider}")
    print(f"  Profiles:  {', '.join(sorted(config.profiles)) or '(none)'}")
    print(f"  Debug:     {config.debug}\n")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    target = Path(args.path)
    if target.exists() and not args.force:
        print(f"  {target} already exists (use --force to overwrite)")
        return 1
    target.write_text(SAMPLE_CONFIG, encoding="utf-8")
    print(f"  Wrote sample config: {target}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playwright_auth_injector",
        description="Skip login UIs in Playwright tests by injecting auth state.",
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_setup = sub.add_parser("setup", help="Save an authenticated storage state")
    p_setup.add_argument("--config", default=None,
                         help="Config file (default: search the working directory)")
    p_setup.add_argument("--base-url", default=_DEFAULTS["base_url"],
                         help=f"Application URL (default: {_DEFAULTS['base_url']})")
    p_setup.add_argument("--output-dir", default=_DEFAULTS["output_dir"],
                         help=f"Output directory (default: {_DEFAULTS['output_dir']})")
    p_setup.add_argument("--file", default=_DEFAULTS["storage_state_file"],
                         help=f"Output file name (default: {_DEFAULTS['storage_state_file']})")
    p_setup.add_argument("--profile", default=None, help="Profile override name")
    p_setup.add_argument("--wait-after", type=int, default=None,
                         help=f"Settle delay in ms (default: {_DEFAULTS['wait_after_ms']})")
    p_setup.add_argument("--headed", action="store_true", help="Show the browser")
    p_setup.set_defaults(func=cmd_setup)

    p_check = sub.add_parser("check", help="Validate the config file")
    p_check.add_argument("--config", default=None,
                         help="Config file (default: search the working directory)")
    p_check.set_defaults(func=cmd_check)

    p_init = sub.add_parser("init", help="Write a sample config file")
    p_init.add_argument("--path", default=CONFIG_FILE_NAMES[0],
                        help=f"Target file (default: {CONFIG_FILE_NAMES[0]})")
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing file")
    p_init.set_defaults(func=cmd_init)

    return parser


def main(argv=None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        return args.func(args)
    except (AuthError, LookupError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n  Cancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
