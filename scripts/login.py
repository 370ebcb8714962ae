#!/usr/bin/env python3
"""
Portal login script

Usage:
  python scripts/login.py totp  [--config <yaml>] [--log-level DEBUG] [--json-logs]
  python scripts/login.py email [--config <yaml>] [--otp <digits>]
  python scripts/login.py check [--config <yaml>]
  python scripts/login.py fido2 [--config <yaml>]

Credentials come from PORTAL_USERNAME / PORTAL_PASSWORD / PORTAL_TOTP_SECRET
(environment or .env at the project root).

Exit codes:
  0 success, 1 failure, 2 session already authenticated
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import requests
from dotenv import load_dotenv

from application.login_orchestrator import LoginOrchestrator
from application.ports.logger import LoggerPort
from application.ports.requests_client import RequestsSessionHttpClient
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import AlreadyLoggedIn, PortalError
from infrastructure.config.endpoint_loader import ConfigLoadError, PortalSettings, PortalSettingsLoader
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.secrets.env_account_provider import AccountNotConfigured, EnvAccountProvider
from infrastructure.url.base_url_resolver import BaseUrlResolver

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ALREADY_LOGGED_IN = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sign in to the Science Tokyo portal")
    parser.add_argument("--config", help="YAML file overriding base URL / endpoints / user agent")
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--json-logs", action="store_true", help="Print one JSON line per event to stdout")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("totp", help="Log in with the stored TOTP secret")
    email = sub.add_parser("email", help="Log in with a one-time password sent by email")
    email.add_argument("--otp", help="OTP digits (prompted when omitted)")
    sub.add_parser("check", help="Only check that username and password are accepted")
    sub.add_parser("fido2", help="Log in with TOTP, then try FIDO2 registration")
    return parser


def build_logger(json_logs: bool, level: str) -> LoggerPort:
    if json_logs:
        return ConsoleLogger(min_level=level)
    setup_console_logging(level=level)
    return LoguruLogger()


def build_orchestrator(settings: PortalSettings, logger: LoggerPort) -> LoginOrchestrator:
    http_client = RequestsSessionHttpClient(
        timeout_sec=settings.timeout_sec,
        user_agent=settings.user_agent,
    )
    deps = ExecutionDeps(
        http_client=http_client,
        url_resolver=BaseUrlResolver(settings.endpoints.base_url),
        logger=logger,
        endpoints=settings.endpoints,
    )
    return LoginOrchestrator(deps)


def run_command(
    args: argparse.Namespace,
    orchestrator: LoginOrchestrator,
    account_provider: EnvAccountProvider,
    prompt: Callable[[str], str] = input,
) -> int:
    account = account_provider.get()

    if args.command == "check":
        ok = orchestrator.check_credentials(account.username, account.password)
        print("credentials accepted" if ok else "credentials rejected")
        return EXIT_OK if ok else EXIT_FAILED

    if args.command == "email":
        orchestrator.start(account)
        orchestrator.login_email()
        otp = args.otp or prompt("OTP: ").strip()
        orchestrator.complete_email(otp)
        print("logged in (email OTP)")
        return EXIT_OK

    orchestrator.login_with_totp(account)
    print("logged in (TOTP)")

    if args.command == "fido2":
        result = orchestrator.register_fido2()
        print(f"fido2 registration: {result.status.value}")
        return EXIT_OK if result.ok else EXIT_FAILED

    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logger = build_logger(args.json_logs, args.log_level)

    try:
        settings = PortalSettingsLoader().load(args.config)
        orchestrator = build_orchestrator(settings, logger)
        return run_command(args, orchestrator, EnvAccountProvider())
    except AlreadyLoggedIn:
        print("already logged in")
        return EXIT_ALREADY_LOGGED_IN
    except (ConfigLoadError, AccountNotConfigured) as e:
        print(f"configuration error: {e}", file=sys.stderr)
        return EXIT_FAILED
    except PortalError as e:
        print(f"login failed: {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_FAILED
    except requests.RequestException as e:
        print(f"network error: {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
