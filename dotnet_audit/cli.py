"""
Interactive menu for auditing, logging, ticketing and installing .NET.
"""

from __future__ import annotations

import datetime
import getpass
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, TextIO

from .common import is_blank
from .config import Config, load_config
from .detection import VersionRecord, default_sources, scan
from .environment import Environment, detect_environment
from .eol import EolClassifier, build_reference_table
from .installer import install_latest
from .logging_config import setup_logging_from_env
from .render import GREEN, RED, YELLOW, colorize, render_records
from .report import get_report_path, write_csv
from .tickets import TicketError, create_ticket

logger = logging.getLogger(__name__)

MENU = """
.NET version audit
  1) Scan installed .NET versions
  2) Log versions to CSV
  3) Create upgrade ticket
  4) Install latest .NET
  5) Exit"""

SCAN, LOG, TICKET, INSTALL, EXIT = "1", "2", "3", "4", "5"


@dataclass
class Session:
    """Everything a menu command needs; rebuilt per process, not per selection."""
    config: Config = field(default_factory=Config)
    env: Environment = field(default_factory=detect_environment)
    read: Callable[[str], str] = input
    read_secret: Callable[[str], str] = getpass.getpass
    out: TextIO = field(default_factory=lambda: sys.stdout)

    @property
    def classifier(self) -> EolClassifier:
        return EolClassifier(build_reference_table(self.config.eol_dates))

    def say(self, message: str = "") -> None:
        print(message, file=self.out)

    def scan(self) -> list[VersionRecord]:
        return scan(default_sources(self.env))


def cmd_scan(session: Session) -> None:
    render_records(session.scan(), session.classifier, datetime.datetime.now(), session.out)


def cmd_log(session: Session) -> None:
    path = get_report_path(session.config.csv_path)
    try:
        written = write_csv(session.scan(), path)
    except OSError as e:
        session.say(colorize(f"Could not write {path}: {e}", RED))
        return
    if written == 0:
        session.say(colorize("Nothing to log.", YELLOW))
    else:
        session.say(colorize(f"Logged {written} version(s) to {path}", GREEN))


def cmd_ticket(session: Session) -> None:
    org = session.read("Organization: ").strip()
    project = session.read("Project: ").strip()
    credential = session.read_secret("Personal access token: ").strip()
    if is_blank(org) or is_blank(project) or is_blank(credential):
        session.say(colorize("Organization, project and token are all required.", YELLOW))
        return

    try:
        ticket_id = create_ticket(
            org,
            project,
            credential,
            records=session.scan(),
            machine=session.env.machine_name,
            config=session.config,
        )
    except TicketError as e:
        session.say(colorize(f"Ticket creation failed: {e}", RED))
        return
    session.say(colorize(f"Created work item {ticket_id}", GREEN))


def cmd_install(session: Session) -> None:
    channel = session.read(f"Channel (STS/LTS) [{session.config.channel}]: ").strip().upper()
    channel = channel or session.config.channel
    result = install_latest(
        channel=channel,
        prompt=session.read,
        config=session.config,
        env=session.env,
    )
    if result.success:
        version = result.installed_version or "version unknown"
        session.say(colorize(f"Installed .NET {version} ({channel}) to {result.install_dir}", GREEN))
    else:
        session.say(colorize(f"Installation failed: {result.error_message}", RED))


COMMANDS: dict[str, Callable[[Session], None]] = {
    SCAN: cmd_scan,
    LOG: cmd_log,
    TICKET: cmd_ticket,
    INSTALL: cmd_install,
}


def dispatch(choice: str, session: Session) -> bool:
    """
    Run one menu selection.

    Returns:
        False when the loop should stop, True otherwise
    """
    choice = choice.strip()
    if choice == EXIT:
        return False

    command = COMMANDS.get(choice)
    if command is None:
        session.say(colorize("Invalid selection, choose 1-5.", YELLOW))
        return True

    logger.debug(f"Menu selection {choice}: {command.__name__}")
    command(session)
    return True


def run_menu(session: Session) -> None:
    """Show the menu until the operator exits or input ends."""
    while True:
        session.say(MENU)
        try:
            choice = session.read("Select an option: ")
            if not dispatch(choice, session):
                break
        except (EOFError, KeyboardInterrupt):
            session.say()
            break


def main() -> int:
    setup_logging_from_env()
    try:
        config = load_config()
    except ValueError as e:
        logger.error(str(e))
        return 2

    run_menu(Session(config=config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
