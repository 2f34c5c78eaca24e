"""
Work item creation for end-of-support findings.

Files one "User Story" per request against an Azure DevOps style REST API,
authenticating with a personal access token.
"""

from __future__ import annotations

import base64
import datetime
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any, Sequence

from .common import is_blank
from .config import Config
from .detection import VersionRecord, scan
from .environment import detect_machine_name
from .eol import EolClassifier, build_reference_table

logger = logging.getLogger(__name__)

NO_EOL_PLACEHOLDER = "None"
JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"


class TicketError(Exception):
    """Raised when the work item cannot be created."""
    pass


class ValidationError(TicketError):
    """Raised when required ticket inputs are missing."""
    pass


@dataclass(frozen=True)
class TicketRequest:
    """
    Title and description of a work item to create.
    """
    title: str
    description: str

    def to_patch(self) -> list[dict[str, str]]:
        """Render the JSON patch document adding title and description."""
        return [
            {"op": "add", "path": "/fields/System.Title", "value": self.title},
            {"op": "add", "path": "/fields/System.Description", "value": self.description},
        ]


def join_versions(versions: Sequence[str]) -> str:
    return ", ".join(versions) if versions else NO_EOL_PLACEHOLDER


def default_title(machine: str, eol_versions: Sequence[str]) -> str:
    return f"Upgrade .NET on {machine} (EOL installed: {join_versions(eol_versions)})"


def default_description(machine: str, eol_versions: Sequence[str]) -> str:
    return "\n".join([
        f"Machine: {machine}",
        f"End-of-support .NET versions installed: {join_versions(eol_versions)}",
        "",
        "Install a supported .NET release and remove the end-of-support runtimes.",
    ])


def build_ticket(
    machine: str,
    eol_versions: Sequence[str],
    title: str | None = None,
    description: str | None = None,
) -> TicketRequest:
    """Build a ticket, filling in default title and description where not given."""
    return TicketRequest(
        title=title if not is_blank(title) else default_title(machine, eol_versions),
        description=(
            description if not is_blank(description)
            else default_description(machine, eol_versions)
        ),
    )


def work_item_url(org: str, project: str, config: Config | None = None) -> str:
    """Build the work-item creation endpoint for an organization and project."""
    settings = (config or Config()).tickets
    work_item_type = urllib.parse.quote(settings.work_item_type)
    return (
        f"https://{org}.{settings.service_host}/{urllib.parse.quote(project)}"
        f"/_apis/wit/workitems/${work_item_type}?api-version={settings.api_version}"
    )


def auth_header(credential: str) -> str:
    """Basic auth with an empty user name and the token as password."""
    token = base64.b64encode(f":{credential}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def submit_ticket(
    url: str,
    credential: str,
    ticket: TicketRequest,
    timeout: int = 30,
) -> int:
    """
    POST a ticket and return the identifier assigned by the service.

    Raises:
        TicketError: On network, HTTP or response format errors
    """
    body = json.dumps(ticket.to_patch()).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=body,
        method="POST",
        headers={
            "Authorization": auth_header(credential),
            "Content-Type": JSON_PATCH_CONTENT_TYPE,
            "Accept": "application/json",
        },
    )

    logger.debug(f"Creating work item: POST {url}")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            payload: Any = json.loads(response.read())
    except urllib.error.HTTPError as e:
        raise TicketError(f"Work item creation failed: HTTP {e.code} {e.reason}") from e
    except urllib.error.URLError as e:
        raise TicketError(f"Cannot reach {url}: {e.reason}") from e
    except (OSError, ValueError) as e:
        raise TicketError(f"Work item creation failed: {e}") from e

    if not isinstance(payload, dict) or "id" not in payload:
        raise TicketError("Unexpected response from work tracking service: missing 'id'")

    logger.info(f"Created work item {payload['id']}")
    return payload["id"]


def create_ticket(
    org: str,
    project: str,
    credential: str,
    title: str | None = None,
    description: str | None = None,
    *,
    records: Sequence[VersionRecord] | None = None,
    now: datetime.datetime | None = None,
    machine: str | None = None,
    config: Config | None = None,
) -> int:
    """
    File a ticket listing the end-of-support versions on this machine.

    Args:
        org: Organization (subdomain of the service host)
        project: Project name
        credential: Personal access token
        title: Explicit title (default is generated)
        description: Explicit description (default is generated)
        records: Installed versions (scans the machine if None)
        now: Classification moment (current time if None)
        machine: Machine name (detected if None)
        config: Configuration (defaults if None)

    Returns:
        Work item id

    Raises:
        ValidationError: If org, project or credential is blank
        TicketError: If the request fails
    """
    missing = [
        label for label, value in (("organization", org), ("project", project), ("credential", credential))
        if is_blank(value)
    ]
    if missing:
        raise ValidationError(f"Missing required value(s): {', '.join(missing)}")

    config = config or Config()
    if records is None:
        records = scan()
    if now is None:
        now = datetime.datetime.now()
    if machine is None:
        machine = detect_machine_name()

    classifier = EolClassifier(build_reference_table(config.eol_dates))
    eol_versions = [record.version for record in classifier.filter_eol(records, now)]
    ticket = build_ticket(machine, eol_versions, title, description)

    return submit_ticket(
        work_item_url(org.strip(), project.strip(), config),
        credential.strip(),
        ticket,
        timeout=config.timeout_seconds,
    )
