"""Finding Apple development teams from the signing certificates in the keychain."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass

from cryptography import x509
from cryptography.x509.oid import NameOID

logger = logging.getLogger(__name__)

_PEM_BLOCK = re.compile(
    rb"-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----", re.DOTALL
)
_NICE_NAME = re.compile(r"Apple Develop\w+: (.*) \(.+\)")


class TeamError(Exception):
    """Raised when certificates can't be listed, parsed or turned into a team."""


@dataclass(frozen=True, order=True)
class Team:
    """A development team: display name and team ID."""

    name: str
    id: str


def _first(name: x509.Name, oid) -> str | None:
    for attribute in name.get_attributes_for_oid(oid):
        value = attribute.value
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError:
                continue
        return value
    return None


def team_from_certificate(cert: x509.Certificate) -> Team:
    """The team a signing certificate belongs to."""
    subject = cert.subject
    common_name = _first(subject, NameOID.COMMON_NAME)
    if common_name is None:
        raise TeamError("skipping cert, missing common name")
    organization = _first(subject, NameOID.ORGANIZATION_NAME)
    if organization is not None:
        logger.debug("found cert %r with organization %r", common_name, organization)
        name = organization
    else:
        logger.debug(
            "found cert %r but failed to get organization; falling back to displaying "
            "common name",
            common_name,
        )
        match = _NICE_NAME.search(common_name)
        if match is not None:
            name = match.group(1)
        else:
            logger.debug(
                "regex failed to capture nice part of name in cert %r; falling back to "
                "displaying full name",
                common_name,
            )
            name = common_name
    team_id = _first(subject, NameOID.ORGANIZATIONAL_UNIT_NAME)
    if team_id is None:
        raise TeamError(f"skipping cert {common_name}: missing Organization Unit")
    return Team(name, team_id)


def _load_certificates(data: bytes) -> list[x509.Certificate]:
    certs = []
    for block in _PEM_BLOCK.findall(data):
        try:
            certs.append(x509.load_pem_x509_certificate(block))
        except ValueError as err:
            raise TeamError(f"Failed to parse X509 cert: {err}") from err
    return certs


def teams_from_pem(data: bytes) -> list[Team]:
    """Sorted, distinct teams of the PEM certificates in ``data``."""
    teams = set()
    for cert in _load_certificates(data):
        try:
            teams.add(team_from_certificate(cert))
        except TeamError as err:
            logger.error("%s", err)
    return sorted(teams)


def get_pem_list(name_substr: str) -> bytes:
    """PEM text of all keychain certificates whose name contains ``name_substr``."""
    try:
        result = subprocess.run(
            ["security", "find-certificate", "-p", "-a", "-c", name_substr],
            capture_output=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as err:
        raise TeamError(f"Failed to call `security` command: {err}") from err
    return result.stdout


def find_development_teams() -> list[Team]:
    """Teams of every development certificate, under both naming schemes."""
    new = get_pem_list("Development:")
    old = get_pem_list("Developer:")
    return teams_from_pem(new + b"\n" + old)