import datetime
import subprocess
from unittest import mock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from mobiletool.teams import (
    Team,
    TeamError,
    find_development_teams,
    get_pem_list,
    team_from_certificate,
    teams_from_pem,
)


def _cert(attrs):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(oid, value) for oid, value in attrs])
    start = datetime.datetime(2024, 1, 1)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(start)
        .not_valid_after(start + datetime.timedelta(days=1))
        .sign(key, hashes.SHA256())
    )


def _pem(cert):
    return cert.public_bytes(serialization.Encoding.PEM)


FULL = [
    (NameOID.COMMON_NAME, "Apple Development: Jane Doe (PLACE00001)"),
    (NameOID.ORGANIZATION_NAME, "Example Org"),
    (NameOID.ORGANIZATIONAL_UNIT_NAME, "TEAM000001"),
]


def test_team_uses_organization():
    assert team_from_certificate(_cert(FULL)) == Team("Example Org", "TEAM000001")


def test_team_falls_back_to_nice_common_name():
    cert = _cert([
        (NameOID.COMMON_NAME, "Apple Development: Jane Doe (PLACE00001)"),
        (NameOID.ORGANIZATIONAL_UNIT_NAME, "TEAM000002"),
    ])
    assert team_from_certificate(cert) == Team("Jane Doe", "TEAM000002")


def test_team_falls_back_to_full_common_name():
    cert = _cert([
        (NameOID.COMMON_NAME, "Some Other Cert"),
        (NameOID.ORGANIZATIONAL_UNIT_NAME, "TEAM000003"),
    ])
    assert team_from_certificate(cert) == Team("Some Other Cert", "TEAM000003")


def test_missing_common_name():
    cert = _cert([(NameOID.ORGANIZATIONAL_UNIT_NAME, "TEAM000004")])
    with pytest.raises(TeamError, match="missing common name"):
        team_from_certificate(cert)


def test_missing_organizational_unit():
    cert = _cert([(NameOID.COMMON_NAME, "Apple Development: Jane Doe (PLACE00001)")])
    with pytest.raises(TeamError, match="missing Organization Unit"):
        team_from_certificate(cert)


def test_teams_from_pem_sorted_and_unique():
    other = _cert([
        (NameOID.COMMON_NAME, "Apple Developer: Alex Roe (PLACE00002)"),
        (NameOID.ORGANIZATIONAL_UNIT_NAME, "TEAM000005"),
    ])
    broken = _cert([(NameOID.COMMON_NAME, "No Unit")])
    data = _pem(_cert(FULL)) + _pem(_cert(FULL)) + _pem(other) + _pem(broken)
    teams = teams_from_pem(data)
    assert teams == sorted(set(teams))
    assert teams == [Team("Alex Roe", "TEAM000005"), Team("Example Org", "TEAM000001")]


def test_teams_from_empty_pem():
    assert teams_from_pem(b"") == []


def test_teams_from_invalid_pem():
    data = b"-----BEGIN CERTIFICATE-----\nnot base64!!\n-----END CERTIFICATE-----\n"
    with pytest.raises(TeamError, match="Failed to parse X509 cert"):
        teams_from_pem(data)


def test_get_pem_list_command():
    completed = subprocess.CompletedProcess([], 0, b"pem", b"")
    with mock.patch("subprocess.run", return_value=completed) as run:
        assert get_pem_list("Development:") == b"pem"
    assert run.call_args.args[0] == [
        "security", "find-certificate", "-p", "-a", "-c", "Development:",
    ]


def test_get_pem_list_failure():
    with mock.patch("subprocess.run", side_effect=FileNotFoundError("security")):
        with pytest.raises(TeamError, match="security"):
            get_pem_list("Developer:")


def test_find_development_teams_combines_both_schemes():
    outputs = {
        "Development:": _pem(_cert(FULL)),
        "Developer:": _pem(_cert([
            (NameOID.COMMON_NAME, "Apple Developer: Alex Roe (PLACE00002)"),
            (NameOID.ORGANIZATIONAL_UNIT_NAME, "TEAM000005"),
        ])),
    }

    def fake_run(args, **kwargs):
        return subprocess.CompletedProcess(args, 0, outputs[args[-1]], b"")

    with mock.patch("subprocess.run", side_effect=fake_run):
        teams = find_development_teams()
    assert [team.id for team in teams] == ["TEAM000005", "TEAM000001"]