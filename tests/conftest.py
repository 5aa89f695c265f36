"""Shared pytest configuration and fixtures."""

import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

from asterisk_exporter.collectors.base import build_error_descriptor
from asterisk_exporter.config.loader import ConfigLoader
from asterisk_exporter.models.sip import (
    PeerRecord,
    PeersInfo,
    RegistrationRecord,
    RegistriesInfo,
    SipChannelsInfo,
    UsersInfo,
)
from asterisk_exporter.utils.errors import DataSourceUnavailable


CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.example.yaml"

PEERS_ROW = "{:<25.25} {:<39.39} {:<3.3} {:<10.10} {:<10.10} {:<3.3} {:<8} {:<11.11} {:<32.32}"
USERS_ROW = "{:<26.26} {:<16.16} {:<16.16} {:<16.16} {:<4.4} {:<10.10}"
REGISTRY_ROW = "{:<39.39} {:<6.6} {:<12.12}  {:>8} {:<20.20} {:<25.25}"


def peers_output(rows, summary):
    """Render 'sip show peers' output the way chan_sip prints it."""
    lines = [PEERS_ROW.format("Name/username", "Host", "Dyn", "Forcerport", "Comedia",
                              "ACL", "Port", "Status", "Description")]
    for name, host, port, status in rows:
        lines.append(PEERS_ROW.format(name, host, " D ", "Auto (No)", "No", "", port, status, ""))
    lines.append(summary)
    return "\n".join(lines) + "\n"


def users_output(usernames):
    """Render 'sip show users' output."""
    lines = [USERS_ROW.format("Username", "Secret", "Accountcode", "Def.Context", "ACL", "Forcerport")]
    for username in usernames:
        lines.append(USERS_ROW.format(username, "secret", "", "from-internal", "No", "No"))
    return "\n".join(lines) + "\n"


def registry_output(rows):
    """Render 'sip show registry' output."""
    lines = [REGISTRY_ROW.format("Host", "dnsmgr", "Username", "Refresh", "State", "Reg.Time")]
    for host, username, refresh, state, reg_time in rows:
        lines.append(REGISTRY_ROW.format(host, "N", username, refresh, state, reg_time))
    suffix = "" if len(rows) == 1 else "s"
    lines.append(f"{len(rows)} SIP registration{suffix}.")
    return "\n".join(lines) + "\n"


def fake_asterisk(directory, outputs, encoding="utf-8"):
    """
    Write an executable standing in for the asterisk binary.

    It prints the recorded output for the command passed after -rx, encoded
    with the given encoding, and fails for any other command.
    """
    cases = []
    for index, (command, output) in enumerate(outputs.items()):
        output_file = directory / f"output_{index}.txt"
        output_file.write_bytes(output.encode(encoding))
        cases.append(f"  '{command}') cat '{output_file}' ;;")

    binary = directory / "asterisk"
    binary.write_text(
        "#!/bin/sh\n"
        "case \"$2\" in\n"
        + "\n".join(cases)
        + "\n  *) echo \"No such command '$2'\" >&2; exit 1 ;;\nesac\n"
    )
    binary.chmod(0o755)
    return str(binary)


@pytest.fixture(scope="session")
def config():
    """Load the example configuration shipped with the repository."""
    if not CONFIG_PATH.exists():
        pytest.skip(f"Config file not found: {CONFIG_PATH}")

    return ConfigLoader.load_from_file(str(CONFIG_PATH))


@pytest.fixture
def logger():
    """Create logger for tests."""
    test_logger = logging.getLogger("test_exporter")
    test_logger.setLevel(logging.DEBUG)
    return test_logger


@pytest.fixture
def error_descriptor():
    """Shared collector health descriptor."""
    return build_error_descriptor("asterisk")


@pytest.fixture
def cli_outputs():
    """Realistic output of every 'sip show ...' command used by the exporter."""
    return {
        "sip show peers": peers_output(
            [
                ("alice/alice", "10.0.0.5", "5060", "OK (15 ms)"),
                ("bob", "(Unspecified)", "0", "UNKNOWN"),
                ("carol/carol", "10.0.0.7", "5060", "UNREACHABLE"),
            ],
            "3 sip peers [Monitored: 1 online, 2 offline Unmonitored: 0 online, 0 offline]",
        ),
        "sip show channels": (
            "Peer             User/ANR         Call ID          Format           Hold     Last Message    Expiry     Peer\n"
            "10.0.0.5         alice            3c2a5f1e0b7c     (ulaw)           No       Rx: ACK                    alice\n"
            "1 active SIP dialog\n"
        ),
        "sip show subscriptions": (
            "Peer             User             Call ID          Extension        Last state     Type            Mailbox    Expiry\n"
            "0 active SIP subscriptions\n"
        ),
        "sip show channelstats": (
            "Peer             Call ID      Duration Recv: Pack  Lost       (     %) Jitter Send: Pack  Lost       (     %) Jitter\n"
            "2 active SIP channels\n"
        ),
        "sip show users": users_output(["alice", "bob", "carol"]),
        "sip show registry": registry_output([
            ("sip.provider.com:5060", "myuser", 105, "Registered", "Mon, 18 Oct 2026 10:00:00"),
            ("backup.provider.net:5060", "backup", 120, "Request Sent", ""),
        ]),
    }


@pytest.fixture
def fake_data_source():
    """Data source returning the snapshot used throughout the collector tests."""
    source = Mock()
    source.peers_info.return_value = PeersInfo(
        total=2,
        monitored_online=3,
        monitored_offline=1,
        unmonitored_online=0,
        unmonitored_offline=0,
        status_unknown=0,
        status_qualified=2,
        peers=[PeerRecord("alice", "OK"), PeerRecord("bob", "UNKNOWN")],
    )
    source.sip_channels_info.return_value = SipChannelsInfo(
        active_dialogs=4, active_subscriptions=5, active_channels=6
    )
    source.users_info.return_value = UsersInfo(users=7)
    source.registries_info.return_value = RegistriesInfo(
        total=2,
        online=1,
        offline=1,
        registrations=[
            RegistrationRecord("myuser", "Registered"),
            RegistrationRecord("backup", "Request Sent"),
        ],
    )
    return source


@pytest.fixture
def failing_data_source(fake_data_source):
    """Data source whose registry query fails."""
    fake_data_source.registries_info.side_effect = DataSourceUnavailable("'sip show registry' failed")
    return fake_data_source
