"""Parsers for chan_sip 'sip show ...' CLI output."""

import re
from typing import List, Optional, Tuple

from ..models.sip import (
    PeerRecord,
    PeersInfo,
    RegistrationRecord,
    RegistriesInfo,
    UsersInfo,
)
from ..utils.errors import ParseError

PEERS_SUMMARY = re.compile(
    r'(\d+)\s+sip peers\s+\[Monitored:\s*(\d+)\s+online,\s*(\d+)\s+offline\s+'
    r'Unmonitored:\s*(\d+)\s+online,\s*(\d+)\s+offline\]'
)
DIALOGS_SUMMARY = re.compile(r'(\d+)\s+active SIP dialogs?')
SUBSCRIPTIONS_SUMMARY = re.compile(r'(\d+)\s+active SIP subscriptions?')
CHANNELS_SUMMARY = re.compile(r'(\d+)\s+active SIP channels?')
REGISTRY_SUMMARY = re.compile(r'(\d+)\s+SIP registrations?')

STATUS_QUALIFIED = "OK"
STATUS_UNKNOWN = "UNKNOWN"
STATE_REGISTERED = "Registered"


def _find_header(lines: List[str], first_column: str) -> int:
    for i, line in enumerate(lines):
        if line.lstrip().startswith(first_column):
            return i
    raise ParseError(f"Header starting with '{first_column}' not found")


def _column_span(header: str, column: str, next_column: Optional[str] = None) -> Tuple[int, Optional[int]]:
    start = header.find(column)
    if start < 0:
        raise ParseError(f"Column '{column}' not found in header: {header.strip()}")
    end = header.find(next_column, start) if next_column else -1
    return start, end if end > start else None


def _search_count(pattern: re.Pattern, output: str, what: str) -> int:
    match = pattern.search(output)
    if not match:
        raise ParseError(f"Cannot find {what} in output: {output[:200]}")
    return int(match.group(1))


def parse_peers(output: str) -> PeersInfo:
    """
    Parse 'sip show peers' output.

    Args:
        output: Output from 'sip show peers'

    Returns:
        PeersInfo: Summary counters and one PeerRecord per row

    Raises:
        ParseError: If header or summary line is missing

    Example output:
        Name/username   Host        Dyn Forcerport Comedia    ACL Port     Status      Description
        alice/alice     10.0.0.5     D  Auto (No)  No             5060     OK (15 ms)
        bob             (Unspecified) D  Auto (No)  No            0        UNKNOWN
        2 sip peers [Monitored: 1 online, 1 offline Unmonitored: 0 online, 0 offline]
    """
    summary = PEERS_SUMMARY.search(output)
    if not summary:
        raise ParseError(f"Cannot find peers summary in output: {output[:200]}")

    lines = output.splitlines()
    header_index = _find_header(lines, "Name/username")
    header = lines[header_index]
    status_start, status_end = _column_span(header, "Status", "Description")

    info = PeersInfo(
        total=int(summary.group(1)),
        monitored_online=int(summary.group(2)),
        monitored_offline=int(summary.group(3)),
        unmonitored_online=int(summary.group(4)),
        unmonitored_offline=int(summary.group(5)),
    )

    for line in lines[header_index + 1:]:
        if not line.strip():
            continue
        if PEERS_SUMMARY.search(line):
            break

        name = line.split()[0].split("/")[0]
        status_words = line[status_start:status_end].split()
        status = status_words[0] if status_words else ""

        info.peers.append(PeerRecord(name=name, status=status))
        if status == STATUS_QUALIFIED:
            info.status_qualified += 1
        elif status == STATUS_UNKNOWN:
            info.status_unknown += 1

    return info


def parse_active_dialogs(output: str) -> int:
    """Active dialog count from 'sip show channels'."""
    return _search_count(DIALOGS_SUMMARY, output, "active SIP dialogs")


def parse_active_subscriptions(output: str) -> int:
    """Active subscription count from 'sip show subscriptions'."""
    return _search_count(SUBSCRIPTIONS_SUMMARY, output, "active SIP subscriptions")


def parse_active_channels(output: str) -> int:
    """Active channel count from 'sip show channelstats'."""
    return _search_count(CHANNELS_SUMMARY, output, "active SIP channels")


def parse_users(output: str) -> UsersInfo:
    """
    Parse 'sip show users' output.

    The command has no summary line, so every non-empty row below the
    header counts as one user.

    Example output:
        Username                   Secret           Accountcode      Def.Context      ACL  Forcerport
        alice                      secret                            from-internal    No   No
    """
    lines = output.splitlines()
    header_index = _find_header(lines, "Username")
    rows = [line for line in lines[header_index + 1:] if line.strip()]
    return UsersInfo(users=len(rows))


def parse_registry(output: str) -> RegistriesInfo:
    """
    Parse 'sip show registry' output.

    Args:
        output: Output from 'sip show registry'

    Returns:
        RegistriesInfo: Totals and one RegistrationRecord per row

    Raises:
        ParseError: If header or summary line is missing

    Example output:
        Host                                    dnsmgr Username       Refresh State                Reg.Time
        sip.provider.com:5060                   N      myuser             105 Registered           Mon, 18 Oct 2026 10:00:00
        1 SIP registrations.
    """
    total = _search_count(REGISTRY_SUMMARY, output, "SIP registrations summary")

    lines = output.splitlines()
    header_index = _find_header(lines, "Host")
    header = lines[header_index]
    username_start, username_end = _column_span(header, "Username", "Refresh")
    state_start, state_end = _column_span(header, "State", "Reg.Time")

    info = RegistriesInfo(total=total)

    for line in lines[header_index + 1:]:
        if not line.strip():
            continue
        if REGISTRY_SUMMARY.search(line):
            break

        username = line[username_start:username_end].strip()
        state = line[state_start:state_end].strip()

        info.registrations.append(RegistrationRecord(username=username, state=state))
        if state == STATE_REGISTERED:
            info.online += 1

    info.offline = max(total - info.online, 0)
    return info
