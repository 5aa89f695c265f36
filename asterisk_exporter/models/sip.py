"""Parsed results of the chan_sip 'sip show ...' commands."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class PeerRecord:
    """Single row of 'sip show peers'."""

    name: str
    status: str


@dataclass
class PeersInfo:
    """Summary and per-peer rows of 'sip show peers'."""

    total: int = 0
    monitored_online: int = 0
    monitored_offline: int = 0
    unmonitored_online: int = 0
    unmonitored_offline: int = 0
    status_unknown: int = 0
    status_qualified: int = 0
    peers: List[PeerRecord] = field(default_factory=list)


@dataclass
class SipChannelsInfo:
    """Counts from 'sip show channels', 'subscriptions' and 'channelstats'."""

    active_dialogs: int = 0
    active_subscriptions: int = 0
    active_channels: int = 0


@dataclass
class UsersInfo:
    """Row count of 'sip show users'."""

    users: int = 0


@dataclass
class RegistrationRecord:
    """Single row of 'sip show registry'."""

    username: str
    state: str


@dataclass
class RegistriesInfo:
    """Summary and per-registration rows of 'sip show registry'."""

    total: int = 0
    online: int = 0
    offline: int = 0
    registrations: List[RegistrationRecord] = field(default_factory=list)


@dataclass
class SipSnapshot:
    """All SIP data gathered for one scrape."""

    peers: PeersInfo = field(default_factory=PeersInfo)
    channels: SipChannelsInfo = field(default_factory=SipChannelsInfo)
    users: UsersInfo = field(default_factory=UsersInfo)
    registries: RegistriesInfo = field(default_factory=RegistriesInfo)
