"""Collector for chan_sip 'sip show ...' commands."""

import logging
from typing import List

from ..models.sip import SipSnapshot
from ..services.sip_data_source import SipDataSource
from ..utils.metrics import MetricDescriptor, MetricSample, build_fq_name, gauge
from .base import BaseCollector

SUBSYSTEM = "sip"


class SipCollector(BaseCollector):
    """Exposes peers, dialogs, users and registrations of chan_sip."""

    def __init__(
        self,
        prefix: str,
        data_source: SipDataSource,
        logger: logging.Logger,
        error_descriptor: MetricDescriptor
    ):
        """
        Initialize SIP collector.

        Args:
            prefix: Metric namespace (e.g., "asterisk")
            data_source: Provider of SIP snapshot fragments
            logger: Logger instance
            error_descriptor: Shared collector health descriptor
        """
        super().__init__(data_source, logger, error_descriptor)

        def desc(name: str, help_text: str, *label_names: str) -> MetricDescriptor:
            return MetricDescriptor(build_fq_name(prefix, SUBSYSTEM, name), help_text, label_names)

        # sip show peers
        self.total_peers = desc("current_peers", "Number of SIP peers")
        self.monitored_online = desc("current_monitored_online", "Number of currently monitored online SIP")
        self.monitored_offline = desc("current_monitored_offline", "Number of currently monitored offline SIP")
        self.unmonitored_online = desc("current_unmonitored_online", "Number of currently unmonitored online SIP")
        self.unmonitored_offline = desc("current_unmonitored_offline", "Number of currently unmonitored offline SIP")
        self.status_unknown = desc("current_unknown", "Current number of unknown SIP")
        self.status_qualified = desc("current_qualified", "Current number of qualified SIP")
        self.peer_status = desc("peer_status", "Status of individual SIP peers", "peer_name", "peer_status")

        # sip show channels / subscriptions / channelstats
        self.dialogs_active = desc("active_dialogs", "Number of active SIP dialogs")
        self.subscriptions_active = desc("active_subscriptions", "Number of active SIP subscriptions")
        self.channels_active = desc("active_channels", "Number of active SIP channels")

        # sip show users
        self.users = desc("users", "Number of users")

        # sip show registry
        self.total_registrations = desc("total_registrations", "Total number of SIP registrations")
        self.registered_count = desc("registered_count", "Number of successfully registered SIP accounts")
        self.unregistered_count = desc("unregistered_count", "Number of unregistered SIP accounts")
        self.registration_status = desc(
            "registration_status", "Status of individual SIP registrations", "username", "state"
        )

    def name(self) -> str:
        return SUBSYSTEM

    def describe(self) -> List[MetricDescriptor]:
        return [
            self.total_peers,
            self.monitored_online,
            self.monitored_offline,
            self.unmonitored_online,
            self.unmonitored_offline,
            self.status_unknown,
            self.status_qualified,
            self.peer_status,
            self.dialogs_active,
            self.subscriptions_active,
            self.channels_active,
            self.users,
            self.total_registrations,
            self.registered_count,
            self.unregistered_count,
            self.registration_status,
        ]

    def fetch(self) -> SipSnapshot:
        return SipSnapshot(
            peers=self.data_source.peers_info(),
            channels=self.data_source.sip_channels_info(),
            users=self.data_source.users_info(),
            registries=self.data_source.registries_info(),
        )

    def build_samples(self, snapshot: SipSnapshot) -> List[MetricSample]:
        """
        Map a SIP snapshot onto gauges.

        Counters become unlabelled gauges. Each peer and registration becomes
        one labelled gauge with value 1; entities missing from the snapshot
        produce no sample at all.
        """
        peers = snapshot.peers
        samples = [
            gauge(self.total_peers, peers.total),
            gauge(self.monitored_online, peers.monitored_online),
            gauge(self.monitored_offline, peers.monitored_offline),
            gauge(self.unmonitored_online, peers.unmonitored_online),
            gauge(self.unmonitored_offline, peers.unmonitored_offline),
            gauge(self.status_unknown, peers.status_unknown),
            gauge(self.status_qualified, peers.status_qualified),
        ]
        samples.extend(
            gauge(self.peer_status, 1, (peer.name, peer.status))
            for peer in peers.peers
        )

        channels = snapshot.channels
        samples.extend([
            gauge(self.dialogs_active, channels.active_dialogs),
            gauge(self.subscriptions_active, channels.active_subscriptions),
            gauge(self.channels_active, channels.active_channels),
            gauge(self.users, snapshot.users.users),
        ])

        registries = snapshot.registries
        samples.extend([
            gauge(self.total_registrations, registries.total),
            gauge(self.registered_count, registries.online),
            gauge(self.unregistered_count, registries.offline),
        ])
        samples.extend(
            gauge(self.registration_status, 1, (registration.username, registration.state))
            for registration in registries.registrations
        )

        return samples
