"""SIP data source backed by the Asterisk CLI."""

import logging
from typing import Protocol, runtime_checkable

from ..models.sip import PeersInfo, RegistriesInfo, SipChannelsInfo, UsersInfo
from ..utils.errors import DataSourceUnavailable, ExporterError
from . import sip_parser
from .command_runner import CommandRunner


@runtime_checkable
class SipDataSource(Protocol):
    """
    Provider of the four SIP snapshot fragments.

    Every method returns its fragment or raises DataSourceUnavailable.
    """

    def peers_info(self) -> PeersInfo:
        ...

    def sip_channels_info(self) -> SipChannelsInfo:
        ...

    def users_info(self) -> UsersInfo:
        ...

    def registries_info(self) -> RegistriesInfo:
        ...


class AsteriskSipDataSource:
    """Runs 'sip show ...' commands and parses their output."""

    def __init__(self, runner: CommandRunner, logger: logging.Logger):
        """
        Initialize data source.

        Args:
            runner: Command runner used for every CLI call
            logger: Logger instance
        """
        self.runner = runner
        self.logger = logger.getChild(self.__class__.__name__)

    def _query(self, command: str, parser):
        try:
            return parser(self.runner.run(command))
        except ExporterError as e:
            raise DataSourceUnavailable(f"'{command}' failed: {e}") from e

    def peers_info(self) -> PeersInfo:
        return self._query("sip show peers", sip_parser.parse_peers)

    def sip_channels_info(self) -> SipChannelsInfo:
        return SipChannelsInfo(
            active_dialogs=self._query("sip show channels", sip_parser.parse_active_dialogs),
            active_subscriptions=self._query("sip show subscriptions", sip_parser.parse_active_subscriptions),
            active_channels=self._query("sip show channelstats", sip_parser.parse_active_channels),
        )

    def users_info(self) -> UsersInfo:
        return self._query("sip show users", sip_parser.parse_users)

    def registries_info(self) -> RegistriesInfo:
        return self._query("sip show registry", sip_parser.parse_registry)
