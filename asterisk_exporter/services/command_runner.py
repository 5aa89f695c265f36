"""Runs Asterisk CLI commands, locally or on a remote PBX over SSH."""

import logging
import shlex
import subprocess
from typing import List

from ..config.models import AsteriskConfig
from ..utils.errors import CommandError, CommandTimeout
from .ssh_helper import SSHHelper


class CommandRunner:
    """
    Execute 'asterisk -rx <command>' and return its stdout.

    When ``config.ssh`` is set every command opens its own SSH connection,
    otherwise the binary is invoked as a local subprocess. Both paths raise
    CommandError / CommandTimeout on failure.
    """

    def __init__(self, config: AsteriskConfig, logger: logging.Logger):
        """
        Initialize command runner.

        Args:
            config: Asterisk CLI configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    def build_argv(self, command: str) -> List[str]:
        """Argument vector for a CLI command."""
        return [self.config.binary, "-rx", command]

    def run(self, command: str) -> str:
        """
        Run a single CLI command.

        Args:
            command: Asterisk CLI command (e.g., "sip show peers")

        Returns:
            str: Command stdout

        Raises:
            CommandError: If the command cannot run or exits non-zero
            CommandTimeout: If the command exceeds the configured timeout
        """
        if self.config.ssh is not None:
            return self._run_remote(command)
        return self._run_local(command)

    def _run_local(self, command: str) -> str:
        argv = self.build_argv(command)
        self.logger.debug(f"Executing command: {' '.join(argv)}")

        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.config.command_timeout,
                check=False
            )
        except subprocess.TimeoutExpired as e:
            raise CommandTimeout(
                f"Command timed out after {self.config.command_timeout}s: {command}"
            ) from e
        except OSError as e:
            raise CommandError(f"Cannot execute {self.config.binary}: {e}") from e

        if completed.returncode != 0:
            raise CommandError(
                f"Command failed with exit code {completed.returncode}: {completed.stderr.strip()}"
            )

        self.logger.debug(f"Command completed successfully ({len(completed.stdout)} bytes)")
        return completed.stdout

    def _run_remote(self, command: str) -> str:
        remote_command = " ".join(shlex.quote(arg) for arg in self.build_argv(command))
        client = None
        try:
            client = SSHHelper.create_client(self.config.ssh, self.logger)
            return SSHHelper.exec_command(
                client,
                remote_command,
                timeout=self.config.command_timeout,
                logger=self.logger
            )
        finally:
            if client:
                SSHHelper.close_client(client, self.logger)
