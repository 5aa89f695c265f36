"""SSH utilities for running Asterisk CLI commands on a remote PBX."""

import logging
import socket
from typing import Optional

import paramiko

from ..config.models import SSHConfig
from ..utils.errors import CommandError, CommandTimeout


class SSHHelper:
    """Helper class for SSH operations."""

    @staticmethod
    def create_client(config: SSHConfig, logger: logging.Logger, timeout: float = 10) -> paramiko.SSHClient:
        """
        Create SSH client with key authentication.

        Args:
            config: SSH connection configuration
            logger: Logger instance
            timeout: Connect and banner timeout in seconds

        Returns:
            paramiko.SSHClient: Connected client

        Raises:
            CommandError: If connection fails
        """
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        try:
            logger.debug(f"Connecting to {config.host}:{config.port} as {config.username}")

            client.connect(
                hostname=config.host,
                port=config.port,
                username=config.username,
                key_filename=config.ssh_key_path,
                timeout=timeout,
                banner_timeout=timeout
            )

            logger.debug(f"Successfully connected to {config.host}")
            return client

        except paramiko.AuthenticationException as e:
            logger.error(f"Authentication failed for {config.host}: {e}")
            raise CommandError(f"SSH authentication failed for {config.host}: {e}") from e

        except (paramiko.SSHException, OSError) as e:
            logger.error(f"SSH error connecting to {config.host}: {e}")
            raise CommandError(f"SSH connection to {config.host} failed: {e}") from e

    @staticmethod
    def exec_command(
        client: paramiko.SSHClient,
        command: str,
        timeout: float = 30,
        logger: Optional[logging.Logger] = None
    ) -> str:
        """
        Execute command on SSH client and return stdout.

        Args:
            client: Connected paramiko.SSHClient
            command: Command to execute
            timeout: Command timeout in seconds
            logger: Optional logger instance

        Returns:
            str: Command stdout

        Raises:
            CommandError: If command fails (non-zero exit code)
            CommandTimeout: If command times out
        """
        if logger:
            logger.debug(f"Executing command: {command}")

        try:
            stdin, stdout, stderr = client.exec_command(command, timeout=timeout)

            # Wait for command to complete
            exit_code = stdout.channel.recv_exit_status()

            stdout_data = stdout.read().decode('utf-8', errors='replace')
            stderr_data = stderr.read().decode('utf-8', errors='replace')

        except socket.timeout as e:
            raise CommandTimeout(f"Command timed out after {timeout}s: {command}") from e

        except paramiko.SSHException as e:
            raise CommandError(f"Command execution failed: {e}") from e

        if exit_code != 0:
            error_msg = f"Command failed with exit code {exit_code}: {stderr_data.strip()}"
            if logger:
                logger.error(error_msg)
            raise CommandError(error_msg)

        if logger:
            logger.debug(f"Command completed successfully ({len(stdout_data)} bytes)")

        return stdout_data

    @staticmethod
    def close_client(client: Optional[paramiko.SSHClient], logger: Optional[logging.Logger] = None) -> None:
        """
        Close SSH client connection.

        Args:
            client: paramiko.SSHClient instance
            logger: Optional logger instance
        """
        try:
            if client:
                client.close()
                if logger:
                    logger.debug("SSH connection closed")
        except Exception as e:
            if logger:
                logger.warning(f"Error closing SSH connection: {e}")
