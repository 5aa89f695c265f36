"""Tests for the Asterisk CLI command runner."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from conftest import fake_asterisk

from asterisk_exporter.config.models import AsteriskConfig, SSHConfig
from asterisk_exporter.services.command_runner import CommandRunner
from asterisk_exporter.utils.errors import CommandError, CommandTimeout


@pytest.fixture
def local_config():
    return AsteriskConfig(binary="/usr/sbin/asterisk", command_timeout=3)


@pytest.fixture
def remote_config():
    return AsteriskConfig(
        command_timeout=4,
        ssh=SSHConfig(host="pbx.example.com", ssh_key_path="/keys/id_ed25519"),
    )


def test_local_run_success(local_config, logger):
    """Local commands are run as 'asterisk -rx <command>'."""
    runner = CommandRunner(local_config, logger)

    with patch("asterisk_exporter.services.command_runner.subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="1 active SIP dialog\n", stderr=""
        )

        output = runner.run("sip show channels")

    assert output == "1 active SIP dialog\n"
    args, kwargs = mock_run.call_args
    assert args[0] == ["/usr/sbin/asterisk", "-rx", "sip show channels"]
    assert kwargs["timeout"] == 3


def test_local_run_nonzero_exit(local_config, logger):
    """Non-zero exit codes raise CommandError."""
    runner = CommandRunner(local_config, logger)

    with patch("asterisk_exporter.services.command_runner.subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="Unable to connect to remote asterisk"
        )

        with pytest.raises(CommandError, match="Unable to connect"):
            runner.run("sip show peers")


def test_local_run_timeout(local_config, logger):
    """Subprocess timeouts raise CommandTimeout."""
    runner = CommandRunner(local_config, logger)

    with patch("asterisk_exporter.services.command_runner.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="asterisk", timeout=3)

        with pytest.raises(CommandTimeout):
            runner.run("sip show peers")


def test_local_binary_missing(local_config, logger):
    """Missing binary raises CommandError."""
    runner = CommandRunner(local_config, logger)

    with patch("asterisk_exporter.services.command_runner.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("asterisk")

        with pytest.raises(CommandError):
            runner.run("sip show peers")


def test_remote_run_uses_ssh(remote_config, logger):
    """With SSH configured the quoted command runs remotely and the client is closed."""
    runner = CommandRunner(remote_config, logger)

    with patch("asterisk_exporter.services.command_runner.SSHHelper") as mock_ssh:
        mock_client = MagicMock()
        mock_ssh.create_client.return_value = mock_client
        mock_ssh.exec_command.return_value = "0 active SIP subscriptions\n"

        output = runner.run("sip show subscriptions")

    assert output == "0 active SIP subscriptions\n"
    args, kwargs = mock_ssh.exec_command.call_args
    assert args[0] is mock_client
    assert args[1] == "asterisk -rx 'sip show subscriptions'"
    assert kwargs["timeout"] == 4
    mock_ssh.close_client.assert_called_once()


def test_remote_connection_failure(remote_config, logger):
    """SSH connection errors propagate as CommandError."""
    runner = CommandRunner(remote_config, logger)

    with patch("asterisk_exporter.services.command_runner.SSHHelper") as mock_ssh:
        mock_ssh.create_client.side_effect = CommandError("SSH connection to pbx.example.com failed")

        with pytest.raises(CommandError):
            runner.run("sip show peers")

        mock_ssh.exec_command.assert_not_called()
        mock_ssh.close_client.assert_not_called()


def test_remote_command_failure_closes_client(remote_config, logger):
    """Client is closed even when the remote command fails."""
    runner = CommandRunner(remote_config, logger)

    with patch("asterisk_exporter.services.command_runner.SSHHelper") as mock_ssh:
        mock_ssh.create_client.return_value = MagicMock()
        mock_ssh.exec_command.side_effect = CommandTimeout("Command timed out after 4s")

        with pytest.raises(CommandTimeout):
            runner.run("sip show peers")

        mock_ssh.close_client.assert_called_once()


def test_local_run_decodes_with_replacement(local_config, logger):
    """Output is decoded as UTF-8 with replacement, like the SSH path."""
    runner = CommandRunner(local_config, logger)

    with patch("asterisk_exporter.services.command_runner.subprocess.run") as mock_run:
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")

        runner.run("sip show peers")

    _, kwargs = mock_run.call_args
    assert kwargs["encoding"] == "utf-8"
    assert kwargs["errors"] == "replace"


def test_local_run_latin1_output(tmp_path, logger):
    """Non-UTF-8 bytes in peer names do not break the command."""
    binary = fake_asterisk(tmp_path, {"sip show peers": "hélène/hélène  OK (12 ms)\n"}, encoding="latin-1")
    runner = CommandRunner(AsteriskConfig(binary=binary), logger)

    output = runner.run("sip show peers")

    assert output == "h�l�ne/h�l�ne  OK (12 ms)\n"


def test_local_run_real_process_failure(tmp_path, logger):
    """A real non-zero exit surfaces stderr in the CommandError."""
    binary = fake_asterisk(tmp_path, {})
    runner = CommandRunner(AsteriskConfig(binary=binary), logger)

    with pytest.raises(CommandError, match="No such command 'sip show peers'"):
        runner.run("sip show peers")
