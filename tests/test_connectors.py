"""Tests for the connectors and the filesystem scanner built on them."""

from unittest.mock import MagicMock, patch

import pytest
from paramiko.ssh_exception import AuthenticationException

from magento_doctor.connector.base import CommandError
from magento_doctor.connector.local import LocalConnector
from magento_doctor.connector.ssh import SSHConfig, SSHConnector
from magento_doctor.scanner.filesystem import Filesystem

from conftest import failed, ok


class TestLocalConnector:
    def test_run_captures_output(self):
        result = LocalConnector().run("echo hello")

        assert result.success
        assert result.stdout.strip() == "hello"

    def test_check_raises_on_failure(self):
        with pytest.raises(CommandError):
            LocalConnector().check("exit 3")

    def test_timeout_is_a_failed_result(self):
        result = LocalConnector(timeout=0.1).run("sleep 2")

        assert result.exit_code == 124
        assert "timed out" in result.stderr

    def test_file_helpers(self, tmp_path):
        (tmp_path / "env.php").write_text("<?php return [];")
        connector = LocalConnector()

        assert connector.file_exists(str(tmp_path / "env.php"))
        assert not connector.file_exists(str(tmp_path / "config.php"))
        assert connector.read_file(str(tmp_path / "env.php")) == "<?php return [];"
        assert connector.read_file(str(tmp_path / "missing")) is None
        assert connector.list_dir(str(tmp_path)) == ["env.php"]


class TestSSHConnector:
    def test_run_requires_connection(self):
        with pytest.raises(RuntimeError, match="Not connected"):
            SSHConnector(SSHConfig(host="shop")).run("php -v")

    def test_authentication_failure_is_connection_error(self):
        with patch("magento_doctor.connector.ssh.paramiko.SSHClient") as client_class:
            client_class.return_value.connect.side_effect = AuthenticationException("denied")

            with pytest.raises(ConnectionError, match="Authentication failed"):
                SSHConnector(SSHConfig(host="shop")).connect()

    def test_sudo_wraps_commands(self):
        with patch("magento_doctor.connector.ssh.paramiko.SSHClient") as client_class:
            client = client_class.return_value
            stdout, stderr = MagicMock(), MagicMock()
            stdout.channel.recv_exit_status.return_value = 0
            stdout.read.return_value = b"ok"
            stderr.read.return_value = b""
            client.exec_command.return_value = (MagicMock(), stdout, stderr)

            with SSHConnector(SSHConfig(host="shop", user="deploy", use_sudo=True)) as ssh:
                result = ssh.run("cat /var/www/app/etc/env.php")

        command = client.exec_command.call_args[0][0]
        assert command == "sudo -n sh -c 'cat /var/www/app/etc/env.php'"
        assert result.stdout == "ok"
        client.close.assert_called_once()


class TestFilesystem:
    def test_paths(self, mock_connector):
        fs = Filesystem(mock_connector, "/srv/shop/")

        assert fs.path("generated") == "/srv/shop/generated"
        assert fs.path("/var/log") == "/var/log"
        assert fs.path() == "/srv/shop"

    def test_size(self, mock_connector):
        mock_connector.run.return_value = ok("2147483648\t/srv/shop/generated\n")
        assert Filesystem(mock_connector, "/srv/shop").size("generated") == 2147483648

        mock_connector.run.return_value = failed()
        assert Filesystem(mock_connector, "/srv/shop").size("missing") == 0

    def test_large_files(self, mock_connector):
        mock_connector.run.return_value = ok(
            "15728640\t/srv/shop/pub/media/banner.png\ngarbage\n20971520\t/srv/shop/pub/media/video.mp4\n"
        )

        files = Filesystem(mock_connector, "/srv/shop").large_files("pub/media", 10)

        assert files == [
            ("/srv/shop/pub/media/banner.png", 15728640),
            ("/srv/shop/pub/media/video.mp4", 20971520),
        ]
        assert "-size +10M" in mock_connector.run.call_args[0][0]
