"""Tests for SSHClient command building and connection handling."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from podscope.clients.base import (
    CommandError,
    LogOptions,
    NotConnectedError,
    PassphraseRequiredError,
)
from podscope.clients.ssh import SSHClient
from podscope.models.state.app_settings import SSHHost


@pytest.fixture
def host() -> SSHHost:
    return SSHHost(name="node-1", host="10.0.0.5", user="admin", port=2222, key_path="/keys/id_ed25519")


@pytest.fixture
def client(host: SSHHost) -> SSHClient:
    return SSHClient(host)


# =============================================================================
# Command plumbing
# =============================================================================


class TestCommands:
    """Tests for ssh and crictl command construction."""

    def test_ssh_command_batch_mode_without_passphrase(self, client: SSHClient) -> None:
        cmd = client._ssh_command("true")
        assert cmd[0] == "ssh"
        assert "BatchMode=yes" in cmd
        assert cmd[cmd.index("-p") + 1] == "2222"
        assert cmd[cmd.index("-i") + 1] == "/keys/id_ed25519"
        assert cmd[-2:] == ["admin@10.0.0.5", "true"]

    def test_passphrase_disables_batch_mode(self, client: SSHClient) -> None:
        client.set_passphrase("secret")
        assert "BatchMode=yes" not in client._ssh_command("true")

    def test_non_root_user_gets_sudo(self, client: SSHClient) -> None:
        command = client._logs_command("abc123", LogOptions(tail_lines=20, timestamps=True, follow=True))
        assert command == "sudo -n crictl logs --tail=20 --timestamps -f abc123 2>&1"

    def test_root_user_has_no_sudo(self) -> None:
        client = SSHClient(SSHHost(name="n", host="h"))
        assert client._logs_command("abc", LogOptions(tail_lines=5)) == "crictl logs --tail=5 abc 2>&1"

    def test_container_id_is_quoted(self, client: SSHClient) -> None:
        assert "'a b'" in client._logs_command("a b", LogOptions())

    def test_env_is_none_without_passphrase(self, client: SSHClient) -> None:
        assert client._env() is None


# =============================================================================
# Connection
# =============================================================================


class TestConnect:
    """Tests for connect, passphrase handling and close."""

    @pytest.mark.asyncio
    async def test_encrypted_key_requires_passphrase(self, client: SSHClient) -> None:
        with patch.object(client, "_key_is_encrypted", return_value=True):
            with pytest.raises(PassphraseRequiredError):
                await client.connect()
        assert not client.connected

    @pytest.mark.asyncio
    async def test_connect_success(self, client: SSHClient) -> None:
        run = AsyncMock(return_value="")
        with (
            patch.object(client, "_key_is_encrypted", return_value=False),
            patch("podscope.clients.ssh.run_command", run),
        ):
            await client.connect()
        assert client.connected
        assert run.await_args.args[0][-1] == "true"

    @pytest.mark.asyncio
    async def test_wrong_passphrase_reports_auth_failure(self, client: SSHClient) -> None:
        client.set_passphrase("wrong")
        run = AsyncMock(side_effect=CommandError("Permission denied (publickey)."))
        with patch("podscope.clients.ssh.run_command", run):
            with pytest.raises(CommandError, match="authentication failed"):
                await client.connect()
        assert not client.connected
        client.close()

    @pytest.mark.asyncio
    async def test_commands_need_connection(self, client: SSHClient) -> None:
        with pytest.raises(NotConnectedError):
            await client.list_containers()

    @pytest.mark.asyncio
    async def test_list_containers_parses_crictl(self, client: SSHClient) -> None:
        client.connected = True
        payload = '{"containers": [{"id": "abc", "metadata": {"name": "web"}, "state": "CONTAINER_RUNNING"}]}'
        run = AsyncMock(return_value=payload)
        with patch("podscope.clients.ssh.run_command", run):
            containers = await client.list_containers()
        assert [container.name for container in containers] == ["web"]
        assert run.await_args.args[0][-1] == "sudo -n crictl ps -a -o json"

    @pytest.mark.asyncio
    async def test_close_removes_askpass_helper(self, client: SSHClient) -> None:
        client.set_passphrase("secret")
        env = client._env()
        assert env is not None
        assert env["SSH_ASKPASS_REQUIRE"] == "force"
        helper = client._askpass_path
        assert helper is not None and helper.exists()

        client.close()

        assert not helper.exists()
        assert client._env() is None
