"""OpenSSH-backed remote host client running crictl on a node."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shlex
import stat
import tempfile
from contextlib import suppress
from pathlib import Path

from podscope.clients.base import (
    CommandError,
    LogOptions,
    NotConnectedError,
    PassphraseRequiredError,
    RemoteHostClient,
)
from podscope.clients.parsers import CrictlParser
from podscope.clients.process import run_command, run_command_sync, stream_command
from podscope.constants.timeouts import SSH_COMMAND_TIMEOUT, SSH_CONNECT_TIMEOUT
from podscope.core.streaming import CancelScope, LineQueue
from podscope.models.core.resources import NodeInfo, RemoteContainer
from podscope.models.state.app_settings import SSHHost

logger = logging.getLogger(__name__)

_PASSPHRASE_ENV = "PODSCOPE_SSH_PASSPHRASE"
_ASKPASS_SCRIPT = f'#!/bin/sh\nprintf \'%s\\n\' "${_PASSPHRASE_ENV}"\n'

_NODE_INFO_SCRIPT = "; ".join(
    (
        'echo "hostname=$(hostname)"',
        'echo "kernel=$(uname -r)"',
        'echo "arch=$(uname -m)"',
        'echo "os=$(. /etc/os-release 2>/dev/null && echo $PRETTY_NAME)"',
        'echo "cpus=$(nproc 2>/dev/null)"',
        "echo \"mem_kib=$(awk '/MemTotal/ {{print $2}}' /proc/meminfo 2>/dev/null)\"",
        'echo "uptime=$(uptime -p 2>/dev/null)"',
        "echo \"runtime=$({sudo}crictl version 2>/dev/null | grep RuntimeVersion | awk '{{print $2}}')\"",
    )
)


class SSHClient(RemoteHostClient):
    """Runs crictl on one SSH host.

    Keys protected by a passphrase are detected before connecting; once a
    passphrase is supplied it is handed to ssh through a private
    SSH_ASKPASS helper that lives until ``close``.
    """

    def __init__(self, host: SSHHost, parser: CrictlParser | None = None) -> None:
        self.host = host
        self._parser = parser or CrictlParser()
        self._passphrase: str | None = None
        self._askpass_path: Path | None = None
        self.connected = False

    # ------------------------------------------------------------------
    # Command plumbing
    # ------------------------------------------------------------------

    @property
    def _sudo(self) -> str:
        return "" if self.host.user == "root" else "sudo -n "

    def _ssh_command(self, remote: str) -> list[str]:
        cmd = [
            "ssh",
            "-o", f"ConnectTimeout={SSH_CONNECT_TIMEOUT}",
            "-o", "StrictHostKeyChecking=accept-new",
            "-o", "PasswordAuthentication=no",
            "-o", "KbdInteractiveAuthentication=no",
            "-p", str(self.host.port),
        ]
        if self._passphrase is None:
            cmd.extend(["-o", "BatchMode=yes"])
        if self.host.key_path:
            cmd.extend(["-i", self.host.key_path, "-o", "IdentitiesOnly=yes"])
        cmd.extend([self.host.target, remote])
        return cmd

    def _env(self) -> dict[str, str] | None:
        if self._passphrase is None:
            return None
        env = dict(os.environ)
        env.update(
            {
                "SSH_ASKPASS": str(self._ensure_askpass()),
                "SSH_ASKPASS_REQUIRE": "force",
                "DISPLAY": env.get("DISPLAY", ":0"),
                _PASSPHRASE_ENV: self._passphrase,
            }
        )
        return env

    def _ensure_askpass(self) -> Path:
        if self._askpass_path is None:
            handle, name = tempfile.mkstemp(prefix="podscope-askpass-", suffix=".sh")
            with os.fdopen(handle, "w", encoding="utf-8") as script:
                script.write(_ASKPASS_SCRIPT)
            os.chmod(name, stat.S_IRWXU)
            self._askpass_path = Path(name)
        return self._askpass_path

    async def _run_remote(self, remote: str, timeout: int = SSH_COMMAND_TIMEOUT) -> str:
        if not self.connected:
            raise NotConnectedError(f"not connected to {self.host.name}")
        logger.debug("ssh %s: %s", self.host.name, remote)
        return await run_command(self._ssh_command(remote), timeout, self._env())

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def _key_is_encrypted(self) -> bool:
        if not self.host.key_path:
            return False
        try:
            run_command_sync(["ssh-keygen", "-y", "-P", "", "-f", self.host.key_path], SSH_CONNECT_TIMEOUT)
        except CommandError as exc:
            return "passphrase" in str(exc).lower()
        return False

    async def connect(self) -> None:
        if self._passphrase is None and await asyncio.to_thread(self._key_is_encrypted):
            raise PassphraseRequiredError(f"key {self.host.key_path} is passphrase protected")
        try:
            await run_command(self._ssh_command("true"), SSH_CONNECT_TIMEOUT + 5, self._env())
        except CommandError as exc:
            self.connected = False
            if self._passphrase is not None and "permission denied" in str(exc).lower():
                raise CommandError(f"authentication failed for {self.host.target}") from exc
            raise
        self.connected = True
        logger.info("Connected to %s (%s:%d)", self.host.name, self.host.host, self.host.port)

    def set_passphrase(self, passphrase: str) -> None:
        self._passphrase = passphrase

    def close(self) -> None:
        self.connected = False
        self._passphrase = None
        if self._askpass_path is not None:
            with suppress(FileNotFoundError):
                self._askpass_path.unlink()
            self._askpass_path = None

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    async def list_containers(self) -> list[RemoteContainer]:
        output = await self._run_remote(f"{self._sudo}crictl ps -a -o json")
        try:
            payload = json.loads(output or "{}")
        except json.JSONDecodeError as exc:
            raise CommandError(f"unexpected crictl output: {exc}") from exc
        return self._parser.parse_containers(payload)

    async def node_info(self) -> NodeInfo:
        output = await self._run_remote(_NODE_INFO_SCRIPT.format(sudo=self._sudo))
        return self._parser.parse_node_info(output)

    def _logs_command(self, container_id: str, options: LogOptions) -> str:
        parts = [f"{self._sudo}crictl", "logs", f"--tail={options.tail_lines}"]
        if options.timestamps:
            parts.append("--timestamps")
        if options.follow:
            parts.append("-f")
        parts.append(shlex.quote(container_id))
        return " ".join(parts) + " 2>&1"

    async def container_logs(self, container_id: str, options: LogOptions) -> list[str]:
        output = await self._run_remote(self._logs_command(container_id, options))
        return output.splitlines()

    async def stream_container_logs(
        self,
        container_id: str,
        options: LogOptions,
        out: LineQueue,
        scope: CancelScope,
    ) -> None:
        if not self.connected:
            raise NotConnectedError(f"not connected to {self.host.name}")
        follow = LogOptions(
            container=options.container,
            tail_lines=options.tail_lines,
            timestamps=options.timestamps,
            follow=True,
        )
        await stream_command(
            self._ssh_command(self._logs_command(container_id, follow)),
            out,
            scope,
            self._env(),
        )
