"""Subprocess helpers shared by the kubectl and ssh clients."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Mapping, Sequence
from contextlib import suppress

from podscope.clients.base import CommandError
from podscope.constants.values import STDERR_TAIL_BYTES
from podscope.core.streaming import CancelScope, LineQueue

logger = logging.getLogger(__name__)


def run_command_sync(
    cmd: Sequence[str],
    timeout: float,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run a command synchronously (thread-safe wrapper target)."""
    try:
        result = subprocess.run(
            list(cmd),
            capture_output=True,
            text=True,
            timeout=timeout,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as exc:
        raise CommandError(f"{cmd[0]} not found on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandError(f"{cmd[0]} timed out after {timeout:.0f}s") from exc
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise CommandError(stderr or f"{cmd[0]} command failed", result.returncode)
    return result.stdout


async def run_command(
    cmd: Sequence[str],
    timeout: float,
    env: Mapping[str, str] | None = None,
) -> str:
    return await asyncio.to_thread(run_command_sync, cmd, timeout, env)


async def _read_tail(stream: asyncio.StreamReader, limit: int) -> bytes:
    """Read ``stream`` to EOF, keeping only its last ``limit`` bytes."""
    tail = b""
    while chunk := await stream.read(4096):
        tail = (tail + chunk)[-limit:]
    return tail


def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.terminate()


async def stream_command(
    cmd: Sequence[str],
    out: LineQueue,
    scope: CancelScope,
    env: Mapping[str, str] | None = None,
) -> None:
    """Copy a command's stdout into ``out`` line by line.

    Cancelling ``scope`` terminates the process, which ends the read loop.
    A non-zero exit that was not caused by cancellation raises CommandError.
    stderr is drained alongside stdout; only its tail is kept for the error.
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as exc:
        raise CommandError(f"{cmd[0]} not found on PATH") from exc
    assert process.stdout is not None and process.stderr is not None
    scope.add_callback(lambda: _terminate(process))
    logger.debug("Streaming from pid %s: %s", process.pid, " ".join(cmd[:4]))
    stderr_task = asyncio.create_task(_read_tail(process.stderr, STDERR_TAIL_BYTES))
    reached_eof = False
    try:
        while not scope.cancelled:
            raw = await process.stdout.readline()
            if not raw:
                reached_eof = True
                break
            await out.put(raw.decode("utf-8", errors="replace").rstrip("\r\n"))
    finally:
        if not reached_eof:
            _terminate(process)
        await process.wait()
        stderr = await stderr_task
    if scope.cancelled:
        return
    if process.returncode:
        message = stderr.decode("utf-8", errors="replace").strip()
        raise CommandError(message or f"{cmd[0]} exited with {process.returncode}", process.returncode)
