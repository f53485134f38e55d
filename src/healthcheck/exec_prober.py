"""
Exec Prober

Runs a command without a shell; exit status 0 means healthy.

Command validation:
- An empty command is rejected (EmptyCommandError).
- Without an explicit argument list the command must be a single token.
  A string such as ``"curl -f localhost"`` is rejected
  (InvalidCommandFormatError) rather than split: quoting rules cannot be
  reproduced safely without a shell. Pass ``command="curl",
  args=["-f", "localhost"]`` instead.

The child runs under a context scoped to the prober timeout (a zero
timeout inherits the caller context unchanged). When that context ends
the child is killed, and so is a child whose probing task is cancelled.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import asyncio
from contextlib import suppress

from src.core.config.constants import (
    DEFAULT_TIMEOUT,
    MAX_EXEC_OUTPUT,
    TRUNCATION_MARKER,
    ProberKind,
)
from src.core.context import CallContext
from src.core.exceptions import (
    EmptyCommandError,
    ExecCommandError,
    InvalidCommandFormatError,
)
from src.healthcheck.base_prober import BaseProber
from src.healthcheck.types import Target


def validate_command(command: str, args: list[str]) -> tuple[str, list[str]]:
    """
    Resolve the executable and its arguments.

    Raises:
        EmptyCommandError: Command is empty or whitespace only
        InvalidCommandFormatError: Command contains whitespace and no args were given
    """
    if not command.strip():
        raise EmptyCommandError()
    if args:
        return command, list(args)
    if any(ch.isspace() for ch in command):
        raise InvalidCommandFormatError(command)
    return command, []


def truncate_output(output: bytes, limit: int = MAX_EXEC_OUTPUT) -> str:
    """Decode ``output`` and cut it at ``limit`` bytes with an explicit marker."""
    if len(output) <= limit:
        return output.decode("utf-8", errors="replace")
    return output[:limit].decode("utf-8", errors="replace") + TRUNCATION_MARKER


async def _terminate(process: asyncio.subprocess.Process, communicate: asyncio.Future) -> None:
    """Kill the child, drop its pending output read and reap it."""
    if process.returncode is None:
        with suppress(ProcessLookupError):
            process.kill()
    communicate.cancel()
    with suppress(asyncio.CancelledError):
        await communicate
    await process.wait()


class ExecProber(BaseProber):
    """
    Command execution prober.

    Target fields used: command, args.

    Usage:
        prober = ExecProber(timeout=10.0)
        result = await prober.probe(ctx, Target(command="pg_isready", args=["-q"]))
    """

    kind = ProberKind.EXEC.value

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, max_output: int = MAX_EXEC_OUTPUT):
        super().__init__(timeout)
        self._max_output = max_output

    async def _probe_internal(self, ctx: CallContext, target: Target):
        try:
            program, args = validate_command(target.command, target.args)
        except (EmptyCommandError, InvalidCommandFormatError) as e:
            return "", e

        run_ctx = ctx.with_timeout(self.timeout) if self.timeout > 0 else ctx

        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            return "", ExecCommandError.from_exception(
                e, f"command failed: {e}", command=program
            )

        communicate = asyncio.ensure_future(process.communicate())
        watcher = asyncio.ensure_future(run_ctx.wait())
        try:
            done, _ = await asyncio.wait(
                {communicate, watcher}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            await _terminate(process, communicate)
            raise
        finally:
            watcher.cancel()

        if communicate not in done:
            with suppress(ProcessLookupError):
                process.kill()
            stdout, _ = await communicate
            err = run_ctx.err()
            return truncate_output(stdout or b"", self._max_output), ExecCommandError(
                f"command failed: {err}", details={"command": program}
            )

        stdout, _ = communicate.result()
        if process.returncode != 0:
            return truncate_output(stdout or b"", self._max_output), ExecCommandError(
                f"command failed: exit status {process.returncode}",
                details={"command": program, "exit_code": process.returncode},
            )
        return (stdout or b"").decode("utf-8", errors="replace").strip(), None
