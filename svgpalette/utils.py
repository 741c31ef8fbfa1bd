from __future__ import annotations

import asyncio
import shlex
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass
class CmdResult:
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_cmd(args: Sequence[str], timeout_sec: float = 300) -> CmdResult:
    """Run a command without a shell, returning stdout/stderr as bytes.

    A command that cannot be started (missing, not executable, bad format) is
    reported as exit code 127 and a timeout as 124, so callers only ever look
    at the result.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return CmdResult(returncode=127, stdout=b"", stderr=str(e).encode())

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_sec)
    except asyncio.TimeoutError:
        proc.kill()
        try:
            await proc.wait()
        except Exception:
            # Ignore wait errors on kill path
            pass
        return CmdResult(
            returncode=124, stdout=b"", stderr=f"Timeout after {timeout_sec}s".encode()
        )

    return CmdResult(returncode=proc.returncode or 0, stdout=stdout or b"", stderr=stderr or b"")


def describe(args: Sequence[str]) -> str:
    return shlex.join(args)


def tail(data: bytes, max_chars: int = 500) -> str:
    """Last ``max_chars`` characters of command output, decoded leniently."""
    text = data.decode("utf-8", errors="replace").strip()
    if len(text) <= max_chars:
        return text
    return "..." + text[-max_chars:]
