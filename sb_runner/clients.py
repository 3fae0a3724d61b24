"""
Client registry: binary locations, native build commands and launch wrappers.

Each supported client maps to one ClientSpec. Resolving a client yields an
Invocation that satisfies the harness protocol once ``--db <dir>`` is
appended.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

from sb_common.errors import BuildError, HarnessError
from sb_runner.process import ProcessLauncher, ProcessSpec, SubprocessLauncher

logger = logging.getLogger(__name__)

REFERENCE_CLIENT = "reference"


@dataclass(frozen=True)
class Invocation:
    """Resolved command used to launch a harness."""

    command: tuple[str, ...]
    extra_args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)

    def argv(self, db_dir: Path) -> list[str]:
        return [*self.command, *self.extra_args, "--db", str(db_dir)]


def _direct(binary: Path) -> Invocation:
    return Invocation(command=(str(binary),))


def _java_jar(binary: Path) -> Invocation:
    return Invocation(command=("java",), extra_args=("-jar", str(binary)))


def _python_module(_: Path) -> Invocation:
    return Invocation(command=(sys.executable, "-m", "sb_harness"))


@dataclass(frozen=True)
class ClientSpec:
    """How one client's harness is located, built and launched."""

    name: str
    binary_parts: tuple[str, ...]
    build_command: Optional[tuple[str, ...]]
    launcher: Callable[[Path], Invocation] = _direct

    def binary_path(self, harnesses_dir: Path) -> Path:
        return harnesses_dir.joinpath(self.name, *self.binary_parts)

    def build_argv(self, harnesses_dir: Path) -> list[str]:
        if self.build_command is None:
            return []
        binary = self.binary_path(harnesses_dir)
        source = harnesses_dir / self.name
        return [
            part.format(binary=binary, source=source) for part in self.build_command
        ]


CLIENTS: dict[str, ClientSpec] = {
    spec.name: spec
    for spec in (
        ClientSpec("geth", ("geth-harness",), ("go", "build", "-o", "{binary}", ".")),
        ClientSpec("erigon", ("erigon-harness",), ("go", "build", "-o", "{binary}", ".")),
        ClientSpec(
            "reth",
            ("target", "release", "reth-harness"),
            ("cargo", "build", "--release"),
        ),
        ClientSpec(
            "ethrex",
            ("target", "release", "ethrex-harness"),
            ("cargo", "build", "--release"),
        ),
        ClientSpec(
            "besu",
            ("build", "libs", "besu-harness.jar"),
            ("{source}/gradlew", "shadowJar"),
            launcher=_java_jar,
        ),
        ClientSpec(
            "nethermind",
            ("bin", "Release", "net10.0", "Nethermind.Harness"),
            ("dotnet", "build", "-c", "Release"),
        ),
        ClientSpec(REFERENCE_CLIENT, (), None, launcher=_python_module),
    )
}

KNOWN_CLIENTS: tuple[str, ...] = tuple(CLIENTS)


def resolve_binary(harnesses_dir: Path, client: str) -> Path:
    """Return the expected harness binary path for ``client``."""
    spec = CLIENTS.get(client)
    if spec is None:
        return harnesses_dir / client / f"{client}-harness"
    return spec.binary_path(harnesses_dir)


def resolve_invocation(client: str, binary: Path) -> Invocation:
    """Return the launch command for ``client`` given its built binary."""
    spec = CLIENTS.get(client)
    if spec is None:
        return _direct(binary)
    return spec.launcher(binary)


def needs_build(client: str) -> bool:
    spec = CLIENTS.get(client)
    return spec is None or spec.build_command is not None


def build_client(
    harnesses_dir: Path,
    client: str,
    launcher: ProcessLauncher | None = None,
) -> Path:
    """Build ``client``'s harness with its native tool and return the binary path.

    Build output is forwarded to stderr.

    Raises:
        BuildError: unknown client, failed build, or missing binary afterwards.
    """
    spec = CLIENTS.get(client)
    if spec is None:
        raise BuildError(f"unknown client {client!r}", context={"client": client})

    binary = spec.binary_path(harnesses_dir)
    if spec.build_command is None:
        return binary

    source_dir = harnesses_dir / client
    logger.info(
        "building harness", extra={"client": client, "source_dir": str(source_dir)}
    )

    process_spec = ProcessSpec(
        argv=spec.build_argv(harnesses_dir),
        cwd=source_dir,
        capture_output=False,
    )
    try:
        outcome = (launcher or SubprocessLauncher()).run(process_spec)
    except HarnessError as exc:
        raise BuildError(
            f"build {client} failed to start",
            context={"client": client, "command": process_spec.command_line()},
            cause=exc,
        ) from exc

    if not outcome.succeeded:
        raise BuildError(
            f"build {client} failed",
            context={"client": client, "returncode": outcome.returncode},
        )
    if not binary.exists():
        raise BuildError(
            f"build {client}: binary not found at {binary}",
            context={"client": client, "binary": binary},
        )

    logger.info("harness built", extra={"client": client, "binary": str(binary)})
    return binary
