"""Reconciliation of a single host block in an SSH client config file.

The config is parsed into a list of blocks. A line starting with ``Host ``
opens a block, and every following line (blank lines included) belongs to it
until the next ``Host`` line. Lines before the first ``Host`` line form a
preamble block. Reconciling drops the blocks for one alias, keeps every other
block verbatim and in order, and appends the freshly rendered block at the
end.

The file is rewritten with a plain read-modify-write and no locking. Two
concurrent runs against the same file race and the last writer wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ec2dev.constants import (
    SSH_CONFIG_FILE_MODE,
    SSH_DIR_MODE,
    SSH_EXIT_ON_FORWARD_FAILURE,
    SSH_HOST_DIRECTIVE,
    SSH_SERVER_ALIVE_INTERVAL,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SSHHostBlock:
    """Host entry written for the managed instance.

    Attributes
    ----------
    alias : str
        Host alias, unique in the reconciled file
    user : str
        Remote login user
    hostname : str
        Public address of the instance
    local_forward_port : int
        Port forwarded from localhost to the same port on the instance
    identity_file : str
        Private key path, written as given
    """

    alias: str
    user: str
    hostname: str
    local_forward_port: int
    identity_file: str

    def __post_init__(self) -> None:
        for field_name in ("alias", "user", "hostname", "identity_file"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"SSH host block {field_name} must be a non-empty string")

        if any(char.isspace() for char in self.alias):
            raise ValueError(f"SSH host alias must be a single token, got '{self.alias}'")

        if not isinstance(self.local_forward_port, int) or not (
            1 <= self.local_forward_port <= 65535
        ):
            raise ValueError(
                f"Port must be between 1-65535, got {self.local_forward_port}"
            )


@dataclass(frozen=True)
class ConfigBlock:
    """Contiguous run of original config lines.

    ``alias`` is None for the preamble and for ``Host`` lines naming several
    patterns; ``lines`` keep their original line endings.
    """

    alias: str | None
    lines: tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(self.lines)


def parse_host_alias(line: str) -> str | None:
    """Return the alias named by a ``Host`` line.

    Returns None when the line names more than one pattern, since such a
    block does not belong to a single alias. A trailing ``#`` comment is not
    part of the pattern list.
    """
    patterns = line[len(SSH_HOST_DIRECTIVE) :].split("#", 1)[0].split()
    if len(patterns) != 1:
        return None
    return patterns[0]


def parse_ssh_config(text: str) -> list[ConfigBlock]:
    """Split SSH config text into blocks.

    Parameters
    ----------
    text : str
        Full config file content

    Returns
    -------
    list[ConfigBlock]
        Blocks in file order; joining their text gives back ``text`` exactly
    """
    blocks: list[ConfigBlock] = []
    alias: str | None = None
    current: list[str] = []

    for line in text.splitlines(keepends=True):
        if line.startswith(SSH_HOST_DIRECTIVE):
            if current:
                blocks.append(ConfigBlock(alias=alias, lines=tuple(current)))
            alias = parse_host_alias(line)
            current = [line]
        else:
            current.append(line)

    if current:
        blocks.append(ConfigBlock(alias=alias, lines=tuple(current)))

    return blocks


def render_host_block(block: SSHHostBlock) -> str:
    """Serialize a host block in its fixed line order.

    Other tooling reads this layout, so field order and option values must
    stay exactly as they are.
    """
    return (
        f"{SSH_HOST_DIRECTIVE}{block.alias}\n"
        f"  User {block.user}\n"
        f"  HostName {block.hostname}\n"
        f"  LocalForward {block.local_forward_port} localhost:{block.local_forward_port}\n"
        f"  IdentityFile {block.identity_file}\n"
        f"  ServerAliveInterval {SSH_SERVER_ALIVE_INTERVAL}\n"
        f"  ExitOnForwardFailure {SSH_EXIT_ON_FORWARD_FAILURE}\n"
    )


def reconcile_ssh_config(text: str, alias: str, block: SSHHostBlock) -> str:
    """Replace the host block for ``alias`` and return the new config text.

    Parameters
    ----------
    text : str
        Existing config content
    alias : str
        Host alias to replace
    block : SSHHostBlock
        New entry, must use the same alias

    Returns
    -------
    str
        Config text with every other block unchanged and in order, and
        exactly one block for ``alias`` at the end
    """
    if block.alias != alias:
        raise ValueError(f"Host block alias '{block.alias}' does not match '{alias}'")

    blocks = parse_ssh_config(text)
    kept = [b for b in blocks if b.alias != alias]
    removed = len(blocks) - len(kept)
    if removed:
        logger.debug("Removed %d existing block(s) for host %s", removed, alias)

    out = "".join(b.text for b in kept)
    if out and not out.endswith("\n"):
        out += "\n"

    return out + render_host_block(block)


def atomic_file_write(path: Path, content: str, mode: int) -> None:
    """Write file atomically using a temp file in the same directory.

    Parameters
    ----------
    path : Path
        Target file path
    content : str
        File content to write
    mode : int
        Permission bits for the written file
    """
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)

    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


class SSHConfigReconciler:
    """Apply ``reconcile_ssh_config`` to an SSH config file on disk.

    Parameters
    ----------
    path : Path
        SSH client config file (usually ``~/.ssh/config``)
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def check_readable(self) -> None:
        """Fail early if an existing config file cannot be read or replaced.

        Raises
        ------
        PermissionError
            If the file exists but is not readable, or its directory is not
            writable
        """
        if not self.path.exists():
            return

        if not os.access(self.path, os.R_OK):
            raise PermissionError(f"SSH config {self.path} is not readable")

        directory = self.path.resolve().parent
        if not os.access(directory, os.W_OK):
            raise PermissionError(f"Directory {directory} is not writable")

    def read(self) -> str:
        """Return the current config text, empty if the file does not exist."""
        try:
            return self.path.read_text()
        except FileNotFoundError:
            return ""

    def reconcile(self, block: SSHHostBlock) -> str:
        """Rewrite the file so it holds ``block`` as the entry for its alias.

        A symlinked config is updated through the link; the link itself is
        left in place.

        Returns
        -------
        str
            The text that was written
        """
        target = self.path.resolve()
        original = self.read()
        updated = reconcile_ssh_config(original, block.alias, block)

        if target.exists():
            mode = target.stat().st_mode & 0o777
        else:
            target.parent.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)
            mode = SSH_CONFIG_FILE_MODE

        atomic_file_write(target, updated, mode)
        logger.debug("Wrote host %s to %s", block.alias, target)
        return updated
