"""Parsing of line-oriented git status and name-status output."""

import os
from typing import Dict

from status_tree.status_code import StatusCode


# Single-character escapes git uses when quoting paths
_C_ESCAPES = {
    'a': 0x07,
    'b': 0x08,
    't': 0x09,
    'n': 0x0a,
    'v': 0x0b,
    'f': 0x0c,
    'r': 0x0d,
    '"': 0x22,
    '\\': 0x5c,
}


def _unquote(path: str) -> str:
    """
    Undo the C-style quoting git applies to paths with unusual characters.

    With `core.quotePath` on (git's default) every non-ASCII byte is written
    as an octal escape, so the escaped bytes are collected and decoded
    together as UTF-8.

    Args:
        path: Path as printed by git, quoted or not

    Returns:
        The path as it appears on disk
    """
    if len(path) < 2 or not path.startswith('"') or not path.endswith('"'):
        return path

    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != '\\' or i + 1 >= len(body):
            raw.extend(ch.encode('utf-8', errors='surrogateescape'))
            i += 1
            continue

        octal = body[i + 1:i + 4]
        if len(octal) == 3 and all(c in '01234567' for c in octal):
            raw.append(int(octal, 8) & 0xff)
            i += 4
            continue

        escaped = _C_ESCAPES.get(body[i + 1])
        if escaped is None:
            raw.extend(b'\\')
            i += 1
            continue

        raw.append(escaped)
        i += 2

    return raw.decode('utf-8', errors='surrogateescape')


def _absolute(base_path: str, relative_path: str) -> str:
    """Join a git relative path onto a directory."""
    return os.path.normpath(os.path.join(base_path, *relative_path.split('/')))


def parse_porcelain_status(output: str, base_path: str) -> Dict[str, StatusCode]:
    """
    Parse `git status --porcelain` output.

    Each line is `XY path`; renames and copies read `XY old -> new` and are
    keyed by the new path only. Ignored entries (`!!`) are skipped.

    Args:
        output: Raw porcelain output
        base_path: Directory the paths are relative to

    Returns:
        Mapping of absolute path to status code
    """
    changed: Dict[str, StatusCode] = {}
    for line in output.splitlines():
        if len(line) < 4:
            continue

        xy = line[:2]
        if xy == "!!":
            continue

        file_part = line[3:]
        if 'R' in xy or 'C' in xy:
            parts = file_part.split(" -> ")
            if len(parts) == 2:
                file_part = parts[1]

        file_part = _unquote(file_part)
        if not file_part:
            continue

        changed[_absolute(base_path, file_part)] = StatusCode.from_porcelain(xy)

    return changed


def parse_name_status(output: str, base_path: str) -> Dict[str, StatusCode]:
    """
    Parse `git diff --name-status` output.

    Each line is a status letter (renames and copies carry a similarity score,
    e.g. `R100`) followed by a tab or spaces and the path. Renames and copies
    list old and new paths; the new one is used.

    Args:
        output: Raw name-status output
        base_path: Directory the paths are relative to

    Returns:
        Mapping of absolute path to status code
    """
    changed: Dict[str, StatusCode] = {}
    for line in output.splitlines():
        if not line.strip():
            continue

        parts = line.split('\t')
        if len(parts) == 1:
            parts = line.split(None, 1)

            # Without tabs only the last field of a rename or copy is the new path
            if len(parts) == 2 and parts[0][:1] in ('R', 'C'):
                parts = [parts[0], parts[1].split()[-1]]

        if len(parts) < 2:
            continue

        letter = parts[0][:1]
        file_part = _unquote(parts[-1].strip())
        if not file_part:
            continue

        changed[_absolute(base_path, file_part)] = StatusCode.from_letter(letter)

    return changed
