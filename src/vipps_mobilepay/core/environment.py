"""
Layered environment used to configure the Vipps MobilePay client.

Values come from :data:`os.environ`, then from a ``.env`` file (which never
overrides a key that is already set), then from explicit overrides (which
always win).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

__all__ = [
    "ClientEnvironment",
    "build_environment",
    "find_env_file",
]


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_env_file(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return values

    for raw_line in data.splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip()] = _strip_quotes(value.strip())
    return values


def find_env_file(name: str = ".env", start: Optional[Path] = None) -> Optional[Path]:
    """
    Walk up from ``start`` (default: the working directory) looking for ``name``.

    Returns ``None`` when no ancestor directory holds the file.
    """
    directory = (start or Path.cwd()).resolve()
    for candidate in (directory, *directory.parents):
        path = candidate / name
        if path.is_file():
            return path
    return None


@dataclass(frozen=True)
class ClientEnvironment:
    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
    search_parents: bool = False,
) -> ClientEnvironment:
    """
    Assemble a :class:`ClientEnvironment` from multiple sources.

    ``base`` defaults to :data:`os.environ`. Set ``env_file`` to ``None`` to
    skip file loading. With ``search_parents`` the file is looked up in the
    working directory and its ancestors, as a project-root ``.env`` would be.
    """
    merged: Dict[str, str] = dict(base if base is not None else os.environ)

    if env_file is not None:
        path: Optional[Path] = Path(env_file)
        if search_parents and not path.is_absolute():
            path = find_env_file(env_file) or path
        for key, value in _parse_env_file(path).items():
            merged.setdefault(key, value)

    if overrides:
        merged.update(overrides)

    return ClientEnvironment(variables=merged)
