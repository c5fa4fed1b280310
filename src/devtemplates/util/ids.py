from __future__ import annotations

"""Name and version validation.

CONTRACT
- Inputs: Project names, database names, PHP versions
- Outputs (required):
  - validate_*() returns the validated value or raises
- Invariants:
  - Project names match `[a-z0-9][a-z0-9_-]{0,62}` (Compose project names)
  - Database names match `[A-Za-z_][A-Za-z0-9_]{0,62}`
  - PHP versions match `<major>.<minor>`
- Failure:
  - Raises ValueError on invalid input
"""

import re

_PROJECT_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,62}$")
_DB_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")
_PHP_VERSION_RE = re.compile(r"^\d+\.\d+$")


def validate_project_name(name: str) -> str:
    if not _PROJECT_NAME_RE.fullmatch(name):
        raise ValueError(
            "Invalid project name. Use 1-63 chars: lowercase letters/digits, plus '_-'. Must "
            "start with a letter or digit."
        )
    return name


def validate_db_name(name: str) -> str:
    if not _DB_NAME_RE.fullmatch(name):
        raise ValueError(
            "Invalid database name. Use 1-63 chars: letters/digits/underscore. Must not start "
            "with a digit."
        )
    return name


def validate_php_version(version: str) -> str:
    if not _PHP_VERSION_RE.fullmatch(version):
        raise ValueError(f"Invalid PHP version {version!r}. Expected <major>.<minor>, e.g. 8.3.")
    return version
