from __future__ import annotations

"""Compose and env file text edits.

CONTRACT
- Inputs: compose YAML text, env file text
- Outputs:
  - prefix_container_names() returns (new_text, container_names)
  - set_env_value() returns new env text
  - read_env_file() returns a dict of KEY -> VALUE
- Invariants:
  - Edits are textual; comments, ordering and quoting are preserved
  - Each container_name value gets the prefix exactly once per call
- Failure:
  - Raises TemplateError if the rewritten compose text is not valid YAML
"""

import re
from pathlib import Path

import yaml
from loguru import logger

from ..errors import TemplateError

_CONTAINER_NAME_RE = re.compile(
    r"^(?P<key>[ \t]*container_name:[ \t]*)(?P<quote>[\"']?)(?P<name>[^\"'\s#]+)(?P=quote)",
    re.MULTILINE,
)
_ENV_LINE_RE = re.compile(r"^\s*(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)$")


def prefix_container_names(text: str, project_name: str) -> tuple[str, list[str]]:
    prefix = f"{project_name}-"
    names: list[str] = []

    def _sub(m: re.Match[str]) -> str:
        name = prefix + m.group("name")
        names.append(name)
        quote = m.group("quote")
        return f"{m.group('key')}{quote}{name}{quote}"

    out = _CONTAINER_NAME_RE.sub(_sub, text)
    try:
        yaml.safe_load(out)
    except yaml.YAMLError as exc:
        raise TemplateError(f"Compose file is not valid YAML after rewrite: {exc}") from exc
    logger.debug(f"Container names: {names}")
    return out, names


def set_env_value(text: str, key: str, value: str) -> str:
    line = f"{key}={value}"
    pattern = re.compile(rf"^{re.escape(key)}=.*$", re.MULTILINE)
    if pattern.search(text):
        return pattern.sub(lambda _: line, text)
    sep = "" if not text or text.endswith("\n") else "\n"
    return f"{text}{sep}{line}\n"


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def read_env_file(path: Path) -> dict[str, str]:
    env: dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _ENV_LINE_RE.match(line)
        if not m:
            logger.warning(f"Ignoring malformed line in {path}: {raw!r}")
            continue
        env[m.group("key")] = _unquote(m.group("value").strip())
    return env
