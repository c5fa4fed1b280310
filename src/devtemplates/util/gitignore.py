from __future__ import annotations

"""`.gitignore` maintenance.

CONTRACT
- Inputs: Repo path, entry (posix path relative to the repo)
- Outputs (required):
  - GitignoreResult with status added|present|missing
- Invariants:
  - Never creates `.gitignore`
  - Idempotent: the entry appears at most once after any number of runs
- Failure:
  - Raises OSError if `.gitignore` is not readable/writable
"""

from pathlib import Path

from loguru import logger

from ..schemas import GitignoreResult


def has_entry(text: str, entry: str) -> bool:
    return any(line.strip() == entry for line in text.splitlines())


def ensure_gitignore_entry(repo: Path, entry: str) -> GitignoreResult:
    path = repo / ".gitignore"
    if not path.is_file():
        return GitignoreResult(status="missing", path=str(path), entry=entry)

    text = path.read_text(encoding="utf-8")
    if has_entry(text, entry):
        logger.debug(f"{entry} already listed in {path}")
        return GitignoreResult(status="present", path=str(path), entry=entry)

    sep = "" if not text or text.endswith("\n") else "\n"
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{sep}{entry}\n")
    logger.debug(f"Added {entry} to {path}")
    return GitignoreResult(status="added", path=str(path), entry=entry)
