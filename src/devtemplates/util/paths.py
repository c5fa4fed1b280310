from __future__ import annotations

"""Path utilities.

CONTRACT
- Inputs: template resources (Traversable or Path) and destination paths
- Outputs:
  - ensure_dir() creates directory tree
  - copy_file() writes a template file to dest, byte for byte
  - copy_tree() writes a template directory to dest
- Invariants:
  - Never overwrites an existing destination unless `force=True`
  - A refused copy leaves the destination untouched
- Failure:
  - Raises TemplateNotFoundError if the source is missing
  - Raises DestinationExistsError on conflicts
"""

from importlib.resources.abc import Traversable
from pathlib import Path

from loguru import logger

from ..errors import DestinationExistsError, TemplateNotFoundError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def copy_file(src: Traversable | Path, dest: Path, force: bool = False) -> bool:
    """Copy one template file. Returns True if an existing file was replaced."""
    if not src.is_file():
        raise TemplateNotFoundError(f"Template file not found: {src}")
    existed = dest.exists()
    if existed and not force:
        raise DestinationExistsError(dest)
    ensure_dir(dest.parent)
    dest.write_bytes(src.read_bytes())
    logger.debug(f"Copied {src} -> {dest}")
    return existed


def _walk(src: Traversable | Path, rel: Path) -> list[tuple[Traversable | Path, Path]]:
    out: list[tuple[Traversable | Path, Path]] = []
    for child in src.iterdir():
        if child.name == "__pycache__":
            continue
        if child.is_dir():
            out.extend(_walk(child, rel / child.name))
        else:
            out.append((child, rel / child.name))
    return out


def copy_tree(src: Traversable | Path, dest: Path, force: bool = False) -> list[Path]:
    """Copy a template directory into `dest`.

    The overwrite guard applies to `dest` as a whole: if it exists, nothing is
    written unless `force` is set. Forced copies overwrite files in place and
    leave unrelated files in `dest` alone.
    """
    if not src.is_dir():
        raise TemplateNotFoundError(f"Template directory not found: {src}")
    if dest.exists() and not force:
        raise DestinationExistsError(dest)

    written: list[Path] = []
    for child, rel in sorted(_walk(src, Path()), key=lambda item: item[1].as_posix()):
        target = dest / rel
        ensure_dir(target.parent)
        target.write_bytes(child.read_bytes())
        written.append(target)
    logger.debug(f"Copied {len(written)} files {src} -> {dest}")
    return written
