from __future__ import annotations

"""Package errors.

CONTRACT
- Invariants:
  - Every failure the CLI reports with exit code 1 derives from TemplateError
- Failure:
  - n/a
"""

from pathlib import Path


class TemplateError(RuntimeError):
    """Raised when a template cannot be installed or launched."""


class TemplateNotFoundError(TemplateError):
    """Raised for unknown template names or missing template files."""


class DestinationExistsError(TemplateError):
    def __init__(self, dest: Path) -> None:
        self.dest = dest
        super().__init__(f"{dest} already exists (use --force to overwrite)")


class InvalidCatalogError(TemplateError):
    """Raised when catalog.yaml cannot be parsed or fails its schema."""
