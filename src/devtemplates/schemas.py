from __future__ import annotations

"""Result schemas.

CONTRACT
- Inputs: Pydantic models
- Outputs:
  - Validated JSON-serializable result records for every install operation
- Invariants:
  - All schemas have schema_version int field
  - Paths are stored as strings
- Failure:
  - Raises ValidationError on schema mismatch
"""

from typing import Literal

from pydantic import BaseModel, Field


class GitignoreResult(BaseModel):
    schema_version: int = 1
    status: Literal["added", "present", "missing"]
    path: str
    entry: str


class CopyResult(BaseModel):
    schema_version: int = 1
    template: str
    destination: str
    files: list[str] = Field(default_factory=list)
    overwritten: bool = False


class AgentInitResult(CopyResult):
    gitignore: GitignoreResult | None = None


class ServiceInitResult(CopyResult):
    project_name: str
    compose_file: str
    renamed: bool = False
    container_names: list[str] = Field(default_factory=list)
    env_file: str | None = None
    database: dict[str, str] = Field(default_factory=dict)
