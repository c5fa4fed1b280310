from __future__ import annotations

"""Template catalog configuration.

CONTRACT
- Inputs: catalog.yaml inside the template root
- Outputs (required):
  - Validated Catalog, AgentTemplate, SkillTemplate, ServiceTemplate objects
- Invariants:
  - Template root is the bundled `devtemplates.templates` package unless
    DEVTEMPLATES_HOME points at a directory with the same layout
  - Template names match `[a-z0-9][a-z0-9_-]{0,31}`
- Failure:
  - Raises InvalidCatalogError on unparsable YAML or invalid schema
  - Raises TemplateNotFoundError on unknown template names
"""

import importlib.resources
import os
from dataclasses import dataclass, field
from importlib.resources.abc import Traversable
from pathlib import Path

import yaml

from . import templates
from .errors import InvalidCatalogError, TemplateNotFoundError

CATALOG_FILE = "catalog.yaml"
HOME_ENV_VAR = "DEVTEMPLATES_HOME"


@dataclass(frozen=True)
class AgentTemplate:
    instructions: str
    destination: str = ".github/copilot-instructions.md"


@dataclass(frozen=True)
class SkillTemplate:
    name: str
    path: str
    description: str = ""


@dataclass(frozen=True)
class ServiceTemplate:
    name: str
    path: str
    description: str = ""
    compose_file: str = "docker-compose.yml"
    env_example: str | None = None
    db_env_keys: list[str] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)

    @property
    def has_database(self) -> bool:
        return bool(self.db_env_keys)


@dataclass(frozen=True)
class Catalog:
    root: Traversable
    agent: AgentTemplate
    skills_destination: str
    skills: dict[str, SkillTemplate]
    services: dict[str, ServiceTemplate]

    def resource(self, rel: str) -> Traversable:
        node = self.root
        for part in rel.split("/"):
            node = node / part
        return node

    def skill(self, name: str) -> SkillTemplate:
        try:
            return self.skills[name]
        except KeyError:
            raise TemplateNotFoundError(
                f"Unknown skill {name!r}. Available: {', '.join(sorted(self.skills))}"
            ) from None

    def service(self, name: str) -> ServiceTemplate:
        try:
            return self.services[name]
        except KeyError:
            raise TemplateNotFoundError(
                f"Unknown template {name!r}. Available: {', '.join(sorted(self.services))}"
            ) from None


_NAME_PATTERN = "^[a-z0-9][a-z0-9_-]{0,31}$"

CATALOG_SCHEMA = {
    "type": "object",
    "properties": {
        "agent": {
            "type": "object",
            "properties": {
                "instructions": {"type": "string"},
                "destination": {"type": "string"},
            },
            "required": ["instructions"],
        },
        "skills": {
            "type": "object",
            "properties": {
                "destination": {"type": "string"},
                "templates": {
                    "type": "object",
                    "propertyNames": {"pattern": _NAME_PATTERN},
                    "additionalProperties": {
                        "type": "object",
                        "properties": {
                            "path": {"type": "string"},
                            "description": {"type": "string"},
                        },
                        "required": ["path"],
                    },
                },
            },
            "required": ["templates"],
        },
        "services": {
            "type": "object",
            "propertyNames": {"pattern": _NAME_PATTERN},
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "path": {"type": "string"},
                    "description": {"type": "string"},
                    "compose_file": {"type": "string"},
                    "env_example": {"type": ["string", "null"]},
                    "db_env_keys": {"type": "array", "items": {"type": "string"}},
                    "versions": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["path"],
            },
        },
    },
    "required": ["agent", "skills", "services"],
}


def template_root() -> Traversable:
    home = os.environ.get(HOME_ENV_VAR)
    if home:
        return Path(home)
    return importlib.resources.files(templates)


def load_catalog(root: Traversable | None = None) -> Catalog:
    import jsonschema  # lazy import

    root = root if root is not None else template_root()
    catalog_path = root / CATALOG_FILE
    if not catalog_path.is_file():
        raise TemplateNotFoundError(f"Catalog not found: {catalog_path}")
    try:
        data = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise InvalidCatalogError(f"Invalid {CATALOG_FILE}: {e}") from e

    try:
        jsonschema.validate(instance=data, schema=CATALOG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise InvalidCatalogError(f"Invalid {CATALOG_FILE} schema: {e.message}") from e

    agent_raw = data["agent"]
    skills_raw = data["skills"]
    return Catalog(
        root=root,
        agent=AgentTemplate(
            instructions=str(agent_raw["instructions"]),
            destination=str(agent_raw.get("destination", ".github/copilot-instructions.md")),
        ),
        skills_destination=str(skills_raw.get("destination", ".github/skills")),
        skills={
            name: SkillTemplate(
                name=name,
                path=str(s["path"]),
                description=str(s.get("description", "")),
            )
            for name, s in skills_raw["templates"].items()
        },
        services={
            name: ServiceTemplate(
                name=name,
                path=str(s["path"]),
                description=str(s.get("description", "")),
                compose_file=str(s.get("compose_file", "docker-compose.yml")),
                env_example=s.get("env_example"),
                db_env_keys=list(s.get("db_env_keys", []) or []),
                versions=[str(v) for v in s.get("versions", []) or []],
            )
            for name, s in data["services"].items()
        },
    )
