from __future__ import annotations

"""Template installers.

CONTRACT
- Inputs: Target project path, template name, install options
- Outputs (required):
  - init_agent() writes .github/copilot-instructions.md
  - init_skill() writes .github/skills/<name>/
  - init_service() writes <output_dir>/<template>/ with a renamed compose
    file, prefixed container names and a rendered .env
- Invariants:
  - Creates missing parent directories
  - Does not overwrite existing destinations unless `force=True`
  - Never creates .gitignore
- Failure:
  - Raises TemplateNotFoundError / DestinationExistsError (TemplateError)
  - Raises ValueError on invalid names or options
"""

from pathlib import Path

from loguru import logger

from .config import Catalog, load_catalog
from .errors import DestinationExistsError, TemplateNotFoundError
from .schemas import AgentInitResult, CopyResult, ServiceInitResult
from .util.compose import prefix_container_names, set_env_value
from .util.gitignore import ensure_gitignore_entry
from .util.ids import validate_db_name, validate_project_name
from .util.paths import copy_file, copy_tree

DEFAULT_COMPOSE_NAME = "docker-compose.yml"


def init_agent(
    repo: Path,
    force: bool = False,
    gitignore: bool = False,
    catalog: Catalog | None = None,
) -> AgentInitResult:
    catalog = catalog or load_catalog()
    dest = repo / catalog.agent.destination
    overwritten = copy_file(catalog.resource(catalog.agent.instructions), dest, force=force)

    result = AgentInitResult(
        template="agent",
        destination=str(dest),
        files=[str(dest)],
        overwritten=overwritten,
    )
    if gitignore:
        entry = Path(catalog.agent.destination).as_posix()
        result.gitignore = ensure_gitignore_entry(repo, entry)
    return result


def init_skill(
    repo: Path,
    name: str,
    force: bool = False,
    catalog: Catalog | None = None,
) -> CopyResult:
    catalog = catalog or load_catalog()
    skill = catalog.skill(name)
    dest = repo / catalog.skills_destination / skill.name
    existed = dest.exists()
    files = copy_tree(catalog.resource(skill.path), dest, force=force)
    return CopyResult(
        template=skill.name,
        destination=str(dest),
        files=[str(f) for f in files],
        overwritten=existed,
    )


def init_service(
    template: str,
    project_name: str,
    db_name: str | None = None,
    output_dir: Path = Path("."),
    compose_name: str = DEFAULT_COMPOSE_NAME,
    force: bool = False,
    catalog: Catalog | None = None,
) -> ServiceInitResult:
    """Install a Docker Compose service template.

    Layout after a successful run::

        <output_dir>/<template>/
            <compose_name>      container_name values prefixed with <project_name>-
            .env                rendered from the template's env example
            ...                 everything else copied as-is
    """
    validate_project_name(project_name)
    if db_name is not None:
        validate_db_name(db_name)
    if not compose_name or Path(compose_name).name != compose_name:
        raise ValueError(f"Invalid compose file name {compose_name!r}: must be a plain file name.")

    catalog = catalog or load_catalog()
    service = catalog.service(template)
    if db_name is not None and not service.has_database:
        raise ValueError(f"Template {service.name!r} has no database settings; drop --db-name.")

    src = catalog.resource(service.path)
    if not (src / service.compose_file).is_file():
        raise TemplateNotFoundError(f"Compose file missing from template {service.name!r}")

    # The compose file must not land on the rendered .env or any other template entry.
    taken = {".env"} | {child.name for child in src.iterdir()}
    taken.discard(service.compose_file)
    if compose_name in taken:
        raise ValueError(
            f"Invalid compose file name {compose_name!r}: the {service.name} template already "
            "writes a file or directory with that name."
        )

    dest = output_dir / service.name
    existed = dest.exists()
    compose_dest = dest / compose_name
    renamed = compose_name != service.compose_file
    if renamed and compose_dest.exists() and not force:
        raise DestinationExistsError(compose_dest)

    files = copy_tree(src, dest, force=force)

    compose_src = dest / service.compose_file
    if renamed:
        compose_src.replace(compose_dest)
        files = [compose_dest if f == compose_src else f for f in files]
        logger.debug(f"Renamed {compose_src.name} -> {compose_name}")

    text, container_names = prefix_container_names(
        compose_dest.read_text(encoding="utf-8"), project_name
    )
    compose_dest.write_text(text, encoding="utf-8")

    env_file: Path | None = None
    database: dict[str, str] = {}
    if service.env_example:
        env_text = (dest / service.env_example).read_text(encoding="utf-8")
        if db_name is not None:
            for key in service.db_env_keys:
                env_text = set_env_value(env_text, key, db_name)
                database[key] = db_name
        env_file = dest / ".env"
        env_file.write_text(env_text, encoding="utf-8")
        if env_file not in files:
            files.append(env_file)

    logger.debug(f"Installed {service.name} for {project_name} at {dest}")
    return ServiceInitResult(
        template=service.name,
        destination=str(dest),
        files=[str(f) for f in files],
        overwritten=existed,
        project_name=project_name,
        compose_file=str(compose_dest),
        renamed=renamed,
        container_names=container_names,
        env_file=str(env_file) if env_file else None,
        database=database,
    )
