"""devtemplates package.

Simple API for scripts that set up projects:

    import devtemplates

    # AI assistant instructions, listed in .gitignore
    devtemplates.init_agent("/path/to/repo", gitignore=True)

    # Postgres service with prefixed container names
    devtemplates.init_service("postgres", "shop", db_name="shop_dev", output_dir="docker")
"""

from pathlib import Path

__version__ = "0.1.0"

from .config import load_catalog
from .docker import start_php
from .init import init_agent as _init_agent
from .init import init_service as _init_service
from .init import init_skill as _init_skill
from .schemas import AgentInitResult, CopyResult, ServiceInitResult


def init_agent(repo: str | Path = ".", *, force: bool = False, gitignore: bool = False) -> AgentInitResult:
    """Copy copilot-instructions.md into `<repo>/.github/`.

    Args:
        repo: Target project root
        force: Overwrite an existing instructions file
        gitignore: Also list the file in an existing .gitignore

    Returns:
        AgentInitResult; `result.gitignore.status` is "missing" when the repo
        has no .gitignore.
    """
    return _init_agent(Path(repo), force=force, gitignore=gitignore)


def init_skill(repo: str | Path, name: str, *, force: bool = False) -> CopyResult:
    """Copy the `name` skill into `<repo>/.github/skills/<name>/`."""
    return _init_skill(Path(repo), name, force=force)


def init_service(
    template: str,
    project_name: str,
    *,
    db_name: str | None = None,
    output_dir: str | Path = ".",
    compose_name: str = "docker-compose.yml",
    force: bool = False,
) -> ServiceInitResult:
    """Install a service template into `<output_dir>/<template>/`."""
    return _init_service(
        template,
        project_name,
        db_name=db_name,
        output_dir=Path(output_dir),
        compose_name=compose_name,
        force=force,
    )


__all__ = [
    "__version__",
    "init_agent",
    "init_skill",
    "init_service",
    "start_php",
    "load_catalog",
    "AgentInitResult",
    "CopyResult",
    "ServiceInitResult",
]
