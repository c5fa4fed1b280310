"""CLI entrypoints.

Console scripts (one Typer app each):
- agent init
- agent-skills init|list
- utemplate (alias dt) init|list|doctor|scan
- dockerphp start|stop|versions

CONTRACT
- Inputs: Command line arguments (parsed by Typer)
- Outputs (required):
  - Exit code 0 on success, 1 on template errors (missing source,
    destination conflict, docker missing), 2 on invalid arguments
  - Console output (stdout/stderr) describing results
- Invariants:
  - All commands validate their inputs before touching the filesystem
  - File operations are delegated to `init` / `docker` modules
- Failure:
  - Invalid arguments raise typer.BadParameter
  - TemplateError and OSError are printed to stderr and mapped to exit code 1
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import Catalog, load_catalog
from .docker import start_php, stop_php, sonar_scan
from .doctor import doctor_report
from .errors import TemplateError
from .init import DEFAULT_COMPOSE_NAME, init_agent, init_service, init_skill

console = Console()
err_console = Console(stderr=True)

agent_app = typer.Typer(add_completion=False, help="Install AI assistant instructions into a project.")
skills_app = typer.Typer(add_completion=False, help="Install agent skills into a project.")
utemplate_app = typer.Typer(add_completion=False, help="Install Docker Compose service templates.")
dockerphp_app = typer.Typer(add_completion=False, help="Run the PHP development stack.")


def _setup_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(
        lambda msg: sys.stderr.write(msg),
        level="DEBUG" if verbose else "WARNING",
        format="{level}: {message}",
    )


def _install_callback(app: typer.Typer, prog: str, aliases: tuple[str, ...] = ()) -> None:
    def _version_callback(value: bool):
        if value:
            invoked = Path(sys.argv[0]).name
            name = invoked if invoked in aliases else prog
            console.print(f"{name} version: {__version__}")
            raise typer.Exit()

    def main(
        version: bool = typer.Option(
            False, "--version", callback=_version_callback, is_eager=True, help="Show version."
        ),
        verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    ):
        _setup_logging(verbose)

    app.callback()(main)


_install_callback(agent_app, "agent")
_install_callback(skills_app, "agent-skills")
_install_callback(utemplate_app, "utemplate", aliases=("dt",))
_install_callback(dockerphp_app, "dockerphp")


def _fail(exc: Exception) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=1)


def _catalog() -> Catalog:
    try:
        return load_catalog()
    except TemplateError as e:
        _fail(e)


_REPO_OPTION = typer.Option(
    Path("."),
    "--repo",
    help="Target project root (default: current dir).",
)
_FORCE_SHORT_OPTION = typer.Option(
    False,
    "--force",
    "-f",
    help="Overwrite existing files.",
)
_JSON_OPTION = typer.Option(
    False,
    "--json",
    help="Print the result as JSON.",
)
_DRY_RUN_OPTION = typer.Option(
    False,
    "--dry-run",
    help="Print the docker command without running it.",
)
_PROJECT_DIR_OPTION = typer.Option(
    Path("."),
    "--project-dir",
    help="Project directory mounted into the stack.",
)
_COMPOSE_ARGS_ARGUMENT = typer.Argument(
    None,
    help="Extra docker compose flags, after `--`.",
)


@agent_app.command("init")
def agent_init(
    repo: Path = _REPO_OPTION,
    force: bool = _FORCE_SHORT_OPTION,
    gitignore: bool = typer.Option(
        False, "--gitignore", "-g", help="Add the instructions file to .gitignore."
    ),
    as_json: bool = _JSON_OPTION,
) -> None:
    """Copy copilot-instructions.md into <repo>/.github/."""
    try:
        result = init_agent(repo, force=force, gitignore=gitignore)
    except (TemplateError, OSError) as e:
        _fail(e)

    if as_json:
        console.print_json(result.model_dump_json())
        return
    verb = "Overwrote" if result.overwritten else "Created"
    console.print(f"[green]{verb}[/green] {escape(result.destination)}")

    gi = result.gitignore
    if gi is None:
        return
    if gi.status == "added":
        console.print(f"Added {gi.entry} to .gitignore")
    elif gi.status == "present":
        console.print(f".gitignore already lists {gi.entry}")
    else:
        console.print(f"No .gitignore found in {escape(str(repo))}.")
        console.print(f"Create one and add this line: {gi.entry}")


@skills_app.command("init")
def skills_init(
    name: str = typer.Argument(..., help="Skill to install (react or typescript)."),
    repo: Path = _REPO_OPTION,
    force: bool = _FORCE_SHORT_OPTION,
) -> None:
    """Copy a skill into <repo>/.github/skills/<name>/."""
    try:
        result = init_skill(repo, name, force=force)
    except (TemplateError, OSError) as e:
        _fail(e)
    verb = "Overwrote" if result.overwritten else "Created"
    console.print(f"[green]{verb}[/green] {escape(result.destination)} ({len(result.files)} files)")


@skills_app.command("list")
def skills_list() -> None:
    """List bundled skills."""
    catalog = _catalog()
    table = Table(title="Skills")
    table.add_column("Name")
    table.add_column("Description")
    for skill in catalog.skills.values():
        table.add_row(skill.name, skill.description)
    console.print(table)


@utemplate_app.command("init")
def utemplate_init(
    template: str = typer.Argument(..., help="Service template (see `utemplate list`)."),
    project_name: str = typer.Option(..., "--project-name", help="Prefix for container names."),
    db_name: str | None = typer.Option(None, "--db-name", help="Database name written to .env."),
    output_dir: Path = typer.Option(
        Path("."), "--output-dir", help="Parent dir; the template lands in <output-dir>/<template>."
    ),
    compose_name: str = typer.Option(
        DEFAULT_COMPOSE_NAME, "--compose-name", "-n", help="File name for the compose file."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing install."),
    as_json: bool = _JSON_OPTION,
) -> None:
    """Copy a Docker Compose service template into a project."""
    try:
        result = init_service(
            template,
            project_name,
            db_name=db_name,
            output_dir=output_dir,
            compose_name=compose_name,
            force=force,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    except (TemplateError, OSError) as e:
        _fail(e)

    if as_json:
        console.print_json(result.model_dump_json())
        return
    verb = "Overwrote" if result.overwritten else "Created"
    console.print(f"[green]{verb}[/green] {escape(result.destination)}")
    console.print(f"Compose file: {escape(result.compose_file)}")
    for name in result.container_names:
        console.print(f"  container: {name}")
    for key, value in result.database.items():
        console.print(f"  {key}={value}")


@utemplate_app.command("list")
def utemplate_list() -> None:
    """List bundled service templates."""
    catalog = _catalog()
    table = Table(title="Service templates")
    table.add_column("Name")
    table.add_column("Database")
    table.add_column("Description")
    for service in catalog.services.values():
        table.add_row(service.name, "yes" if service.has_database else "", service.description)
    console.print(table)


@utemplate_app.command("doctor")
def utemplate_doctor() -> None:
    """Template and environment checks."""
    report = doctor_report()
    table = Table(title="utemplate doctor")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")
    for item in report.items:
        table.add_row(item.name, item.status, item.details)
    console.print(table)
    if report.ok:
        console.print("[green]OK[/green]")
    else:
        raise typer.Exit(code=2)


@utemplate_app.command("scan")
def utemplate_scan(
    project_dir: Path = typer.Argument(Path("."), help="Project to scan (default: current dir)."),
    env_file: Path = typer.Option(
        Path("sonarqube/.env"), "--env-file", help="Env file with SONAR_TOKEN and SONAR_PROJECT_KEY."
    ),
    host_url: str | None = typer.Option(None, "--host-url", help="SonarQube server URL."),
    dry_run: bool = _DRY_RUN_OPTION,
) -> None:
    """Run sonar-scanner against a project in Docker."""
    try:
        plan, rc = sonar_scan(project_dir, env_file, host_url=host_url, dry_run=dry_run)
    except (TemplateError, OSError) as e:
        _fail(e)
    if dry_run:
        typer.echo(plan.render())
        return
    if rc != 0:
        raise typer.Exit(code=rc)
    console.print(f"Scan complete for {escape(str(project_dir))}")


def _php(action, version: str, project_dir: Path, compose_args: list[str] | None, dry_run: bool):
    try:
        plan, rc = action(version, project_dir, compose_args or (), dry_run=dry_run)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    except (TemplateError, OSError) as e:
        _fail(e)
    if dry_run:
        typer.echo(plan.render(with_env=True))
        return
    if rc != 0:
        raise typer.Exit(code=rc)


@dockerphp_app.command("start")
def dockerphp_start(
    version: str = typer.Argument(..., help="PHP version, e.g. 8.3."),
    compose_args: list[str] | None = _COMPOSE_ARGS_ARGUMENT,
    project_dir: Path = _PROJECT_DIR_OPTION,
    dry_run: bool = _DRY_RUN_OPTION,
) -> None:
    """docker compose up -d with PHP_VERSION set."""
    _php(start_php, version, project_dir, compose_args, dry_run)


@dockerphp_app.command("stop")
def dockerphp_stop(
    version: str = typer.Argument(..., help="PHP version the stack was started with."),
    compose_args: list[str] | None = _COMPOSE_ARGS_ARGUMENT,
    project_dir: Path = _PROJECT_DIR_OPTION,
    dry_run: bool = _DRY_RUN_OPTION,
) -> None:
    """docker compose down."""
    _php(stop_php, version, project_dir, compose_args, dry_run)


@dockerphp_app.command("versions")
def dockerphp_versions() -> None:
    """List supported PHP versions."""
    try:
        service = _catalog().service("php")
    except TemplateError as e:
        _fail(e)
    for v in service.versions:
        console.print(v)


if __name__ == "__main__":
    utemplate_app()
