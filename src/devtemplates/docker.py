from __future__ import annotations

"""Docker launchers for the PHP stack and SonarQube scans.

CONTRACT
- Inputs: PHP version / project dir / env file, extra compose flags
- Outputs (required):
  - LaunchPlan(cmd, cwd, env) describing the docker invocation
  - Exit code of docker when not a dry run
- Invariants:
  - Commands are argv lists (no shell)
  - Secrets from the SonarQube env file travel through the child
    environment, never through argv
  - Dry runs never execute anything
- Failure:
  - Raises ValueError on invalid versions
  - Raises TemplateError if docker is missing or inputs are absent
"""

import importlib.resources
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Sequence

from loguru import logger

from .config import Catalog, load_catalog
from .errors import TemplateError
from .util.compose import read_env_file
from .util.ids import validate_php_version
from .util.shell import run_cmd, which

PHP_TEMPLATE = "php"
SONAR_IMAGE = "sonarsource/sonar-scanner-cli"
SONAR_DEFAULT_HOST = "http://localhost:9000"
SONAR_REQUIRED_KEYS = ("SONAR_TOKEN", "SONAR_PROJECT_KEY")

ComposeAction = Literal["up", "down"]


@dataclass(frozen=True)
class LaunchPlan:
    cmd: list[str]
    cwd: Path
    env: dict[str, str] = field(default_factory=dict)

    def render(self, with_env: bool = False) -> str:
        cmd = shlex.join(self.cmd)
        if not with_env or not self.env:
            return cmd
        env = " ".join(f"{k}={shlex.quote(v)}" for k, v in self.env.items())
        return f"{env} {cmd}"


def php_compose_command(
    compose_file: Path,
    project_dir: Path,
    action: ComposeAction = "up",
    extra_args: Sequence[str] = (),
) -> list[str]:
    cmd = [
        "docker", "compose",
        "-f", str(compose_file),
        "--project-directory", str(project_dir),
        action,
    ]
    if action == "up":
        cmd.append("-d")
    cmd.extend(extra_args)
    return cmd


def _run(plan: LaunchPlan) -> int:
    if which("docker") is None:
        raise TemplateError("docker not found in PATH")
    res = run_cmd(plan.cmd, cwd=plan.cwd, env=plan.env or None)
    if res.returncode != 0:
        logger.warning(f"{plan.render()} exited with {res.returncode}")
    return res.returncode


def plan_php(
    version: str,
    project_dir: Path = Path("."),
    action: ComposeAction = "up",
    extra_args: Sequence[str] = (),
    catalog: Catalog | None = None,
) -> LaunchPlan:
    validate_php_version(version)
    catalog = catalog or load_catalog()
    service = catalog.service(PHP_TEMPLATE)
    if service.versions and version not in service.versions:
        raise ValueError(
            f"Unsupported PHP version {version}. Supported: {', '.join(service.versions)}"
        )
    if not project_dir.is_dir():
        raise TemplateError(f"Project directory not found: {project_dir}")

    project_dir = project_dir.resolve()
    local = project_dir / service.compose_file
    if local.is_file():
        compose_file = local
    else:
        resource = catalog.resource(service.path) / service.compose_file
        if not resource.is_file():
            raise TemplateError(f"No compose file in {project_dir} and none bundled")
        # Bundled templates live on disk for regular and editable installs.
        with importlib.resources.as_file(resource) as path:
            compose_file = Path(path)
    logger.debug(f"Using compose file {compose_file}")

    return LaunchPlan(
        cmd=php_compose_command(compose_file, project_dir, action, extra_args),
        cwd=project_dir,
        env={"PHP_VERSION": version},
    )


def start_php(
    version: str,
    project_dir: Path = Path("."),
    extra_args: Sequence[str] = (),
    dry_run: bool = False,
    catalog: Catalog | None = None,
) -> tuple[LaunchPlan, int]:
    plan = plan_php(version, project_dir, "up", extra_args, catalog)
    if dry_run:
        return plan, 0
    return plan, _run(plan)


def stop_php(
    version: str,
    project_dir: Path = Path("."),
    extra_args: Sequence[str] = (),
    dry_run: bool = False,
    catalog: Catalog | None = None,
) -> tuple[LaunchPlan, int]:
    plan = plan_php(version, project_dir, "down", extra_args, catalog)
    if dry_run:
        return plan, 0
    return plan, _run(plan)


def plan_sonar_scan(
    project_dir: Path = Path("."),
    env_file: Path = Path("sonarqube/.env"),
    host_url: str | None = None,
) -> LaunchPlan:
    if not project_dir.is_dir():
        raise TemplateError(f"Project directory '{project_dir}' not found")
    if not env_file.is_file():
        raise TemplateError(f".env not found: {env_file}")

    values = read_env_file(env_file)
    missing = [k for k in SONAR_REQUIRED_KEYS if not values.get(k)]
    if missing:
        raise TemplateError(f"Missing {', '.join(missing)} in {env_file}")

    env = {k: values[k] for k in SONAR_REQUIRED_KEYS}
    env["SONAR_HOST_URL"] = host_url or values.get("SONAR_HOST_URL") or SONAR_DEFAULT_HOST

    abs_project = project_dir.resolve()
    cmd = ["docker", "run", "--rm"]
    for key in env:
        cmd.extend(["-e", key])
    cmd.extend(["-v", f"{abs_project}:/usr/src", SONAR_IMAGE])
    return LaunchPlan(cmd=cmd, cwd=abs_project, env=env)


def sonar_scan(
    project_dir: Path = Path("."),
    env_file: Path = Path("sonarqube/.env"),
    host_url: str | None = None,
    dry_run: bool = False,
) -> tuple[LaunchPlan, int]:
    plan = plan_sonar_scan(project_dir, env_file, host_url)
    if dry_run:
        return plan, 0
    return plan, _run(plan)
