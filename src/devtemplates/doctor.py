from __future__ import annotations

"""Environment health checks.

CONTRACT
- Inputs: Template root (optional)
- Outputs (required):
  - DoctorReport (ok=bool, items=[(name, status, details)])
- Invariants:
  - Checks: catalog validity, every catalog path, docker, docker compose
  - Does not modify system state (read-only checks)
- Failure:
  - Returns DoctorReport with ok=False if the catalog is invalid or a
    template path is missing
"""

from dataclasses import dataclass
from importlib.resources.abc import Traversable
from pathlib import Path

from .config import Catalog, load_catalog
from .errors import TemplateError
from .util.shell import run_cmd, which


@dataclass(frozen=True)
class DoctorItem:
    name: str
    status: str
    details: str


@dataclass(frozen=True)
class DoctorReport:
    ok: bool
    items: list[DoctorItem]


def _catalog_paths(catalog: Catalog) -> list[tuple[str, str, bool]]:
    """(label, relative path, expect_dir) for every template in the catalog."""
    out: list[tuple[str, str, bool]] = [("agent", catalog.agent.instructions, False)]
    for skill in catalog.skills.values():
        out.append((f"skill {skill.name}", skill.path, True))
    for service in catalog.services.values():
        out.append((f"service {service.name}", service.path, True))
        out.append((f"service {service.name}", f"{service.path}/{service.compose_file}", False))
        if service.env_example:
            out.append((f"service {service.name}", f"{service.path}/{service.env_example}", False))
    return out


def doctor_report(root: Traversable | None = None) -> DoctorReport:
    items: list[DoctorItem] = []
    ok = True

    # 1. Critical: catalog
    try:
        catalog = load_catalog(root)
    except TemplateError as e:
        return DoctorReport(ok=False, items=[DoctorItem("catalog", "FAIL", str(e))])
    items.append(
        DoctorItem(
            "catalog",
            "OK",
            f"{len(catalog.skills)} skills, {len(catalog.services)} services",
        )
    )

    # 2. Critical: template files
    missing: list[str] = []
    for label, rel, expect_dir in _catalog_paths(catalog):
        node = catalog.resource(rel)
        if not (node.is_dir() if expect_dir else node.is_file()):
            missing.append(f"{label}: {rel}")
    if missing:
        ok = False
        items.append(DoctorItem("template files", "FAIL", "; ".join(missing)))
    else:
        items.append(DoctorItem("template files", "OK", "all present"))

    # 3. Binaries
    docker_bin = which("docker")
    if docker_bin:
        items.append(DoctorItem("docker", "OK", docker_bin))
        res = run_cmd(["docker", "compose", "version"], cwd=Path("."), timeout_s=5, capture=True)
        if res.returncode == 0:
            items.append(DoctorItem("docker compose", "OK", res.stdout.strip()))
        else:
            items.append(
                DoctorItem("docker compose", "WARN", "compose plugin missing; dockerphp unavailable")
            )
    else:
        items.append(
            DoctorItem("docker", "WARN", "docker not found; dockerphp and scan unavailable")
        )

    return DoctorReport(ok=ok, items=items)
