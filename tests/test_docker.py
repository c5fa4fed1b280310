from pathlib import Path

import pytest

from devtemplates import docker
from devtemplates.errors import TemplateError
from devtemplates.util.shell import CmdResult


@pytest.fixture
def fake_docker(monkeypatch):
    calls = []

    def fake_run_cmd(cmd, cwd, env=None, timeout_s=None, capture=False):
        calls.append({"cmd": cmd, "cwd": cwd, "env": env})
        return CmdResult(cmd=" ".join(cmd), returncode=0, stdout="", stderr="", elapsed_s=0.0)

    monkeypatch.setattr(docker, "which", lambda cmd: "/usr/bin/docker")
    monkeypatch.setattr(docker, "run_cmd", fake_run_cmd)
    return calls


def test_php_compose_command():
    cmd = docker.php_compose_command(Path("/p/docker-compose.yml"), Path("/p"), "up", ["--build"])
    assert cmd == [
        "docker", "compose", "-f", "/p/docker-compose.yml", "--project-directory", "/p",
        "up", "-d", "--build",
    ]
    cmd = docker.php_compose_command(Path("/p/c.yml"), Path("/p"), "down")
    assert cmd[-1] == "down"


def test_plan_php_uses_bundled_compose_file(tmp_path):
    plan = docker.plan_php("8.3", tmp_path)

    compose_file = Path(plan.cmd[plan.cmd.index("-f") + 1])
    assert compose_file.name == "docker-compose.yml"
    assert compose_file.is_file()
    assert compose_file.parent.name == "php"
    assert plan.env == {"PHP_VERSION": "8.3"}
    assert plan.cwd == tmp_path.resolve()


def test_plan_php_prefers_project_compose_file(tmp_path):
    local = tmp_path / "docker-compose.yml"
    local.write_text("services: {}\n", encoding="utf-8")

    plan = docker.plan_php("8.2", tmp_path)

    assert plan.cmd[plan.cmd.index("-f") + 1] == str(local.resolve())


def test_plan_php_rejects_versions(tmp_path):
    with pytest.raises(ValueError, match="Unsupported PHP version"):
        docker.plan_php("5.6", tmp_path)
    with pytest.raises(ValueError, match="Invalid PHP version"):
        docker.plan_php("latest", tmp_path)


def test_plan_php_missing_project_dir(tmp_path):
    with pytest.raises(TemplateError, match="Project directory not found"):
        docker.plan_php("8.3", tmp_path / "nope")


def test_start_php_dry_run_executes_nothing(tmp_path, fake_docker):
    plan, rc = docker.start_php("8.3", tmp_path, ["--build"], dry_run=True)

    assert rc == 0
    assert fake_docker == []
    rendered = plan.render(with_env=True)
    assert rendered.startswith("PHP_VERSION=8.3 docker compose ")
    assert rendered.endswith(" up -d --build")


def test_start_and_stop_php_run_compose(tmp_path, fake_docker):
    _, rc = docker.start_php("8.1", tmp_path)
    _, rc2 = docker.stop_php("8.1", tmp_path)

    assert (rc, rc2) == (0, 0)
    assert fake_docker[0]["cmd"][-2:] == ["up", "-d"]
    assert fake_docker[0]["env"] == {"PHP_VERSION": "8.1"}
    assert fake_docker[1]["cmd"][-1] == "down"


def test_start_php_propagates_exit_code(tmp_path, monkeypatch):
    monkeypatch.setattr(docker, "which", lambda cmd: "/usr/bin/docker")
    monkeypatch.setattr(
        docker,
        "run_cmd",
        lambda cmd, cwd, env=None: CmdResult(" ".join(cmd), 3, "", "", 0.0),
    )
    _, rc = docker.start_php("8.3", tmp_path)
    assert rc == 3


def test_start_php_without_docker(tmp_path, monkeypatch):
    monkeypatch.setattr(docker, "which", lambda cmd: None)
    with pytest.raises(TemplateError, match="docker not found"):
        docker.start_php("8.3", tmp_path)


def _sonar_env(tmp_path, body):
    env = tmp_path / "sonarqube" / ".env"
    env.parent.mkdir(parents=True)
    env.write_text(body, encoding="utf-8")
    return env


def test_plan_sonar_scan_keeps_secrets_out_of_argv(tmp_path):
    env = _sonar_env(tmp_path, "SONAR_TOKEN=squ_secret\nSONAR_PROJECT_KEY=shop\n")

    plan = docker.plan_sonar_scan(tmp_path, env)

    assert plan.env == {
        "SONAR_TOKEN": "squ_secret",
        "SONAR_PROJECT_KEY": "shop",
        "SONAR_HOST_URL": "http://localhost:9000",
    }
    assert "squ_secret" not in plan.render()
    assert plan.cmd[:3] == ["docker", "run", "--rm"]
    assert f"{tmp_path.resolve()}:/usr/src" in plan.cmd
    assert plan.cmd[-1] == docker.SONAR_IMAGE


def test_plan_sonar_scan_host_url_precedence(tmp_path):
    env = _sonar_env(
        tmp_path, "SONAR_TOKEN=t\nSONAR_PROJECT_KEY=k\nSONAR_HOST_URL=http://sonar:9000\n"
    )
    assert docker.plan_sonar_scan(tmp_path, env).env["SONAR_HOST_URL"] == "http://sonar:9000"
    plan = docker.plan_sonar_scan(tmp_path, env, host_url="http://other:9000")
    assert plan.env["SONAR_HOST_URL"] == "http://other:9000"


def test_plan_sonar_scan_errors(tmp_path):
    with pytest.raises(TemplateError, match="not found"):
        docker.plan_sonar_scan(tmp_path / "missing", tmp_path / ".env")
    with pytest.raises(TemplateError, match=".env not found"):
        docker.plan_sonar_scan(tmp_path, tmp_path / ".env")
    env = _sonar_env(tmp_path, "SONAR_TOKEN=\n")
    with pytest.raises(TemplateError, match="SONAR_TOKEN, SONAR_PROJECT_KEY"):
        docker.plan_sonar_scan(tmp_path, env)


def test_sonar_scan_runs(tmp_path, fake_docker):
    env = _sonar_env(tmp_path, "SONAR_TOKEN=t\nSONAR_PROJECT_KEY=k\n")
    _, rc = docker.sonar_scan(tmp_path, env)
    assert rc == 0
    assert fake_docker[0]["env"]["SONAR_TOKEN"] == "t"
