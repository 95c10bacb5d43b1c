"""
Shared test fixtures — example projects built on disk.
"""

import textwrap
from pathlib import Path

import pytest

from podforge.adapters.mock import MockCommandRunner
from podforge.core.observability.logging_config import reset_logging
from podforge.core.project import Project

HELLO_FILES = {
    "pods/frontend.yml": """\
        version: "2"
        services:
          web:
            image: dockercloud/hello-world
            build: https://github.com/docker/dockercloud-hello-world.git
            ports:
              - "80:80"
    """,
    "pods/overrides/development/frontend.yml": """\
        services:
          web:
            environment:
              MODE: development
    """,
    "pods/overrides/production/.keep": "",
    "pods/overrides/test/.keep": "",
}

RAILS_HELLO_FILES = {
    "pods/frontend.yml": """\
        version: "2"
        services:
          web:
            image: faraday/rails_hello
            build: https://github.com/faradayio/rails_hello.git
            ports:
              - "3000:3000"
            volumes:
              - ./data:/data
            labels:
              io.podforge.srcdir: /usr/src/app
              io.podforge.lib.coffee_rails: https://github.com/rails/coffee-rails.git
    """,
    "pods/db.yml": """\
        version: "2"
        services:
          db:
            image: postgres
            volumes:
              - pgdata:/var/lib/postgresql/data
        volumes:
          pgdata: {}
    """,
    "pods/migrate.yml": """\
        version: "2"
        services:
          migrate:
            image: faraday/rails_hello
            command: rake db:migrate
    """,
    "pods/migrate.config.yml": """\
        pod_type: task
    """,
    "pods/overrides/development/frontend.yml": """\
        services:
          web:
            environment:
              RAILS_ENV: development
    """,
    "pods/overrides/production/db.yml": """\
        services:
          db:
            image: postgres:9.6
    """,
    "pods/overrides/test/.keep": "",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``files`` (relative path -> content) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
    return root


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory: build a project directory and load it."""

    def _make(files: dict[str, str], name: str = "myproj") -> Project:
        root = write_tree(tmp_path / name, files)
        return Project.load(root)

    return _make


@pytest.fixture
def hello(make_project) -> Project:
    return make_project(HELLO_FILES, name="hello")


@pytest.fixture
def rails_hello(make_project) -> Project:
    return make_project(RAILS_HELLO_FILES, name="rails_hello")


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI invocations install handlers on the root logger; drop them."""
    yield
    reset_logging()
