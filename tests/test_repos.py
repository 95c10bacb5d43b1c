"""
Tests for the source registry — aliases, lookup, mount state, cloning.
"""

import pytest

from podforge.core.errors import AliasDerivationFailure
from podforge.core.persistence.state_file import default_state_path, load_state
from podforge.core.repos import SRCDIR_LABEL, Repos, human_alias, lib_mount_path


class TestHumanAlias:
    def test_uses_repo_name(self):
        assert human_alias("https://example.com/org/rails_hello.git") == "rails_hello"

    def test_appends_branch(self):
        assert human_alias("https://example.com/org/rails_hello.git#dev") == "rails_hello_dev"

    def test_local_path(self):
        assert human_alias("../src/node_hello") == "node_hello"

    def test_scp_style_url(self):
        assert human_alias("git@github.com:faradayio/rails_hello.git") == "rails_hello"

    def test_schemeless_github(self):
        assert human_alias("github.com/faradayio/rails_hello") == "rails_hello"

    def test_deterministic(self):
        url = "https://github.com/docker/dockercloud-hello-world.git"
        assert human_alias(url) == human_alias(url) == "dockercloud-hello-world"

    @pytest.mark.parametrize("ref", ["git://example.com", "git://example.com/", "/", ".."])
    def test_no_usable_name(self, ref: str):
        with pytest.raises(AliasDerivationFailure) as exc:
            human_alias(ref)
        assert exc.value.reference == ref


class TestRepos:
    def test_collects_build_and_lib_sources(self, rails_hello):
        aliases = [r.alias for r in rails_hello.repos]
        assert aliases == ["coffee-rails", "rails_hello"]

    def test_find_by_alias(self, hello):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        assert repo is not None
        assert repo.git_url == "https://github.com/docker/dockercloud-hello-world.git"
        assert repo.lib_key is None

    def test_find_by_lib_key(self, rails_hello):
        repo = rails_hello.repos.find_by_lib_key("coffee_rails")
        assert repo is not None
        assert repo.alias == "coffee-rails"
        service = {"labels": {SRCDIR_LABEL: "/usr/src/app/"}}
        assert lib_mount_path(service, repo) == "/usr/src/app/vendor/coffee-rails"
        assert lib_mount_path({}, repo) == "/app/vendor/coffee-rails"

    def test_unknown_lookups(self, rails_hello):
        assert rails_hello.repos.find_by_alias("nope") is None
        assert rails_hello.repos.find_by_lib_key("nope") is None

    def test_sources_in_override_layers(self, make_project):
        project = make_project({
            "pods/app.yml": "services:\n  app:\n    image: app\n",
            "pods/overrides/development/app.yml": (
                "services:\n  app:\n    build: https://example.com/org/app_src.git#dev\n"
            ),
        })
        repo = project.repos.find_by_alias("app_src_dev")
        assert repo is not None
        assert repo.git_url.endswith("#dev")

    def test_alias_collision_keeps_first(self, make_project):
        project = make_project({
            "pods/a.yml": "services:\n  a:\n    build: https://example.com/one/app.git\n",
            "pods/b.yml": "services:\n  b:\n    build: https://example.com/two/app.git\n",
        })
        assert len(project.repos) == 1
        assert project.repos.find_by_alias("app").git_url == "https://example.com/one/app.git"

    def test_find_by_git_url_requires_exact_url(self, make_project):
        project = make_project({
            "pods/a.yml": "services:\n  a:\n    build: https://example.com/one/app.git\n",
            "pods/b.yml": "services:\n  b:\n    build: https://example.com/two/app.git\n",
        })
        assert project.repos.find_by_git_url("https://example.com/one/app.git") is not None
        assert project.repos.find_by_git_url("https://example.com/two/app.git") is None

    def test_empty_registry(self):
        assert len(Repos()) == 0
        assert list(Repos()) == []


class TestMountState:
    def test_not_mounted_until_cloned(self, hello):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        assert not repo.is_mounted(hello)
        repo.fake_clone_source(hello)
        assert repo.is_mounted(hello)
        assert repo.path(hello) == hello.src_dir / "dockercloud-hello-world"

    def test_unmount_and_remount(self, hello):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        repo.fake_clone_source(hello)

        repo.set_mounted(hello, False)
        assert not repo.is_mounted(hello)
        assert repo.is_cloned(hello)
        state = load_state(default_state_path(hello.output_dir))
        assert state.unmounted == ["dockercloud-hello-world"]

        repo.set_mounted(hello, True)
        assert repo.is_mounted(hello)

    def test_state_survives_output(self, hello):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        repo.fake_clone_source(hello)
        repo.set_mounted(hello, False)
        hello.output(hello.ovr("development"))
        assert not repo.is_mounted(hello)

    def test_absolute_path(self, hello):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        assert repo.absolute_path(hello).is_absolute()


class TestClone:
    def test_clone_runs_git(self, hello, runner):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        repo.clone(hello, runner)
        assert runner.ran == [[
            "git", "clone",
            "https://github.com/docker/dockercloud-hello-world.git",
            str(repo.path(hello)),
        ]]

    def test_clone_checks_out_fragment_branch(self, make_project, runner):
        project = make_project({
            "pods/a.yml": "services:\n  a:\n    build: https://example.com/org/app.git#dev\n",
        })
        repo = project.repos.find_by_alias("app_dev")
        repo.clone(project, runner)
        assert runner.ran == [[
            "git", "clone", "-b", "dev", "https://example.com/org/app.git", str(repo.path(project)),
        ]]

    def test_clone_skips_existing(self, hello, runner):
        repo = hello.repos.find_by_alias("dockercloud-hello-world")
        repo.fake_clone_source(hello)
        repo.clone(hello, runner)
        assert runner.call_count == 0
