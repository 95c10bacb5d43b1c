"""
Tests for resolving command-line targets to pods and services.
"""

import pytest

from podforge.core.act_on import ActOn
from podforge.core.errors import NameResolutionFailure
from podforge.core.models.pod import Pod, Service


def _names(targets):
    return [t.name if isinstance(t, Pod) else t.qualified_name for t in targets]


class TestActOn:
    def test_all_in_pod_order(self, rails_hello):
        targets = list(ActOn.all().pods_or_services(rails_hello))
        assert all(isinstance(t, Pod) for t in targets)
        assert _names(targets) == ["db", "frontend", "migrate"]

    def test_empty_names_mean_all(self):
        assert ActOn.from_names([]).is_all
        assert not ActOn.from_names(["db"]).is_all
        assert ActOn.from_names(("db", "web")).names == ("db", "web")

    def test_named_keeps_order(self, rails_hello):
        targets = list(ActOn.named(["web", "db"]).pods_or_services(rails_hello))
        assert isinstance(targets[0], Service)
        assert _names(targets) == ["frontend/web", "db"]

    def test_duplicates_repeated(self, rails_hello):
        targets = list(ActOn.named(["db", "db"]).pods_or_services(rails_hello))
        assert _names(targets) == ["db", "db"]

    def test_qualified_service(self, rails_hello):
        targets = list(ActOn.named(["frontend/web"]).pods_or_services(rails_hello))
        assert targets == [Service(pod=rails_hello.pod("frontend"), name="web")]

    def test_error_raised_when_reached(self, rails_hello):
        it = ActOn.named(["frontend", "missing"]).pods_or_services(rails_hello)
        assert next(it).name == "frontend"
        with pytest.raises(NameResolutionFailure) as exc:
            next(it)
        assert exc.value.name == "missing"

    def test_ambiguous_service(self, make_project):
        project = make_project({
            "pods/a.yml": "services:\n  web:\n    image: a\n",
            "pods/b.yml": "services:\n  web:\n    image: b\n",
        })
        with pytest.raises(NameResolutionFailure):
            list(ActOn.named(["web"]).pods_or_services(project))

    def test_reflects_current_pods(self, rails_hello):
        act_on = ActOn.all()
        first = list(act_on.pods_or_services(rails_hello))
        second = list(act_on.pods_or_services(rails_hello))
        assert first == second

    def test_repr(self):
        assert repr(ActOn.all()) == "ActOn.all()"
        assert repr(ActOn.named(["db"])) == "ActOn.named(['db'])"
