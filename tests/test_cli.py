"""Tests for the command line dispatcher."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from shush import cli
from shush.errors import SensuError
from shush.expire import ExpireAfter, NoExpiration
from shush.resources import ResolvedResource

from .conftest import FakeSensu

CLIENTS = [{"name": "c1", "instance_id": "i-1", "subscriptions": ["web"]}]
RESULTS = [{"client": "c1", "check": {"name": "disk"}},
           {"client": "c1", "check": {"name": "cpu"}}]


@pytest.fixture()
def fake() -> FakeSensu:
    return FakeSensu({"/clients": CLIENTS, "/clients/c1": CLIENTS[0], "/results": RESULTS,
                      "/silenced": [{"subscription": "web", "check": "disk"}]})


@pytest.fixture(autouse=True)
def wiring(fake: FakeSensu):
    cfg = {"api": "http://sensu:4567", "timeout": 10}
    with patch.object(cli, "load_config", return_value=cfg), \
            patch.object(cli, "SensuClient", return_value=fake) as client_cls:
        yield client_cls


class TestSilence:
    def test_nodes_and_checks(self, fake):
        assert cli.main(["-n", "i-1", "-c", "disk,cpu", "-e", "1h"]) == 0
        assert [(ep, p.resource, p.check) for ep, p in fake.posts] == [
            ("/silenced", ResolvedResource.client("c1"), "disk"),
            ("/silenced", ResolvedResource.client("c1"), "cpu"),
        ]
        assert all(p.expiration == ExpireAfter(3600) for _, p in fake.posts)

    def test_default_expiration(self, fake):
        assert cli.main(["-s", "web"]) == 0
        (_, payload), = fake.posts
        assert payload.resource == ResolvedResource.subscription("web")
        assert payload.expiration == ExpireAfter(7200)

    def test_expire_on_resolve(self, fake):
        assert cli.main(["-c", "disk", "-o"]) == 0
        (_, payload), = fake.posts
        assert payload.expiration == NoExpiration(True)

    def test_expire_conflicts_with_expire_on_resolve(self, fake):
        assert cli.main(["-c", "disk", "-e", "1h", "-o"]) == 1
        assert fake.gets == []
        assert fake.posts == []

    def test_bad_clock_expiration_does_no_work(self, fake):
        assert cli.main(["-i", "c1", "-e", "1:xx"]) == 1
        assert fake.gets == []

    def test_no_targets(self, fake):
        assert cli.main([]) == 1
        assert fake.posts == []

    def test_all_checks_misspelled(self, fake):
        assert cli.main(["-i", "c1", "-c", "dsik"]) == 1
        assert fake.posts == []

    def test_failed_post_exits_nonzero(self, fake):
        fake.fail_post_at = 1
        fake.post_error = SensuError("boom", status=500)
        assert cli.main(["-i", "c1"]) == 1

    def test_dry_run(self, fake):
        assert cli.main(["-i", "c1", "--dry-run"]) == 0
        assert fake.posts == []

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_timeout_flag(self, fake, wiring, value):
        assert cli.main(["-c", "disk", "--timeout", value]) == 1
        wiring.assert_not_called()
        assert fake.posts == []

    def test_timeout_flag_wins(self, fake, wiring):
        cli.main(["-i", "c1", "--timeout", "2.5"])
        wiring.assert_called_once_with("http://sensu:4567", timeout=2.5)


class TestClear:
    def test_clear_uses_clear_endpoint(self, fake):
        assert cli.main(["-r", "-i", "c1", "-c", "cpu"]) == 0
        (endpoint, payload), = fake.posts
        assert endpoint == "/silenced/clear"
        assert payload.expiration is None


class TestList:
    def test_list_prints_matches(self, fake, capsys):
        assert cli.main(["-l", "-s", "^web$"]) == 0
        out = capsys.readouterr().out
        assert "Subscription: web" in out
        assert fake.posts == []

    def test_list_rejects_nodes(self, fake):
        assert cli.main(["-l", "-n", "i-1"]) == 1
        assert fake.gets == []

    def test_list_api_failure(self, fake):
        fake.routes["/silenced"] = SensuError("down")
        assert cli.main(["-l"]) == 1


class TestParser:
    def test_resource_kinds_are_exclusive(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["-n", "i-1", "-s", "web"])

    def test_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["-l", "-r"])
