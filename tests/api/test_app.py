# tests/api/test_app.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from netswitch.contracts.host import HostEnvironment
from netswitch.core.cache import MemoryObjectCache
from netswitch.core.errors import EnvironmentUnsupported
from netswitch.main import create_app

from conftest import MEMBER, SUPER_ADMIN, build_host

ADMIN = {"X-WP-User-Id": str(SUPER_ADMIN)}


@pytest.fixture
def client(settings):
    app = create_app(settings, host=build_host())
    with TestClient(app, base_url="https://a.example.com") as c:
        yield c


def _switch_nonce(client: TestClient, headers=ADMIN) -> str:
    nodes = client.get("/wp-admin/admin-bar", headers=headers).json()
    return next(n["meta"]["data-nonce"] for n in nodes if n["id"] == "network-3")


class TestHealth:
    def test_reports_environment(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["multi_network"] is True
        assert body["host_version"] == "6.8"
        assert body["hooks"] == 7


class TestAdminBar:
    def test_super_admin_sees_switcher(self, client):
        r = client.get("/wp-admin/admin-bar", headers=ADMIN)
        assert r.status_code == 200
        ids = [n["id"] for n in r.json()]
        assert ids[0] == "wp-multinetwork-switcher"
        assert ids[-1] == "network-admin-all"
        assert len(ids) == 5

    def test_front_end_links_skip_admin_path(self, client):
        nodes = client.get(
            "/wp-admin/admin-bar", params={"context": "front"}, headers=ADMIN
        ).json()
        by_id = {n["id"]: n for n in nodes}
        assert by_id["network-3"]["href"] == "https://b.example.com/"
        assert by_id["network-admin-all"]["href"] == "https://a.example.com/wp-admin/network/"

    def test_admin_links_keep_admin_path(self, client):
        nodes = client.get("/wp-admin/admin-bar", headers=ADMIN).json()
        by_id = {n["id"]: n for n in nodes}
        assert by_id["network-3"]["href"] == "https://b.example.com/wp-admin/"

    def test_anonymous_sees_nothing(self, client):
        assert client.get("/wp-admin/admin-bar").json() == []

    def test_member_sees_nothing(self, client):
        headers = {"X-WP-User-Id": str(MEMBER)}
        assert client.get("/wp-admin/admin-bar", headers=headers).json() == []

    def test_current_network_from_host_header(self, settings):
        app = create_app(settings, host=build_host())
        with TestClient(app, base_url="https://b.example.com") as c:
            nodes = c.get("/wp-admin/admin-bar", headers=ADMIN).json()
        current = next(n for n in nodes if n["meta"].get("class") == "current-network")
        assert current["id"] == "network-3"

    def test_single_network_install(self, settings):
        app = create_app(settings, host=build_host(network_count=1))
        with TestClient(app, base_url="https://a.example.com") as c:
            assert c.get("/wp-admin/admin-bar", headers=ADMIN).json() == []


class TestDashboardWidgets:
    @pytest.mark.parametrize("screen", ["dashboard", "dashboard-network"])
    def test_widget_on_dashboard(self, client, screen):
        r = client.get("/wp-admin/dashboard-widgets", params={"screen": screen}, headers=ADMIN)
        widgets = r.json()
        assert [w["id"] for w in widgets] == ["wpmn_network_overview"]
        assert widgets[0]["view"]["stats"]["total_networks"] == 3

    def test_no_widget_elsewhere(self, client):
        r = client.get("/wp-admin/dashboard-widgets", params={"screen": "edit-post"}, headers=ADMIN)
        assert r.json() == []


class TestAssets:
    def test_css_for_manager(self, client):
        r = client.get("/wp-admin/assets/network-switcher.css", headers=ADMIN)
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/css")
        assert "#wpadminbar" in r.text

    def test_js_for_manager(self, client):
        r = client.get("/wp-admin/assets/network-switcher.js", headers=ADMIN)
        assert r.status_code == 200
        assert '"https://a.example.com/wp-admin/admin-ajax.php"' in r.text

    def test_empty_for_anonymous(self, client):
        assert client.get("/wp-admin/assets/network-switcher.css").status_code == 204
        assert client.get("/wp-admin/assets/network-switcher.js").status_code == 204

    def test_front_context(self, client):
        r = client.get(
            "/wp-admin/assets/network-switcher.js", params={"context": "front"}, headers=ADMIN
        )
        assert r.status_code == 200


class TestAdminAjax:
    def test_switch_from_admin_over_tls(self, client):
        nonce = _switch_nonce(client)
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "switch_network", "network_id": "3", "nonce": nonce, "context": "admin"},
            headers=ADMIN,
        )
        assert r.status_code == 200
        assert r.json() == {
            "success": True,
            "data": {"redirect_url": "https://b.example.com/wp-admin/"},
        }

    def test_switch_from_front_end(self, client):
        nonce = _switch_nonce(client)
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "switch_network", "network_id": "3", "nonce": nonce, "context": "front"},
            headers=ADMIN,
        )
        assert r.json()["data"]["redirect_url"] == "https://b.example.com/"

    def test_referer_decides_without_context(self, client):
        nonce = _switch_nonce(client)
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "switch_network", "network_id": "3", "nonce": nonce},
            headers={**ADMIN, "Referer": "https://a.example.com/hello-world/"},
        )
        assert r.json()["data"]["redirect_url"] == "https://b.example.com/"

    def test_forwarded_proto(self, settings):
        app = create_app(settings, host=build_host())
        with TestClient(app, base_url="http://a.example.com") as c:
            nonce = _switch_nonce(c)
            r = c.post(
                "/wp-admin/admin-ajax.php",
                data={"action": "switch_network", "network_id": "3", "nonce": nonce},
                headers={**ADMIN, "X-Forwarded-Proto": "https"},
            )
        assert r.json()["data"]["redirect_url"] == "https://b.example.com/wp-admin/"

    def test_invalid_nonce(self, client):
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "switch_network", "network_id": "3", "nonce": "bogus"},
            headers=ADMIN,
        )
        assert r.status_code == 200
        assert r.json() == {"success": False, "data": {"message": "Invalid nonce."}}

    def test_unknown_network(self, client):
        nonce = _switch_nonce(client)
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "switch_network", "network_id": "99", "nonce": nonce},
            headers=ADMIN,
        )
        assert r.json() == {"success": False, "data": {"message": "Network does not exist."}}

    def test_network_info(self, client):
        nonce = _switch_nonce(client)
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "get_network_info", "network_id": "3", "nonce": nonce},
            headers=ADMIN,
        )
        assert r.json()["data"] == {
            "id": 3,
            "domain": "b.example.com",
            "path": "/",
            "site_name": "b.example.com",
            "site_count": 2,
        }

    def test_unknown_action(self, client):
        r = client.post("/wp-admin/admin-ajax.php", data={"action": "nope"}, headers=ADMIN)
        assert r.status_code == 400
        assert r.text == "0"

    def test_anonymous(self, client):
        r = client.post(
            "/wp-admin/admin-ajax.php",
            data={"action": "switch_network", "network_id": "3", "nonce": "x"},
        )
        assert r.status_code == 400
        assert r.text == "0"


class TestLifespan:
    def test_activation_refuses_single_network_host(self, settings):
        host = build_host()
        host._environment = HostEnvironment(multisite=True, multi_network=False, version="6.8")
        app = create_app(settings, host=host)

        with pytest.raises(EnvironmentUnsupported):
            with TestClient(app):
                pass

    def test_activation_refuses_old_host(self, settings):
        host = build_host()
        host._environment = HostEnvironment(multisite=True, multi_network=True, version="4.9")
        app = create_app(settings, host=host)

        with pytest.raises(EnvironmentUnsupported, match="5.0 or higher"):
            with TestClient(app):
                pass

    def test_uses_injected_empty_cache(self, settings):
        cache = MemoryObjectCache()
        app = create_app(settings, host=build_host(), cache=cache)
        assert app.state.infra.cache is cache

    def test_shutdown_flushes_cache(self, settings):
        cache = MemoryObjectCache()
        app = create_app(settings, host=build_host(), cache=cache)

        with TestClient(app, base_url="https://a.example.com") as c:
            c.get("/wp-admin/admin-bar", headers=ADMIN)
            assert len(cache) > 0

        assert len(cache) == 0
