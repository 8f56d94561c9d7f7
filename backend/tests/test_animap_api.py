"""Smoke tests for the Animap API application factory."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from backend.animap_api import create_app  # noqa: E402
from backend.animap_api.settings import AnimapSettings  # noqa: E402
from backend.resolver.catalog import BUILTIN_MAPPINGS  # noqa: E402
from backend.tests.catalog_fixtures import (  # noqa: E402
    ANILIST_URL,
    CATALOG_BASE,
    FakeCatalog,
    detail_page,
    episode_envelope,
    episode_fragment,
    media,
)


def _settings(**overrides) -> AnimapSettings:
    values = {
        "anilist_url": ANILIST_URL,
        "catalog_base_url": CATALOG_BASE,
        "request_timeout": 2.0,
    }
    values.update(overrides)
    return AnimapSettings(**values)


@pytest.fixture()
def catalog() -> FakeCatalog:
    fake = FakeCatalog()
    fake.add_listing("100", episode_envelope(episode_fragment("one-piece-100", [1, 2, 3])))
    fake.detail_pages["one-piece-100"] = detail_page(21)

    fake.media[4242] = media(4242, english="Example Show", romaji="Rei no Show")
    fake.search_results["Example Show"] = [
        ("Example Show", "/example-show-123?ref=search"),
        ("Unrelated", "/xyz"),
    ]
    fake.add_listing(
        "123", episode_envelope(episode_fragment("example-show-123", range(1, 13), fillers={7}))
    )
    fake.detail_pages["example-show-123"] = detail_page(4242)
    return fake


@pytest.fixture()
def client(catalog: FakeCatalog) -> TestClient:
    app = create_app(settings=_settings(), transport=catalog.transport())
    return TestClient(app)


def test_health_endpoint_reports_mapping_counts(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "version": "0.1.0",
        "static_mappings": len(BUILTIN_MAPPINGS),
        "cached_mappings": 0,
    }


def test_static_anilist_id_skips_anilist_and_search(client: TestClient, catalog: FakeCatalog) -> None:
    response = client.get("/episodes/21")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    results = body["results"]
    assert results["success"] is True
    assert results["externalId"] == 21
    assert results["internalId"] == "one-piece-100"
    assert results["totalEpisodes"] == 3
    assert "message" not in results
    assert catalog.calls["anilist"] == 0
    assert catalog.calls["search"] == 0


def test_dynamic_lookup_resolves_caches_and_returns_episodes(client: TestClient, catalog: FakeCatalog) -> None:
    response = client.get("/episodes/4242")

    assert response.status_code == 200
    results = response.json()["results"]
    assert results["success"] is True
    assert results["internalId"] == "example-show-123"
    assert results["externalId"] == 4242
    assert results["totalEpisodes"] == 12
    assert len(results["episodes"]) == 12
    assert results["episodes"][6] == {
        "episodeNumber": 7,
        "internalEpisodeId": "example-show-123?ep=1007",
        "displayTitle": "Episode 7",
        "nativeTitle": "Dai 7 wa",
        "isFiller": True,
    }
    assert [episode["isFiller"] for episode in results["episodes"]].count(True) == 1
    assert catalog.search_terms == ["Example Show"]

    snapshot = client.get("/mappings/cache").json()
    assert snapshot == {"total": 1, "mappings": {"4242": "example-show-123"}}


def test_repeat_lookup_uses_cache(client: TestClient, catalog: FakeCatalog) -> None:
    client.get("/episodes/4242")
    anilist_calls = catalog.calls["anilist"]
    search_calls = catalog.calls["search"]

    response = client.get("/resolve/4242")

    assert response.status_code == 200
    assert response.json() == {
        "external_id": 4242,
        "internal_id": "example-show-123",
        "source": "cache",
        "score": None,
    }
    assert catalog.calls["anilist"] == anilist_calls
    assert catalog.calls["search"] == search_calls


def test_unknown_anilist_id_reports_domain_failure(client: TestClient, catalog: FakeCatalog) -> None:
    response = client.get("/episodes/999999999")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["results"]["success"] is False
    assert "999999999" in body["results"]["message"]
    assert "episodes" not in body["results"]
    assert catalog.calls["search"] == 0


def test_resolve_endpoint_returns_404_when_unresolved(client: TestClient) -> None:
    response = client.get("/resolve/999999999")

    assert response.status_code == 404


def test_resolve_endpoint_reports_static_source(client: TestClient, catalog: FakeCatalog) -> None:
    response = client.get("/resolve/21")

    assert response.status_code == 200
    assert response.json()["source"] == "static"
    assert catalog.total_calls == 0


def test_internal_id_lookup_reads_anilist_id_from_page(client: TestClient, catalog: FakeCatalog) -> None:
    response = client.get("/episodes/example-show-123")

    results = response.json()["results"]
    assert results["success"] is True
    assert results["internalId"] == "example-show-123"
    assert results["externalId"] == 4242
    assert results["totalEpisodes"] == 12
    assert catalog.calls["anilist"] == 0


def test_empty_episode_listing_is_reported(client: TestClient, catalog: FakeCatalog) -> None:
    catalog.add_listing("55", episode_envelope(None))

    response = client.get("/episodes/quiet-show-55")

    results = response.json()["results"]
    assert results["success"] is False
    assert results["internalId"] == "quiet-show-55"
    assert "quiet-show-55" in results["message"]


def test_describe_unresolved_includes_anilist_title(catalog: FakeCatalog) -> None:
    catalog.media[88] = media(88, english="Completely Unknown Show")
    app = create_app(settings=_settings(describe_unresolved=True), transport=catalog.transport())

    response = TestClient(app).get("/episodes/88")

    results = response.json()["results"]
    assert results["success"] is False
    assert "(Completely Unknown Show)" in results["message"]


def test_first_result_fallback_setting(catalog: FakeCatalog) -> None:
    catalog.media[88] = media(88, english="Completely Unknown Show")
    catalog.search_results["Completely Unknown Show"] = [("Another Thing", "/another-thing-55")]
    app = create_app(settings=_settings(first_result_fallback=True), transport=catalog.transport())

    response = TestClient(app).get("/resolve/88")

    assert response.status_code == 200
    assert response.json()["internal_id"] == "another-thing-55"
    assert response.json()["source"] == "fallback"


def test_static_mapping_file_is_loaded(tmp_path: Path, catalog: FakeCatalog) -> None:
    mapping = tmp_path / "mapping.json"
    mapping.write_text('{"4242": "example-show-123"}', encoding="utf-8")
    app = create_app(
        settings=_settings(static_mapping_path=mapping, use_builtin_mappings=False),
        transport=catalog.transport(),
    )
    test_client = TestClient(app)

    assert test_client.get("/health").json()["static_mappings"] == 1
    assert test_client.get("/resolve/4242").json()["source"] == "static"
    assert catalog.calls["anilist"] == 0


def test_unexpected_failure_returns_error_envelope(client: TestClient) -> None:
    def _explode(identifier: str):
        raise RuntimeError("boom")

    client.app.state.app_state.lookup_service.lookup = _explode

    response = client.get("/episodes/21")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "results": {
            "success": False,
            "message": "An error occurred while fetching the episodes",
        },
    }


def test_invalid_title_field_setting_is_rejected() -> None:
    with pytest.raises(ValueError):
        _settings(title_fields=["english", "kanji"])


def test_non_ascii_digit_anilist_id_on_page_is_ignored(client: TestClient, catalog: FakeCatalog) -> None:
    catalog.add_listing("77", episode_envelope(episode_fragment("odd-show-77", [1])))
    catalog.detail_pages["odd-show-77"] = detail_page("¹")

    response = client.get("/episodes/odd-show-77")

    assert response.status_code == 200
    results = response.json()["results"]
    assert results["success"] is True
    assert results["totalEpisodes"] == 1
    assert "externalId" not in results


def test_shutdown_closes_outbound_clients(catalog: FakeCatalog) -> None:
    app = create_app(settings=_settings(), transport=catalog.transport())
    app_state = app.state.app_state

    with TestClient(app) as test_client:
        assert test_client.get("/health").status_code == 200
        assert not app_state.catalog_client.is_closed

    assert app_state.catalog_client.is_closed
    assert app_state.anilist_client.is_closed


def test_matching_settings_reach_the_resolver(catalog: FakeCatalog) -> None:
    app = create_app(
        settings=_settings(acceptance_threshold=0.5, substring_score=0.6),
        transport=catalog.transport(),
    )

    matcher = app.state.app_state.resolver.matcher
    assert matcher.acceptance_threshold == 0.5
    assert matcher.substring_score == 0.6
