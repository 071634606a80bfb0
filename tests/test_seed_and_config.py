import json

import pytest

from registry_mock.core.config import ServerConfig, load_config
from registry_mock.domain.errors import FixtureError
from registry_mock.main import create_app
from registry_mock.storage.fixture_store import FixtureStore
from registry_mock.storage.seed import load_seed_data, load_seed_file

SEED = {
    # children listed before parents on purpose
    "version": [{"crate_id": "rand", "num": "0.8.5"}],
    "crate": [{"name": "rand", "category_ids": ["no-std"]}],
    "category": [{"category": "no-std"}],
    "user": [{"name": "John Doe"}],
    "crate_ownership": [{"crate_id": "rand", "user_id": 1}],
}


def test_seed_creates_parents_first():
    store = FixtureStore()

    created = load_seed_data(store, SEED)

    assert created == 5
    assert store.lookup("version", "1").crate_id == "rand"
    assert store.lookup("crate", "rand").category_ids == ["no-std"]


def test_seed_rejects_unknown_kinds():
    with pytest.raises(FixtureError):
        load_seed_data(FixtureStore(), {"widgets": []})


def test_seed_can_set_the_dependency_kind():
    store = FixtureStore()
    data = {
        "crate": [{"name": "rand"}, {"name": "cc"}],
        "version": [{"crate_id": "rand", "num": "0.8.5"}],
        "dependency": [{"crate_id": "cc", "version_id": "1", "kind": "build"}],
    }

    load_seed_data(store, data)

    assert store.lookup("dependency", "1").kind == "build"


def test_seed_file(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED), encoding="utf-8")
    store = FixtureStore()

    assert load_seed_file(store, path) == 5
    assert [u.login for u in store.all("user")] == ["john-doe"]


def test_config_defaults(monkeypatch):
    for name in ServerConfig.model_fields:
        monkeypatch.delenv(f"REGISTRY_MOCK_{name.upper()}", raising=False)

    config = load_config()

    assert config.api_prefix == "/api/v1"
    assert config.default_per_page == 10
    assert config.seed_file is None


def test_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("REGISTRY_MOCK_API_PREFIX", "/api/v2")
    monkeypatch.setenv("REGISTRY_MOCK_DEFAULT_PER_PAGE", "5")
    monkeypatch.setenv("REGISTRY_MOCK_SEED_FILE", str(tmp_path / "seed.json"))

    config = load_config()

    assert config.api_prefix == "/api/v2"
    assert config.default_per_page == 5
    assert config.seed_file == tmp_path / "seed.json"


def test_app_loads_seed_file_when_no_store_is_given(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(SEED), encoding="utf-8")

    app = create_app(config=ServerConfig(seed_file=path))

    assert app.state.store.lookup("crate", "rand") is not None


def test_each_app_owns_its_store():
    first = create_app(config=ServerConfig())
    second = create_app(config=ServerConfig())

    first.state.store.create("crate", name="rand")

    assert second.state.store.all("crate") == []
