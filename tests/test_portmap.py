"""
Tests for the port-forward manager: blob store, repository and HTTP API.
"""

import json
import threading

import pytest

from portmap.app import ValidationError, create_app, validate_mapping
from portmap.config import Settings, load_settings
from portmap.store import JsonBlobStore, MappingRepository, mapping_url


@pytest.fixture
def blob_path(tmp_path):
    return str(tmp_path / "portmap_config.json")


@pytest.fixture
def repo(blob_path):
    return MappingRepository(JsonBlobStore(blob_path))


@pytest.fixture
def client(blob_path):
    app = create_app(Settings(data_path=blob_path))
    app.config["TESTING"] = True
    return app.test_client()


def sample(**overrides):
    data = {"port": 3000, "subdomain": "api", "cloudIdeUrl": "ide.example.dev"}
    data.update(overrides)
    return data


class TestJsonBlobStore:
    """Tests for JsonBlobStore."""

    def test_missing_blob_reads_empty(self, blob_path):
        """No file means no mappings."""
        assert JsonBlobStore(blob_path).read() == []

    def test_write_then_read(self, blob_path):
        """Written lists are read back."""
        store = JsonBlobStore(blob_path)
        store.write([{"id": 1}])
        assert store.read() == [{"id": 1}]

    def test_non_list_payload_reads_empty(self, blob_path):
        """A JSON object instead of a list is treated as empty."""
        with open(blob_path, "w") as f:
            json.dump({"id": 1}, f)
        assert JsonBlobStore(blob_path).read() == []

    def test_corrupt_json_reads_empty(self, blob_path):
        """Unparseable JSON is treated as empty."""
        with open(blob_path, "w") as f:
            f.write("{not json")
        assert JsonBlobStore(blob_path).read() == []

    def test_ensure_initialises_blob(self, blob_path):
        """ensure() writes an empty list when nothing is stored."""
        JsonBlobStore(blob_path).ensure()
        with open(blob_path) as f:
            assert json.load(f) == []

    def test_ensure_keeps_existing_mappings(self, blob_path):
        """ensure() leaves a populated blob alone."""
        store = JsonBlobStore(blob_path)
        store.write([{"id": 4}])
        store.ensure()
        assert store.read() == [{"id": 4}]

    def test_non_object_entries_dropped(self, blob_path):
        """Entries that are not JSON objects are skipped."""
        with open(blob_path, "w") as f:
            json.dump(["x", 3, None, {"id": 2}], f)
        assert JsonBlobStore(blob_path).read() == [{"id": 2}]


class TestMappingRepository:
    """Tests for MappingRepository."""

    def test_first_id_is_one(self, repo):
        """The first mapping gets id 1."""
        assert repo.add(sample())["id"] == 1

    def test_ids_continue_from_max(self, repo):
        """New ids are one past the highest existing id."""
        repo.store.write([{"id": 7, **sample()}, {"id": 2, **sample()}])
        assert repo.add(sample())["id"] == 8

    def test_ids_not_reused_after_middle_delete(self, repo):
        """Deleting a middle mapping does not free the top id."""
        repo.add(sample())
        repo.add(sample())
        repo.add(sample())
        repo.delete(2)
        assert repo.add(sample())["id"] == 4

    def test_update_merges(self, repo):
        """Only supplied fields change."""
        repo.add(sample())
        updated = repo.update(1, {"port": 8080})
        assert updated == {"id": 1, "port": 8080, "subdomain": "api", "cloudIdeUrl": "ide.example.dev"}
        assert repo.get(1) == updated

    def test_update_missing_returns_none(self, repo):
        """Unknown ids are not created by update."""
        assert repo.update(9, {"port": 1}) is None
        assert repo.list() == []

    def test_update_cannot_change_id(self, repo):
        """The path id wins over an id in the body."""
        repo.add(sample())
        assert repo.update(1, {"id": 5})["id"] == 1

    def test_delete(self, repo):
        """Delete removes the mapping and reports it."""
        repo.add(sample())
        assert repo.delete(1) is True
        assert repo.delete(1) is False
        assert repo.list() == []

    def test_mapping_url(self):
        """URLs are https://subdomain.host:port."""
        assert mapping_url(sample()) == "https://api.ide.example.dev:3000"

    def test_non_integer_ids_ignored_for_next_id(self, repo):
        """Null or string ids never break or win the id scan."""
        repo.store.write([{"id": None}, {"id": "3"}, {"id": True}, {"id": 2}])
        assert repo.add(sample())["id"] == 3

    def test_add_after_non_object_entries(self, repo):
        """A blob holding stray scalars still accepts new mappings."""
        with open(repo.store.path, "w") as f:
            json.dump(["x"], f)
        assert repo.add(sample())["id"] == 1
        assert repo.list() == [{**sample(), "id": 1}]

    def test_concurrent_adds_get_unique_ids(self, repo):
        """Parallel adds never share an id or lose a record."""
        threads, per_thread = 16, 10
        barrier = threading.Barrier(threads)
        ids = []
        ids_lock = threading.Lock()

        def worker():
            barrier.wait()
            for _ in range(per_thread):
                mapping_id = repo.add(sample())["id"]
                with ids_lock:
                    ids.append(mapping_id)

        workers = [threading.Thread(target=worker) for _ in range(threads)]
        for t in workers:
            t.start()
        for t in workers:
            t.join()

        total = threads * per_thread
        assert sorted(ids) == list(range(1, total + 1))
        assert len(repo.list()) == total


class TestValidation:
    """Tests for validate_mapping."""

    def test_unknown_fields_dropped(self):
        """Only port, subdomain and cloudIdeUrl are kept."""
        assert validate_mapping(sample(extra=1)) == sample()

    @pytest.mark.parametrize("bad", [
        sample(port=0),
        sample(port=70000),
        sample(port="3000"),
        sample(port=True),
        sample(subdomain=""),
        sample(cloudIdeUrl=None),
    ])
    def test_rejects_bad_fields(self, bad):
        """Out-of-range ports and empty strings are rejected."""
        with pytest.raises(ValidationError):
            validate_mapping(bad)

    def test_full_body_required_unless_partial(self):
        """Creation needs every field, updates do not."""
        with pytest.raises(ValidationError):
            validate_mapping({"port": 80})
        assert validate_mapping({"port": 80}, partial=True) == {"port": 80}

    def test_rejects_non_object(self):
        """Lists and scalars are not mappings."""
        with pytest.raises(ValidationError):
            validate_mapping([1, 2])


class TestSettings:
    """Tests for load_settings."""

    def test_env_overrides(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("PORTMAP_DATA_PATH", "/tmp/x.json")
        monkeypatch.setenv("PORTMAP_PORT", "9100")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.data_path == "/tmp/x.json"
        assert settings.port == 9100
        assert settings.log_level == "DEBUG"


class TestApi:
    """Tests for the HTTP endpoints."""

    def test_list_starts_empty(self, client):
        """A fresh store lists nothing."""
        resp = client.get("/mappings")
        assert resp.status_code == 200
        assert resp.get_json() == []

    def test_create_and_list(self, client):
        """POST assigns an id and the mapping is listed with its URL."""
        resp = client.post("/mappings", json=sample())
        assert resp.status_code == 201
        assert resp.get_json()["id"] == 1

        listed = client.get("/mappings").get_json()
        assert listed == [{**sample(), "id": 1, "url": "https://api.ide.example.dev:3000"}]

    def test_create_invalid_is_400(self, client):
        """Bad bodies are rejected with an error message."""
        resp = client.post("/mappings", json=sample(port=-1))
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_create_non_json_is_400(self, client):
        """A non-JSON body is rejected."""
        resp = client.post("/mappings", data="port=3000")
        assert resp.status_code == 400

    def test_update(self, client):
        """PUT merges fields."""
        client.post("/mappings", json=sample())
        resp = client.put("/mappings/1", json={"subdomain": "web"})
        assert resp.status_code == 200
        assert resp.get_json()["subdomain"] == "web"
        assert resp.get_json()["port"] == 3000

    def test_update_missing_is_404(self, client):
        """PUT on an unknown id is 404."""
        resp = client.put("/mappings/3", json={"port": 80})
        assert resp.status_code == 404

    def test_delete(self, client):
        """DELETE removes and is idempotent."""
        client.post("/mappings", json=sample())
        assert client.delete("/mappings/1").status_code == 200
        assert client.delete("/mappings/1").status_code == 200
        assert client.get("/mappings").get_json() == []

    def test_index_page_lists_mappings(self, client):
        """The HTML page shows stored mappings."""
        client.post("/mappings", json=sample(subdomain="docs"))
        resp = client.get("/")
        assert resp.status_code == 200
        body = resp.get_data(as_text=True)
        assert "Port Forward Manager" in body
        assert "https://docs.ide.example.dev:3000" in body

    def test_store_failure_is_500(self, client, monkeypatch):
        """Unexpected storage errors surface as JSON 500s."""
        repo = client.application.config["REPOSITORY"]

        def boom(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(repo.store, "write", boom)
        resp = client.post("/mappings", json=sample())
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to add mapping"}

    def test_list_survives_stray_entries(self, client, blob_path):
        """A hand-edited blob with non-object entries still lists."""
        with open(blob_path, "w") as f:
            json.dump(["x", {"id": 1, **sample()}], f)
        resp = client.get("/mappings")
        assert resp.status_code == 200
        assert [m["id"] for m in resp.get_json()] == [1]
