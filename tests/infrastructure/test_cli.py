"""End-to-end tests for the click CLI over a JSON store.

Every invocation shares one cache, the way separate processes share Redis.
"""

import re

import pytest
from click.testing import CliRunner

from catalog.infrastructure import bootstrap
from catalog.infrastructure.cache.in_memory_cache_repository import InMemoryCacheRepository
from catalog.infrastructure.cli.main import cli
from catalog.infrastructure.config import get_settings


@pytest.fixture
def run(monkeypatch, tmp_path):
    monkeypatch.setenv("CATALOG_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CATALOG_STORE_BACKEND", "json")
    monkeypatch.setenv("CATALOG_CACHE_BACKEND", "memory")
    monkeypatch.setenv("CATALOG_LOG_LEVEL", "ERROR")
    shared_cache = InMemoryCacheRepository()
    monkeypatch.setattr(bootstrap, "cache_repository", lambda settings: shared_cache)
    get_settings.cache_clear()
    runner = CliRunner()
    yield lambda *args: runner.invoke(cli, list(args))
    get_settings.cache_clear()


def _create(run, name="Widget", ref="W-1", category="Tools", *extra) -> str:
    result = run(
        "product", "create", "--name", name, "--reference", ref, "--category", category, *extra
    )
    assert result.exit_code == 0, result.output
    return re.search(r"Product (\w+) ", result.output).group(1)


class TestProductCommands:

    def test_create_and_get(self, run):
        product_id = _create(run, "Widget", "W-1", "Tools", "--stock", "3", "--spec", "ram_gb=8")
        result = run("product", "get", "--id", product_id)
        assert result.exit_code == 0
        assert "Name:       Widget" in result.output
        assert "Stock:      3" in result.output
        assert '"ram_gb": 8' in result.output

    def test_repeated_create_is_idempotent(self, run):
        first = _create(run)
        result = run(
            "product", "create", "--name", " Widget ", "--reference", "W-1", "--category", "Tools"
        )
        assert result.exit_code == 0, result.output
        assert f"Product {first} " in result.output
        assert "version=1" in result.output

    def test_create_with_same_key_and_other_data_rejected(self, run):
        _create(run)
        result = run(
            "product", "create", "--name", "Widget", "--reference", "W-1", "--category", "Garden"
        )
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_create_invalid(self, run):
        result = run("product", "create", "--name", " ", "--reference", "R", "--category", "C")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_bad_spec_format(self, run):
        result = run(
            "product", "create", "--name", "A", "--reference", "R", "--category", "C",
            "--spec", "novalue",
        )
        assert result.exit_code == 2

    def test_update(self, run):
        product_id = _create(run)
        result = run("product", "update", "--id", product_id, "--stock", "9")
        assert result.exit_code == 0
        assert "version 2" in result.output
        assert "Stock:      9" in run("product", "get", "--id", product_id).output

    def test_update_can_clear_images_and_specs(self, run):
        product_id = _create(run, "Widget", "W-1", "Tools", "--image", "a.jpg", "--spec", "color=red")
        result = run("product", "update", "--id", product_id, "--clear-images", "--clear-specs")
        assert result.exit_code == 0, result.output
        assert "version 2" in result.output
        shown = run("product", "get", "--id", product_id).output
        assert "image:" not in shown
        assert "Specifications:" not in shown

    def test_clear_flag_conflicts_with_new_values(self, run):
        product_id = _create(run)
        result = run("product", "update", "--id", product_id, "--clear-images", "--image", "b.jpg")
        assert result.exit_code == 2

    def test_delete(self, run):
        product_id = _create(run)
        assert run("product", "delete", "--id", product_id).exit_code == 0
        result = run("product", "get", "--id", product_id)
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_and_search(self, run):
        _create(run, "Widget", "W-1", "Tools")
        _create(run, "Gadget", "G-1", "Garden")

        listed = run("product", "list")
        assert "Widget" in listed.output and "Gadget" in listed.output

        by_name = run("product", "search-name", "--name", "widg")
        assert "Widget" in by_name.output and "Gadget" not in by_name.output

        by_category = run("product", "search-category", "--category", "garden")
        assert "Gadget" in by_category.output and "Widget" not in by_category.output

    def test_empty_list(self, run):
        assert "No products found." in run("product", "list").output

    def test_limit_out_of_range(self, run):
        result = run("product", "list", "--limit", "500")
        assert result.exit_code == 2


class TestHealthCommand:

    def test_healthy(self, run):
        result = run("health")
        assert result.exit_code == 0
        assert "Status: healthy" in result.output
