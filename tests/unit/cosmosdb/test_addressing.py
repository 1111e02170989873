"""Tests for resource links and resource ids."""

import pytest

from cosmosrest.cosmosdb.addressing import (
    ResourceAddress,
    ResourceAddresser,
    build_resource_id,
    build_resource_link,
)


class TestBuildResourceLink:
    """Joining and trimming of link segments."""

    def test_joins_segments(self):
        assert build_resource_link("dbs", "app", "colls", "notes") == "dbs/app/colls/notes"

    def test_trims_slashes_and_whitespace(self):
        link = build_resource_link(" /dbs/ ", "app/", "/colls", "  notes  ")

        assert link == "dbs/app/colls/notes"

    def test_drops_empty_segments(self):
        assert build_resource_link("dbs", "", "  ", "/", "app") == "dbs/app"

    def test_accepts_whole_sub_links(self):
        assert build_resource_link("dbs/app/colls/notes/", "/docs") == "dbs/app/colls/notes/docs"

    def test_preserves_case(self):
        assert build_resource_link("dbs", "MyApp", "colls", "lifePlans") == "dbs/MyApp/colls/lifePlans"

    def test_no_segments(self):
        assert build_resource_link() == ""

    @pytest.mark.parametrize(
        "segments",
        [
            ("//dbs//", "app"),
            ("dbs", "//app//", "colls//notes"),
            ("\tdbs\n", " / app / ", "colls", "notes/ / docs"),
        ],
    )
    def test_never_emits_slash_noise(self, segments):
        link = build_resource_link(*segments)

        assert not link.startswith("/")
        assert not link.endswith("/")
        assert "//" not in link


class TestBuildResourceId:
    """Resource ids are lowercase links."""

    def test_lowercases_link(self):
        assert build_resource_id("dbs", "MyApp", "colls", "lifePlans") == "dbs/myapp/colls/lifeplans"

    @pytest.mark.parametrize(
        "segments",
        [
            ("dbs", "App", "colls", "Notes", "docs", "Note-1"),
            (" /dbs/", "app", "colls/ModelSettings"),
            ("dbs", "app"),
        ],
    )
    def test_id_equals_lowercase_link(self, segments):
        assert build_resource_id(*segments) == build_resource_link(*segments).lower()


class TestResourceAddresser:
    """Database-scoped links and addresses."""

    @pytest.fixture
    def addresser(self):
        return ResourceAddresser("App")

    def test_links(self, addresser):
        assert addresser.database_link() == "dbs/App"
        assert addresser.container_link("notes") == "dbs/App/colls/notes"
        assert addresser.documents_link("notes") == "dbs/App/colls/notes/docs"
        assert addresser.document_link("notes", "Note-1") == "dbs/App/colls/notes/docs/Note-1"

    def test_container_address_targets_docs_and_signs_container(self, addresser):
        address = addresser.for_container("lifePlans")

        assert address == ResourceAddress(
            link="dbs/App/colls/lifePlans/docs",
            resource_id="dbs/app/colls/lifeplans",
            resource_type="docs",
        )

    def test_document_address_signs_lowercase_link(self, addresser):
        address = addresser.for_document("notes", "Note-1")

        assert address.link == "dbs/App/colls/notes/docs/Note-1"
        assert address.resource_id == address.link.lower()
        assert address.resource_type == "docs"

    def test_address_is_immutable(self, addresser):
        address = addresser.for_document("notes", "n1")

        with pytest.raises(AttributeError):
            address.link = "elsewhere"
