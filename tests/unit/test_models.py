"""Tests for Siren model parsing."""

import pytest

from siren_nav.core.models import (
    EmbeddedLink,
    EmbeddedRepresentation,
    Entity,
    ResponseData,
    parse_siren,
)


class TestParseSiren:
    """Tests for parse_siren."""

    def test_parse_full_document(self, root_doc):
        """Test parsing links, sub-entities and actions."""
        entity = parse_siren(root_doc)

        assert entity.cls == ["root"]
        assert entity.properties == {"name": "api"}
        assert len(entity.links) == 4
        assert len(entity.entities) == 4
        assert [a.name for a in entity.actions] == ["create-order", "create-order-json", "find"]

    def test_sub_entity_kinds(self, root_doc):
        """Test that href decides between embedded link and representation."""
        entity = parse_siren(root_doc)

        assert isinstance(entity.entities[0], EmbeddedLink)
        assert isinstance(entity.entities[1], EmbeddedRepresentation)
        assert entity.entities[1].get_self() == "/items/2"
        assert entity.entities[2].get_self() is None

    def test_action_defaults(self, root_doc):
        """Test that method defaults to GET and fields are parsed."""
        entity = parse_siren(root_doc)

        create = entity.get_action("create-order")
        find = entity.get_action("find")

        assert create.method == "POST"
        assert create.fields[0].name == "sku"
        assert find.method == "GET"
        assert entity.get_action("missing") is None

    def test_empty_document(self):
        entity = parse_siren({})

        assert entity.links == []
        assert entity.entities == []
        assert entity.get_self() is None

    def test_entity_passthrough(self):
        entity = Entity()

        assert parse_siren(entity) is entity

    def test_non_object_rejected(self):
        with pytest.raises(TypeError):
            parse_siren("<html></html>")


class TestResponseData:
    """Tests for ResponseData header lookup."""

    def test_header_case_fallback(self):
        response = ResponseData(status=201, headers={"location": "/orders/1"})

        assert response.header("Location") == "/orders/1"
        assert response.header("Etag") is None

    def test_header_case_insensitive(self):
        response = ResponseData(status=200, headers={"Content-Type": "text/plain", "ETag": "1"})

        assert response.header("content-type") == "text/plain"
        assert response.header("etag") == "1"
        assert response.header("Location") is None
