"""Tests for the shared Elasticsearch helpers."""

import pytest

from .elasticsearch import POSTS_MAPPINGS, ensure_posts_index, unwrap_es_response


def test_unwrap_plain_dict():
    data = {"hits": {"hits": []}}
    assert unwrap_es_response(data) is data


def test_unwrap_rejects_unexpected_type():
    with pytest.raises(TypeError):
        unwrap_es_response(["not", "a", "response"])


class TestEnsurePostsIndex:
    @pytest.mark.asyncio
    async def test_creates_missing_index_with_geo_point(self, fake_es):
        created = await ensure_posts_index(fake_es, "around")
        assert created is True
        mappings = fake_es.indices.created["around"]
        assert mappings == POSTS_MAPPINGS
        assert mappings["properties"]["location"]["type"] == "geo_point"

    @pytest.mark.asyncio
    async def test_leaves_existing_index_alone(self, fake_es):
        fake_es.docs["around"] = {}
        created = await ensure_posts_index(fake_es, "around")
        assert created is False
        assert fake_es.indices.created == {}
