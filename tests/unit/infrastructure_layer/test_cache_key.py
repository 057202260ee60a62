"""
Unit Tests for Cache Key Derivation
"""

import pytest

from src.infrastructure.cache.cache_key import derive_cache_key
from tests.test_fixtures import RequestFactory

NAMESPACE = "gateway.example.com"


@pytest.mark.unit
class TestDeriveCacheKey:
    def test_layout(self):
        key = derive_cache_key(RequestFactory.descriptor(), NAMESPACE)

        assert key == (
            "https://screenshot-cache.gateway.example.com"
            "/v1/w1200/h800/js/css/https%3A%2F%2Fexample.com"
        )

    def test_is_deterministic(self):
        first = derive_cache_key(RequestFactory.descriptor(js="a()", css="b{}"), NAMESPACE)
        second = derive_cache_key(RequestFactory.descriptor(js="a()", css="b{}"), NAMESPACE)

        assert first == second

    @pytest.mark.parametrize(
        "field, value",
        [
            ("target_url", "https://example.org"),
            ("version", "2"),
            ("width", "1201"),
            ("height", "full"),
            ("js", "x()"),
            ("css", "y{}"),
        ],
    )
    def test_each_field_changes_the_key(self, field, value):
        base = RequestFactory.descriptor()
        changed = base.model_copy(update={field: value})

        assert derive_cache_key(base, NAMESPACE) != derive_cache_key(changed, NAMESPACE)

    def test_namespace_changes_the_key(self, descriptor):
        assert derive_cache_key(descriptor, "a.local") != derive_cache_key(descriptor, "b.local")

    def test_slashes_are_encoded_so_fields_cannot_shift(self):
        """js ending in a slash must not collide with css starting with one."""
        left = RequestFactory.descriptor(js="a/", css="b")
        right = RequestFactory.descriptor(js="a", css="/b")

        assert derive_cache_key(left, NAMESPACE) != derive_cache_key(right, NAMESPACE)
        assert "/jsa%2F/cssb/" in derive_cache_key(left, NAMESPACE)

    def test_version_is_encoded(self):
        key = derive_cache_key(RequestFactory.descriptor(version="1/2 beta"), NAMESPACE)
        assert "/v1%2F2%20beta/" in key

    def test_non_ascii_is_percent_encoded(self):
        key = derive_cache_key(RequestFactory.descriptor(target_url="https://例え.jp/"), NAMESPACE)

        assert key.isascii()
        assert key.endswith("/https%3A%2F%2F%E4%BE%8B%E3%81%88.jp%2F")

    def test_path_has_fixed_segment_count(self):
        key = derive_cache_key(
            RequestFactory.descriptor(js="a/b/c", css="d/e", target_url="https://x.com/p/q"),
            NAMESPACE,
        )
        path = key.split("://", 1)[1].split("/")

        assert len(path) == 7
