"""Tests for origin resolution."""

import pytest

from origin_storage.origin import is_cache_url, resolve_origin


@pytest.mark.parametrize(
    ("url", "origin"),
    [
        ("https://mipcache.bdstatic.com/c/s/www.example.com/page.html", "www.example.com"),
        ("https://mipcache.bdstatic.com/c/blog.example.org/a/b", "blog.example.org"),
        ("https://www.example.com/page.html", "www.example.com"),
        ("http://localhost:8080/x", "localhost"),
    ],
)
def test_resolve_origin(url, origin):
    assert resolve_origin(url) == origin


def test_cache_url_without_embedded_site_falls_back_to_host():
    assert resolve_origin("https://mipcache.bdstatic.com/") == "mipcache.bdstatic.com"


def test_is_cache_url():
    assert is_cache_url("https://mipcache.bdstatic.com/c/s/a.com/")
    assert not is_cache_url("https://a.com/mipcache.bdstatic.com")


def test_custom_cache_hosts():
    url = "https://cache.example.net/c/site.com/index.html"
    assert is_cache_url(url, ["cache.example.net"])
    assert resolve_origin(url, ["cache.example.net"]) == "site.com"
