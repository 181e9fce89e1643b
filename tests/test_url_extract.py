from linkguard.domain.url.extract import canonicalize_url, extract_urls, is_parseable_https


def test_extract_urls_strips_trailing_punctuation_and_dedups():
    text = "Visit https://example.com/login. Or https://example.com/login! Also http://other.test/a?b=1,"
    assert extract_urls(text) == ["https://example.com/login", "http://other.test/a?b=1"]


def test_extract_urls_respects_limit():
    text = " ".join(f"https://site{i}.example/" for i in range(10))
    assert extract_urls(text, limit=3) == [
        "https://site0.example/",
        "https://site1.example/",
        "https://site2.example/",
    ]


def test_extract_urls_empty_input():
    assert extract_urls("") == []
    assert extract_urls(None) == []


def test_canonicalize_url_lowercases_scheme_and_host_only():
    assert canonicalize_url("  HTTPS://Example.COM/Path?Q=A ") == "https://example.com/Path?Q=A"


def test_is_parseable_https():
    assert is_parseable_https("https://example.com") is True
    assert is_parseable_https("http://example.com") is False
    assert is_parseable_https("https://") is False
    assert is_parseable_https("https://example.com:notaport/") is False
    assert is_parseable_https("not a url") is False


def test_extract_urls_zero_limit():
    assert extract_urls("https://a.example/ https://b.example/", limit=0) == []
