# tests/test_csp.py
import base64

from speculum.csp import ContentSecurityPolicy, apply_nonce, generate_nonce, nonce_source


def test_nonce_is_base64_of_16_random_bytes():
    nonce = generate_nonce()
    assert len(base64.b64decode(nonce, validate=True)) == 16


def test_nonces_do_not_repeat():
    nonces = {generate_nonce() for _ in range(10_000)}
    assert len(nonces) == 10_000


def test_nonce_appended_to_script_src():
    header = "default-src 'self'; script-src 'self'"
    assert (
        apply_nonce(header, "abc123")
        == "default-src 'self'; script-src 'self' 'nonce-abc123'"
    )


def test_nonce_and_unsafe_hashes_appended_to_style_src():
    header = "script-src 'self'; style-src 'self'"
    assert apply_nonce(header, "xyz") == (
        "script-src 'self' 'nonce-xyz'; style-src 'self' 'nonce-xyz' 'unsafe-hashes'"
    )


def test_missing_directives_are_not_added():
    header = "default-src 'self'; img-src 'self' data:"
    assert apply_nonce(header, "abc123") == header


def test_empty_header_stays_empty():
    assert apply_nonce("", "abc123") == ""


def test_known_hashes_follow_the_nonce():
    header = "script-src 'self'; style-src 'self'"
    result = apply_nonce(
        header,
        "n1",
        script_hashes=["'sha256-AAA='"],
        style_hashes=["'sha256-BBB='"],
    )
    policy = ContentSecurityPolicy.parse(result)
    assert policy.sources("script-src") == ["'self'", "'nonce-n1'", "'sha256-AAA='"]
    assert policy.sources("style-src") == [
        "'self'",
        "'nonce-n1'",
        "'unsafe-hashes'",
        "'sha256-BBB='",
    ]


def test_only_first_duplicate_directive_is_kept():
    header = "script-src 'self'; script-src https://cdn.example.org; style-src 'self'"
    result = apply_nonce(header, "abc")
    assert result.count("script-src") == 1
    assert "cdn.example.org" not in result
    assert result.startswith("script-src 'self' 'nonce-abc'")


def test_whitespace_is_normalized():
    header = "  default-src   'self' ;;script-src 'self'  ;"
    assert apply_nonce(header, "abc") == (
        "default-src 'self'; script-src 'self' 'nonce-abc'"
    )


def test_applying_twice_does_not_duplicate_sources():
    once = apply_nonce("script-src 'self'; style-src 'self'", "abc")
    assert apply_nonce(once, "abc") == once


def test_policy_parse_and_append():
    policy = ContentSecurityPolicy.parse("Default-Src 'self'; img-src data:")
    assert policy.directive_names == ["Default-Src", "img-src"]
    assert policy.has_directive("IMG-SRC")
    assert policy.append_sources("img-src", "https:", "data:") is True
    assert policy.sources("img-src") == ["data:", "https:"]
    assert policy.append_sources("script-src", "'self'") is False
    assert not policy.has_directive("script-src")


def test_policy_from_directives_serializes_in_order():
    policy = ContentSecurityPolicy.from_directives(
        {"default-src": ["'self'"], "object-src": ["'none'"], "upgrade-insecure-requests": []}
    )
    assert str(policy) == "default-src 'self'; object-src 'none'; upgrade-insecure-requests"


def test_nonce_source_format():
    assert nonce_source("abc") == "'nonce-abc'"


def test_directive_spelling_is_kept():
    header = "Default-Src 'self'; Script-Src 'self'"
    assert apply_nonce(header, "abc") == (
        "Default-Src 'self'; Script-Src 'self' 'nonce-abc'"
    )
