from memkv.url import build_url


def test_build_url_joins_host_and_segment():
    assert build_url("http://localhost:8080", "keys") == "http://localhost:8080/keys"


def test_build_url_nests_for_prefix_routes():
    assert build_url(build_url("http://localhost:8080", "keys"), "c") == "http://localhost:8080/keys/c"


def test_build_url_does_not_normalize_or_escape():
    assert build_url("http://host/", "/a b") == "http://host///a b"
    assert build_url("http://host", "") == "http://host/"
