def build_url(host: str, segment: str) -> str:
    """Joins a host and a path segment as "{host}/{segment}".

    Nothing is normalized or escaped, so callers must pass a clean segment.
    Prefix routes nest two calls: build_url(build_url(host, "keys"), prefix).
    """
    return f"{host}/{segment}"
