from courier_bd.geo import ApiGeoResolver, StaticGeoResolver


def test_static_resolver_ignores_case_and_spaces():
    resolver = StaticGeoResolver({"olddhaka": 5, "Gulshan": 2}, default=1)

    assert resolver.resolve("Old Dhaka") == 5
    assert resolver.resolve("  GULSHAN ") == 2
    assert resolver.resolve("Mirpur") == 1
    assert resolver.resolve(None) == 1


def test_api_resolver_fetches_once():
    calls = []

    def fetch():
        calls.append(1)
        return [("Dhaka", 52), ("Chattogram", 53)]

    resolver = ApiGeoResolver(fetch, StaticGeoResolver({"sylhet": 3}, default=1))

    assert resolver.resolve("dhaka") == 52
    assert resolver.resolve("Chattogram") == 53
    assert resolver.resolve("Sylhet") == 3
    assert len(calls) == 1


def test_api_resolver_falls_back_when_fetch_fails(caplog):
    def fetch():
        raise RuntimeError("city list down")

    resolver = ApiGeoResolver(fetch, StaticGeoResolver({"khulna": 6}, default=1), tag="Pathao")

    assert resolver.resolve("Khulna") == 6
    assert "city list down" in caplog.text


def test_api_resolver_retries_after_failed_fetch():
    attempts = []

    def fetch():
        attempts.append(1)
        if len(attempts) == 1:
            raise ConnectionError("timed out")
        return [("Dhaka", 52)]

    resolver = ApiGeoResolver(fetch, StaticGeoResolver({"dhaka": 1}, default=1))

    assert resolver.resolve("Dhaka") == 1
    assert resolver.resolve("Dhaka") == 52
    assert resolver.resolve("Dhaka") == 52
    assert len(attempts) == 2
