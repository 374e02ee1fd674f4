from wallaura.settings import Settings, mask_key


def test_defaults_without_environment():
    settings = Settings.from_env({})
    assert settings.access_key is None
    assert settings.api_base == "https://api.unsplash.com"
    assert settings.cache_ttl == 30
    assert settings.rate_limit_window == 60
    assert settings.rate_limit_max == 120


def test_first_credential_variable_wins():
    env = {"UNSPLASH_KEY": "server-key", "VITE_UNSPLASH_ACCESS_KEY": "vite-key"}
    assert Settings.from_env(env).access_key == "server-key"


def test_second_credential_variable_used_as_fallback():
    assert Settings.from_env({"VITE_UNSPLASH_ACCESS_KEY": "vite-key"}).access_key == "vite-key"
    assert Settings.from_env({"UNSPLASH_KEY": "", "VITE_UNSPLASH_ACCESS_KEY": "vite-key"}).access_key == "vite-key"


def test_credential_is_sanitized():
    assert Settings.from_env({"UNSPLASH_KEY": ' "abc123" '}).access_key == "abc123"
    assert Settings.from_env({"UNSPLASH_KEY": "your_access_key_here"}).access_key is None
    assert Settings.from_env({"UNSPLASH_KEY": "PLACEHOLDER"}).access_key is None


def test_numeric_overrides():
    settings = Settings.from_env({
        "CACHE_TTL_SECONDS": "5",
        "CACHE_MAX_ENTRIES": "10",
        "RATE_LIMIT_WINDOW_SECONDS": "1.5",
        "RATE_LIMIT_MAX": "3",
        "RATE_LIMIT_MAX_CLIENTS": "7",
        "UPSTREAM_TIMEOUT_SECONDS": "2",
        "UNSPLASH_API_BASE": "http://localhost:9000/",
    })
    assert settings.cache_ttl == 5.0
    assert settings.cache_max_entries == 10
    assert settings.rate_limit_window == 1.5
    assert settings.rate_limit_max == 3
    assert settings.rate_limit_max_clients == 7
    assert settings.upstream_timeout == 2.0
    assert settings.api_base == "http://localhost:9000"


def test_mask_key():
    assert mask_key(None) == "<<none>>"
    assert mask_key("short") == "****"
    assert mask_key("abcdefghijkl") == "abcd...ijkl"
