from powerprox.config.settings import Settings, _apply_env_overrides, get_logging_config, get_settings


def test_default_settings_load_from_packaged_yaml():
    settings = get_settings()
    assert settings.region.origin_lat_deg == -33.88243560003056
    assert settings.region.origin_lon_deg == 151.2064118987779
    assert settings.region.search_radius_m == 5000
    assert settings.cache.ttl_days == 32
    assert settings.property_data.form_defaults["Menu_Lv2"] == "Electricity Line"
    assert settings.engine.workers >= 1


def test_env_overrides_are_applied(monkeypatch):
    monkeypatch.setenv("POWERPROX_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("POWERPROX_CACHE_PATH", "/tmp/elsewhere.json")
    monkeypatch.setenv("POWERPROX_GEOCODE_API_KEY", "secret")
    raw = _apply_env_overrides({"property_data": {"init_url": "a", "select_url": "b"}})
    settings = Settings.model_validate(raw)
    assert settings.app.log_level == "DEBUG"
    assert settings.cache.path == "/tmp/elsewhere.json"
    assert settings.geocode.api_key == "secret"


def test_logging_config_is_a_dict_config():
    config = get_logging_config()
    assert config["version"] == 1
    assert "console" in config["handlers"]
