"""
Configuration and boot tests: the store URL is mandatory and its absence
stops the process before the server starts.
"""

import pytest

from delivery_api import main
from delivery_api.core.config import EnvironmentMode, Settings, get_settings
from delivery_api.core.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "API_PORT", "CORS_ORIGIN", "ENV_MODE", "DEBUG"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(clean_env):
    settings = Settings(_env_file=None)

    assert settings.database_url is None
    assert settings.api_port == 3001
    assert settings.cors_origin == "http://localhost:3000"
    assert settings.env_mode == EnvironmentMode.DEVELOPMENT


def test_reads_environment(clean_env):
    clean_env.setenv("DATABASE_URL", "postgresql+psycopg://u:p@db:5432/deliveries")
    clean_env.setenv("ENV_MODE", "PRODUCTION")

    settings = get_settings()

    assert settings.require_database_url() == "postgresql+psycopg://u:p@db:5432/deliveries"
    assert settings.is_production


def test_missing_database_url_is_configuration_error(clean_env):
    with pytest.raises(ConfigurationError):
        Settings(_env_file=None).require_database_url()


def test_blank_database_url_counts_as_missing(clean_env):
    clean_env.setenv("DATABASE_URL", "   ")

    with pytest.raises(ConfigurationError):
        Settings(_env_file=None).require_database_url()


def test_invalid_env_mode(clean_env):
    clean_env.setenv("ENV_MODE", "qa")

    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_run_exits_without_database_url(clean_env):
    started = []
    clean_env.setattr(main.uvicorn, "run", lambda *args, **kwargs: started.append(kwargs))

    with pytest.raises(SystemExit) as exc_info:
        main.run()

    assert exc_info.value.code == 1
    assert started == []


def test_run_starts_server_on_fixed_port(clean_env, tmp_path):
    started = []
    clean_env.setattr(main.uvicorn, "run", lambda *args, **kwargs: started.append((args, kwargs)))
    clean_env.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")

    main.run()

    [(args, kwargs)] = started
    assert args == ("delivery_api.main:app",)
    assert kwargs["port"] == 3001


@pytest.mark.asyncio
async def test_startup_fails_without_database_url(clean_env):
    app = main.create_app(Settings(_env_file=None))

    with pytest.raises(ConfigurationError):
        async with app.router.lifespan_context(app):
            pass
