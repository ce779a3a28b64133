import pytest

from vntranslate import configuration
from vntranslate.errors import TranslationProviderConfigurationError


@pytest.fixture(autouse=True)
def _clear_config_cache():
    configuration._load_config_instance.cache_clear()
    yield
    configuration._load_config_instance.cache_clear()


def test_environment_overrides_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("TRANSLATION_PROVIDER", "Mock")
    monkeypatch.setenv("VNTRANSLATE_MEMORY_FILE", "custom_memory.json")

    settings = configuration.get_settings(app_dir=tmp_path)

    assert settings.TRANSLATION_PROVIDER == "echo"
    assert settings.VNTRANSLATE_MEMORY_FILE == "custom_memory.json"
    assert settings.VNTRANSLATE_OUTPUT_ROOT == "MyTranslations"


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    monkeypatch.setenv("TRANSLATION_PROVIDER", "echo")
    monkeypatch.delenv("VNTRANSLATE_OUTPUT_ROOT", raising=False)
    (tmp_path / ".env").write_text("VNTRANSLATE_OUTPUT_ROOT=Exports\n", encoding="utf-8")

    settings = configuration.get_settings(app_dir=tmp_path)

    assert settings.VNTRANSLATE_OUTPUT_ROOT == "Exports"


def test_openai_without_key_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("TRANSLATION_PROVIDER", "openai")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(TranslationProviderConfigurationError, match="OPENAI_API_KEY"):
        configuration.get_settings(app_dir=tmp_path)


def test_format_validation_errors():
    message = configuration._format_validation_errors(
        [{"path": ["VNTRANSLATE_BATCH_SIZE"], "message": "must be an integer", "source": "env"}]
    )

    assert message.splitlines()[1] == "- VNTRANSLATE_BATCH_SIZE: must be an integer (source: env)"


@pytest.mark.parametrize("value", ["0", "-5"])
def test_batch_size_below_one_is_rejected(tmp_path, monkeypatch, value):
    monkeypatch.setenv("TRANSLATION_PROVIDER", "echo")
    monkeypatch.setenv("VNTRANSLATE_BATCH_SIZE", value)

    with pytest.raises(TranslationProviderConfigurationError, match="VNTRANSLATE_BATCH_SIZE"):
        configuration.get_settings(app_dir=tmp_path)


def test_provider_credentials_come_from_dotenv(tmp_path, monkeypatch):
    monkeypatch.setenv("TRANSLATION_PROVIDER", "openai")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    (tmp_path / ".env").write_text("OPENAI_API_KEY=sk-dotenv\n", encoding="utf-8")

    settings = configuration.get_settings(app_dir=tmp_path)
    credentials = configuration.provider_credentials(settings)

    assert credentials["OPENAI_API_KEY"] == "sk-dotenv"
    assert set(credentials) == set(configuration.CREDENTIAL_KEYS)
