import pytest

from signaling.config import AppConfig, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SIGNALING_HOST",
        "SIGNALING_PORT",
        "TWILIO_ACCOUNT_SID",
        "TWILIO_AUTH_TOKEN",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "missing.yaml")

    assert config == AppConfig()
    assert config.server.port == 8080
    assert config.signaling.room_capacity == 2
    assert config.signaling.bye_leaves_room is True
    assert not config.ice.enabled


def test_yaml_values_are_loaded(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "server:\n"
        "  port: 9000\n"
        "signaling:\n"
        "  client_log: false\n"
        "ice:\n"
        "  static_servers:\n"
        "    - urls: [stun:a.example.org, stun:b.example.org]\n"
    )

    config = load_config(path)

    assert config.server.port == 9000
    assert config.signaling.client_log is False
    assert config.ice.static_servers[0].urls == ["stun:a.example.org", "stun:b.example.org"]


def test_environment_overrides_yaml(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("server:\n  port: 9000\n")
    monkeypatch.setenv("SIGNALING_PORT", "9443")
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC123")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.org, https://b.example.org")

    config = load_config(path)

    assert config.server.port == 9443
    assert config.ice.enabled
    assert config.cors.origins == ["https://a.example.org", "https://b.example.org"]


def test_room_capacity_above_two_is_invalid(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("signaling:\n  room_capacity: 3\n")

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_non_mapping_yaml_is_invalid(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ValueError, match="must be a mapping"):
        load_config(path)
