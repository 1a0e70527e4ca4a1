"""Tests for the key.txt credential store."""
import pytest

from credential_store import CredentialStore


@pytest.fixture
def store(tmp_path):
    return CredentialStore(str(tmp_path / "key.txt"))


def test_missing_file_is_empty(store):
    assert store.get_default() is None
    assert store.get_credential("OpenWeather") is None


def test_credential_round_trip(store):
    store.set_credential("OpenWeather", "k1")

    assert store.get_credential("OpenWeather") == "k1"
    assert store.get_credential("AccuWeather") is None


def test_credential_overwrite(store):
    store.set_credential("OpenWeather", "k1")
    store.set_credential("OpenWeather", "k2")

    assert store.get_credential("OpenWeather") == "k2"


def test_default_round_trip_keeps_keys(store):
    store.set_credential("WeatherAPI", "w1")
    store.set_default("AccuWeather")

    assert store.get_default() == "AccuWeather"
    assert store.get_credential("WeatherAPI") == "w1"


def test_setting_key_keeps_default(store):
    store.set_default("AccuWeather")
    store.set_credential("AccuWeather", "a1")

    assert store.get_default() == "AccuWeather"


def test_remove_credential(store):
    store.set_credential("OpenWeather", "k1")
    store.set_credential("WeatherAPI", "w1")

    store.remove_credential("OpenWeather")

    assert store.get_credential("OpenWeather") is None
    assert store.get_credential("WeatherAPI") == "w1"


def test_file_layout(store, tmp_path):
    store.set_default("OpenWeather")
    store.set_credential("OpenWeather", "k1")
    store.set_credential("AerisWeather", "id:secret")

    content = (tmp_path / "key.txt").read_text(encoding="utf-8")

    assert content == "OpenWeather\nOpenWeather:k1\nAerisWeather:id:secret\n"
    assert store.get_credential("AerisWeather") == "id:secret"


def test_reads_hand_written_key_file(tmp_path):
    """Empty keys ("Name:") and blank default lines are treated as unset."""
    path = tmp_path / "key.txt"
    path.write_text("\nOpenWeather:abc\nWeatherAPI:\ngarbage line\n", encoding="utf-8")
    store = CredentialStore(str(path))

    assert store.get_default() is None
    assert store.get_credential("OpenWeather") == "abc"
    assert store.get_credential("WeatherAPI") is None


def test_plaintext_warning_on_first_write(store, caplog):
    with caplog.at_level("WARNING"):
        store.set_credential("OpenWeather", "k1")
        store.set_credential("WeatherAPI", "w1")

    warnings = [r for r in caplog.records if "unencrypted" in r.getMessage()]
    assert len(warnings) == 1
