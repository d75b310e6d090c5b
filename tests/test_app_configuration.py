from pathlib import Path

import pytest
import yaml

from spamgate.configuration.app_configuration import AppConfig, default_config_path
from spamgate.configuration.classifier_settings import ClassifierSettings


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path) -> None:
    config_payload = {
        "default_identity": "guest",
        "vocabulary_path": str(config_path.parent / "vocab.json"),
        "broadcast": {"room": "live"},
        "classifier": {
            "model_location": "https://example.com/model.pt",
            "encoding_length": 32,
            "spam_threshold": 0.75,
            "overflow_policy": "reject",
            "load_timeout_seconds": 30,
            "device": "cuda",
        },
    }
    config_path.write_text(yaml.safe_dump(config_payload), encoding="utf-8")

    config = AppConfig(config_path)

    assert config.default_identity == "guest"
    assert config.vocabulary_path == (config_path.parent / "vocab.json").resolve()
    assert config.broadcast_room == "live"

    classifier = config.classifier
    assert classifier.model_location == "https://example.com/model.pt"
    assert classifier.encoding_length == 32
    assert classifier.spam_threshold == pytest.approx(0.75)
    assert classifier.overflow_policy == "reject"
    assert classifier.load_timeout_seconds == pytest.approx(30.0)
    assert classifier.device == "cuda"


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    assert config.data == {}
    assert config.default_identity == "Anonymous"
    assert config.broadcast_room == "comments"
    assert config.vocabulary_path.name == "vocabulary.json"

    classifier = config.classifier
    assert classifier.encoding_length == 20
    assert classifier.spam_threshold == 0.5
    assert classifier.overflow_policy == "truncate"
    assert classifier.load_timeout_seconds is None
    assert classifier.model_location == "model/model.pt"


def test_app_config_invalid_yaml_returns_defaults(config_path: Path) -> None:
    config_path.write_text("classifier: [unclosed", encoding="utf-8")

    config = AppConfig(config_path)

    assert config.data == {}


def test_app_config_non_mapping_document(config_path: Path) -> None:
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    assert AppConfig(config_path).data == {}


def test_app_config_reload_picks_up_changes(config_path: Path) -> None:
    config_path.write_text("default_identity: first\n", encoding="utf-8")
    config = AppConfig(config_path)
    assert config.default_identity == "first"

    config_path.write_text("default_identity: second\n", encoding="utf-8")
    config.reload()

    assert config.default_identity == "second"


def test_classifier_section_must_be_mapping(config_path: Path) -> None:
    config_path.write_text("classifier: nope\n", encoding="utf-8")
    assert AppConfig(config_path).classifier.as_dict() == {}


@pytest.mark.parametrize(
    "data, attribute, expected",
    [
        ({"encoding_length": "abc"}, "encoding_length", 20),
        ({"encoding_length": 0}, "encoding_length", 20),
        ({"encoding_length": "12"}, "encoding_length", 12),
        ({"spam_threshold": 1.5}, "spam_threshold", 0.5),
        ({"spam_threshold": "high"}, "spam_threshold", 0.5),
        ({"spam_threshold": "0.8"}, "spam_threshold", 0.8),
        ({"overflow_policy": "wrap"}, "overflow_policy", "truncate"),
        ({"overflow_policy": "REJECT"}, "overflow_policy", "reject"),
        ({"load_timeout_seconds": 0}, "load_timeout_seconds", None),
        ({"load_timeout_seconds": "soon"}, "load_timeout_seconds", None),
        ({}, "device", "cpu"),
    ],
)
def test_classifier_settings_coercion(data, attribute, expected) -> None:
    assert getattr(ClassifierSettings(data), attribute) == expected


def test_default_config_path_honours_env(monkeypatch, tmp_path: Path) -> None:
    target = tmp_path / "custom.yml"
    monkeypatch.setenv("SPAMGATE_CONFIG", str(target))
    assert default_config_path() == target.resolve()

    monkeypatch.delenv("SPAMGATE_CONFIG")
    assert default_config_path().parts[-2:] == ("config", "app_config.yml")


def test_shipped_config_is_valid() -> None:
    path = Path(__file__).parent.parent / "config" / "app_config.yml"
    config = AppConfig(path)

    assert config.default_identity == "Anonymous"
    assert config.classifier.encoding_length == 20
    assert config.classifier.spam_threshold == 0.5
