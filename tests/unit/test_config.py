import logging

from tally import config


def test_defaults_without_config_file(tmp_tally_dir):
    assert config.get_store_path() == tmp_tally_dir / "store.json"
    assert config.get_default_priority() == "medium"
    assert config.get_log_level() == logging.WARNING


def test_values_from_yaml(tmp_tally_dir):
    (tmp_tally_dir / "config.yaml").write_text(
        "store_path: ~/elsewhere/tally.json\ndefault_priority: HIGH\nlog_level: debug\n"
    )
    assert config.get_store_path().name == "tally.json"
    assert "~" not in str(config.get_store_path())
    assert config.get_default_priority() == "high"
    assert config.get_log_level() == logging.DEBUG


def test_invalid_values_fall_back(tmp_tally_dir):
    (tmp_tally_dir / "config.yaml").write_text("default_priority: urgent\nlog_level: loud\n")
    assert config.get_default_priority() == "medium"
    assert config.get_log_level() == logging.WARNING


def test_malformed_yaml_is_ignored(tmp_tally_dir):
    (tmp_tally_dir / "config.yaml").write_text("store_path: [unclosed\n")
    assert config.get_store_path() == tmp_tally_dir / "store.json"


def test_non_mapping_yaml_is_ignored(tmp_tally_dir):
    (tmp_tally_dir / "config.yaml").write_text("- just\n- a list\n")
    assert config.get_default_priority() == "medium"


def test_set_persists(tmp_tally_dir):
    config.Config().set("default_priority", "low")
    config.Config.reset()

    assert config.get_default_priority() == "low"
    assert "default_priority: low" in (tmp_tally_dir / "config.yaml").read_text()
