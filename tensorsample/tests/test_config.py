import os
import pytest
import yaml

from tensorsample import config as cfg

@pytest.fixture
def isolated_config(monkeypatch):
    ### apply_config writes env vars and module flags, restore both afterwards ###
    for key, env_var in cfg.ENV_VARS.items():
        monkeypatch.setenv(env_var, str(cfg.DEFAULT_CONFIG_ENV[key]))
    for flag in ("NUM_WORKERS", "WARN_UNNORMALIZED", "NORMALIZED_ATOL", "DEVICE"):
        monkeypatch.setattr(cfg, flag, getattr(cfg, flag))
    return cfg

def test_missing_default_config_gives_defaults(monkeypatch, tmp_path):
    monkeypatch.setattr(cfg, "DEFAULT_CONFIG_PATH", tmp_path / "nope.yaml")
    assert cfg.load_config() == cfg.DEFAULT_CONFIG_ENV

def test_missing_custom_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        cfg.load_config(tmp_path / "nope.yaml")

def test_save_then_load(tmp_path, capsys):
    path = tmp_path / "nested" / "config.yaml"
    assert cfg.save_config({"num_workers": 4, "device": "cpu"}, path)
    assert "Configuration saved" in capsys.readouterr().out

    loaded = cfg.load_config(path)
    assert loaded["num_workers"] == 4
    assert loaded["normalized_atol"] == cfg.DEFAULT_CONFIG_ENV["normalized_atol"]

def test_unknown_keys_are_dropped(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"num_workers": 2, "mixed_precision": "fp16"}))
    loaded = cfg.load_config(path)
    assert "mixed_precision" not in loaded
    assert loaded["num_workers"] == 2

def test_broken_yaml_warns_and_uses_defaults(tmp_path, capsys):
    path = tmp_path / "config.yaml"
    path.write_text("num_workers: [1, 2\n")
    assert cfg.load_config(path) == cfg.DEFAULT_CONFIG_ENV
    assert "Warning" in capsys.readouterr().out

def test_apply_config_updates_flags(isolated_config):
    isolated_config.apply_config({"num_workers": 6, "warn_unnormalized": "False", "normalized_atol": 0.5})
    assert isolated_config.NUM_WORKERS == 6
    assert isolated_config.WARN_UNNORMALIZED is False
    assert isolated_config.NORMALIZED_ATOL == 0.5
    assert os.environ["TENSORSAMPLE_NUM_WORKERS"] == "6"
