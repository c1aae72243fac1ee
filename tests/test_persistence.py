import json

import pytest
import yaml

from pdv import DISABLED_KEY
from pdv.errors import StoreFormatError, StoreLoadMissing, StoreWriteError
from pdv.persistence import load_config_overrides, load_mapping, load_overrides, save_overrides


def test_missing_file_raises_store_load_missing(tmp_path):
    with pytest.raises(StoreLoadMissing) as excinfo:
        load_overrides(tmp_path / "nope.yaml")
    assert isinstance(excinfo.value, FileNotFoundError)


def test_yaml_file_is_written_and_read(tmp_path):
    path = tmp_path / "sub" / "defaults.yaml"
    save_overrides(path, {"Out-File:Encoding": "utf-8", "Out-File:Width": 80, DISABLED_KEY: False})

    assert yaml.safe_load(path.read_text()) == {
        "Out-File:Encoding": "utf-8",
        "Out-File:Width": 80,
        DISABLED_KEY: False,
    }
    assert load_overrides(path)["Out-File:Width"] == 80


def test_json_suffix_selects_json(tmp_path):
    path = tmp_path / "defaults.json"
    save_overrides(path, {"A:x": [1, 2]})
    assert json.loads(path.read_text()) == {"A:x": [1, 2]}
    assert load_overrides(path) == {"A:x": [1, 2]}


def test_empty_file_loads_as_empty_mapping(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_overrides(path) == {}


def test_non_mapping_content_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(StoreFormatError):
        load_overrides(path)


def test_unparseable_json_is_rejected(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(StoreFormatError):
        load_mapping(path)


def test_write_failure_is_wrapped(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(StoreWriteError):
        save_overrides(blocker / "defaults.yaml", {})


def test_config_section_is_flattened(tmp_path):
    path = tmp_path / "toolrc.yaml"
    path.write_text(yaml.safe_dump({
        "version": "1.0",
        "defaults": {
            "Out-File": {"Encoding": "utf-8", "Width": 120},
            "*:Verbose": True,
        },
    }))
    assert load_config_overrides(path) == {
        "Out-File:Encoding": "utf-8",
        "Out-File:Width": 120,
        "*:Verbose": True,
    }


def test_config_without_section_imports_nothing(tmp_path):
    path = tmp_path / "toolrc.yaml"
    path.write_text(yaml.safe_dump({"version": "1.0"}))
    assert load_config_overrides(path) == {}


def test_config_section_must_be_mapping(tmp_path):
    path = tmp_path / "toolrc.yaml"
    path.write_text(yaml.safe_dump({"defaults": ["a", "b"]}))
    with pytest.raises(StoreFormatError):
        load_config_overrides(path)
