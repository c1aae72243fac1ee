import pytest

from pdv.keys import OverrideKey, glob_match, key_matches, key_pattern, strip_flag


def test_serialize_and_parse():
    key = OverrideKey("Out-File", "Encoding")
    assert key.serialize() == "Out-File:Encoding"
    assert str(key) == "Out-File:Encoding"
    assert OverrideKey.parse("Out-File:Encoding") == key


def test_parse_splits_on_first_colon():
    """Values after the first colon stay in the parameter."""
    key = OverrideKey.parse("Invoke-Thing:Mode:Extra")
    assert key.command == "Invoke-Thing"
    assert key.parameter == "Mode:Extra"


@pytest.mark.parametrize("text", ["disabled", "NoColon", ":Encoding", "Out-File:", ""])
def test_parse_rejects_bad_keys(text):
    with pytest.raises(ValueError):
        OverrideKey.parse(text)


def test_empty_parts_rejected():
    with pytest.raises(ValueError):
        OverrideKey("", "Encoding")
    with pytest.raises(ValueError):
        OverrideKey("Out-File", "")


def test_keys_are_hashable_and_ordered():
    a = OverrideKey("A", "x")
    b = OverrideKey("B", "a")
    assert sorted([b, a]) == [a, b]
    assert {a: 1}[OverrideKey("A", "x")] == 1


def test_key_pattern_adds_trailing_wildcard():
    assert key_pattern("Out-File", "Encoding") == "Out-File:Encoding*"


def test_glob_match_is_case_insensitive():
    assert glob_match("Out-File:Encoding", "out-file:enc*")
    assert glob_match("Get-ChildItem", "Get-*")
    assert glob_match("ls", "l?")
    assert not glob_match("Out-File", "Get-*")


def test_key_matches_defaults_match_everything():
    assert key_matches(OverrideKey("Anything", "At-All"))


def test_key_matches_parameter_prefix():
    assert key_matches(OverrideKey("Out-File", "EncodingFormat"), "Out-File", "Encoding")
    assert not key_matches(OverrideKey("Out-File", "Width"), "Out-File", "Encoding")
    assert key_matches(OverrideKey("Out-File", "Width"), "Out-*", "*")


@pytest.mark.parametrize("typed, expected", [
    ("Encoding", "Encoding"),
    ("-Encoding", "Encoding"),
    ("--Width", "-Width"),
])
def test_strip_flag_removes_one_dash(typed, expected):
    assert strip_flag(typed) == expected
