import copy

import pytest
from streamdigest.utils.config import merge_config_dicts, read_and_merge_config_files


def test_merge_config_dicts_no_conflict():
    a = {
        "digest": {
            "algorithm": "sha1",
            "chunk_size": 1024,
        },
        "threads": 1,
    }
    b = {
        "digest": {
            "algorithm": "md5",
            "encoding": "hex",
        },
        "extra": [1, 2],
    }
    expected = {
        "digest": {
            "algorithm": "md5",  # from b, replaces a's value
            "chunk_size": 1024,
            "encoding": "hex",
        },
        "threads": 1,
        "extra": [1, 2],
    }
    assert merge_config_dicts(a, b) == expected


def test_merge_config_dicts_missing_values():
    a = {"digest": {"algorithm": None}, "threads": 4}
    b = {"digest": {"algorithm": "sha256"}, "threads": None}
    expected = {"digest": {"algorithm": "sha256"}, "threads": 4}
    assert merge_config_dicts(a, b) == expected


def test_merge_config_dicts_conflict():
    a = {"digest": {"chunk_size": 1024}}
    b = {"digest": {"chunk_size": "large"}}
    with pytest.raises(ValueError, match="Conflict at digest.chunk_size"):
        merge_config_dicts(a, b)


def test_merge_config_dicts_does_not_modify_inputs():
    a = {"digest": {"algorithm": "sha1"}}
    b = {"digest": {"algorithm": "md5"}}
    a_orig, b_orig = copy.deepcopy(a), copy.deepcopy(b)

    merge_config_dicts(a, b)

    assert a == a_orig
    assert b == b_orig


def test_read_and_merge_config_files(tmp_path):
    first = tmp_path / "first.yaml"
    first.write_text("digest:\n  algorithm: sha1\n")
    second = tmp_path / "second.yaml"
    second.write_text("")
    third = tmp_path / "third.yaml"
    third.write_text("threads: 3\n")

    assert read_and_merge_config_files([first, second, third]) == {"digest": {"algorithm": "sha1"}, "threads": 3}


def test_read_and_merge_config_files_rejects_list(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(RuntimeError, match="list.yaml") as excinfo:
        read_and_merge_config_files([path])
    assert "expected a mapping" in str(excinfo.value.__cause__)
