import json
from pathlib import Path

import pytest

from conftest import make_record
from ingestor.handlers.base import PatternFileDecodeError, PatternFileReadError
from ingestor.patternfile import PatternStore, load_pattern_file, read_pattern_file
from patterns import LoadError


def test_json_array_and_wrapped_object(tmp_path: Path, login_record):
    bare = tmp_path / "bare.json"
    bare.write_text(json.dumps([login_record]))
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"patterns": [login_record]}))

    assert read_pattern_file(bare) == read_pattern_file(wrapped) == [login_record]


def test_json_with_wrong_top_level_type(tmp_path: Path):
    f = tmp_path / "bad.json"
    f.write_text('{"name": "not a list"}')

    with pytest.raises(PatternFileDecodeError):
        read_pattern_file(f)


def test_invalid_json(tmp_path: Path):
    f = tmp_path / "bad.json"
    f.write_text("[{")

    with pytest.raises(PatternFileDecodeError):
        read_pattern_file(f)


def test_missing_file(tmp_path: Path):
    with pytest.raises(PatternFileReadError):
        read_pattern_file(tmp_path / "absent.json")


def test_json_lines_bad_line_becomes_diagnostic(tmp_path: Path, login_record):
    f = tmp_path / "library.jsonl"
    f.write_text(json.dumps(login_record) + "\n\n{broken\n")

    repository, diagnostics = load_pattern_file(f)

    assert len(repository) == 1
    assert len(diagnostics) == 1
    assert (diagnostics[0].error, diagnostics[0].field) == (LoadError.TYPE_MISMATCH, "record")


def test_yaml_values_stay_strings(tmp_path: Path):
    f = tmp_path / "library.yaml"
    f.write_text(
        "patterns:\n"
        "  - name: PORT\n"
        "    uuid: 5d6e7f80-9a0b-4c1d-9e2f-3a4b5c6d7e8f\n"
        "    pattern: 'port @NUMBER:port@'\n"
        "    values:\n"
        "      default_port: 22\n"
        "    tags: [net]\n"
        "    test_messages:\n"
        "      - message: port 80\n"
        "        values:\n"
        "          port: 80\n"
    )

    repository, diagnostics = load_pattern_file(f)

    assert diagnostics == []
    pattern = next(iter(repository.values()))
    assert dict(pattern.default_values) == {"default_port": "22"}
    assert dict(pattern.test_messages[0].expected_values) == {"port": "80"}


def test_store_reload_swaps_library(tmp_path: Path, login_record):
    f = tmp_path / "library.json"
    f.write_text(json.dumps([login_record]))
    store = PatternStore(f)
    assert len(store.repository) == 0

    store.reload()
    assert len(store.repository) == 1

    f.write_text(json.dumps([login_record, make_record("x @NUMBER:n@")]))
    store.reload()
    repository, diagnostics, matcher = store.snapshot()
    assert len(repository) == 2
    assert diagnostics == []
    assert matcher.repository is repository


def test_store_keeps_previous_library_on_error(tmp_path: Path, login_record):
    f = tmp_path / "library.json"
    f.write_text(json.dumps([login_record]))
    store = PatternStore(f)
    store.reload()

    f.write_text("[{")
    with pytest.raises(PatternFileDecodeError):
        store.reload()

    assert len(store.repository) == 1
