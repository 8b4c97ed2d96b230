import json
from pathlib import Path

from conftest import make_record
from patterns import Outcome, load_patterns, validate
from patterns.validator import validate_pattern

EXAMPLES = Path(__file__).resolve().parents[1] / "examples" / "patterns.json"


def only_pattern(record):
    repository, diagnostics = load_patterns([record])
    assert diagnostics == []
    return next(iter(repository.values()))


def test_passing_test_message(login_record):
    outcomes = validate_pattern(only_pattern(login_record))
    assert [o.outcome for o in outcomes] == [Outcome.PASS]


def test_wrong_expectation_fails_with_both_sides():
    record = make_record("n @NUMBER:n@", test_messages=[{"message": "n 5", "values": {"n": "6"}}])

    outcome = validate_pattern(only_pattern(record))[0]

    assert outcome.outcome is Outcome.FAIL
    assert dict(outcome.expected) == {"n": "6"}
    assert dict(outcome.actual) == {"n": "5"}


def test_extra_or_missing_fields_fail():
    record = make_record(
        "a @STRING:a@ b @STRING:b@",
        test_messages=[
            {"message": "a x b y", "values": {"a": "x"}},
            {"message": "a x b y", "values": {"a": "x", "b": "y", "c": "z"}},
        ],
    )
    outcomes = validate_pattern(only_pattern(record))
    assert [o.outcome for o in outcomes] == [Outcome.FAIL, Outcome.FAIL]


def test_default_values_are_not_compared():
    record = make_record(
        "n @NUMBER:n@", values={"kind": "counter"}, test_messages=[{"message": "n 5", "values": {"n": "5"}}]
    )
    assert validate_pattern(only_pattern(record))[0].passed


def test_unmatched_text_is_no_match():
    record = make_record("n @NUMBER:n@", test_messages=[{"message": "n five", "values": {"n": "5"}}])

    outcome = validate_pattern(only_pattern(record))[0]

    assert outcome.outcome is Outcome.NO_MATCH
    assert outcome.actual is None


def test_expected_tags_must_be_carried_by_pattern():
    record = make_record(
        "n @NUMBER:n@",
        tags=["metrics"],
        test_messages=[{"message": "n 5", "values": {"n": "5"}, "tags": ["metrics", "alert"]}],
    )
    outcome = validate_pattern(only_pattern(record))[0]
    assert outcome.outcome is Outcome.FAIL
    assert outcome.missing_tags == frozenset({"alert"})


def test_other_patterns_do_not_interfere():
    # the more specific pattern would win in matching, but self-tests only use their own pattern
    generic = make_record(
        "user @ANY:rest@", test_messages=[{"message": "user bob logged in", "values": {"rest": "bob logged in"}}]
    )
    specific = make_record("user @STRING:user@ logged in")
    repository, diagnostics = load_patterns([generic, specific])

    report = validate(repository, diagnostics)

    assert report.ok
    assert len(report.outcomes) == 1


def test_report_fails_on_load_diagnostics(login_record):
    repository, diagnostics = load_patterns([login_record, make_record("x", uid="nope")])

    report = validate(repository, diagnostics)

    assert report.failures == []
    assert not report.ok


def test_outcome_serialization(login_record):
    outcome = validate_pattern(only_pattern(login_record))[0]
    data = outcome.to_dict()
    assert data["outcome"] == "pass"
    assert data["actual"] == {"user": "alice", "ip": "10.0.0.5"}
    json.dumps(data)


def test_shipped_examples_are_self_consistent():
    records = json.loads(EXAMPLES.read_text(encoding="utf-8"))["patterns"]
    repository, diagnostics = load_patterns(records)

    report = validate(repository, diagnostics)

    assert diagnostics == []
    assert len(repository) == len(records)
    assert all(o.passed for o in report.outcomes), [o.to_dict() for o in report.failures]
    assert report.ok
