from patterns.fields import FieldKind, is_valid, satisfies, scan


def test_number_consumes_digits_with_optional_sign():
    assert scan(FieldKind.NUMBER, "port 8080 open", 5) == 9
    assert scan(FieldKind.NUMBER, "-42x", 0) == 3
    assert scan(FieldKind.NUMBER, "-x", 0) == 0
    assert scan(FieldKind.NUMBER, "abc", 0) == 0


def test_string_stops_at_whitespace_and_punctuation():
    assert scan(FieldKind.STRING, "alice logged", 0) == 5
    assert scan(FieldKind.STRING, "web-01.local, ok", 0) == len("web-01.local")


def test_any_runs_to_stop_character_or_end():
    assert scan(FieldKind.ANY, "a b c] tail", 0, "]") == 5
    assert scan(FieldKind.ANY, "a b c", 0, None) == 5
    assert scan(FieldKind.ANY, "a b c", 0, "]") == 5


def test_address_and_timestamp_validity():
    assert is_valid(FieldKind.IPV4, "10.0.0.5")
    assert not is_valid(FieldKind.IPV4, "10.0.0.256")
    assert not is_valid(FieldKind.IPV4, "10.0.0")
    assert is_valid(FieldKind.IPV6, "2001:db8::1")
    assert not is_valid(FieldKind.IPV6, "2001:db8:::1")
    assert is_valid(FieldKind.TIMESTAMP, "2024-05-01T10:00:00Z")
    assert not is_valid(FieldKind.TIMESTAMP, "2024-13-45")


def test_constraints():
    assert satisfies(FieldKind.NUMBER, "22", {"min": 1, "max": 65535})
    assert not satisfies(FieldKind.NUMBER, "70000", {"max": 65535})
    assert satisfies(FieldKind.STRING, "bob", {"min_len": 3})
    assert not satisfies(FieldKind.ANY, "toolong", {"max_len": 3})
    assert satisfies(FieldKind.STRING, "anything", {})
