from pathlib import Path

from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from ingestor.watcher import PatternFileEventHandler

DELAY = 0.05


def make_handler(tmp_path: Path, calls: list):
    target = tmp_path / "patterns.json"
    target.write_text("[]")
    return target, PatternFileEventHandler(target, lambda: calls.append(target.read_text()), delay=DELAY)


def settle(handler: PatternFileEventHandler) -> None:
    timer = handler._timer
    if timer is not None:
        timer.join(timeout=5)


def test_modification_of_target_triggers_reload(tmp_path: Path):
    calls = []
    target, handler = make_handler(tmp_path, calls)

    handler.on_modified(FileModifiedEvent(str(target)))
    settle(handler)

    assert calls == ["[]"]


def test_other_files_are_ignored(tmp_path: Path):
    calls = []
    _, handler = make_handler(tmp_path, calls)

    handler.on_created(FileCreatedEvent(str(tmp_path / "other.json")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "other.json")))
    settle(handler)

    assert handler._timer is None
    assert calls == []


def test_atomic_rename_onto_target_triggers_reload(tmp_path: Path):
    calls = []
    target, handler = make_handler(tmp_path, calls)

    handler.on_moved(FileMovedEvent(str(tmp_path / ".patterns.json.tmp"), str(target)))
    settle(handler)

    assert calls == ["[]"]


def test_burst_reloads_once_with_the_final_content(tmp_path: Path):
    calls = []
    target, handler = make_handler(tmp_path, calls)
    handler.delay = 0.5

    # truncate-then-write, as editors do
    target.write_text("[")
    handler.on_modified(FileModifiedEvent(str(target)))
    target.write_text("[]")
    handler.on_modified(FileModifiedEvent(str(target)))
    settle(handler)

    assert calls == ["[]"]


def test_events_after_a_reload_schedule_another(tmp_path: Path):
    calls = []
    target, handler = make_handler(tmp_path, calls)

    handler.on_modified(FileModifiedEvent(str(target)))
    settle(handler)
    target.write_text('{"patterns": []}')
    handler.on_modified(FileModifiedEvent(str(target)))
    settle(handler)

    assert calls == ["[]", '{"patterns": []}']


def test_failing_reload_is_logged_not_raised(tmp_path: Path, caplog):
    target = tmp_path / "patterns.json"
    target.write_text("[]")

    def boom():
        raise RuntimeError("bad file")

    handler = PatternFileEventHandler(target, boom, delay=DELAY)
    handler.on_modified(FileModifiedEvent(str(target)))
    settle(handler)

    assert "bad file" in caplog.text
