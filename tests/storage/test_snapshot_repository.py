import json
import tempfile
import unittest
from pathlib import Path

from pomodoro import (
    DEFAULT_SETTINGS,
    PomodoroTimer,
    TimerMode,
    TimerState,
    VirtualClock,
    merge_settings,
)
from storage import (
    DEFAULT_STORAGE_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    SnapshotRepository,
    StorageCorruptionError,
    StorageError,
    decode_snapshot,
    encode_snapshot,
)


class _BrokenStore:
    def get(self, key):
        raise StorageError("disk gone")

    def set(self, key, value):
        raise StorageError("disk full")


class SnapshotCodecTests(unittest.TestCase):
    def test_encode_drops_remaining_and_running(self) -> None:
        state = TimerState(TimerMode.SHORT_BREAK, 42, True, 3, 1)

        payload = json.loads(encode_snapshot(state, DEFAULT_SETTINGS))

        self.assertEqual(
            {"completedCycleCount", "completedFocusCount", "mode", "settings"},
            set(payload),
        )
        self.assertEqual("ShortBreak", payload["mode"])
        self.assertEqual(25, payload["settings"]["focusMinutes"])
        self.assertEqual("#BA4949", payload["settings"]["themeColors"]["Focus"])

    def test_decode_restores_saved_fields(self) -> None:
        settings = merge_settings(DEFAULT_SETTINGS, {"alarm_sound_id": "digital"})
        state = TimerState(TimerMode.LONG_BREAK, 5, False, 4, 0)

        snapshot = decode_snapshot(encode_snapshot(state, settings))

        self.assertEqual(TimerMode.LONG_BREAK, snapshot.mode)
        self.assertEqual(4, snapshot.completed_focus_count)
        self.assertEqual(0, snapshot.completed_cycle_count)
        self.assertEqual(settings, snapshot.settings)

    def test_decode_rejects_malformed_payloads(self) -> None:
        valid = json.loads(encode_snapshot(TimerState(TimerMode.FOCUS, 1, False), DEFAULT_SETTINGS))
        broken_payloads = [
            "not json",
            "[]",
            json.dumps({**valid, "mode": "Nap"}),
            json.dumps({**valid, "completedFocusCount": -1}),
            json.dumps({**valid, "completedCycleCount": True}),
            json.dumps({**valid, "settings": {"focusMinutes": 25}}),
        ]

        for raw in broken_payloads:
            with self.subTest(raw=raw):
                with self.assertRaises(StorageCorruptionError):
                    decode_snapshot(raw)


class SnapshotRepositoryTests(unittest.TestCase):
    def test_save_then_load_uses_configured_key(self) -> None:
        store = InMemoryKeyValueStore()
        repository = SnapshotRepository(store)

        repository.save(TimerState(TimerMode.SHORT_BREAK, 3, True, 1, 0), DEFAULT_SETTINGS)
        snapshot = repository.load()

        self.assertIsNotNone(store.get(DEFAULT_STORAGE_KEY))
        self.assertIsNotNone(snapshot)
        if snapshot is None:
            self.fail("Expected a persisted snapshot")
        self.assertEqual(TimerMode.SHORT_BREAK, snapshot.mode)
        self.assertEqual(1, snapshot.completed_focus_count)

    def test_timer_reload_restores_counters_with_full_duration(self) -> None:
        repository = SnapshotRepository(InMemoryKeyValueStore())
        timer = PomodoroTimer.from_repository(repository, scheduler_factory=VirtualClock())
        timer.update_settings({"short_break_minutes": 7, "alarm_sound_id": "analog"})
        timer.skip()
        timer.tick()
        timer.close()

        reloaded = PomodoroTimer.from_repository(repository, scheduler_factory=VirtualClock())
        snapshot = reloaded.snapshot()

        self.assertEqual(TimerMode.SHORT_BREAK, snapshot.mode)
        self.assertEqual(7 * 60, snapshot.remaining_seconds)
        self.assertFalse(snapshot.running)
        self.assertEqual(1, snapshot.completed_focus_count)
        self.assertEqual("analog", reloaded.settings.alarm_sound_id)

    def test_load_returns_none_when_nothing_saved(self) -> None:
        self.assertIsNone(SnapshotRepository(InMemoryKeyValueStore()).load())

    def test_corrupt_snapshot_is_discarded_with_warning(self) -> None:
        store = InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: "{broken"})
        repository = SnapshotRepository(store)

        with self.assertLogs("storage", level="WARNING"):
            self.assertIsNone(repository.load())

    def test_deeply_nested_snapshot_is_discarded(self) -> None:
        store = InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: "[" * 200000})

        with self.assertLogs("storage", level="WARNING"):
            timer = PomodoroTimer.from_repository(
                SnapshotRepository(store),
                scheduler_factory=VirtualClock(),
            )

        self.assertEqual(TimerMode.FOCUS, timer.snapshot().mode)
        self.assertEqual(25 * 60, timer.snapshot().remaining_seconds)

    def test_garbage_state_file_falls_back_and_is_rewritten(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "timer.json"
            path.write_bytes(b"\xff\xfe\x00garbage")
            repository = SnapshotRepository(JsonFileKeyValueStore(path))

            with self.assertLogs("storage", level="WARNING"):
                timer = PomodoroTimer.from_repository(
                    repository,
                    scheduler_factory=VirtualClock(),
                )
                result = timer.skip()

            self.assertTrue(result.accepted)
            self.assertEqual(TimerMode.SHORT_BREAK, result.snapshot.mode)
            snapshot = repository.load()

        self.assertIsNotNone(snapshot)
        if snapshot is None:
            self.fail("Expected the skip to be persisted over the garbage file")
        self.assertEqual(TimerMode.SHORT_BREAK, snapshot.mode)
        self.assertEqual(1, snapshot.completed_focus_count)

    def test_store_failures_are_logged_not_raised(self) -> None:
        repository = SnapshotRepository(_BrokenStore())
        state = TimerState(TimerMode.FOCUS, 10, False)

        with self.assertLogs("storage", level="ERROR") as captured:
            repository.save(state, DEFAULT_SETTINGS)
            self.assertIsNone(repository.load())

        self.assertEqual(2, len(captured.records))


if __name__ == "__main__":
    unittest.main()
