import unittest

from pomodoro import DEFAULT_SETTINGS, SettingsFormatError, TimerMode, merge_settings
from pomodoro.settings import (
    merge_settings_reporting,
    settings_from_dict,
    settings_to_dict,
)


class MergeSettingsTests(unittest.TestCase):
    def test_absent_fields_are_unchanged(self) -> None:
        merged = merge_settings(DEFAULT_SETTINGS, {"focus_minutes": 50})

        self.assertEqual(50, merged.focus_minutes)
        self.assertEqual(DEFAULT_SETTINGS.short_break_minutes, merged.short_break_minutes)
        self.assertEqual(DEFAULT_SETTINGS.long_break_interval, merged.long_break_interval)
        self.assertEqual(DEFAULT_SETTINGS.alarm_volume, merged.alarm_volume)

    def test_durations_are_clamped_into_range(self) -> None:
        merged = merge_settings(
            DEFAULT_SETTINGS,
            {"focus_minutes": 0, "short_break_minutes": 500, "long_break_minutes": -3},
        )

        self.assertEqual(1, merged.focus_minutes)
        self.assertEqual(60, merged.short_break_minutes)
        self.assertEqual(1, merged.long_break_minutes)

    def test_zero_interval_is_clamped_to_one(self) -> None:
        merged = merge_settings(DEFAULT_SETTINGS, {"long_break_interval": 0})
        self.assertEqual(1, merged.long_break_interval)

    def test_volume_is_clamped(self) -> None:
        self.assertEqual(1.0, merge_settings(DEFAULT_SETTINGS, {"alarm_volume": 3}).alarm_volume)
        self.assertEqual(0.0, merge_settings(DEFAULT_SETTINGS, {"alarm_volume": -1}).alarm_volume)

    def test_accepts_persisted_camel_case_keys(self) -> None:
        merged = merge_settings(
            DEFAULT_SETTINGS,
            {"shortBreakMinutes": 10, "autoStartFocus": True, "alarmSoundId": "wood"},
        )

        self.assertEqual(10, merged.short_break_minutes)
        self.assertTrue(merged.auto_start_focus)
        self.assertEqual("wood", merged.alarm_sound_id)

    def test_invalid_values_keep_previous_value(self) -> None:
        with self.assertLogs("pomodoro.settings", level="WARNING"):
            merged = merge_settings(
                DEFAULT_SETTINGS,
                {"focus_minutes": "soon", "auto_start_breaks": "maybe", "unknown": 1},
            )

        self.assertEqual(DEFAULT_SETTINGS, merged)

    def test_numeric_strings_are_accepted(self) -> None:
        merged = merge_settings(DEFAULT_SETTINGS, {"focus_minutes": "45", "alarm_volume": "0.25"})
        self.assertEqual(45, merged.focus_minutes)
        self.assertEqual(0.25, merged.alarm_volume)

    def test_theme_colors_merge_per_mode(self) -> None:
        merged = merge_settings(DEFAULT_SETTINGS, {"themeColors": {"ShortBreak": "#518A58"}})

        self.assertEqual("#518A58", merged.theme_colors[TimerMode.SHORT_BREAK])
        self.assertEqual(
            DEFAULT_SETTINGS.theme_colors[TimerMode.FOCUS],
            merged.theme_colors[TimerMode.FOCUS],
        )

    def test_merge_does_not_mutate_original(self) -> None:
        merge_settings(DEFAULT_SETTINGS, {"focus_minutes": 40})
        self.assertEqual(25, DEFAULT_SETTINGS.focus_minutes)

    def test_reporting_lists_only_accepted_fields(self) -> None:
        with self.assertLogs("pomodoro.settings", level="WARNING"):
            merged, accepted = merge_settings_reporting(
                DEFAULT_SETTINGS,
                {"focusMinutes": 25, "long_break_minutes": "", "alarm_volume": 0.1},
            )

        self.assertEqual(frozenset({"focus_minutes", "alarm_volume"}), accepted)
        self.assertEqual(15, merged.long_break_minutes)

    def test_reporting_nothing_accepted_returns_same_settings(self) -> None:
        with self.assertLogs("pomodoro.settings", level="WARNING"):
            merged, accepted = merge_settings_reporting(DEFAULT_SETTINGS, {"focus_minutes": "abc"})

        self.assertIs(DEFAULT_SETTINGS, merged)
        self.assertEqual(frozenset(), accepted)


class SettingsSerializationTests(unittest.TestCase):
    def test_round_trip_preserves_every_field(self) -> None:
        settings = merge_settings(
            DEFAULT_SETTINGS,
            {
                "focus_minutes": 30,
                "long_break_interval": 2,
                "auto_start_focus": True,
                "alarm_sound_id": "kitchen",
                "alarm_volume": 0.4,
                "theme_colors": {"Focus": "#7D53A2"},
            },
        )

        self.assertEqual(settings, settings_from_dict(settings_to_dict(settings)))

    def test_missing_field_is_rejected(self) -> None:
        payload = settings_to_dict(DEFAULT_SETTINGS)
        del payload["longBreakInterval"]

        with self.assertRaises(SettingsFormatError):
            settings_from_dict(payload)

    def test_mistyped_field_is_rejected(self) -> None:
        payload = settings_to_dict(DEFAULT_SETTINGS)
        payload["focusMinutes"] = "25"

        with self.assertRaises(SettingsFormatError):
            settings_from_dict(payload)

    def test_out_of_range_persisted_values_are_clamped(self) -> None:
        payload = settings_to_dict(DEFAULT_SETTINGS)
        payload["longBreakInterval"] = 0
        payload["focusMinutes"] = 90

        restored = settings_from_dict(payload)

        self.assertEqual(1, restored.long_break_interval)
        self.assertEqual(60, restored.focus_minutes)


if __name__ == "__main__":
    unittest.main()
