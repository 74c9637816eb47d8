"""
Formula-focused unit tests for the planning core.

Each test checks one rule of the time model, classification, rounding,
warmup derivation, catalog resolution or day-rule validation.  Expected
values are hand-computed from the defaults in core/config.py:

    set 1.0 min, transition 0.5 min, rest 120 s compound / 60 s isolation,
    warmup 15 reps @ 50 % of the first work set.
"""

import math

import pytest

from rack_session.core.catalog import NOT_FOUND, Found, get_catalog, normalize_name
from rack_session.core.classification import (
    ISOLATION_KEYS,
    classify,
    is_compound,
    min_sets,
    rest_seconds,
)
from rack_session.core.config import DEFAULT_TIMING, FillConfig, RunnerSettings, TimingConfig
from rack_session.core.days import DayRule, day_keys, get_day
from rack_session.core.engine.config_loader import deep_merge, load_settings, settings_from_dict
from rack_session.core.models import ExerciseEntry, LoggedExercise, SetSpec, Workout
from rack_session.core.time_model import (
    display_buffer_minutes,
    display_minutes,
    estimate_exercise_minutes,
    estimate_workout_minutes,
    total_sets_for_time,
)
from rack_session.core.validator import can_add_to_day, rewrite_title, validate_workout
from rack_session.core.weights import guess_increment, round_to_increment, warmup_for

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

PUSH_RULES = {
    "push_day": DayRule(
        label="Push day",
        allow_any_of=frozenset({"push"}),
        disallow_any_of=frozenset({"pull", "legs"}),
    )
}


def _ex(name: str, n_sets: int, reps: int = 8, kg: float = 0.0) -> ExerciseEntry:
    return ExerciseEntry(name=name, sets=[SetSpec(reps=reps, kg=kg) for _ in range(n_sets)])


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestModels:
    """Construction-time validation and copy semantics."""

    def test_negative_reps_rejected(self):
        with pytest.raises(ValueError):
            SetSpec(reps=-1, kg=20)

    def test_negative_or_nan_kg_rejected(self):
        with pytest.raises(ValueError):
            SetSpec(reps=5, kg=-2.5)
        with pytest.raises(ValueError):
            SetSpec(reps=5, kg=float("nan"))

    def test_workout_copy_is_independent(self):
        """Mutating a copy's sets never touches the source workout."""
        w = Workout("A", [_ex("Bench press", 3, kg=60)])
        c = w.copy()
        c.exercises[0].sets[0].kg = 100
        c.exercises[0].sets.pop()
        assert w.exercises[0].sets[0].kg == 60
        assert len(w.exercises[0].sets) == 3
        assert sum(len(ex.sets) for ex in w.exercises) == 3

    def test_logged_top_weight_is_last(self):
        assert LoggedExercise("bench_press", 3, [60, 62.5, 65]).top_weight == 65
        assert LoggedExercise("bench_press", 0, []).top_weight is None


# ---------------------------------------------------------------------------
# Time model
# ---------------------------------------------------------------------------

class TestTimeModel:
    """minutes = sets*1.0 + (sets-1)*rest + 0.5, warmup counted as a set."""

    def test_compound_without_warmup(self):
        """3 bodyweight sets: 3 + 2*2 + 0.5 = 7.5."""
        assert estimate_exercise_minutes(_ex("Bench press", 3)) == pytest.approx(7.5)

    def test_compound_with_warmup(self):
        """4 sets @ 80 kg + warmup = 5 sets: 5 + 4*2 + 0.5 = 13.5."""
        ex = _ex("Bench press", 4, reps=6, kg=80)
        assert total_sets_for_time(ex) == 5
        assert estimate_exercise_minutes(ex) == pytest.approx(13.5)

    def test_isolation_with_warmup(self):
        """Triceps pushdown 3 @ 25 + warmup: 4 + 3*1 + 0.5 = 7.5."""
        assert estimate_exercise_minutes(_ex("Triceps pushdown", 3, 12, 25)) == pytest.approx(7.5)

    def test_plank_has_no_warmup(self):
        """Plank holds: 3 + 2*1 + 0.5 = 5.5."""
        assert estimate_exercise_minutes(_ex("Plank", 3, 1, 60)) == pytest.approx(5.5)

    def test_warmup_disabled(self):
        timing = TimingConfig(warmup_enabled=False)
        ex = _ex("Bench press", 4, reps=6, kg=80)
        assert total_sets_for_time(ex, timing) == 4
        assert estimate_exercise_minutes(ex, timing) == pytest.approx(4 + 3 * 2 + 0.5)

    def test_empty_exercise_costs_transition_only(self):
        assert estimate_exercise_minutes(ExerciseEntry("Bench press")) == pytest.approx(0.5)

    def test_day1_baseline_total(self):
        """13.5 + 10.5 + 7.5 + 7.5 + 7.5 = 46.5."""
        baseline = get_day("day1").baseline
        assert estimate_workout_minutes(baseline) == pytest.approx(46.5)

    def test_display_buffer_is_ceiled(self):
        """45 * 0.12 = 5.4 → 6."""
        assert display_buffer_minutes(45) == 6
        assert display_buffer_minutes(50) == 6
        assert display_buffer_minutes(0) == 0
        assert display_buffer_minutes(-10) == 0

    def test_display_minutes_adds_buffer(self):
        w = Workout("A", [_ex("Bench press", 3)])
        assert display_minutes(w, 45) == pytest.approx(7.5 + 6)
        assert display_minutes(w, 0) == pytest.approx(7.5)


class TestConfigValidation:
    """Frozen config dataclasses reject inconsistent values."""

    def test_compound_rest_must_exceed_isolation(self):
        with pytest.raises(ValueError):
            TimingConfig(rest_compound_seconds=60, rest_isolation_seconds=60)

    def test_aim_must_not_exceed_cap(self):
        with pytest.raises(ValueError):
            FillConfig(aim_fraction=0.99, cap_fraction=0.95)

    def test_defaults(self):
        assert DEFAULT_TIMING.rest_compound_seconds == 120
        assert DEFAULT_TIMING.rest_isolation_seconds == 60


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:
    """compound / isolation from key and tags."""

    def test_idempotent_over_catalog(self):
        """Repeated calls agree for every catalog entry, by key and by label."""
        catalog = get_catalog()
        for entry in catalog.entries():
            first = classify(entry.key)
            assert classify(entry.key) == first
            assert classify(entry.label) == first

    def test_isolation_keys(self):
        for key in ISOLATION_KEYS:
            assert classify(key) == "isolation"

    def test_core_with_legs_is_compound(self):
        """Squat is tagged core but also legs."""
        assert classify("Squat") == "compound"
        assert classify("Deadlift") == "compound"

    def test_known_compounds(self):
        for name in ("Bench press", "Pull-up", "Barbell row", "Dips"):
            assert is_compound(name)

    def test_unknown_defaults_to_compound(self):
        assert classify("Zottman curl on a wobble board") == "compound"

    def test_class_drives_rest_and_floor(self):
        assert rest_seconds("Bench press") == 120
        assert rest_seconds("Lateral raises") == 60
        assert min_sets("Bench press") == 2
        assert min_sets("Lateral raises") == 1

    def test_exercise_key_takes_precedence(self):
        ex = ExerciseEntry(name="Something custom", exercise_key="face_pulls")
        assert classify(ex) == "isolation"


# ---------------------------------------------------------------------------
# Rounding and warmup
# ---------------------------------------------------------------------------

class TestRounding:
    """Round half away from zero on the quotient."""

    def test_half_rounds_up(self):
        assert round_to_increment(1.25) == 2.5
        assert round_to_increment(3.75) == 5.0

    def test_half_rounds_away_from_zero_when_negative(self):
        assert round_to_increment(-1.25) == -2.5

    def test_nearest_step(self):
        assert round_to_increment(41.2) == 40.0
        assert round_to_increment(17.5, 1.0) == 18.0

    def test_non_finite_returns_none(self):
        assert round_to_increment(float("nan")) is None
        assert round_to_increment(float("inf")) is None

    def test_bad_increment_raises(self):
        with pytest.raises(ValueError):
            round_to_increment(10, 0)

    def test_dumbbell_increment(self):
        assert guess_increment("Incline DB press") == 1.0
        assert guess_increment("Incline dumbbell press") == 1.0
        assert guess_increment("Bench press") == 2.5


class TestWarmup:
    """Warmup is 15 reps @ 50 % of the first work set, rounded."""

    def test_barbell_warmup(self):
        assert warmup_for(_ex("Bench press", 4, 6, 80)) == SetSpec(reps=15, kg=40.0)

    def test_dumbbell_warmup_uses_1kg_steps(self):
        """33 * 0.5 = 16.5 → 17 with a 1 kg increment."""
        assert warmup_for(_ex("Incline dumbbell press", 3, 10, 33)) == SetSpec(reps=15, kg=17.0)

    def test_first_set_drives_warmup(self):
        ex = ExerciseEntry("Bench press", [SetSpec(6, 60), SetSpec(6, 100)])
        assert warmup_for(ex).kg == 30.0

    def test_no_warmup_for_bodyweight_or_plank(self):
        assert warmup_for(_ex("Dips", 3, 10, 0)) is None
        assert warmup_for(_ex("Plank", 3, 1, 60)) is None
        assert warmup_for(ExerciseEntry("Bench press")) is None

    def test_disabled(self):
        assert warmup_for(_ex("Bench press", 3, 5, 80), TimingConfig(warmup_enabled=False)) is None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class TestCatalog:
    """Two-stage resolver: exact key, then normalized alias."""

    def test_exact_key(self):
        assert get_catalog().lookup("bench_press") == Found("bench_press")

    def test_alias_is_case_and_space_insensitive(self):
        catalog = get_catalog()
        assert catalog.resolve("  barbell   BENCH press ") == "bench_press"
        assert catalog.resolve("OHP") == "overhead_press"
        assert catalog.resolve("Incline DB press") == "incline_db_press"

    def test_unknown_is_not_found(self):
        catalog = get_catalog()
        assert catalog.lookup("Underwater basket weaving") is NOT_FOUND
        assert catalog.resolve("Underwater basket weaving") is None
        assert catalog.tags("Underwater basket weaving") is None
        assert catalog.label("Underwater basket weaving") is None

    def test_total_over_odd_input(self):
        catalog = get_catalog()
        assert catalog.resolve(None) is None
        assert catalog.resolve(123) is None
        assert catalog.resolve("") is None

    def test_display_name_falls_back_to_input(self):
        catalog = get_catalog()
        assert catalog.display_name("ohp") == "Overhead press"
        assert catalog.display_name("Mystery lift") == "Mystery lift"

    def test_normalize_name(self):
        assert normalize_name("  Farmer’s   Walk ") == "farmer's walk"
        assert normalize_name(None) == ""

    def test_all_movement_patterns_present(self):
        tags = set().union(*(e.tag_set for e in get_catalog().entries()))
        assert {"push", "pull", "legs", "core"} <= tags


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------

class TestValidator:
    """Day-rule filtering of a workout."""

    def test_tag_law_for_every_day(self):
        """Every kept known exercise has an allowed tag and no disallowed tag."""
        catalog = get_catalog()
        everything = Workout("All", [_ex(e.label, 3) for e in catalog.entries()])
        for day_key in day_keys():
            rule = get_day(day_key).rule
            result = validate_workout(day_key, everything)
            assert result.workout.exercises
            for ex in result.workout.exercises:
                tags = catalog.tags(ex.exercise_key)
                assert tags & rule.allow_any_of
                assert not tags & rule.disallow_any_of

    def test_pull_exercise_dropped_from_push_day(self):
        """A pull/back exercise on a push day is dropped with a warning naming it and its tags."""
        w = Workout("Push (45 min version)", [_ex("Bench press", 3), _ex("Barbell row", 3)])
        result = validate_workout("push_day", w, rules=PUSH_RULES)

        assert [ex.name for ex in result.workout.exercises] == ["Bench press"]
        assert len(result.warnings) == 1
        assert "Barbell row" in result.warnings[0]
        assert "pull, back" in result.warnings[0]
        assert "Dropped" in result.warnings[0]

    def test_input_not_modified(self):
        w = Workout("Push", [_ex("barbell bench press", 3), _ex("Barbell row", 3)])
        validate_workout("push_day", w, rules=PUSH_RULES)
        assert len(w.exercises) == 2
        assert w.exercises[0].name == "barbell bench press"

    def test_kept_exercises_are_canonicalized(self):
        w = Workout("Push", [_ex("barbell bench press", 3)])
        ex = validate_workout("push_day", w, rules=PUSH_RULES).workout.exercises[0]
        assert ex.name == "Bench press"
        assert ex.exercise_key == "bench_press"

    def test_unknown_exercise_kept_with_warning(self):
        w = Workout("Push", [_ex("Landmine press thing", 3)])
        result = validate_workout("push_day", w, rules=PUSH_RULES)
        assert [ex.name for ex in result.workout.exercises] == ["Landmine press thing"]
        assert "Unknown exercise 'Landmine press thing'" in result.warnings[0]

    def test_unknown_day_passes_through(self):
        w = Workout("Anything", [_ex("Barbell row", 3)])
        result = validate_workout("day99", w)
        assert result.workout is w
        assert result.warnings == ["No day rule found for day99"]

    def test_title_rewrite_keeps_suffix(self):
        w = Workout("Push (45 min version)", [_ex("Bench press", 3)])
        assert validate_workout("push_day", w, rules=PUSH_RULES).workout.title == (
            "Push day (45 min version)"
        )
        assert rewrite_title("", "Day 2") == "Day 2"
        assert rewrite_title("Pull", "Day 2") == "Day 2"

    def test_can_add_to_day(self):
        assert can_add_to_day("push_day", "Dips", rules=PUSH_RULES)
        assert not can_add_to_day("push_day", "Squat", rules=PUSH_RULES)
        assert can_add_to_day("push_day", "Mystery lift", rules=PUSH_RULES)
        assert can_add_to_day("nowhere", "Squat", rules=PUSH_RULES)


def test_baselines_are_legal_for_their_day():
    """Bundled templates pass their own day rule without warnings."""
    for day_key in day_keys():
        day = get_day(day_key)
        result = validate_workout(day_key, day.baseline)
        assert result.warnings == []
        assert len(result.workout.exercises) == len(day.baseline.exercises)
        assert not math.isnan(estimate_workout_minutes(result.workout))


# ---------------------------------------------------------------------------
# Settings loader
# ---------------------------------------------------------------------------

class TestSettingsLoader:
    """Bundled settings.yaml + ~/.rack-session override."""

    def test_deep_merge_keeps_unlisted_keys(self):
        base = {"timing": {"set_minutes": 1.0, "transition_minutes": 0.5}, "fill": {"aim_fraction": 0.9}}
        merged = deep_merge(base, {"timing": {"set_minutes": 1.5}})
        assert merged == {
            "timing": {"set_minutes": 1.5, "transition_minutes": 0.5},
            "fill": {"aim_fraction": 0.9},
        }
        assert base["timing"]["set_minutes"] == 1.0

    def test_bundled_matches_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        settings = load_settings()
        assert settings.timing == DEFAULT_TIMING
        assert settings.fill == FillConfig()
        assert settings.fit_tolerance_minutes == 1.5

    def test_user_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        user_dir = tmp_path / ".rack-session"
        user_dir.mkdir()
        (user_dir / "settings.yaml").write_text(
            "timing:\n  rest_compound_seconds: 180\nrunner:\n  transition_seconds: 0\n"
        )
        settings = load_settings()
        assert settings.timing.rest_compound_seconds == 180
        assert settings.timing.rest_isolation_seconds == 60
        assert settings.runner.transition_seconds == 0

    def test_invalid_section_falls_back_with_warning(self):
        with pytest.warns(UserWarning, match="invalid 'fill'"):
            settings = settings_from_dict({"fill": {"aim_fraction": 0.99, "cap_fraction": 0.5}})
        assert settings.fill == FillConfig()

    def test_unknown_keys_ignored(self):
        settings = settings_from_dict({"timing": {"set_minutes": 2.0, "bogus": 1}})
        assert settings.timing.set_minutes == 2.0

    @pytest.mark.parametrize(
        "runner",
        [
            {"autofill_max_deviation": "lots"},
            {"autofill_max_deviation": 0},
            {"transition_seconds": -5},
            {"ready_countdown_seconds": "ten"},
            {"tick_seconds": float("nan")},
        ],
    )
    def test_invalid_runner_section_falls_back_with_warning(self, runner):
        with pytest.warns(UserWarning, match="invalid 'runner'"):
            settings = settings_from_dict({"runner": runner})
        assert settings.runner == RunnerSettings()
