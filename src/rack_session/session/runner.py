"""
Interactive session runner.

Walks a planned workout exercise by exercise:

    TRANSITION → AUTOFILL → READY → WARMUP? → WORK_SET(i) → REST_GATE → ... → DONE

The runner owns the workout while it runs: auto-fill and the rest-gate
adjust command rewrite set weights in place, and the final SessionRecord
is built from the workout as actually performed.  Skip latches live in a
per-run SessionState.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from ..core.catalog import ExerciseCatalog, get_catalog
from ..core.classification import classify, exercise_ref, rest_seconds
from ..core.config import DEFAULT_SETTINGS, Settings
from ..core.models import ExerciseEntry, LoggedExercise, SessionRecord, SetSpec, Workout
from ..core.weights import is_timed, warmup_for
from .countdown import Countdown, CountdownOutcome
from .terminal import SessionIO


class Phase(Enum):
    TRANSITION = "transition"
    AUTOFILL = "autofill"
    READY = "ready"
    WARMUP = "warmup"
    WORK_SET = "work_set"
    REST_GATE = "rest_gate"
    DONE = "done"


@dataclass
class SessionState:
    """One-way latches for a single run."""

    skip_transitions: bool = False
    autofill_disabled: bool = False


class HistoryLookup(Protocol):
    def last_entry_for(self, exercise_key: str) -> LoggedExercise | None: ...


def record_key(exercise: ExerciseEntry, catalog: ExerciseCatalog | None = None) -> str:
    """Key an exercise is logged under; unknown names become lower_snake_case."""
    catalog = catalog or get_catalog()
    key = exercise.exercise_key or catalog.resolve(exercise.name)
    if key:
        return key
    return re.sub(r"\s+", "_", str(exercise.name or "").lower())


def build_session_record(
    day_key: str,
    workout: Workout,
    catalog: ExerciseCatalog | None = None,
) -> SessionRecord:
    """
    Summarize a performed workout for the history log.

    Only work sets are logged; warmup sets never appear.
    """
    catalog = catalog or get_catalog()
    exercises = [
        LoggedExercise(
            exercise_key=record_key(ex, catalog),
            sets_count=len(ex.sets),
            weights=[float(s.kg) if math.isfinite(s.kg) else 0.0 for s in ex.sets],
        )
        for ex in workout.exercises
    ]
    return SessionRecord(
        created_at=datetime.now().isoformat(timespec="seconds"),
        day_key=day_key,
        title=workout.title,
        exercises=exercises,
    )


def parse_weight(raw: str) -> float | None:
    """Parse a kg entry; accepts a decimal comma.  None if invalid or negative."""
    try:
        value = float(raw.strip().replace(",", "."))
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def apply_history_weights(exercise: ExerciseEntry, weights: list[float]) -> None:
    """
    Overwrite the exercise's weights with logged ones, index by index.

    Sets beyond the logged count reuse the last logged weight.  Reps and the
    number of sets are unchanged.
    """
    if not weights:
        return
    exercise.sets = [
        SetSpec(reps=s.reps, kg=weights[i] if i < len(weights) else weights[-1])
        for i, s in enumerate(exercise.sets)
    ]


class SessionRunner:
    """
    Drives one workout through the interactive state machine.

    Args:
        io: User interface (console or scripted)
        history: Source of previous sessions for auto-fill (None disables it)
        settings: Runner timings and time model
        catalog: Exercise catalog (default: global catalog)
    """

    def __init__(
        self,
        io: SessionIO,
        history: HistoryLookup | None = None,
        settings: Settings = DEFAULT_SETTINGS,
        catalog: ExerciseCatalog | None = None,
    ):
        self.io = io
        self.history = history
        self.settings = settings
        self.catalog = catalog or get_catalog()
        self.trace: list[tuple[Phase, int]] = []

    def run(self, day_key: str, workout: Workout, state: SessionState | None = None) -> SessionRecord:
        """
        Run the whole workout and return the record to log.

        Raises:
            EOFError: If input closes mid-session
        """
        state = state or SessionState()
        self.io.say(
            "Press Enter when a set is done. Rest starts from the gate; "
            "Enter during a countdown skips it."
        )

        for idx, ex in enumerate(workout.exercises):
            if idx > 0:
                self._transition(idx, state)
            self._autofill(idx, ex, state)

            rest = rest_seconds(ex, self.settings.timing, self.catalog)
            self.io.say(
                f"\n=== {ex.name} ({classify(ex, self.catalog)} | rest {rest}s) ==="
            )
            self._ready(idx)
            self._warmup(idx, ex)

            for i in range(len(ex.sets)):
                self._work_set(idx, ex, i)
                if i < len(ex.sets) - 1:
                    self._rest_gate(idx, ex, i, rest)

        self.trace.append((Phase.DONE, len(workout.exercises)))
        return build_session_record(day_key, workout, self.catalog)

    def _countdown(self, seconds: int, label: str) -> CountdownOutcome:
        outcome = Countdown(
            seconds, label=label, tick_seconds=self.settings.runner.tick_seconds
        ).run(self.io, on_tick=self.io.tick, on_cue=self.io.beep)
        if outcome is CountdownOutcome.INTERRUPTED:
            self.io.say(f"{label}: skipped")
        return outcome

    def _transition(self, idx: int, state: SessionState) -> None:
        seconds = self.settings.runner.transition_seconds
        if seconds <= 0 or state.skip_transitions:
            return
        self.trace.append((Phase.TRANSITION, idx))
        self.io.say("\n--- Change-over ---")
        while True:
            cmd = self.io.ask(
                f"Enter = {seconds}s change-over | s = skip | p = skip for the rest of the session: "
            ).strip().lower()
            if cmd == "":
                self._countdown(seconds, "Change-over")
                return
            if cmd == "s":
                self.io.say("Change-over skipped.")
                return
            if cmd == "p":
                state.skip_transitions = True
                self.io.say("Change-overs disabled for the rest of the session.")
                return
            self.io.warn("Unknown choice. Use Enter, s or p.")

    def _autofill(self, idx: int, ex: ExerciseEntry, state: SessionState) -> None:
        key = self.catalog.resolve(exercise_ref(ex))
        if key is None:
            return
        ex.exercise_key = key
        ex.name = self.catalog.label(key) or ex.name

        if state.autofill_disabled or self.history is None:
            return
        last = self.history.last_entry_for(key)
        if last is None or not last.weights:
            return

        self.trace.append((Phase.AUTOFILL, idx))
        weights_text = ", ".join(f"{w:g}" for w in last.weights)
        plan_kg = ex.sets[0].kg if ex.sets else 0.0
        last_top = last.top_weight or 0.0
        if plan_kg > 0 and last_top > 0:
            deviation = abs(last_top - plan_kg) / plan_kg
            if deviation > self.settings.runner.autofill_max_deviation:
                self.io.warn(
                    f"Auto-fill ignored for {ex.name}: history looks off "
                    f"({weights_text} kg vs plan {plan_kg:g} kg)."
                )
                return

        self.io.say(
            f"Last time: {last.sets_count or len(last.weights)} sets @ {weights_text} kg"
        )
        while True:
            cmd = self.io.ask(
                "Enter = keep plan | y = use history | p = no auto-fill for the rest of the session: "
            ).strip().lower()
            if cmd == "":
                self.io.say("Keeping the plan.")
                return
            if cmd == "y":
                apply_history_weights(ex, last.weights)
                self.io.say("History weights applied.")
                return
            if cmd == "p":
                state.autofill_disabled = True
                self.io.say("Auto-fill disabled for the rest of the session.")
                return
            self.io.warn("Unknown choice. Use Enter, y or p.")

    def _ready(self, idx: int) -> None:
        seconds = self.settings.runner.ready_countdown_seconds
        if seconds <= 0:
            return
        self.trace.append((Phase.READY, idx))
        self._countdown(seconds, "Ready for set 1")

    def _warmup(self, idx: int, ex: ExerciseEntry) -> None:
        warm = warmup_for(ex, self.settings.timing)
        if warm is None:
            return
        self.trace.append((Phase.WARMUP, idx))
        self.io.ask(f"Warmup: {warm.reps} reps @ {warm.kg:g} kg  (Enter when done) ")

    def _work_set(self, idx: int, ex: ExerciseEntry, i: int) -> None:
        self.trace.append((Phase.WORK_SET, idx))
        s = ex.sets[i]
        if is_timed(ex):
            self.io.ask(f"Set {i + 1}: {s.kg:g} sec  (Enter when done) ")
        else:
            self.io.ask(f"Set {i + 1}: {s.reps} reps @ {s.kg:g} kg  (Enter when done) ")

    def _rest_gate(self, idx: int, ex: ExerciseEntry, i: int, rest: int) -> None:
        self.trace.append((Phase.REST_GATE, idx))
        while True:
            cmd = self.io.ask(
                f"Enter = rest {rest}s | a = adjust next sets | s = skip rest: "
            ).strip().lower()
            if cmd == "":
                self._countdown(rest, "Rest")
                return
            if cmd == "s":
                return
            if cmd == "a":
                self._adjust(ex, i)
                continue
            self.io.warn("Unknown choice. Use Enter, a or s.")

    def _adjust(self, ex: ExerciseEntry, i: int) -> None:
        raw = self.io.ask(f"New kg for the rest of the exercise (from set {i + 2})? ")
        if not raw.strip():
            self.io.say("No change.")
            return
        new_kg = parse_weight(raw)
        if new_kg is None:
            self.io.warn("Invalid weight. Try again.")
            return
        for j in range(i + 1, len(ex.sets)):
            ex.sets[j].kg = new_kg
        self.io.say(f"Rest of the exercise set to {new_kg:g} kg")
