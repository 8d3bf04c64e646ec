"""Per-set completion rules.

A completion state maps each join-record id to one boolean per set. All
derived values (is an exercise done, is the workout done, where to resume)
are computed from it on demand and never stored.
"""

from ..models.workout import ExerciseInSession

CompletionState = dict[str, list[bool]]


def initial_completion(exercises: list[ExerciseInSession]) -> CompletionState:
    """All sets of every exercise start incomplete."""
    return {e.user_exercise_id: [False] * e.sets for e in exercises}


def reconcile_completion(
    stored: dict | None, exercises: list[ExerciseInSession]
) -> CompletionState:
    """Fit a saved completion mapping to the current exercise definitions.

    Each exercise gets exactly ``sets`` flags: saved flags are kept in
    position, missing ones are padded with False and extras are dropped.
    Only a literal True counts as done. Entries for join-records that are
    no longer in the workout are discarded.
    """
    stored = stored if isinstance(stored, dict) else {}
    completion: CompletionState = {}

    for exercise in exercises:
        saved = stored.get(exercise.user_exercise_id)
        if not isinstance(saved, list):
            saved = []
        flags = [value is True for value in saved[: exercise.sets]]
        flags.extend([False] * (exercise.sets - len(flags)))
        completion[exercise.user_exercise_id] = flags

    return completion


def is_exercise_complete(completion: CompletionState, user_exercise_id: str) -> bool:
    flags = completion.get(user_exercise_id)
    return bool(flags) and all(flags)


def is_all_complete(completion: CompletionState, exercises: list[ExerciseInSession]) -> bool:
    return all(is_exercise_complete(completion, e.user_exercise_id) for e in exercises)


def completed_set_count(completion: CompletionState, user_exercise_id: str) -> int:
    return sum(1 for done in completion.get(user_exercise_id, []) if done)


def first_incomplete_index(
    completion: CompletionState, exercises: list[ExerciseInSession]
) -> int:
    """Index of the first exercise with an unfinished set, or 0 if none."""
    for index, exercise in enumerate(exercises):
        if not is_exercise_complete(completion, exercise.user_exercise_id):
            return index
    return 0


def completed_exercise_ids(
    completion: CompletionState, exercises: list[ExerciseInSession]
) -> list[str]:
    """Join-record ids whose sets are all done, in exercise order."""
    return [
        e.user_exercise_id
        for e in exercises
        if is_exercise_complete(completion, e.user_exercise_id)
    ]
