import random

from smart_liveness.liveness.challenges import get_random_challenges
from smart_liveness.models import LivenessAction
from conftest import ScriptedRng


def test_always_contains_blink():
    for seed in range(1000):
        challenges = get_random_challenges(3, rng=random.Random(seed))
        assert len(challenges) == 3
        assert any(c.action == LivenessAction.BLINK for c in challenges)


def test_blink_forced_into_first_slot():
    rng = ScriptedRng([LivenessAction.TURN_LEFT, LivenessAction.TURN_RIGHT, LivenessAction.TURN_LEFT])
    challenges = get_random_challenges(3, rng=rng, required_blinks=4, now=12.5)
    assert [c.action for c in challenges] == [
        LivenessAction.BLINK,
        LivenessAction.TURN_RIGHT,
        LivenessAction.TURN_LEFT,
    ]
    assert challenges[0].instruction == "Please blink 4 times"
    assert challenges[1].instruction == "Please turn your head right"
    assert all(not c.completed and c.start_time == 12.5 for c in challenges)


def test_never_generates_reserved_actions():
    seen = set()
    rng = random.Random(7)
    for _ in range(200):
        seen.update(c.action for c in get_random_challenges(3, rng=rng))
    assert seen == {LivenessAction.BLINK, LivenessAction.TURN_LEFT, LivenessAction.TURN_RIGHT}


def test_zero_count():
    assert get_random_challenges(0) == []
