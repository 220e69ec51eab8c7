import random
from typing import List, Optional

from smart_liveness.app.utils import now_ts
from smart_liveness.models.base import LivenessAction, LivenessChallenge


GENERATED_ACTIONS = (LivenessAction.BLINK, LivenessAction.TURN_LEFT, LivenessAction.TURN_RIGHT)


def instruction_for(action: LivenessAction, required_blinks: int = 2) -> str:
    if action == LivenessAction.BLINK:
        return f"Please blink {required_blinks} times"
    if action == LivenessAction.TURN_LEFT:
        return "Please turn your head left"
    if action == LivenessAction.TURN_RIGHT:
        return "Please turn your head right"
    if action == LivenessAction.SMILE:
        return "Please smile"
    return "Please nod your head"


def get_random_challenges(
    count: int = 3,
    rng: Optional[random.Random] = None,
    required_blinks: int = 2,
    now: Optional[float] = None,
) -> List[LivenessChallenge]:
    """Random challenge batch that always contains at least one BLINK.

    Head turns alone could be passed with a few still photos, so when the draw
    has no BLINK the first slot is replaced with one.
    """
    rng = rng or random.Random()
    started = now_ts() if now is None else now
    actions = [rng.choice(GENERATED_ACTIONS) for _ in range(max(0, int(count)))]
    if actions and LivenessAction.BLINK not in actions:
        actions[0] = LivenessAction.BLINK
    return [
        LivenessChallenge(
            action=a,
            instruction=instruction_for(a, required_blinks),
            completed=False,
            start_time=started,
        )
        for a in actions
    ]
