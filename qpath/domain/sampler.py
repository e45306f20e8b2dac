"""Uniform random selection among candidate actions."""

from typing import Sequence

from .errors import EmptySelectionError
from .types import Action
from ..utils.rng import SeededRNG


def sample_random_action(actions: Sequence[Action], rng: SeededRNG) -> Action:
    """
    Pick one action uniformly at random.

    The unit interval is split into one equal-width bucket per action, in list
    order, and the action whose bucket holds the drawn value is returned. The
    last action also takes a draw of exactly 1.0.

    Raises:
        EmptySelectionError: If there are no actions to choose from
    """
    if not actions:
        raise EmptySelectionError("no actions to sample from")

    width = 1.0 / len(actions)
    draw = rng.random()
    for i, action in enumerate(actions):
        if draw < (i + 1) * width:
            return action
    return actions[-1]
