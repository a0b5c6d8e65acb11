"""Food placement."""

from __future__ import annotations

import itertools
import random
from typing import AbstractSet, Optional

from . import utils
from .snake import Snake
from .utils import Cell


def spawn_food(
    width: int,
    height: int,
    snake: Snake,
    obstacles: AbstractSet[Cell],
    rng: random.Random,
) -> Optional[Cell]:
    """Pick a food cell uniformly among cells free of snake and obstacles."""

    occupied = itertools.chain(snake.body, obstacles)
    return utils.random_free_cell(width, height, occupied, rng)
