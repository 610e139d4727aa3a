from __future__ import annotations

import math
from time import time


def epoch_seconds(now_epoch: int | float | None = None) -> int:
    if now_epoch is None:
        return int(time())
    return math.floor(now_epoch)
