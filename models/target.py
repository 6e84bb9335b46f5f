from dataclasses import dataclass
from typing import Callable

import numpy as np


@dataclass(frozen=True)
class Target:
    """A target density with its log density and support."""
    density: Callable
    log_density: Callable
    lb: float = -np.inf
    ub: float = np.inf
    label: str = ""
