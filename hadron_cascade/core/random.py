"""Random number stream shared by every channel generator.

All uniform draws go through ``RandomStream.rndm()`` so that the draw order
(and therefore reproducibility) is determined by the control path alone.
"""

from typing import Optional

import numpy as np


class RandomStream:
    """Uniform [0, 1) random stream backed by numpy's Generator.

    Args:
        seed: Seed for np.random.default_rng (None for OS entropy)
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self.n_draws = 0

    def rndm(self) -> float:
        """Draw one uniform value in [0, 1)."""
        self.n_draws += 1
        return float(self._rng.random())

    def reseed(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self.n_draws = 0
