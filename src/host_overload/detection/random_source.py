# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Process-wide random source for the stochastic estimators.

All randomness flows through a :class:`numpy.random.Generator`.  Estimators
that are not handed a generator of their own draw from the shared one
here; call :func:`seed_random_source` to make a run reproducible.
"""

from __future__ import annotations

import numpy as np

_generator: np.random.Generator = np.random.default_rng()


def get_random_source() -> np.random.Generator:
    """Return the shared generator."""
    return _generator


def seed_random_source(seed: int | None) -> np.random.Generator:
    """Replace the shared generator with a freshly seeded one and return it."""
    global _generator
    _generator = np.random.default_rng(seed)
    return _generator
