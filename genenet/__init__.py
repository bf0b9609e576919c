"""
genenet - Genetic Training of Small Networks

Trains small classifiers by selection, crossover and mutation instead of
gradient descent. Two problems ship with the package: a bit-string alphabet
learner and a feed-forward network that learns to classify the numbers 0-9.
"""

__version__ = "0.1.0"

# Expose common submodules for convenience
from .evolution import *  # noqa: F401,F403
from .translation import *  # noqa: F401,F403
from .utils import *  # noqa: F401,F403
from .reporting import *  # noqa: F401,F403
from .runner import *  # noqa: F401,F403
from .variants import *  # noqa: F401,F403

# Configuration presets as top-level names
from .config import PRESET_ALPHABET, PRESET_NUMBERS, EvolutionConfig  # noqa: F401
