# Target distributions for the slice-sampler trials: inverse gamma and normal.
# Each module provides truth(params) and sample_data(key, params).

from .target import Target
from . import invgamma
from . import normal

__all__ = ["Target", "invgamma", "normal"]
