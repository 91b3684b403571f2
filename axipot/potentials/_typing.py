from typing import Union

import numpy as np
from numpy.typing import ArrayLike

CoordinateLike = Union[float, ArrayLike]
ResultLike = Union[float, np.ndarray]
