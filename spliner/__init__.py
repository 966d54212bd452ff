__version__ = "1.0.0"

# Import from modules
from .lib import ValidationError
from .section import Section
from .spline import Spliner
from .tools import interpolate, interpolate_points

__all__ = ["extrapolate", "lib", "section", "spline", "tools"] + [
    k for (k, v) in locals().items() if not k.startswith("_") and callable(v)
]  # submodules and all local, public functions and classes


def __dir__():
    return __all__
