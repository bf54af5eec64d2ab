from .packed_decimal import *
from .packed_decimal import __all__
