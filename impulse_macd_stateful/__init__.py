# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    version = version("impulse_macd_stateful")
except PackageNotFoundError:
    version = "0.0.0"

from impulse_macd_stateful.stateful import *
from impulse_macd_stateful.stateful import __all__ as stateful_all

# Vectorised counterpart of the stateful engine. Supports ta.impulse_macd()
from impulse_macd_stateful.momentum import *
from impulse_macd_stateful.momentum import __all__ as momentum_all

__all__ = ["version"] + momentum_all + stateful_all
