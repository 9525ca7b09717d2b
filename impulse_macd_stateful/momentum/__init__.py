# -*- coding: utf-8 -*-
from .impulse_macd import impulse_macd

__all__ = ["impulse_macd"]
