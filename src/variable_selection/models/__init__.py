"""Variable-selection models."""

from .base import VariableSelector
from .ols import OLSSelector
from .lasso import LassoSelector
from .pcr import PCRSelector
from .horseshoe import HorseshoeSelector

__all__ = ["VariableSelector", "OLSSelector", "LassoSelector", "PCRSelector", "HorseshoeSelector"]
