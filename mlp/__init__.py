from .MLP import MLP
from .layers import PerceptronLayer, WeightGrid
from .early_stopping import EarlyStopping
from .helpers.errors import (
    MLPError,
    DimensionMismatch,
    SizeMismatch,
    NotConfigured,
    TopologyFrozen,
)

__all__ = [
    "MLP",
    "PerceptronLayer",
    "WeightGrid",
    "EarlyStopping",
    "MLPError",
    "DimensionMismatch",
    "SizeMismatch",
    "NotConfigured",
    "TopologyFrozen",
]
