from .Layer import Layer
from .PerceptronLayer import PerceptronLayer
from .WeightGrid import WeightGrid

__all__ = [
    "Layer",
    "PerceptronLayer",
    "WeightGrid",
]
