from revo.creatures.coefficients import Coefficients, MutateSpeed, TriangularRange
from revo.creatures.creature import Creature
from revo.creatures.layer import Absent, LayerModifiers, Present

__all__ = [
    "Absent",
    "Coefficients",
    "Creature",
    "LayerModifiers",
    "MutateSpeed",
    "Present",
    "TriangularRange",
]
