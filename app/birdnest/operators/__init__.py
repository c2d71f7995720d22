"""Package operators building install and remove commands."""

from birdnest.operators.apt import AptOperator
from birdnest.operators.base import OperationCommand, Operator
from birdnest.operators.flatpak import FlatpakOperator
from birdnest.operators.pikman import PikmanOperator

__all__ = [
    "AptOperator",
    "FlatpakOperator",
    "OperationCommand",
    "Operator",
    "PikmanOperator",
]
