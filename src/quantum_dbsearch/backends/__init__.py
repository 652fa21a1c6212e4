"""Backends for sampling exported search circuits."""

from .base import QuantumBackend
from .simulator import SimulatorBackend

__all__ = ["QuantumBackend", "SimulatorBackend"]
