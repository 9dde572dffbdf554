"""Simulation helpers and runners for playing heads-up demonstration hands."""

from .runner import SimulationConfig, SimulationRunner, SimulationStats

__all__ = ["SimulationConfig", "SimulationRunner", "SimulationStats"]
