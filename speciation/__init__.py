"""
Speciation Simulator

A headless, tick-driven ecological simulation. Species populations grow,
decline, branch and go extinct under a shared environment that drifts back
to its ecosystem baseline and can be perturbed by discrete events.

Architecture: SpeciationSimulation is the source of truth. Charts, phylogeny
views and event logs are consumers of its snapshots.
"""

__version__ = "0.1.0"
