"""Ingest package for loading the population estimates file.

This module handles reading the raw CSV into Observation records
for the population report pipeline.
"""

from popreport.ingest.run import Loader, load_observations

__all__ = ["Loader", "load_observations"]
