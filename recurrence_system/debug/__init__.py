"""Debug exporters for solved recurrence models."""

from .occupancy_grid_exporter import export_occupancy_grid

__all__ = ['export_occupancy_grid']
