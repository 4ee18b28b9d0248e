"""
Pillars Package
Scoring logic for the urban metrics engine
"""

from . import poi_metrics
from . import derived_metrics
from . import comparison
from . import insights
from . import area_scoring

__all__ = [
    'poi_metrics',
    'derived_metrics',
    'comparison',
    'insights',
    'area_scoring',
]
