"""
Data Sources Package
Layer statistics, metric reference tables and the external index importer
"""

from . import models
from . import layer_stats
from . import metric_definitions
from . import external_index

__all__ = ['models', 'layer_stats', 'metric_definitions', 'external_index']
