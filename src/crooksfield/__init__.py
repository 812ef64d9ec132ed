"""
Crooksfield: animated oscillatory-series field with Marsaglia jitter.
"""

from crooksfield.field import FieldConfig, FieldRenderer, map_colours, pack_rgb
from crooksfield.series import evaluate, series_field
from crooksfield.unirand import SeedOutOfRange, StreamGenerator, decompose_seed, initialise

__version__ = "0.1.0"
