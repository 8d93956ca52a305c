"""Windowed k-mer distance between a k-mer index and reference sequences."""

from .config import Config
from . import sequences
from . import kmer
from . import utils

__version__ = '0.1.0'
