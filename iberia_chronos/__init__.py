"""
Iberia Chronos: model-generated historical political maps of the Iberian Peninsula.
"""
from __future__ import annotations

__version__ = "0.1.0"
