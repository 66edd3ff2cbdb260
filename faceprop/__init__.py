"""
faceprop - facial proportion analysis and sample registration queue.
"""

from faceprop.core.config import VERSION

__version__ = VERSION
