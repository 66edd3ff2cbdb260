"""
API routers. Services are injected at startup through each module's set_services().
"""

from faceprop.routers import analysis, registration

__all__ = ['analysis', 'registration']
