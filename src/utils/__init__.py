"""
Utility modules for the offer landing service
"""
from .config_loader import LandingSettings, load_landing_settings

__all__ = [
    'LandingSettings',
    'load_landing_settings',
]
