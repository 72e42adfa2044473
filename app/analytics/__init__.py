"""
Analytics Module

Visit logging and reporting over the visit log.
"""

from .factory import create_analytics_module

__all__ = ["create_analytics_module"]
