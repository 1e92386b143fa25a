"""
Linear triangulation utilities.
"""

from .dlt import triangulate_dlt, project

__all__ = ['triangulate_dlt', 'project']
