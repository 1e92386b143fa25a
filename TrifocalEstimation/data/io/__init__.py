"""
Feature file input/output.
"""

from .feat_io import read_feat_file, write_feat_file

__all__ = ['read_feat_file', 'write_feat_file']
