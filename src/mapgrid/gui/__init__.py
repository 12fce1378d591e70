"""
Qt user interface for mapgrid.
"""
