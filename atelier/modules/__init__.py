"""
Atelier Modules
===============

Flask blueprint modules for the portfolio site.
"""

__all__ = ['projects', 'projects_public']
