# ============================================================================
# src/medicine_resolver/api/__init__.py
# ============================================================================
"""
HTTP API for the medicine resolver
"""

from .main import create_app
