"""
Docsy Patient: client core for the Docsy ERP patient app

Session and patient-profile persistence, an authenticated REST gateway and
paginated list loaders scoped to the active patient profile.
"""

__version__ = "0.1.0"
__author__ = "Docsy ERP Team"
__description__ = "Patient app client core for Docsy ERP"
