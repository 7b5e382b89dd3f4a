"""
Patient-facing API client.
"""

from .patient_api import PatientApiClient

__all__ = ["PatientApiClient"]
