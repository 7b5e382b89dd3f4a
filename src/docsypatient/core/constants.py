"""
Shared constants for the Docsy patient client.
"""

DEFAULT_PAGE_SIZE = 10

# Persisted key suffixes; the configured storage prefix is prepended
TOKEN_KEY = "token"
REFRESH_KEY = "refresh"
USER_KEY = "user"
PROFILES_KEY = "patient_profiles"
ACTIVE_PROFILE_KEY = "active_profile"

SESSION_KEYS = [
    TOKEN_KEY,
    REFRESH_KEY,
    USER_KEY,
    PROFILES_KEY,
    ACTIVE_PROFILE_KEY,
]

# Request headers carrying the active profile scope
CLINIC_HEADER = "X-Clinic-Id"
PROFILE_HEADER = "X-Patient-Profile-Id"

# Backend endpoints
PATIENT_PROFILES_PATH = "/api/auth/patient-profiles"
REQUEST_OTP_PATH = "/api/auth/request-otp"
VERIFY_OTP_PATH = "/api/auth/verify-otp"
LOGIN_PATH = "/api/auth/login"
REFRESH_PATH = "/api/auth/refresh"
APPOINTMENTS_PATH = "/api/appointments"
DOCTORS_PATH = "/api/appointments/doctors"
BILLING_PATH = "/api/billing"
PRESCRIPTIONS_PATH = "/api/prescriptions"

OTP_LENGTH = 4
