"""Registration and resume-after-registration flow."""
