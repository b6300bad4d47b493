"""
CSRF protection configuration.

This module provides a centralized CSRFProtect instance that can be:
1. Initialized in main.py with the Flask app
2. Imported in controllers to use @csrf.exempt where a route must opt out

Every state-changing form in the application carries the token, either as
the `csrf_token` form field or as the `X-CSRFToken` header for AJAX calls.
"""

from flask_wtf.csrf import CSRFProtect

# Global CSRF instance - initialized in create_app()
csrf = CSRFProtect()
