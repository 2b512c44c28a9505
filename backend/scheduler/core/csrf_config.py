"""
CSRF protection configuration.

This module provides a centralized CSRFProtect instance that can be:
1. Initialized in main.py with the Flask app
2. Used to exempt the JSON API blueprints, which authenticate with tokens

Usage:
    from scheduler.core.csrf_config import csrf

    csrf.exempt(providers_bp)
"""

from flask_wtf.csrf import CSRFProtect

# Global CSRF instance - initialized in create_app()
csrf = CSRFProtect()
