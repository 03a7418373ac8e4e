"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

from flask_wtf.csrf import CSRFProtect

# Initialize CSRF Protection
csrf = CSRFProtect()
