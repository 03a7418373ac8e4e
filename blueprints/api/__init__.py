"""
Cabin engine API blueprint.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.api import routes
from blueprints.api import cabins
from blueprints.api import reservations
from blueprints.api import availability

# Register all route functions on the blueprint
routes.register_routes(api_bp)
cabins.register_routes(api_bp)
reservations.register_routes(api_bp)
availability.register_routes(api_bp)
