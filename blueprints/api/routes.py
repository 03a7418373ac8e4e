"""
Service routes: health check and CSRF token for browser clients.
"""

from flask import current_app, jsonify
from flask_wtf.csrf import generate_csrf


def register_routes(bp):
    """Register service routes on the blueprint."""

    @bp.route('/health')
    def health_check():
        """
        Health check endpoint.

        Returns:
            JSON with status and version
        """
        return jsonify({
            'status': 'ok',
            'version': current_app.config.get('APP_VERSION', '1.0.0'),
            'app': current_app.config.get('APP_NAME', 'Club Hiraya Cabins')
        })

    @bp.route('/csrf-token')
    def csrf_token():
        """Issue a CSRF token; browser clients send it back as X-CSRFToken."""
        return jsonify({'success': True, 'csrf_token': generate_csrf()})
