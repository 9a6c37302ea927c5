from flask import render_template
from bulletin import db


def register_error_handlers(app):
    """Register error handlers with the Flask application"""

    @app.errorhandler(403)
    def forbidden_error(error):
        return render_template('errors/403.html'), 403

    @app.errorhandler(404)
    def not_found_error(error):
        return render_template('errors/404.html'), 404

    @app.errorhandler(413)
    def request_entity_too_large(error):
        max_mb = app.config.get('IMAGE_MAX_SIZE_MB', 5)
        return render_template('errors/413.html', max_mb=max_mb), 413

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return render_template('errors/500.html'), 500
