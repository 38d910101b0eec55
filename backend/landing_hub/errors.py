from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from landing_hub.domain.errors import LandingHubError


def register_error_handlers(app):
    @app.errorhandler(LandingHubError)
    def handle_landing_hub_error(error):
        if error.status_code >= 500:
            app.logger.error("%s: %s", type(error).__name__, error.message)
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(error):
        app.logger.exception("Unhandled storage error")
        response = jsonify({
            "error": "InternalError",
            "message": "The request could not be completed.",
        })
        response.status_code = 500
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description,
        })
        response.status_code = error.code
        return response
