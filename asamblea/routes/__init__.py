from werkzeug.exceptions import HTTPException

from asamblea.routes.admin import register_admin_routes
from asamblea.routes.auth import register_auth_routes
from asamblea.routes.public import register_public_routes
from asamblea.services.errors import VotingError


def register_routes(app):
    register_auth_routes(app)
    register_public_routes(app)
    register_admin_routes(app)
    register_error_handlers(app)


def register_error_handlers(app):
    @app.errorhandler(VotingError)
    def voting_error(error):
        return error.to_dict(), error.status_code

    @app.errorhandler(HTTPException)
    def http_error(error):
        return {
            "ok": False,
            "error": error.name.lower().replace(" ", "_"),
            "message": error.description,
        }, error.code
