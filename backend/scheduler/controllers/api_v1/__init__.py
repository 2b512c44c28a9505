"""REST API v1 blueprints."""

from flask import Flask, request

from scheduler.controllers.api_v1.admins import admins_bp
from scheduler.controllers.api_v1.appointments import appointments_bp
from scheduler.controllers.api_v1.categories import categories_bp
from scheduler.controllers.api_v1.customers import customers_bp
from scheduler.controllers.api_v1.providers import providers_bp
from scheduler.controllers.api_v1.secretaries import secretaries_bp
from scheduler.controllers.api_v1.services import services_bp
from scheduler.controllers.api_v1.settings import settings_bp
from scheduler.controllers.api_v1.token import token_bp
from scheduler.controllers.api_v1.unavailabilities import unavailabilities_bp
from scheduler.core.api_utils import add_cors_headers
from scheduler.core.csrf_config import csrf

API_PREFIX = "/api/"

API_BLUEPRINTS = (
    admins_bp,
    providers_bp,
    secretaries_bp,
    customers_bp,
    services_bp,
    categories_bp,
    appointments_bp,
    unavailabilities_bp,
    settings_bp,
    token_bp,
)


def register_api_blueprints(app: Flask) -> None:
    """Register every API blueprint; JSON clients skip CSRF and get CORS headers."""
    for blueprint in API_BLUEPRINTS:
        csrf.exempt(blueprint)
        app.register_blueprint(blueprint)

    @app.after_request
    def api_cors_headers(response):
        if request.path.startswith(API_PREFIX):
            add_cors_headers(response)
        return response
