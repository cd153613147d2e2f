import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from oauth2_gateway.auth_controller import AuthController
from oauth2_gateway.auth_routes import AuthRoutes
from oauth2_gateway.configs import GatewaySettings, get_settings
from oauth2_gateway.consent.consent_store import ConsentStore
from oauth2_gateway.consent.consent_store_factory import ConsentStoreFactory
from oauth2_gateway.exceptions import ConfigurationError
from oauth2_gateway.server.server_factory import ServerFactory, ServerFactoryLoader
from oauth2_gateway.user_id.user_id_provider import UserIdProvider
from oauth2_gateway.user_id.user_id_provider_factory import UserIdProviderFactory

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: GatewaySettings | None = None,
    server_factory: ServerFactory | None = None,
    user_id_provider: UserIdProvider | None = None,
    consent_store: ConsentStore | None = None,
) -> FastAPI:
    """
    Build the gateway application.

    Collaborators not passed in are created from ``settings``; a missing
    session secret or OAuth2 server configuration raises ConfigurationError.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings.log_level)

    if not settings.session_secret_key:
        raise ConfigurationError("OAUTH2_GW_SESSION_SECRET_KEY must be set")

    if server_factory is None:
        server_factory = ServerFactoryLoader(settings).get_server_factory()
    if user_id_provider is None:
        user_id_provider = UserIdProviderFactory(settings).get_user_id_provider()
    if consent_store is None:
        consent_store = ConsentStoreFactory(settings).get_consent_store()

    controller = AuthController(
        server_factory=server_factory,
        user_id_provider=user_id_provider,
        consent_store=consent_store,
        templates=Jinja2Templates(directory=str(TEMPLATES_DIR)),
        api_problem_error_response=settings.api_problem_error_response,
        server_type=settings.server_type,
    )

    app = FastAPI(title="OAuth2 Gateway")
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
        https_only=settings.session_https_only,
    )
    app.include_router(AuthRoutes(controller).get_routes())

    # Make essentials available to request handlers
    app.state.settings = settings
    app.state.auth_controller = controller

    logger.info(
        f"OAuth2 gateway ready (consent store={type(consent_store).__name__}, "
        f"user id provider={type(user_id_provider).__name__}, "
        f"api problem errors={settings.api_problem_error_response})"
    )
    return app


def main() -> None:
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
