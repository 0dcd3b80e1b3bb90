# module homechef.app
import logging
import os

from fastapi import FastAPI

from homechef.app_setup.middlewares import (
    register_basic_middlewares,
    register_security_middleware,
    register_force_https_middleware,
)
from homechef.app_setup.exceptions import register_exception_handlers
from homechef.app_setup.routes import register_routes
from homechef.app_setup.routers import register_routers
from homechef.app_setup.lifespan import lifespan

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "info").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

def create_app() -> FastAPI:
    """
    Crée et configure l’instance FastAPI de l’application.
    Étapes et ordre:
      1) register_basic_middlewares: CORS, TrustedHost, ProxyHeaders.
      2) register_security_middleware: en-têtes de sécurité + CSP.
      3) register_exception_handlers: erreurs métier, store, HTTPException -> JSON.
      4) register_routes: racine et favicon.
      5) register_routers: meals, reviews, orders, payments, health.
      6) register_force_https_middleware: ajouté en dernier pour s’exécuter en premier.
    """
    app = FastAPI(title="HomeChef API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    register_force_https_middleware(app)
    return app

# App globale
app = create_app()
