"""
Gestionnaires d’exceptions.
- ServiceError (erreurs métier): JSON {detail, code, retryable} avec le statut porté par l’erreur.
- APIError PostgREST non gérée: 503 store_unavailable (rejouable), journalisée avec la trace.
- APIError 22P02 (identifiant mal formé): 404 not_found, non rejouable.
- HTTPException: corps JSON FastAPI standard {detail}.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

import homechef.infra.supabase_client as supabase_client
from homechef.utils.errors import ServiceError

logger = logging.getLogger(__name__)

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.warning("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code, "retryable": exc.retryable},
        )

    @app.exception_handler(APIError)
    async def store_error_handler(request: Request, exc: APIError):
        # Identifiant mal formé (colonne uuid): la ressource ne peut pas exister
        if supabase_client.error_code(exc) == supabase_client.INVALID_TEXT_REPRESENTATION:
            logger.info("Malformed identifier on %s %s: %s", request.method, request.url.path, exc)
            return JSONResponse(
                status_code=404,
                content={"detail": "Ressource introuvable", "code": "not_found", "retryable": False},
            )
        logger.exception("Store error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=503,
            content={"detail": "Base de données indisponible", "code": "store_unavailable", "retryable": True},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)
