"""
Erreurs métier du cœur (agrégats, commandes, paiements).
Chaque erreur porte un statut HTTP, un code stable et un drapeau retryable;
le handler enregistré par app_setup.exceptions les sérialise en JSON.
"""
from typing import Optional

class ServiceError(Exception):
    status_code = 400
    code = "invalid"
    retryable = False

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

class ValidationError(ServiceError):
    status_code = 400
    code = "invalid"

class ForbiddenError(ServiceError):
    status_code = 403
    code = "forbidden"

class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"

class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"

class InvalidTransitionError(ConflictError):
    code = "invalid_transition"

class ContentionError(ConflictError):
    # Écritures concurrentes sur la même ligne: rejouable tel quel
    code = "contention"
    retryable = True

class PaymentPendingError(ServiceError):
    # Le fournisseur n'a pas (encore) confirmé le paiement
    status_code = 402
    code = "payment_pending"

class UpstreamError(ServiceError):
    # Échec ou timeout Stripe: l'appelant peut rejouer la même confirmation
    status_code = 502
    code = "upstream_failure"
    retryable = True
