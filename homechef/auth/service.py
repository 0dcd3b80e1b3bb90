from typing import Optional, Dict, Any
from homechef.config import ADMIN_EMAILS
from .repository import get_user_from_access_token as _repo_get_user_from_token

ROLES = ("admin", "chef", "user")

def determine_role(email: Optional[str], metadata: Dict[str, Any] | None) -> str:
    """
    Rôle applicatif:
    - admin si l'email figure dans ADMIN_EMAILS
    - sinon user_metadata.role ('admin' ou 'chef', posé par le workflow de demandes)
    - 'user' par défaut
    """
    if email and email.strip().lower() in ADMIN_EMAILS:
        return "admin"
    role_lower = str((metadata or {}).get("role", "")).lower()
    if role_lower in ("admin", "chef"):
        return role_lower
    return "user"

def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise l'utilisateur Supabase en {id, email, metadata, role, token}."""
    raw = _repo_get_user_from_token(access_token)
    email = raw.get("email")
    metadata = raw.get("user_metadata") or {}
    return {
        "id": raw.get("id"),
        "email": email,
        "metadata": metadata,
        "role": determine_role(email, metadata),
        "token": access_token,
    }
