"""
ASGI entrypoint: expose `app` pour les process managers / déploiements
(ex: gunicorn -k uvicorn.workers.UvicornWorker homechef.asgi:app).
"""

from homechef.app import app

if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(
        "homechef.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3000")),
        reload=True,
    )
