"""
Registre central des routers.
- Public: meals (listing/détail), lecture des avis, health
- Authentifié: reviews, orders, payments
"""
from fastapi import FastAPI
from homechef.meals.views import router as meals_router
from homechef.reviews.views import router as reviews_router
from homechef.orders.views import router as orders_router
from homechef.payments.views import router as payments_router
from homechef.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    app.include_router(meals_router)
    app.include_router(reviews_router)
    app.include_router(orders_router)
    app.include_router(payments_router)
    # Health & monitoring
    app.include_router(health_router)
