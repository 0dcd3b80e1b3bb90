"""HomeChef: commandes, règlement Stripe et agrégats de notes des plats."""

__version__ = "1.0.0"
