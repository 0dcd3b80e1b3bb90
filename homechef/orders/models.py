# module homechef.orders.models
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

# Axe exécution (fulfilment)
PLACED = "placed"
ACCEPTED = "accepted"
REJECTED = "rejected"
IN_PROGRESS = "in_progress"
DELIVERED = "delivered"

# Axe paiement, indépendant du précédent
UNPAID = "unpaid"
PAID = "paid"

FULFILLMENT_TRANSITIONS = {
    PLACED: {ACCEPTED, REJECTED},
    ACCEPTED: {IN_PROGRESS},
    IN_PROGRESS: {DELIVERED},
    REJECTED: set(),
    DELIVERED: set(),
}
ORDER_STATUSES = frozenset(FULFILLMENT_TRANSITIONS)

class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_id: str = Field(alias="mealId", min_length=1)
    quantity: int = Field(default=1, ge=1, le=100)
    delivery_address: Optional[str] = Field(default=None, alias="deliveryAddress", max_length=500)

class OrderStatusUpdate(BaseModel):
    status: str = Field(min_length=1)
