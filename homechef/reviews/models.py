# module homechef.reviews.models
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

class ReviewCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meal_id: str = Field(alias="mealId", min_length=1)
    # Informatif: l'auteur retenu est toujours l'utilisateur authentifié
    user_email: Optional[EmailStr] = Field(default=None, alias="userEmail")
    rating: int = Field(ge=1, le=5)
    body: str = Field(default="", max_length=2000)

class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    body: Optional[str] = Field(default=None, max_length=2000)
