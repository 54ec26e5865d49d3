from typing import Tuple

from sqlalchemy.orm import Session

from homebase.core.exception import ResourceNotFoundException, ValidationException
from homebase.models.user import User
from homebase.repositories.user_repository import UserRepository


class PointsService:
    """
    XP and coin balances. Changes are applied as SQL increments so two
    awards landing together both count.
    """

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)

    def award(self, user_id: str, xp: int = 0, coins: int = 0, commit: bool = True) -> None:
        if xp < 0 or coins < 0 or xp + coins == 0:
            raise ValidationException("Points amount must be greater than zero")
        if not self.user_repo.add_points(user_id, xp=xp, coins=coins):
            raise ResourceNotFoundException("User")
        if commit:
            self.db.commit()

    def spend_coins(self, user_id: str, amount: int) -> bool:
        """False, with nothing changed, when the balance is short. Not committed."""
        if amount <= 0:
            raise ValidationException("Points amount must be greater than zero")
        return self.user_repo.spend_coins(user_id, amount)

    def balance(self, user_id: str) -> Tuple[int, int]:
        # Column query reads the row, not the possibly stale identity map
        row = self.db.query(User.xp, User.coins).filter(User.id == user_id).first()
        if row is None:
            raise ResourceNotFoundException("User")
        return row.xp, row.coins
