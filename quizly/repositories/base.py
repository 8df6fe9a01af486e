"""Generic CRUD repository over a SQLAlchemy model"""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from quizly.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Thin wrapper around Session for one model

    Repositories never commit; the calling service owns the transaction.
    """

    model: Type[ModelType]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: int) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def list_all(self) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def add(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete_by_id(self, entity_id: int) -> int:
        """
        Delete with a single statement; child rows go through ON DELETE CASCADE

        Returns:
            Number of rows removed
        """
        return (
            self.db.query(self.model)
            .filter(self.model.id == entity_id)
            .delete(synchronize_session=False)
        )
