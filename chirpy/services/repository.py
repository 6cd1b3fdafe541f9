"""
Entity repositories over the document collections.

Methods taking a ``document`` argument operate on a document the caller
already holds (inside ``store.transaction()`` or ``store.read()``), so
several steps can share one critical section. The rest open their own.
"""

from __future__ import annotations

from typing import Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from ..core.document_store import DocumentStore
from ..models.account import Account
from ..models.document import Document
from ..models.post import Post
from ..utils.exceptions import NotFoundError

T = TypeVar("T", bound=BaseModel)


class Repository(Generic[T]):
    """Create/read/list over one keyed collection with sequential ids"""

    collection: str = ""
    model: Type[BaseModel] = BaseModel
    label: str = "entity"

    def __init__(self, store: DocumentStore):
        self.store = store

    def entities(self, document: Document) -> Dict[int, T]:
        return getattr(document, self.collection)

    def add(self, document: Document, **fields) -> T:
        entity_id = document.next_id(self.collection)
        entity = self.model(id=entity_id, **fields)
        self.entities(document)[entity_id] = entity
        return entity

    def lookup(self, document: Document, entity_id: int) -> T:
        entity = self.entities(document).get(entity_id)
        if entity is None:
            raise NotFoundError(
                f"{self.label.capitalize()} {entity_id} not found",
                entity=self.label,
                entity_id=entity_id,
            )
        return entity

    def find(self, document: Document, predicate: Callable[[T], bool]) -> Optional[T]:
        return next((e for e in self.entities(document).values() if predicate(e)), None)

    def put(self, document: Document, entity: T) -> T:
        """Overwrite an existing entity in place."""
        self.lookup(document, entity.id)
        self.entities(document)[entity.id] = entity
        return entity

    def create(self, **fields) -> T:
        with self.store.transaction() as document:
            return self.add(document, **fields)

    def get(self, entity_id: int) -> T:
        with self.store.read() as document:
            return self.lookup(document, entity_id)

    def list(self) -> List[T]:
        """All entities, in no particular order"""
        with self.store.read() as document:
            return list(self.entities(document).values())

    def find_by(self, field: str, value) -> Optional[T]:
        with self.store.read() as document:
            return self.find(document, lambda e: getattr(e, field) == value)


class PostRepository(Repository[Post]):
    collection = "posts"
    model = Post
    label = "post"


class AccountRepository(Repository[Account]):
    collection = "accounts"
    model = Account
    label = "account"

    def email_owner(self, document: Document, email: str) -> Optional[Account]:
        # Exact, case-sensitive match
        return self.find(document, lambda a: a.email == email)

    def find_by_email(self, email: str) -> Optional[Account]:
        with self.store.read() as document:
            return self.email_owner(document, email)
