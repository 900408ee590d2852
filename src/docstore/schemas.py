"""Validation schemas and row types for the persisted entities."""

from .models.document import Document
from .models.user import User
from .registry import create_insert_schema, create_select_schema

InsertUser = create_insert_schema(User, pick={"username", "password"})
UserRow = create_select_schema(User)

InsertDocument = create_insert_schema(
    Document, omit={"id", "created_at", "updated_at"}
)
UpdateDocument = create_insert_schema(
    Document,
    omit={"id", "created_at", "updated_at"},
    name="UpdateDocument",
    partial=True,
)
DocumentRow = create_select_schema(Document)

__all__ = ["InsertUser", "UserRow", "InsertDocument", "UpdateDocument", "DocumentRow"]
