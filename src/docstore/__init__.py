"""Persistence schema for users and PDF documents."""

from .schemas import DocumentRow, InsertDocument, InsertUser, UpdateDocument, UserRow

__all__ = ["DocumentRow", "InsertDocument", "InsertUser", "UpdateDocument", "UserRow"]
