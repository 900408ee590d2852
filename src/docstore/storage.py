"""Storage layer persisting users and documents."""

import logging
from typing import Any, Dict, List, Optional, Type, Union

from prometheus_client import Counter
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .database import SessionLocal, utcnow
from .models.document import Document
from .models.user import User
from .registry import resolve_defaults, table_columns
from .schemas import DocumentRow, InsertDocument, InsertUser, UpdateDocument, UserRow


logger = logging.getLogger(__name__)

USER_COUNTER = Counter("users_created_total", "Total users created")
DOCUMENT_COUNTER = Counter("documents_created_total", "Total documents created")

Payload = Union[BaseModel, Dict[str, Any]]


class StorageError(Exception):
    """The database rejected or failed an operation."""


class ConstraintViolationError(StorageError):
    """A uniqueness or not-null constraint was violated."""


def _handle_storage_error(session: Session, exc: Exception) -> None:
    """Rollback transaction and re-raise as a storage error."""
    session.rollback()
    logger.exception("storage layer error", exc_info=exc)
    if isinstance(exc, IntegrityError):
        raise ConstraintViolationError(str(exc.orig)) from exc
    if isinstance(exc, SQLAlchemyError):
        raise StorageError("Database error") from exc
    raise exc


def _validate(schema: Type[BaseModel], payload: Payload) -> BaseModel:
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    return schema.model_validate(payload)


def _to_row(schema: Type[BaseModel], obj: Any) -> BaseModel:
    return schema.model_validate(
        {key: getattr(obj, key) for key, _ in table_columns(type(obj))}
    )


def _insert(model: Type[Any], values: Dict[str, Any], row_schema: Type[BaseModel]):
    session: Session = SessionLocal()
    try:
        obj = model(**resolve_defaults(model, values))
        session.add(obj)
        session.commit()
        session.refresh(obj)
        return _to_row(row_schema, obj)
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()


def create_user(payload: Payload) -> UserRow:
    """Validate ``payload`` against :data:`InsertUser` and store the user.

    Raises ``pydantic.ValidationError`` for malformed input and
    :class:`ConstraintViolationError` when the username is taken.
    """
    user = _validate(InsertUser, payload)
    row = _insert(User, user.model_dump(), UserRow)
    USER_COUNTER.inc()
    logger.info("created user id=%s username=%s", row.id, row.username)
    return row


def get_user(user_id: int) -> Optional[UserRow]:
    session: Session = SessionLocal()
    try:
        user = session.get(User, user_id)
        return _to_row(UserRow, user) if user else None
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()


def get_user_by_username(username: str) -> Optional[UserRow]:
    session: Session = SessionLocal()
    try:
        user = session.query(User).filter(User.username == username).first()
        return _to_row(UserRow, user) if user else None
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()


def create_document(payload: Payload) -> DocumentRow:
    """Validate ``payload`` against :data:`InsertDocument` and store it.

    Missing defaults (mime type, timestamps) are resolved before the insert,
    and the stored row, with its assigned id, is returned.
    """
    document = _validate(InsertDocument, payload)
    row = _insert(Document, document.model_dump(), DocumentRow)
    DOCUMENT_COUNTER.inc()
    logger.info(
        "created document id=%s filename=%s size=%s", row.id, row.filename, row.size
    )
    return row


def get_document(document_id: int) -> Optional[DocumentRow]:
    session: Session = SessionLocal()
    try:
        document = session.get(Document, document_id)
        return _to_row(DocumentRow, document) if document else None
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()


def list_documents() -> List[DocumentRow]:
    """Return all documents, most recently updated first."""
    session: Session = SessionLocal()
    try:
        documents = (
            session.query(Document)
            .order_by(Document.updated_at.desc(), Document.id.desc())
            .all()
        )
        return [_to_row(DocumentRow, d) for d in documents]
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()


def update_document(document_id: int, changes: Dict[str, Any]) -> Optional[DocumentRow]:
    """Apply a partial update and stamp ``updated_at``.

    ``changes`` may only name client-writable fields, validated by
    :data:`UpdateDocument`. Returns ``None`` when the document does not exist.
    """
    updates = _validate(UpdateDocument, changes).model_dump(exclude_unset=True)

    session: Session = SessionLocal()
    try:
        document = session.get(Document, document_id)
        if document is None:
            return None
        for key, value in updates.items():
            setattr(document, key, value)
        document.updated_at = utcnow()
        session.commit()
        session.refresh(document)
        logger.info("updated document id=%s fields=%s", document_id, sorted(updates))
        return _to_row(DocumentRow, document)
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()


def delete_document(document_id: int) -> bool:
    session: Session = SessionLocal()
    try:
        deleted = session.query(Document).filter(Document.id == document_id).delete()
        session.commit()
        if deleted:
            logger.info("deleted document id=%s", document_id)
        return bool(deleted)
    except Exception as exc:
        _handle_storage_error(session, exc)
    finally:
        session.close()
