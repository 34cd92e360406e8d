"""Document lookups by string id."""

from typing import Dict, Iterable, Optional, Type, TypeVar

from beanie import Document, PydanticObjectId
from beanie.operators import In
from bson.errors import InvalidId

from easyhealth.shared.exceptions import NotFoundException


DocumentT = TypeVar("DocumentT", bound=Document)


def to_object_id(document_id: Optional[str]) -> Optional[PydanticObjectId]:
    """Parse a string id; malformed ids parse to None."""
    if not document_id:
        return None
    try:
        return PydanticObjectId(document_id)
    except (InvalidId, TypeError):
        return None


def canonical_id(value: Optional[str]) -> Optional[str]:
    """Lower-case form of an ObjectId string; anything else is returned unchanged."""
    object_id = to_object_id(value)
    return str(object_id) if object_id is not None else value


async def fetch(model: Type[DocumentT], document_id: Optional[str], session=None) -> Optional[DocumentT]:
    """Load a document by id, or None if the id is malformed or unknown."""
    object_id = to_object_id(document_id)
    if object_id is None:
        return None
    return await model.get(object_id, session=session)


async def get_or_404(
    model: Type[DocumentT],
    document_id: Optional[str],
    label: str,
    session=None,
) -> DocumentT:
    """Load a document by id or raise NotFoundException('<label> not found')."""
    document = await fetch(model, document_id, session=session)
    if document is None:
        raise NotFoundException(f"{label} not found")
    return document


async def fetch_many(model: Type[DocumentT], document_ids: Iterable[Optional[str]]) -> Dict[str, DocumentT]:
    """Load the documents for a set of ids in one query, keyed by string id."""
    object_ids = {oid for oid in (to_object_id(i) for i in document_ids) if oid is not None}
    if not object_ids:
        return {}
    documents = await model.find(In(model.id, list(object_ids))).to_list()
    return {str(document.id): document for document in documents}
