"""
Favorites and watchlist endpoints.

{media} is "movie" or "tv", {list_name} is "favorites" or "watchlist".
Every call runs with raise_errors=True; a StorageError is turned into
503 storage_unavailable by the app's exception handler.
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_list_service
from api.exceptions import NotFoundError
from api.schemas.common import ErrorResponse, SuccessResponse
from api.schemas.lists import (
    CountResponse,
    ListEntry,
    ListRecord,
    ListResponse,
    ToggleResponse,
)
from tmdb_browser.lists import ListStorageService
from tmdb_browser.models import SavedItem

router = APIRouter(responses={503: {"model": ErrorResponse, "description": "List storage unavailable"}})
logger = logging.getLogger("tmdb_browser.api.lists")

LIST_PATH = "/lists/{media}/{list_name}"


def _entry(item: SavedItem) -> ListEntry:
    return ListEntry(id=item.id, title=item.title, added_at=item.added_at, record=item.to_dict())


@router.get(LIST_PATH, response_model=ListResponse)
def get_list(service: ListStorageService = Depends(get_list_service)):
    """
    Get every entry of a list, newest first.
    """
    items = service.list_all(raise_errors=True)
    document = service.get_document(raise_errors=True)
    return ListResponse(
        key=service.key,
        data=[_entry(item) for item in items],
        total=len(items),
        last_updated=document.get("lastUpdated"),
    )


@router.get(LIST_PATH + "/count", response_model=CountResponse)
def get_count(service: ListStorageService = Depends(get_list_service)):
    return CountResponse(key=service.key, count=service.count(raise_errors=True))


@router.get(LIST_PATH + "/{item_id:int}", response_model=ListEntry)
def get_entry(item_id: int, service: ListStorageService = Depends(get_list_service)):
    """
    Get one entry. 404 when the id is not in the list.
    """
    item = service.get(item_id, raise_errors=True)
    if item is None:
        raise NotFoundError(f"{service.key} entry", item_id)
    return _entry(item)


@router.put(LIST_PATH + "/{item_id:int}", response_model=ListEntry)
def put_entry(
    item_id: int,
    record: ListRecord,
    service: ListStorageService = Depends(get_list_service),
):
    """
    Add a record (or re-add it, which resets its addedAt).
    """
    service.add({**record.model_dump(), "id": item_id}, raise_errors=True)
    item = service.get(item_id, raise_errors=True)
    logger.info(f"{service.key}: put {item_id}")
    return _entry(item)


@router.delete(LIST_PATH + "/{item_id:int}", response_model=SuccessResponse)
def delete_entry(item_id: int, service: ListStorageService = Depends(get_list_service)):
    """
    Remove an entry. Removing an id that is not in the list also succeeds.
    """
    service.remove(item_id, raise_errors=True)
    return SuccessResponse(message=f"Removed {item_id} from {service.key}")


@router.post(LIST_PATH + "/toggle", response_model=ToggleResponse)
def toggle_entry(
    record: ListRecord,
    service: ListStorageService = Depends(get_list_service),
):
    member = service.toggle(record.model_dump(), raise_errors=True)
    return ToggleResponse(id=record.id, member=member)


@router.delete(LIST_PATH, response_model=SuccessResponse)
def clear_list(service: ListStorageService = Depends(get_list_service)):
    service.clear_all(raise_errors=True)
    return SuccessResponse(message=f"Cleared {service.key}")
