from typing import List

from fastapi import APIRouter, Depends, status

from common.cache import delete_prefix, get_or_set_json

from . import schemas
from .stores import RoomStore, get_room_store

router = APIRouter(prefix="/rooms", tags=["rooms"])

ROOMS_CACHE_PREFIX = "rooms:"


# ---------- Create room ----------


@router.post("", response_model=schemas.RoomRead, status_code=status.HTTP_201_CREATED)
def create_room(
    room_in: schemas.RoomCreate,
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Create a new karaoke room.

    Behavior
    --------
    - Ensures that the room number is unique.
    - Capacity must be between 1 and 20 guests.

    Parameters
    ----------
    room_in : RoomCreate
        New room details.
    rooms : RoomStore
        Room store bound to the request's session.

    Returns
    -------
    RoomRead
        The created room.

    Raises
    ------
    ValidationError
        If a room with the same number already exists.
    """
    room = rooms.insert(**room_in.model_dump())
    delete_prefix(ROOMS_CACHE_PREFIX)
    return room


# ---------- List rooms ----------


@router.get("", response_model=List[schemas.RoomRead])
def list_rooms(rooms: RoomStore = Depends(get_room_store)):
    """
    Retrieve all rooms ordered by room number.

    The result is cached for 60 seconds when Redis is configured.
    """
    return get_or_set_json(
        ROOMS_CACHE_PREFIX + "all",
        lambda: [schemas.RoomRead.model_validate(r).model_dump(mode="json") for r in rooms.list()],
        ttl_seconds=60,
    )


@router.get("/{room_id}", response_model=schemas.RoomRead)
def get_room(room_id: int, rooms: RoomStore = Depends(get_room_store)):
    """
    Retrieve a single room by its ID.

    Raises
    ------
    NotFoundError
        If the room does not exist.
    """
    return get_or_set_json(
        f"{ROOMS_CACHE_PREFIX}{room_id}",
        lambda: schemas.RoomRead.model_validate(rooms.get(room_id)).model_dump(mode="json"),
        ttl_seconds=300,
    )


# ---------- Update / delete rooms ----------


@router.put("/{room_id}", response_model=schemas.RoomRead)
def update_room(
    room_id: int,
    update_data: schemas.RoomUpdate,
    rooms: RoomStore = Depends(get_room_store),
):
    """
    Update an existing room.

    Behavior
    --------
    - Allows updating room number, capacity and status.
    - Ensures that the new room number (if changed) remains unique.
    - The status is a manual flag; bookings do not change it.

    Raises
    ------
    NotFoundError
        If the room is not found.
    ValidationError
        If the new room number belongs to another room.
    """
    room = rooms.update(room_id, **update_data.model_dump(exclude_unset=True))
    delete_prefix(ROOMS_CACHE_PREFIX)
    return room


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: int, rooms: RoomStore = Depends(get_room_store)):
    """
    Delete a room.

    Bookings that reference the room are kept; their embedded ``room``
    becomes null.
    """
    rooms.delete(room_id)
    delete_prefix(ROOMS_CACHE_PREFIX)
    return
