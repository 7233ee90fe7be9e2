"""Staff account management. Passwords are hashed on the way in and never sent back."""

from fastapi import APIRouter, Depends, HTTPException, status

from pharmacy.core.deps import get_storage
from pharmacy.core.security import hash_password
from pharmacy.schemas import User, UserCreate, UserResponse, UserUpdate
from pharmacy.storage.base import Storage

router = APIRouter(prefix="/users", tags=["users"])


def _redact(user: User) -> UserResponse:
    return UserResponse.model_validate(user.model_dump(exclude={"password"}))


@router.get("", response_model=list[UserResponse])
async def list_users(storage: Storage = Depends(get_storage)):
    """List staff accounts."""
    return [_redact(user) for user in await storage.users.list_all()]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, storage: Storage = Depends(get_storage)):
    """Create a staff account with a hashed password."""
    user = await storage.users.create(body.model_copy(update={"password": hash_password(body.password)}))
    return _redact(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, storage: Storage = Depends(get_storage)):
    """Get a staff account by id."""
    user = await storage.users.get(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _redact(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, body: UserUpdate, storage: Storage = Depends(get_storage)):
    """Update account fields; a new password is hashed before storing."""
    changes = body.model_dump(exclude_unset=True)
    if changes.get("password"):
        changes["password"] = hash_password(changes["password"])
    user = await storage.users.update(user_id, changes)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _redact(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, storage: Storage = Depends(get_storage)):
    """Delete a staff account."""
    if not await storage.users.delete(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
