from fastapi import APIRouter, Depends, HTTPException
import httpx
import logging

from config import settings
from middleware.auth_middleware import get_current_user
from schemas.user_schema import UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])


def get_clerk_client():
    """HTTP client for the Clerk Backend API, authenticated with the instance secret key."""
    if not settings.CLERK_SECRET_KEY:
        logger.error("CLERK_SECRET_KEY not found in environment variables")
        raise HTTPException(status_code=500, detail="Clerk is not configured")
    with httpx.Client(
        base_url=settings.CLERK_API_URL,
        headers={"Authorization": f"Bearer {settings.CLERK_SECRET_KEY}"},
        timeout=settings.CLERK_API_TIMEOUT,
    ) as client:
        yield client


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: str, user_data: UserUpdate, client=Depends(get_clerk_client),
                user=Depends(get_current_user)):
    """Update the caller's Clerk public metadata (user type and settings)."""
    if user['userId'] != user_id:
        raise HTTPException(status_code=403, detail="Access denied")

    # Clerk deep-merges metadata, so only the provided keys are sent
    public_metadata = user_data.publicMetadata.model_dump(exclude_none=True)

    try:
        response = client.patch(
            f"/users/{user_id}/metadata",
            json={"public_metadata": public_metadata},
        )
        response.raise_for_status()
        return {"message": "User updated successfully", "data": response.json()}
    except httpx.HTTPStatusError as e:
        logger.error(f"Clerk rejected metadata update for {user_id}: {e.response.status_code} {e.response.text}")
        status_code = 404 if e.response.status_code == 404 else 502
        raise HTTPException(status_code=status_code, detail="Error updating user")
    except httpx.HTTPError as e:
        logger.error(f"Error updating user {user_id}: {str(e)}")
        raise HTTPException(status_code=502, detail=f"Error updating user: {str(e)}")
