# ─────────────────────────────────────────────────────────────────
# routes/users.py — User Registry Endpoints
#
#   POST /addUser   → validate + append + rewrite users.json
#   GET  /viewUsers → the full list
#
# We read the raw JSON body ourselves instead of declaring a Pydantic
# body parameter: FastAPI would answer a missing field with 422, but
# clients of this API expect 400 with {"error": ...}.
# ─────────────────────────────────────────────────────────────────

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from database import UserRegistry
from dependencies import get_user_registry
from errors import StorageError, ValidationError
from models import AddUserResponse, ErrorResponse

# Named logger for this module
logger = logging.getLogger("routes")

router = APIRouter(tags=["Users"])


@router.post(
    "/addUser",
    response_model=AddUserResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def add_user(request: Request, users: UserRegistry = Depends(get_user_registry)):
    """
    Registers a user.

    Flow:
    1. Parse JSON body (invalid JSON counts as missing fields)
    2. Check all six fields are present and non-null → 400 if not
    3. Append to memory and rewrite users.json → 500 if the write fails
    4. Echo the stored user back
    """

    try:
        payload = await request.json()
    except ValueError:
        payload = None

    try:
        user = users.add(payload)
    except ValidationError as err:
        logger.warning(f"⚠️  /addUser rejected, missing: {err.missing}")
        return JSONResponse(status_code=400, content={"error": str(err)})
    except StorageError as err:
        logger.error(f"❌ /addUser error: {err}")
        return JSONResponse(status_code=500, content={"error": str(err)})

    return AddUserResponse(success=True, user=user.to_json())


@router.get("/viewUsers")
def view_users(users: UserRegistry = Depends(get_user_registry)):
    """Returns every registered user in insertion order."""

    return users.list_all()
