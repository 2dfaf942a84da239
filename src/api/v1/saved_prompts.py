"""Saved prompt endpoints.

Each authenticated user manages their own named prompts. Every endpoint is
scoped to the caller resolved by the auth dependency; a prompt owned by
someone else answers exactly like one that does not exist.

Endpoints:
    GET    /saved_prompts          - List the caller's prompts (newest first)
    GET    /saved_prompts/{id}     - Get one prompt
    POST   /saved_prompts          - Create a prompt
    PATCH  /saved_prompts/{id}     - Update name and/or content
    PUT    /saved_prompts/{id}     - Same as PATCH
    DELETE /saved_prompts/{id}     - Delete a prompt

Security:
    - GET endpoints require prompts:read
    - POST/PATCH/PUT/DELETE require prompts:write

Usage:
    POST /saved_prompts
    {"name": "Greeting", "content": "Hello!"}

    PATCH /saved_prompts/8f14e45f-ceea-467a-9575-4a1a2b7e0f3e
    {"content": "Updated"}
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from src.core.auth import AuthContext, require_read, require_write
from src.core.exceptions import NotFoundError, PromptbookException, ValidationError
from src.observability.logging import get_logger
from src.services.saved_prompt import SavedPromptData, SavedPromptService, get_saved_prompt_service

logger = get_logger(__name__)

router = APIRouter()


# Request/Response schemas
# Fields are optional here so that presence is checked in one place (the
# store) and missing fields produce the same error body as blank ones.
class SavedPromptCreate(BaseModel):
    """Request schema for creating a saved prompt."""

    name: Optional[str] = Field(None, description="Display name (required)")
    content: Optional[str] = Field(None, description="Prompt text (required)")


class SavedPromptUpdate(BaseModel):
    """Request schema for updating a saved prompt; omitted fields are kept."""

    name: Optional[str] = Field(None, description="New display name")
    content: Optional[str] = Field(None, description="New prompt text")


class SavedPromptResponse(BaseModel):
    """Response schema for a saved prompt."""

    id: str
    name: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_data(cls, data: SavedPromptData) -> "SavedPromptResponse":
        return cls(
            id=data.id,
            name=data.name,
            content=data.content,
            owner_id=data.owner_id,
            created_at=data.created_at,
            updated_at=data.updated_at,
        )


class SavedPromptListResponse(BaseModel):
    """Response schema for listing saved prompts."""

    items: List[SavedPromptResponse]
    total: int


def _http_error(exc: PromptbookException) -> HTTPException:
    """Map a domain exception onto an HTTPException with the uniform body."""
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ValidationError):
        status_code = 422
    else:
        status_code = 500
    return HTTPException(status_code=status_code, detail={"error": exc.to_dict()})


@router.get(
    "",
    response_model=SavedPromptListResponse,
    summary="List saved prompts",
    description="Get all of the caller's saved prompts, most recent first.",
)
async def list_saved_prompts(
    auth: AuthContext = Depends(require_read),
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    """List the caller's saved prompts."""
    prompts = await service.list(auth.subject)
    items = [SavedPromptResponse.from_data(p) for p in prompts]
    return SavedPromptListResponse(items=items, total=len(items))


@router.get(
    "/{prompt_id}",
    response_model=SavedPromptResponse,
    summary="Get a saved prompt",
)
async def get_saved_prompt(
    prompt_id: str,
    auth: AuthContext = Depends(require_read),
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    """Get a saved prompt by ID."""
    try:
        prompt = await service.get(auth.subject, prompt_id)
    except NotFoundError as e:
        raise _http_error(e)

    return SavedPromptResponse.from_data(prompt)


@router.post(
    "",
    response_model=SavedPromptResponse,
    status_code=201,
    summary="Create a saved prompt",
    description="Create a saved prompt owned by the caller. Name and content must not be blank.",
)
async def create_saved_prompt(
    body: SavedPromptCreate,
    auth: AuthContext = Depends(require_write),
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    """Create a saved prompt."""
    try:
        created = await service.create(auth.subject, name=body.name, content=body.content)
    except ValidationError as e:
        raise _http_error(e)

    return SavedPromptResponse.from_data(created)


@router.patch(
    "/{prompt_id}",
    response_model=SavedPromptResponse,
    summary="Update a saved prompt",
    description="Update name and/or content. Omitted fields are left unchanged; other fields are ignored.",
)
@router.put(
    "/{prompt_id}",
    response_model=SavedPromptResponse,
    summary="Update a saved prompt",
    include_in_schema=False,
)
async def update_saved_prompt(
    prompt_id: str,
    body: SavedPromptUpdate,
    auth: AuthContext = Depends(require_write),
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    """Update a saved prompt."""
    try:
        updated = await service.update(
            auth.subject,
            prompt_id,
            body.model_dump(exclude_unset=True),
        )
    except (NotFoundError, ValidationError) as e:
        raise _http_error(e)

    return SavedPromptResponse.from_data(updated)


@router.delete(
    "/{prompt_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a saved prompt",
)
async def delete_saved_prompt(
    prompt_id: str,
    auth: AuthContext = Depends(require_write),
    service: SavedPromptService = Depends(get_saved_prompt_service),
):
    """Delete a saved prompt."""
    try:
        await service.delete(auth.subject, prompt_id)
    except NotFoundError as e:
        raise _http_error(e)

    return Response(status_code=204)
