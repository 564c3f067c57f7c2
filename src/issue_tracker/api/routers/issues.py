"""
issue_tracker.api.routers.issues

Issue and comment endpoints.

Responsibilities:
- CRUD over issues, with visibility-scoped listing.
- Comment listing/creation under an issue; edit/delete by comment id.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from issue_tracker.api.deps import db_session
from issue_tracker.api.schemas import CommentOut, IssueOut
from issue_tracker.auth.deps import authz_engine, get_principal
from issue_tracker.auth.models import Principal
from issue_tracker.auth.policies import AuthorizationEngine
from issue_tracker.db.models import IssuePriority, IssueStatus, IssueType
from issue_tracker.db.repositories.issues import IssueFilters
from issue_tracker.services.comments import CommentService
from issue_tracker.services.issues import IssueService

router = APIRouter(prefix="/v1", tags=["issues"])


class IssueCreateRequest(BaseModel):
    project_id: uuid.UUID
    title: str = Field(min_length=1, max_length=256)
    description: str | None = Field(default=None, max_length=10_000)
    status: IssueStatus = IssueStatus.todo
    priority: IssuePriority = IssuePriority.medium
    type: IssueType = IssueType.task
    assignee_id: uuid.UUID | None = None


class IssueUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=256)
    description: str | None = Field(default=None, max_length=10_000)
    status: IssueStatus | None = None
    priority: IssuePriority | None = None
    type: IssueType | None = None
    # An explicit null unassigns.
    assignee_id: uuid.UUID | None = None


class CommentRequest(BaseModel):
    content: str = Field(min_length=1, max_length=10_000)


def issue_service(
    session: AsyncSession = Depends(db_session),
    authz: AuthorizationEngine = Depends(authz_engine),
) -> IssueService:
    return IssueService(session=session, authz=authz)


def comment_service(
    session: AsyncSession = Depends(db_session),
    authz: AuthorizationEngine = Depends(authz_engine),
) -> CommentService:
    return CommentService(session=session, authz=authz)


@router.get("/issues", response_model=list[IssueOut])
async def list_issues(
    project_id: uuid.UUID | None = None,
    status: IssueStatus | None = None,
    priority: IssuePriority | None = None,
    type: IssueType | None = None,
    assignee_id: uuid.UUID | None = None,
    principal: Principal | None = Depends(get_principal),
    issues: IssueService = Depends(issue_service),
) -> list[IssueOut]:
    filters = IssueFilters(status=status, priority=priority, type=type, assignee_id=assignee_id)
    found = await issues.list_issues(principal, project_id=project_id, filters=filters)
    return [IssueOut.model_validate(i) for i in found]


@router.post("/issues", response_model=IssueOut, status_code=HTTP_201_CREATED)
async def create_issue(
    body: IssueCreateRequest,
    principal: Principal | None = Depends(get_principal),
    issues: IssueService = Depends(issue_service),
) -> IssueOut:
    issue = await issues.create_issue(principal, **body.model_dump())
    return IssueOut.model_validate(issue)


@router.get("/issues/{issue_id}", response_model=IssueOut)
async def get_issue(
    issue_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    issues: IssueService = Depends(issue_service),
) -> IssueOut:
    return IssueOut.model_validate(await issues.get_issue(principal, issue_id))


@router.patch("/issues/{issue_id}", response_model=IssueOut)
async def update_issue(
    issue_id: uuid.UUID,
    body: IssueUpdateRequest,
    principal: Principal | None = Depends(get_principal),
    issues: IssueService = Depends(issue_service),
) -> IssueOut:
    fields = body.model_dump(exclude_unset=True)
    # Nulls only mean something for the nullable columns.
    fields = {
        k: v for k, v in fields.items() if v is not None or k in ("description", "assignee_id")
    }
    return IssueOut.model_validate(await issues.update_issue(principal, issue_id, fields))


@router.delete("/issues/{issue_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_issue(
    issue_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    issues: IssueService = Depends(issue_service),
) -> Response:
    await issues.delete_issue(principal, issue_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get("/issues/{issue_id}/comments", response_model=list[CommentOut])
async def list_comments(
    issue_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    comments: CommentService = Depends(comment_service),
) -> list[CommentOut]:
    return [CommentOut.model_validate(c) for c in await comments.list_comments(principal, issue_id)]


@router.post(
    "/issues/{issue_id}/comments", response_model=CommentOut, status_code=HTTP_201_CREATED
)
async def create_comment(
    issue_id: uuid.UUID,
    body: CommentRequest,
    principal: Principal | None = Depends(get_principal),
    comments: CommentService = Depends(comment_service),
) -> CommentOut:
    comment = await comments.create_comment(principal, issue_id, body.content)
    return CommentOut.model_validate(comment)


@router.patch("/comments/{comment_id}", response_model=CommentOut)
async def update_comment(
    comment_id: uuid.UUID,
    body: CommentRequest,
    principal: Principal | None = Depends(get_principal),
    comments: CommentService = Depends(comment_service),
) -> CommentOut:
    comment = await comments.update_comment(principal, comment_id, body.content)
    return CommentOut.model_validate(comment)


@router.delete("/comments/{comment_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: uuid.UUID,
    principal: Principal | None = Depends(get_principal),
    comments: CommentService = Depends(comment_service),
) -> Response:
    await comments.delete_comment(principal, comment_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
