"""
Query Routes
============

Ad-hoc SQL execution, validation and example queries.
"""

import time
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from api.schemas import (
    CheckResponse,
    ColumnResponse,
    ErrorDetail,
    ErrorResponse,
    ExampleQueryResponse,
    QueryRequest,
    QueryResponse,
    QueryStatusEnum,
    StatisticsResponse,
    ValidateRequest,
    ValidationResponse,
)
from observability.metrics import track_query_metrics
from sql_playground.config import PlaygroundSettings
from sql_playground.examples import get_example_queries
from sql_playground.models import ActorContext, QueryLimits
from sql_playground.playground import QueryPlayground

router = APIRouter(prefix="/api/v1", tags=["Query"])


def get_playground(request: Request) -> QueryPlayground:
    """Dependency to get the configured playground from app state."""
    return request.app.state.playground


def get_settings(request: Request) -> PlaygroundSettings:
    """Dependency to get the settings the app was built with."""
    return request.app.state.settings


def get_request_id(request: Request) -> str:
    """Reuse the telemetry request ID, or generate one."""
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def get_actor(
    request: Request,
    settings: Annotated[PlaygroundSettings, Depends(get_settings)],
) -> ActorContext:
    """
    Build the audit actor from identity headers set by the upstream auth proxy.

    The identity headers are trusted as-is: the API must only be reachable
    through that proxy. X-Forwarded-For is honoured only when
    ``trust_forwarded_for`` is enabled; otherwise client_ip is the peer address.

    Raises:
        HTTPException: 401 when the user cannot be identified
    """
    headers = request.headers
    user_id = headers.get("X-User-Id")
    user_email = headers.get("X-User-Email")
    if not user_id or not user_email:
        raise HTTPException(
            status_code=401,
            detail={
                "error": "Unauthenticated",
                "message": "X-User-Id and X-User-Email headers are required",
            },
        )

    forwarded = headers.get("X-Forwarded-For")
    if settings.trust_forwarded_for and forwarded:
        client_ip = forwarded.split(",")[0].strip()
    else:
        client_ip = request.client.host if request.client else None

    return ActorContext(
        user_id=user_id,
        user_email=user_email,
        user_name=headers.get("X-User-Name", user_email),
        client_ip=client_ip,
        user_agent=headers.get("User-Agent"),
        session_id=headers.get("X-Session-Id"),
    )


def resolve_limits(body: QueryRequest, settings: PlaygroundSettings) -> QueryLimits:
    """Apply per-request limits, never exceeding the configured ceilings."""
    return QueryLimits(
        max_rows=min(body.max_rows or settings.max_rows_limit, settings.max_rows_limit),
        timeout_seconds=min(
            body.timeout_seconds or settings.timeout_seconds, settings.timeout_seconds
        ),
    )


@router.post(
    "/query",
    response_model=QueryResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Query rejected by the safety validator"},
        401: {"model": ErrorResponse, "description": "Caller could not be identified"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Validate and execute an ad-hoc SELECT query",
)
async def execute_query(
    body: QueryRequest,
    playground: Annotated[QueryPlayground, Depends(get_playground)],
    settings: Annotated[PlaygroundSettings, Depends(get_settings)],
    actor: Annotated[ActorContext, Depends(get_actor)],
    request_id: Annotated[str, Depends(get_request_id)],
):
    """
    Run one query through the safety gateway.

    Rejections return 400 with the reason and never touch the database.
    Database failures and timeouts return 200 with the classified error so
    the client can render them next to the query.
    """
    start_time = time.perf_counter()
    limits = resolve_limits(body, settings)

    attempt = await playground.validate_and_execute(body.query, actor, limits)

    processing_time = time.perf_counter() - start_time
    validation = attempt.validation
    track_query_metrics(
        status=attempt.status.value,
        duration_seconds=processing_time,
        rejected_by=validation.rule,
    )

    if not validation.is_accepted:
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error="ValidationRejected",
                message=validation.rejection_reason,
                request_id=request_id,
                details={"rule": validation.rule},
            ).model_dump(),
        )

    result = attempt.result
    error = attempt.error
    stats = result.statistics if result else None

    return QueryResponse(
        status=QueryStatusEnum(attempt.status.value),
        sanitized_query=validation.sanitized_text,
        columns=[ColumnResponse(name=c.name, type=c.type) for c in result.columns] if result else [],
        rows=list(result.rows) if result else [],
        row_count=result.row_count if result else 0,
        statistics=(
            StatisticsResponse(
                elapsed_seconds=stats.elapsed_seconds,
                rows_read=stats.rows_read,
                bytes_read=stats.bytes_read,
            )
            if stats
            else None
        ),
        error=(
            ErrorDetail(code=error.code, category=error.category, message=error.message)
            if error
            else None
        ),
        max_rows=limits.max_rows,
        timeout_seconds=limits.timeout_seconds,
        request_id=request_id,
        processing_time_ms=processing_time * 1000,
    )


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Check a query without executing it",
)
async def validate_query(
    body: ValidateRequest,
    playground: Annotated[QueryPlayground, Depends(get_playground)],
) -> ValidationResponse:
    """Run the safety validator only. Nothing is executed or audited."""
    outcome = playground.validator.validate(body.query)
    return ValidationResponse(
        accepted=outcome.is_accepted,
        sanitized_query=outcome.sanitized_text,
        reason=outcome.rejection_reason,
        rule=outcome.rule,
        checks=[
            CheckResponse(
                check_name=c.check_name,
                status=c.status.value,
                message=c.message,
                details=c.details,
            )
            for c in outcome.checks
        ],
    )


@router.get(
    "/examples",
    response_model=list[ExampleQueryResponse],
    summary="Starter queries for the editor",
)
async def list_examples() -> list[ExampleQueryResponse]:
    return [
        ExampleQueryResponse(name=e.name, description=e.description, query=e.query)
        for e in get_example_queries()
    ]
