"""FastAPI application entrypoint for promlinter service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import Depends, FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    Depends = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..config import PromLinterConfig
from ..models import Issue
from ..orchestrator import Orchestrator


class LintRequest(BaseModel):
    source: str
    filename: str = "main.go"
    strict: Optional[bool] = None


class IssueModel(BaseModel):
    file: str
    line: int
    column: int
    metric: Optional[str] = None
    text: str


class LintResponse(BaseModel):
    issues: List[IssueModel]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator(config=PromLinterConfig(root=Path.cwd()))


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing the linter."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install promlinter[service]`."
        )

    app = FastAPI(title="promlinter", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/lint", response_model=LintResponse)
    async def lint(
        payload: LintRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> LintResponse:
        def _run_lint() -> List[Issue]:
            return orchestrator.lint_source(payload.source, payload.filename, strict=payload.strict)

        loop = asyncio.get_running_loop()
        issues = await loop.run_in_executor(None, _run_lint)
        return LintResponse(issues=[IssueModel(**issue.as_dict()) for issue in issues])

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install promlinter[service]`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
