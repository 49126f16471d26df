"""FastAPI application entrypoint for codecontext service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError
from ..orchestrator import Orchestrator, SyncOutcome
from ..stores import IndexStoreError


class BuildRequest(BaseModel):
    path: str
    force: bool = False


class StatsPayload(BaseModel):
    file_count: int
    total_bytes: int
    total_lines: int


class BuildResponse(BaseModel):
    mode: str
    stats: StatsPayload
    files: int
    symbols: int
    reextracted: int
    removed: int


class SymbolPayload(BaseModel):
    kind: str
    name: str
    file: str
    inputs: List[str]
    input_types: List[str]
    output: str
    internal_calls: List[str]
    external_calls: List[str]
    called_by: List[str]
    doc: Optional[str] = None
    line_start: int
    line_end: int


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing index builds and symbol lookup."""

    app = FastAPI(title="codecontext", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    async def _run(orchestrator: Orchestrator, path: str, force: bool) -> SyncOutcome:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: orchestrator.run(path, force=force))

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/build", response_model=BuildResponse)
    async def build(
        payload: BuildRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> BuildResponse:
        outcome = await _run(orchestrator, payload.path, payload.force)
        stats = outcome.index.stats
        return BuildResponse(
            mode=outcome.mode,
            stats=StatsPayload(
                file_count=stats.file_count,
                total_bytes=stats.total_bytes,
                total_lines=stats.total_lines,
            ),
            files=len(outcome.index.files),
            symbols=len(outcome.index.symbols),
            reextracted=len(outcome.delta.reextract),
            removed=len(outcome.delta.removed),
        )

    @app.get("/symbols/{name}", response_model=List[SymbolPayload])
    async def symbols(
        name: str,
        path: str = ".",
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> List[SymbolPayload]:
        outcome = await _run(orchestrator, path, False)
        matches = outcome.index.symbols_named(name)
        if not matches:
            raise HTTPException(status_code=404, detail=f"Unknown symbol: {name}")
        return [
            SymbolPayload(
                kind=symbol.kind,
                name=symbol.name,
                file=symbol.file,
                inputs=symbol.inputs,
                input_types=symbol.input_types,
                output=symbol.output,
                internal_calls=symbol.internal_calls,
                external_calls=symbol.external_calls,
                called_by=symbol.called_by,
                doc=symbol.doc,
                line_start=symbol.line_start,
                line_end=symbol.line_end,
            )
            for symbol in matches
        ]

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(IndexStoreError)
    async def store_error_handler(_: Any, exc: IndexStoreError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
