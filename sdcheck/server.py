"""
sdcheck Server — HTTP interface to the SDC checker
===================================================
FastAPI application exposing the checker for editors and CI bots.

Launch:
    python -m sdcheck serve --port 8765
    sdcheck serve

Endpoints:
    POST /api/check                 → Check one file's content
    GET  /api/commands              → Known command names
    GET  /api/commands/{name}       → One command's argument schema
    GET  /api/health                → Liveness and version
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .checker import Checker, registry_for_options
from .config import CheckOptions

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  App Setup
# ─────────────────────────────────────────────────────────────

app = FastAPI(title="sdcheck", version=__version__)

# Base options, applied under every request's own overrides
_state = {
    "options": CheckOptions(),
}


# ─────────────────────────────────────────────────────────────
#  Request Models
# ─────────────────────────────────────────────────────────────

class CheckRequest(BaseModel):
    file: str = "<input>"
    content: str
    strict: Optional[bool] = None
    suppress: list[str] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────
#  Routes
# ─────────────────────────────────────────────────────────────

@app.post("/api/check")
async def api_check(req: CheckRequest):
    """Check SDC content and return errors and warnings."""
    try:
        options = _state["options"].with_overrides(strict=req.strict, suppress=req.suppress)
        checker = Checker(options=options)
    except (OSError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = checker.check(req.file, req.content)
    log.debug("Checked %s via HTTP: passed=%s", req.file, result.passed)
    return JSONResponse(result.to_dict())


@app.get("/api/commands")
async def api_commands():
    """Return every known command name."""
    registry = registry_for_options(_state["options"])
    return JSONResponse({"commands": registry.names()})


@app.get("/api/commands/{name}")
async def api_command(name: str):
    """Return one command's argument schema."""
    spec = registry_for_options(_state["options"]).get(name)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Unknown command '{name}'")
    return JSONResponse(spec.to_dict())


@app.get("/api/health")
async def api_health():
    return JSONResponse({"status": "ok", "version": __version__})


def run_server(port: int = 8765, host: str = "127.0.0.1",
               options: Optional[CheckOptions] = None):
    """Launch the checking service."""
    import uvicorn

    if options is not None:
        _state["options"] = options

    print(f"\n─── sdcheck server ───")
    print(f"  http://{host}:{port}")
    print(f"  Press Ctrl+C to stop\n")

    uvicorn.run(app, host=host, port=port, log_level="warning")
