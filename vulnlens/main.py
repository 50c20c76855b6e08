"""
VulnLens FastAPI Application.

Source vulnerability and sensitive-logging scanner:
  POST /analyze                 → issues from every detector
  POST /suggestions             → cached remediation per issue
  POST /suggestions/{id}/apply  → write a suggestion back to its line
  GET  /health                  → status + embedding backend state
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vulnlens.api.routes.analyze import router as analyze_router
from vulnlens.api.routes.audit import router as audit_router
from vulnlens.api.routes.health import router as health_router
from vulnlens.api.routes.rules import router as rules_router
from vulnlens.api.routes.suggestions import router as suggestions_router
from vulnlens.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("vulnlens")

app = FastAPI(
    title="VulnLens",
    description="Source vulnerability detection with cached remediation suggestions",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    # Browsers reject credentialed requests to a wildcard origin
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(rules_router)
app.include_router(analyze_router)
app.include_router(suggestions_router)
app.include_router(audit_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    body = await request.body()
    logger.error(f"Validation Error. Raw body: {body.decode('utf-8')[:500]} | Errors: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors(), "body": body.decode("utf-8")[:100]},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("vulnlens.main:app", host=settings.host, port=settings.port)
