## Main application entry point

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roadmapai.agents.llm.client import MissingCredentials
from roadmapai.deps import BadRequest
from roadmapai.generation.routes import router as generation_router
from roadmapai.logging_config import configure_logging
from roadmapai.settings import settings
from roadmapai.study.routes import router as study_router

logger = configure_logging(settings.log_level)

app = FastAPI(title="Roadmap AI")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    max_age=86400,
)
logger.info(
    "Starting roadmap API (environment=%s, provider=%s, origins=%s)",
    settings.environment,
    settings.LLM_PROVIDER,
    settings.allowed_origins,
)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(BadRequest)
async def bad_request_handler(request: Request, exc: BadRequest):
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = first.get("msg", "invalid request body")
    return JSONResponse({"error": f"Invalid request: {where} {detail}".replace("  ", " ")}, status_code=400)


@app.exception_handler(MissingCredentials)
async def missing_credentials_handler(request: Request, exc: MissingCredentials):
    # Details stay in the server log
    return JSONResponse(
        {"error": "API configuration error - please contact administrator"},
        status_code=500,
    )


app.include_router(generation_router)
app.include_router(study_router)


def serve():
    """Run the API with uvicorn on the configured host and port."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    serve()
