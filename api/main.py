from dotenv import load_dotenv
load_dotenv()

import logfire

# Spans and logs stay local unless LOGFIRE_TOKEN is set
logfire.configure(service_name="users-api", send_to_logfire="if-token-present")

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from routers import users
from database import init_db
from repositories import USER_REPOSITORY
from contextlib import asynccontextmanager

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for startup and shutdown
    """
    # Startup
    if USER_REPOSITORY == "sql":
        init_db()
    logfire.info("Users API started with {backend} repository", backend=USER_REPOSITORY)

    yield

    # Shutdown
    logfire.info("Shutting down Users API...")

app = FastAPI(
    title="Users API",
    description="CRUD API over users with JSON and XML representations",
    version="1.0.0",
    lifespan=lifespan
)

logfire.instrument_fastapi(app)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def malformed_request_handler(request: Request, exc: RequestValidationError):
    """Unparseable ids and query values are malformed input, not validation failures"""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

# Include Routers
app.include_router(users.router, prefix="/api/users", tags=["users"])

@app.get("/")
async def root():
    return {
        "message": "Users API",
        "status": "running"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
    }
