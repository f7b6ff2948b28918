import logging
import uuid

import socketio
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chat import ChatCoordinator, create_socket_server
from chat import router as chat_router
from config import CORS_ALLOWED_ORIGINS, PORT, get_cors_origins
from db import db_manager, init_database
from mongodb_logging_handler import MongoDBHandler
from trips import router as trips_router

load_dotenv()

# Basic logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# MongoDB logging handler will be added during startup
mongo_handler = None

# Initialize FastAPI App
app = FastAPI(title="Travel Buddy")

# CORS Middleware Configuration
origins = get_cors_origins()
if CORS_ALLOWED_ORIGINS:
    logger.info("CORS configured with specific origins: %s", origins)
else:
    logger.warning(
        "CORS_ALLOWED_ORIGINS not set. Using development defaults: %s",
        origins,
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(trips_router)
app.include_router(chat_router)


@app.get("/", tags=["Meta"])
async def welcome():
    return {"message": "Welcome to Travel buddy server"}


# --- Realtime chat ---
sio = create_socket_server()
chat_coordinator = ChatCoordinator(sio)

# Single ASGI entry point: Socket.IO traffic on /socket.io, everything else
# falls through to FastAPI.
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)


# --- Application Lifecycle Events ---
@app.on_event("startup")
async def startup_event():
    """Initialize database and logging on application startup."""
    global mongo_handler

    try:
        await init_database()
        logger.info("Database initialized successfully (Beanie models, indexes).")

        mongo_handler = MongoDBHandler(logging.INFO)
        logging.getLogger().addHandler(mongo_handler)
        logger.info("MongoDB logging handler initialized and configured.")

        logger.info("Application startup completed successfully.")

    except Exception as e:
        logger.critical(
            "CRITICAL: Failed to initialize application during startup: %s",
            str(e),
            exc_info=True,
        )
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources when shutting down."""
    if mongo_handler is not None:
        logging.getLogger().removeHandler(mongo_handler)
        await mongo_handler.flush_pending()
    await db_manager.cleanup_connections()
    logger.info("Application shutdown completed successfully")


# --- Global Exception Handlers ---
@app.exception_handler(404)
async def not_found_handler(request: Request, exc: HTTPException):
    """Handle 404 Not Found errors."""
    logger.warning("404 Not Found: %s. Detail: %s", request.url, exc.detail)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Not found", "detail": exc.detail},
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Exception):
    """Handle 500 Internal Server Error errors."""
    error_id = str(uuid.uuid4())
    logger.error(
        "Internal Server Error (ID: %s): Request %s %s failed. Exception: %s",
        error_id,
        request.method,
        request.url,
        str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "error_id": error_id,
            "detail": str(exc),
        },
    )


# --- Main Execution Block ---
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:asgi_app",
        host="0.0.0.0",
        port=PORT,
        log_level="info",
        reload=True,
    )
