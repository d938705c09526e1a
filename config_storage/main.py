"""FastAPI application for the configuration storage service."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Depends
from fastapi.responses import JSONResponse

# Note: .env is loaded in config_storage.config before config is initialized
from config_storage.auth import verify_api_key
from config_storage.config import config
from config_storage.dbi import DatabaseInterface
from config_storage.exceptions import ConfigStorageDisabledException, StatementExecutionError
from config_storage.models import ConfigStorageResponse, CreateTablesResponse, DropResponse, HealthResponse
from config_storage.operations import DatabaseOperations
from config_storage.relation import Relation
from config_storage.relation_cleanup import RelationCleanup
from config_storage.relation_parameters import RelationParameters

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.PMA_LOG_LEVEL, logging.INFO),
    format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# Global service components
relation: Optional[Relation] = None
operations: Optional[DatabaseOperations] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global relation, operations

    # Startup
    logger.info("Starting configuration storage service...")

    # Validate configuration
    try:
        config.validate()
        logger.info("Configuration validated")
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        sys.exit(1)

    from config_storage.db.session import get_control_engine, get_user_engine

    dbi = DatabaseInterface(get_user_engine(), get_control_engine())
    relation = Relation(dbi)
    operations = DatabaseOperations(dbi, RelationCleanup(dbi, relation))

    parameters = relation.get_relation_parameters()
    logger.info(f"Configuration storage features: {parameters.feature_map()}")

    yield

    # Shutdown
    logger.info("Shutting down configuration storage service...")
    relation = None
    operations = None


# Create FastAPI app
app = FastAPI(
    title="Configuration Storage Service",
    description="Drops databases, tables, columns and users and keeps configuration storage consistent",
    version="1.0.0",
    lifespan=lifespan
)


def _storage_response(parameters: RelationParameters) -> ConfigStorageResponse:
    return ConfigStorageResponse(
        db=parameters.db,
        enabled=parameters.is_enabled,
        all_features=parameters.has_all_features(),
        features=parameters.feature_map(),
    )


def _require_operations() -> DatabaseOperations:
    if operations is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return operations


def _require_relation() -> Relation:
    if relation is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return relation


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok")


@app.get("/v1/config-storage", response_model=ConfigStorageResponse)
def get_config_storage(_: dict = Depends(verify_api_key)):
    """Get the resolved configuration storage features."""
    return _storage_response(_require_relation().get_relation_parameters())


@app.post("/v1/config-storage/tables", response_model=CreateTablesResponse)
def create_config_storage_tables(_: dict = Depends(verify_api_key)):
    """Create configuration storage tables missing from the storage database."""
    current = _require_relation()
    created = current.create_missing_tables()
    return CreateTablesResponse(
        created=created,
        storage=_storage_response(current.get_relation_parameters()),
    )


@app.delete("/v1/databases/{db}", response_model=DropResponse)
def drop_database(db: str, _: dict = Depends(verify_api_key)):
    """Drop a database and its configuration storage metadata."""
    _require_operations().drop_database(db)
    return DropResponse(object_type="database", name=db)


@app.delete("/v1/databases/{db}/tables/{table}", response_model=DropResponse)
def drop_table(db: str, table: str, _: dict = Depends(verify_api_key)):
    """Drop a table and its configuration storage metadata."""
    _require_operations().drop_table(db, table)
    return DropResponse(object_type="table", name=f"{db}.{table}")


@app.delete("/v1/databases/{db}/tables/{table}/columns/{column}", response_model=DropResponse)
def drop_column(db: str, table: str, column: str, _: dict = Depends(verify_api_key)):
    """Drop a column and its configuration storage metadata."""
    _require_operations().drop_column(db, table, column)
    return DropResponse(object_type="column", name=f"{db}.{table}.{column}")


@app.delete("/v1/users/{username}", response_model=DropResponse)
def drop_user(username: str, host: str = "%", _: dict = Depends(verify_api_key)):
    """Drop a user account and its configuration storage metadata."""
    _require_operations().drop_user(username, host)
    return DropResponse(object_type="user", name=f"{username}@{host}")


@app.exception_handler(StatementExecutionError)
async def statement_error_handler(request: Request, exc: StatementExecutionError):
    """Statements rejected by the database server."""
    logger.warning(f"Statement failed [{request.method} {request.url.path}]: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc)}
    )


@app.exception_handler(ConfigStorageDisabledException)
async def storage_disabled_handler(request: Request, exc: ConfigStorageDisabledException):
    """Configuration storage is required but not configured."""
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    uvicorn.run(
        "config_storage.main:app",
        host="0.0.0.0",
        port=config.PMA_PORT,
        log_level=config.PMA_LOG_LEVEL.lower()
    )
