"""FastAPI app exposing code analysis, project scanning and dependency APIs.

Service objects are created on first use from environment settings; tests
replace them through ``app.dependency_overrides[get_ingestion]``.
"""

import logging
from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from api.config import Settings
from api.ingestion import ProjectIngestion
from api.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    FileDependenciesResponse,
    HealthResponse,
    ProjectGraphResponse,
    ScanRequest,
    ScanResponse,
    ScanStats,
)
from code_analysis.file_scanner import FileScanner
from code_analysis.utils.fs_utils import is_directory
from code_analysis.utils.path_utils import resolve_path
from database.manager import DatabaseManager
from database.store import SqlCodeIndexStore

settings = Settings.from_env()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()  # Output to console/terminal
    ],
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Code Intelligence API",
    description="Project scanning, structural code analysis and dependency lookups",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

_ingestion: ProjectIngestion | None = None


def get_ingestion() -> ProjectIngestion:
    """Shared ingestion service backed by the configured SQLite database."""
    global _ingestion
    if _ingestion is None:
        db = DatabaseManager(db_path=settings.db_path, expire_on_commit=False)
        scanner = FileScanner(
            max_file_size=settings.max_file_size, max_depth=settings.max_depth
        )
        _ingestion = ProjectIngestion(SqlCodeIndexStore(db), scanner=scanner)
    return _ingestion


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/code/analyze", response_model=AnalyzeResponse)
async def analyze_code(
    payload: AnalyzeRequest,
    ingestion: ProjectIngestion = Depends(get_ingestion),
) -> AnalyzeResponse:
    """Parse one source text and return its entities, imports and exports.

    Nothing is persisted.
    """
    if not payload.file_path or payload.code is None:
        raise HTTPException(status_code=400, detail="Missing filePath or code")

    options = payload.options.to_parser_options() if payload.options else None
    parsed, stats = ingestion.analyze(payload.file_path, payload.code, options)

    return AnalyzeResponse(
        success=True,
        result=parsed.to_dict(),
        language=parsed.language,
        stats=stats,
    )


@app.post("/projects/scan", response_model=ScanResponse)
async def scan_project(
    payload: ScanRequest,
    ingestion: ProjectIngestion = Depends(get_ingestion),
) -> ScanResponse:
    """Scan a project directory, sync the file registry and re-index changes."""
    if not payload.project_id or not payload.project_path:
        raise HTTPException(status_code=400, detail="Missing projectId or projectPath")

    project_path = resolve_path(payload.project_path)
    if not await is_directory(project_path):
        logger.warning(f"Scan requested for missing directory {project_path}")
        raise HTTPException(
            status_code=404, detail=f"Project directory not found: {project_path}"
        )

    report = await ingestion.scan_project(
        payload.project_id,
        project_path,
        include_content=payload.include_content,
        max_file_size=payload.max_file_size,
    )

    return ScanResponse(
        success=True,
        stats=ScanStats.model_validate(report.stats()),
        files=[f.to_dict() for f in report.files],
    )


@app.get(
    "/code/dependencies",
    response_model=FileDependenciesResponse | ProjectGraphResponse,
)
async def get_dependencies(
    file_id: str | None = Query(default=None, alias="fileId"),
    project_id: str | None = Query(default=None, alias="projectId"),
    ingestion: ProjectIngestion = Depends(get_ingestion),
) -> FileDependenciesResponse | ProjectGraphResponse:
    """Import sources of one file, or the import/export graph of a project."""
    if file_id:
        deps = await ingestion.file_dependencies(file_id)
        return FileDependenciesResponse(
            success=True,
            dependencies=deps.dependencies,
            dependents=deps.dependents,
        )

    if project_id:
        graph = await ingestion.project_graph(project_id)
        return ProjectGraphResponse(success=True, graph=graph.to_dict())

    raise HTTPException(status_code=400, detail="Missing fileId or projectId")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
