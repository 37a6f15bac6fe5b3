from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.routers import sbom
from app.core.logging_config import configure_logging

configure_logging()

app = FastAPI(title="SBOM Graph Backend", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    sbom.router,
    prefix="/api/v1/org/{org_id}/projects/{project_id}/analysis",
    tags=["sbom"]
)


@app.get("/")
def read_root():
    return {"message": "SBOM Graph Backend API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
