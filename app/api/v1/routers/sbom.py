from typing import Optional
from fastapi import APIRouter, Depends, Query
from app.schemas.sbom import GraphDataResponse, StatsDataResponse, TraversalDataResponse, WorkspacesDataResponse
from app.schemas.user import AuthenticatedUser
from app.core.authentication.auth_middleware import get_current_user
from app.core.errors import SbomError, to_http_exception
from app.core.sbom.service import SbomService
from app.core.storage import AnalysisStorage, ResultStorage, get_analysis_storage, get_result_storage

router = APIRouter()


def get_sbom_service(
    analysis_storage: AnalysisStorage = Depends(get_analysis_storage),
    result_storage: ResultStorage = Depends(get_result_storage)
) -> SbomService:
    return SbomService(analysis_storage, result_storage)


@router.get("/{analysis_id}/sbom/workspaces", response_model=WorkspacesDataResponse)
async def get_workspaces(
    org_id: str,
    project_id: str,
    analysis_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SbomService = Depends(get_sbom_service)
):
    try:
        return {"data": service.get_workspaces(org_id, project_id, analysis_id, current_user)}
    except SbomError as e:
        raise to_http_exception(e)


@router.get("/{analysis_id}/sbom/stats", response_model=StatsDataResponse)
async def get_stats(
    org_id: str,
    project_id: str,
    analysis_id: str,
    workspace: str = Query(..., description="Workspace to count dependencies of"),
    ecosystem_filter: Optional[str] = Query(None, description="Only keep dependencies from this ecosystem"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SbomService = Depends(get_sbom_service)
):
    try:
        return {"data": service.get_stats(org_id, project_id, analysis_id, workspace, current_user, ecosystem_filter)}
    except SbomError as e:
        raise to_http_exception(e)


@router.get("/{analysis_id}/sbom/dependency/graph", response_model=GraphDataResponse)
async def get_dependency_graph(
    org_id: str,
    project_id: str,
    analysis_id: str,
    workspace: str = Query(..., description="Workspace the dependency belongs to"),
    dependency: str = Query(..., description="Dependency as name@version"),
    ecosystem_filter: Optional[str] = Query(None, description="Only keep dependencies from this ecosystem"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SbomService = Depends(get_sbom_service)
):
    try:
        nodes = service.get_dependency_graph(
            org_id, project_id, analysis_id, workspace, dependency, current_user,
            ecosystem_filter=ecosystem_filter
        )
        return {"data": nodes}
    except SbomError as e:
        raise to_http_exception(e)


@router.get("/{analysis_id}/sbom/dependency/relations", response_model=TraversalDataResponse)
async def get_dependency_relations(
    org_id: str,
    project_id: str,
    analysis_id: str,
    workspace: str = Query(..., description="Workspace the dependency belongs to"),
    dependency: str = Query(..., description="Dependency as name@version"),
    direct: bool = Query(False, description="Only return direct dependents and dependencies"),
    ecosystem_filter: Optional[str] = Query(None, description="Only keep dependencies from this ecosystem"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SbomService = Depends(get_sbom_service)
):
    try:
        result = service.get_dependency_relations(
            org_id, project_id, analysis_id, workspace, dependency, current_user,
            direct=direct, ecosystem_filter=ecosystem_filter
        )
        return {"data": result}
    except SbomError as e:
        raise to_http_exception(e)


@router.get("/{analysis_id}/sbom/dependency/paths", response_model=GraphDataResponse)
async def get_dependency_paths(
    org_id: str,
    project_id: str,
    analysis_id: str,
    workspace: str = Query(..., description="Workspace the dependency belongs to"),
    dependency: str = Query(..., description="Dependency as name@version"),
    ecosystem_filter: Optional[str] = Query(None, description="Only keep dependencies from this ecosystem"),
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: SbomService = Depends(get_sbom_service)
):
    try:
        nodes = service.get_dependency_paths(
            org_id, project_id, analysis_id, workspace, dependency, current_user,
            ecosystem_filter=ecosystem_filter
        )
        return {"data": nodes}
    except SbomError as e:
        raise to_http_exception(e)
