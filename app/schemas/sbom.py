from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


# Persisted plugin output
class Dependency(BaseModel):
    # Plugins disagree on casing ("Dev" vs "dev"), both are accepted
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    key: Optional[str] = Field(None, alias="Key")
    requires: Optional[Dict[str, str]] = Field(None, alias="Requires")
    dependencies: Optional[Dict[str, str]] = Field(None, alias="Dependencies", description="Child package name to resolved version")
    optional: Optional[bool] = Field(None, alias="Optional")
    bundled: Optional[bool] = Field(None, alias="Bundled")
    dev: Optional[bool] = Field(None, alias="Dev")
    prod: Optional[bool] = Field(None, alias="Prod")
    direct: Optional[bool] = Field(None, alias="Direct")
    transitive: Optional[bool] = Field(None, alias="Transitive")
    licenses: Optional[List[str]] = Field(None, alias="Licenses")
    ecosystem: Optional[str] = None
    source_plugin: Optional[str] = None


class WorkSpaceDependency(BaseModel):
    name: Optional[str] = None
    version: Optional[str] = None
    constraint: Optional[str] = None


class WorkSpaceStart(BaseModel):
    dependencies: Optional[List[WorkSpaceDependency]] = None
    dev_dependencies: Optional[List[WorkSpaceDependency]] = None


class WorkSpaceData(BaseModel):
    dependencies: Dict[str, Dict[str, Dependency]] = Field(default_factory=dict)
    start: WorkSpaceStart = Field(default_factory=WorkSpaceStart)


class AnalysisInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    status: str = "success"
    project_name: str = ""
    package_manager: str = ""
    public_errors: List[Any] = Field(default_factory=list)
    private_errors: List[Any] = Field(default_factory=list)
    analysis_start_time: Optional[str] = None
    analysis_end_time: Optional[str] = None


class SbomOutput(BaseModel):
    workspaces: Dict[str, WorkSpaceData] = Field(default_factory=dict)
    analysis_info: AnalysisInfo = Field(default_factory=AnalysisInfo)


# Dependency graph
class GraphDependency(BaseModel):
    id: str = Field(..., description="Package and version, e.g. lodash@4.17.21")
    parentIds: Optional[List[str]] = Field(None, description="Ids of packages that directly depend on this one")
    childrenIds: Optional[List[str]] = Field(None, description="Ids of packages this one directly depends on")
    prod: Optional[bool] = None
    dev: Optional[bool] = None


class NodeTraversalResult(BaseModel):
    parents: List[GraphDependency] = Field(default_factory=list)
    children: List[GraphDependency] = Field(default_factory=list)
    node: Optional[GraphDependency] = None


class DependencyStats(BaseModel):
    number_of_dependencies: int = Field(0, description="Versions flagged dev or prod")
    number_of_direct_dependencies: int = 0
    number_of_transitive_dependencies: int = 0
    number_of_both_direct_transitive_dependencies: int = 0
    number_of_bundled_dependencies: int = 0
    number_of_optional_dependencies: int = 0
    number_of_unlicensed_dependencies: int = 0
    number_of_dev_dependencies: int = Field(0, description="Dev dependencies declared by the workspace")
    number_of_non_dev_dependencies: int = Field(0, description="Dependencies declared by the workspace")


# API responses
class WorkspacesResponse(BaseModel):
    workspaces: List[str]
    package_manager: str


class WorkspacesDataResponse(BaseModel):
    data: WorkspacesResponse


class GraphDataResponse(BaseModel):
    data: List[GraphDependency]


class TraversalDataResponse(BaseModel):
    data: NodeTraversalResult


class StatsDataResponse(BaseModel):
    data: DependencyStats
