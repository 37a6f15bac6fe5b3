import logging
from typing import List, Optional, Tuple
from pydantic import ValidationError
from app.core.config import settings
from app.core.errors import (
    EntityNotFound,
    GraphTooLarge,
    NotAuthorized,
    PluginFailed,
    PluginResultNotAvailable,
    UnknownWorkspace,
)
from app.core.sbom.builder import VIRTUAL_ROOT_ID, build_complete_graph, split_node_id
from app.core.sbom.ecosystems import EcosystemMapper
from app.core.sbom.graph import GraphIndex, GraphTraversalUtils
from app.core.sbom.merge import PluginResult, filter_sbom_by_ecosystem, merge_sbom_results
from app.core.sbom.stats import compute_workspace_stats
from app.core.storage import AnalysisStorage, ResultStorage
from app.schemas.sbom import DependencyStats, GraphDependency, NodeTraversalResult, SbomOutput, WorkspacesResponse
from app.schemas.user import AuthenticatedUser

logger = logging.getLogger(__name__)


class SbomService:
    """Serves dependency graph views of the SBOM produced by an analysis."""

    def __init__(self, analysis_storage: AnalysisStorage, result_storage: ResultStorage,
                 max_graph_nodes: Optional[int] = None):
        self.analysis_storage = analysis_storage
        self.result_storage = result_storage
        self.max_graph_nodes = settings.max_graph_nodes if max_graph_nodes is None else max_graph_nodes

    def check_access(self, org_id: str, project_id: str, analysis_id: str, user: AuthenticatedUser) -> None:
        if org_id not in user.organizations:
            raise NotAuthorized("User is not a member of this organization")

        if not self.analysis_storage.find_by_id(analysis_id):
            raise EntityNotFound("Analysis not found")

        if not self.analysis_storage.does_analysis_belong_to_project(analysis_id, project_id, org_id):
            raise NotAuthorized("Analysis does not belong to this project")

    def get_merged_sbom(self, analysis_id: str) -> SbomOutput:
        """
        Load the results of every SBOM plugin that ran for an analysis and
        merge them into one multi-language SBOM.

        Raises:
            PluginResultNotAvailable: No SBOM plugin stored a result
            PluginFailed: Every stored result failed or is unusable
        """
        results = self.result_storage.find_by_analysis_and_plugins(
            analysis_id, EcosystemMapper.get_supported_sbom_plugins()
        )
        if not results:
            raise PluginResultNotAvailable()

        plugin_results: List[PluginResult] = []
        for result in results:
            plugin = result.get("plugin")
            ecosystem_info = EcosystemMapper.get_ecosystem_info(plugin)
            if ecosystem_info is None:
                logger.warning("Unknown SBOM plugin %s, skipping", plugin)
                continue

            try:
                sbom = SbomOutput.model_validate(result.get("result") or {})
            except ValidationError as e:
                logger.warning("Malformed result from plugin %s, skipping: %s", plugin, e)
                continue

            if sbom.analysis_info.status == "failure":
                logger.warning("Plugin %s failed, skipping", plugin)
                continue

            plugin_results.append(PluginResult(plugin=plugin, ecosystem=ecosystem_info.ecosystem, sbom=sbom))

        if not plugin_results:
            raise PluginFailed()

        return merge_sbom_results(plugin_results)

    def get_workspaces(self, org_id: str, project_id: str, analysis_id: str,
                       user: AuthenticatedUser) -> WorkspacesResponse:
        self.check_access(org_id, project_id, analysis_id, user)
        sbom = self.get_merged_sbom(analysis_id)
        return WorkspacesResponse(
            workspaces=list(sbom.workspaces.keys()),
            package_manager=sbom.analysis_info.package_manager,
        )

    def get_stats(self, org_id: str, project_id: str, analysis_id: str, workspace: str,
                  user: AuthenticatedUser, ecosystem_filter: Optional[str] = None) -> DependencyStats:
        self.check_access(org_id, project_id, analysis_id, user)

        sbom = self.get_merged_sbom(analysis_id)
        if ecosystem_filter:
            sbom = filter_sbom_by_ecosystem(sbom, ecosystem_filter)

        if workspace not in sbom.workspaces:
            raise UnknownWorkspace()

        return compute_workspace_stats(sbom.workspaces[workspace])

    def get_dependency_graph(self, org_id: str, project_id: str, analysis_id: str, workspace: str,
                             dependency: str, user: AuthenticatedUser,
                             ecosystem_filter: Optional[str] = None) -> List[GraphDependency]:
        """
        Return the nodes that explain why a dependency is present: the
        dependency itself, every node on a path from the virtual root down to
        it, and the virtual root.
        """
        graph, index, target = self._load_graph(org_id, project_id, analysis_id, workspace, dependency, user, ecosystem_filter)
        virtual_root = next((node for node in graph if node.id == VIRTUAL_ROOT_ID), None)

        # Anchor the target to the virtual root so the view always reaches it
        if virtual_root is not None and VIRTUAL_ROOT_ID not in (target.parentIds or []):
            target.parentIds = (target.parentIds or []) + [VIRTUAL_ROOT_ID]
            if target.id not in virtual_root.childrenIds:
                virtual_root.childrenIds.append(target.id)

        path_nodes = GraphTraversalUtils.find_minimal_paths_to_target(target.id, graph, index)

        if virtual_root is not None and all(node.id != VIRTUAL_ROOT_ID for node in path_nodes):
            if any(VIRTUAL_ROOT_ID in (node.parentIds or []) for node in path_nodes):
                path_nodes.append(virtual_root)

        logger.debug("Minimal paths to %s contain %d of %d nodes", target.id, len(path_nodes), len(graph))
        return path_nodes

    def get_dependency_relations(self, org_id: str, project_id: str, analysis_id: str, workspace: str,
                                 dependency: str, user: AuthenticatedUser, direct: bool = False,
                                 ecosystem_filter: Optional[str] = None) -> NodeTraversalResult:
        """Return the dependents and dependencies of one package, one hop or transitively."""
        graph, index, target = self._load_graph(org_id, project_id, analysis_id, workspace, dependency, user, ecosystem_filter)
        if direct:
            return GraphTraversalUtils.find_direct_parents_and_children(target.id, graph)
        return GraphTraversalUtils.find_all_parents_and_children(target.id, graph, index)

    def get_dependency_paths(self, org_id: str, project_id: str, analysis_id: str, workspace: str,
                             dependency: str, user: AuthenticatedUser,
                             ecosystem_filter: Optional[str] = None) -> List[GraphDependency]:
        """Return every node connected to a package through its ancestors or descendants."""
        graph, index, target = self._load_graph(org_id, project_id, analysis_id, workspace, dependency, user, ecosystem_filter)
        path_nodes = GraphTraversalUtils.find_paths_containing(target.id, graph, index)
        logger.debug("Paths containing %s span %d of %d nodes", target.id, len(path_nodes), len(graph))
        return path_nodes

    def _load_graph(self, org_id: str, project_id: str, analysis_id: str, workspace: str, dependency: str,
                    user: AuthenticatedUser,
                    ecosystem_filter: Optional[str]) -> Tuple[List[GraphDependency], GraphIndex, GraphDependency]:
        self.check_access(org_id, project_id, analysis_id, user)

        sbom = self.get_merged_sbom(analysis_id)
        if ecosystem_filter:
            sbom = filter_sbom_by_ecosystem(sbom, ecosystem_filter)

        if workspace not in sbom.workspaces:
            raise UnknownWorkspace()

        if not dependency or not dependency.strip():
            raise EntityNotFound("Dependency parameter is required")

        name, version = split_node_id(dependency)
        if name is None or version is None:
            raise EntityNotFound(f"Invalid dependency {dependency}, expected name@version")

        workspace_data = sbom.workspaces[workspace]
        if not workspace_data.dependencies:
            raise EntityNotFound("No dependencies found in this workspace")

        graph = build_complete_graph(workspace_data)
        if len(graph) > self.max_graph_nodes:
            raise GraphTooLarge(
                f"Dependency graph has {len(graph)} nodes, the limit is {self.max_graph_nodes}"
            )

        index = GraphIndex(graph)
        target = index.get(dependency)
        if target is None:
            raise EntityNotFound(f"Dependency {dependency} not found in workspace {workspace}")

        return graph, index, target
