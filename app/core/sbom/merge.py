from typing import Dict, List
from pydantic import BaseModel
from app.core.errors import InvalidEcosystem
from app.core.sbom.ecosystems import EcosystemMapper
from app.schemas.sbom import Dependency, SbomOutput, WorkSpaceData, WorkSpaceStart


class PluginResult(BaseModel):
    plugin: str
    ecosystem: str
    sbom: SbomOutput


def merge_sbom_results(plugin_results: List[PluginResult]) -> SbomOutput:
    """
    Merge the outputs of several SBOM plugins into one SBOM.

    The first result provides the base structure. Every dependency version is
    tagged with the ecosystem and plugin it came from; when two plugins report
    the same name@version the later one wins.
    """
    if not plugin_results:
        raise ValueError("No plugin results to merge")

    merged = plugin_results[0].sbom.model_copy(deep=True)

    workspace_names: List[str] = []
    for result in plugin_results:
        for name in result.sbom.workspaces:
            if name not in workspace_names:
                workspace_names.append(name)

    for name in workspace_names:
        merged.workspaces[name] = _merge_workspace(name, plugin_results)

    merged.analysis_info.project_name = merged.analysis_info.project_name or "Multi-language Project"
    merged.analysis_info.package_manager = "multi-language"
    return merged


def _merge_workspace(workspace: str, plugin_results: List[PluginResult]) -> WorkSpaceData:
    dependencies: Dict[str, Dict[str, Dependency]] = {}
    start_dependencies = []
    start_dev_dependencies = []

    for result in plugin_results:
        data = result.sbom.workspaces.get(workspace)
        if data is None:
            continue

        for dep_name, versions in data.dependencies.items():
            merged_versions = dependencies.setdefault(dep_name, {})
            for version, dependency in versions.items():
                merged_versions[version] = dependency.model_copy(
                    update={"ecosystem": result.ecosystem, "source_plugin": result.plugin}
                )

        start_dependencies.extend(data.start.dependencies or [])
        start_dev_dependencies.extend(data.start.dev_dependencies or [])

    return WorkSpaceData(
        dependencies=dependencies,
        start=WorkSpaceStart(
            dependencies=start_dependencies or None,
            dev_dependencies=start_dev_dependencies or None,
        ),
    )


def filter_sbom_by_ecosystem(sbom: SbomOutput, ecosystem: str) -> SbomOutput:
    """Return a copy of sbom keeping only dependency versions from one ecosystem."""
    if not EcosystemMapper.is_valid_ecosystem(ecosystem):
        raise InvalidEcosystem(f"Invalid ecosystem filter: {ecosystem}")

    filtered = sbom.model_copy(deep=True)
    for name, data in filtered.workspaces.items():
        kept: Dict[str, Dict[str, Dependency]] = {}
        for dep_name, versions in data.dependencies.items():
            matching = {version: dep for version, dep in versions.items() if dep.ecosystem == ecosystem}
            if matching:
                kept[dep_name] = matching
        filtered.workspaces[name] = WorkSpaceData(dependencies=kept, start=data.start)

    return filtered
