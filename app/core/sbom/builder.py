from typing import Dict, List, Optional, Set, Tuple
from app.schemas.sbom import Dependency, GraphDependency, WorkSpaceData

# Parent of every node that has no other parent, so the graph has one root
VIRTUAL_ROOT_ID = "__VIRTUAL_ROOT__"


def node_id(name: str, version: str) -> str:
    return f"{name}@{version}"


def split_node_id(dependency_id: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split "name@version" into its parts. The last "@" is the separator so
    scoped npm packages such as "@types/node@20.1.0" are handled.
    """
    if not dependency_id or "@" not in dependency_id.lstrip("@"):
        return None, None
    name, _, version = dependency_id.rpartition("@")
    return (name or None), (version or None)


def build_complete_graph(workspace: WorkSpaceData) -> List[GraphDependency]:
    """
    Build the dependency graph of a workspace.

    Each name@version becomes a node whose childrenIds come from its resolved
    Dependencies and whose parentIds are every version that resolves to it.
    Start dependencies and orphans, which have no parent, hang off a virtual
    root node appended at the end of the list.
    """
    virtual_root = GraphDependency(id=VIRTUAL_ROOT_ID, parentIds=[], childrenIds=[], prod=False, dev=False)
    parents_index = _index_parents(workspace.dependencies)

    graph: List[GraphDependency] = []
    seen: Set[str] = set()

    for dep_name, versions in workspace.dependencies.items():
        if not dep_name or not versions:
            continue
        for version, dependency in versions.items():
            if not version or dependency is None:
                continue
            current_id = node_id(dep_name, version)
            if current_id in seen:
                continue

            node = GraphDependency(
                id=current_id,
                parentIds=list(parents_index.get(current_id, [])),
                childrenIds=[
                    node_id(child_name, child_version)
                    for child_name, child_version in (dependency.dependencies or {}).items()
                    if child_name and child_version
                ],
                prod=bool(dependency.prod),
                dev=bool(dependency.dev),
            )
            if not node.parentIds:
                node.parentIds = [VIRTUAL_ROOT_ID]
                virtual_root.childrenIds.append(current_id)

            graph.append(node)
            seen.add(current_id)

    graph.append(virtual_root)
    return graph


def _index_parents(dependencies: Dict[str, Dict[str, Dependency]]) -> Dict[str, List[str]]:
    # One pass instead of rescanning every dependency for each node
    parents: Dict[str, List[str]] = {}
    for dep_name, versions in dependencies.items():
        if not dep_name or not versions:
            continue
        for version, dependency in versions.items():
            if not version or dependency is None:
                continue
            for child_name, child_version in (dependency.dependencies or {}).items():
                if child_name and child_version:
                    parents.setdefault(node_id(child_name, child_version), []).append(node_id(dep_name, version))
    return parents
