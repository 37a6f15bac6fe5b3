from typing import Dict, Iterator, List, Optional, Sequence, Set
from app.schemas.sbom import GraphDependency, NodeTraversalResult


class GraphIndex:
    """
    Lookup structures over one snapshot of a dependency graph.

    The stored adjacency is parent-pointing, so descendants are found through
    a child map built by inverting every node's parentIds. An index can be
    built once and reused for several queries against the same snapshot.
    """

    def __init__(self, graph: Sequence[GraphDependency]):
        self.nodes: Dict[str, GraphDependency] = {}
        self.children: Dict[str, List[GraphDependency]] = {}

        for node in graph:
            self.nodes[node.id] = node
            for parent_id in node.parentIds or []:
                self.children.setdefault(parent_id, []).append(node)

    def get(self, node_id: str) -> Optional[GraphDependency]:
        return self.nodes.get(node_id)

    def parents_of(self, node: GraphDependency) -> List[GraphDependency]:
        # Dangling ids have no node and are skipped
        return [self.nodes[parent_id] for parent_id in node.parentIds or [] if parent_id in self.nodes]

    def children_of(self, node: GraphDependency) -> List[GraphDependency]:
        return self.children.get(node.id, [])

    def ancestors(self, node: GraphDependency) -> List[GraphDependency]:
        """Full ancestor closure of node, in depth-first pre-order."""
        return _closure(node, self.parents_of)

    def descendants(self, node: GraphDependency) -> List[GraphDependency]:
        """Full descendant closure of node, in depth-first pre-order."""
        return _closure(node, self.children_of)


def _closure(start: GraphDependency, neighbours) -> List[GraphDependency]:
    # Iterative DFS producing the same order as the recursive walk. The start
    # node is pre-marked so a cycle through it does not report it as its own
    # ancestor or descendant.
    visited: Set[str] = {start.id}
    found: List[GraphDependency] = []
    stack: List[Iterator[GraphDependency]] = [iter(neighbours(start))]

    while stack:
        current = next(stack[-1], None)
        if current is None:
            stack.pop()
            continue
        if current.id in visited:
            continue
        visited.add(current.id)
        found.append(current)
        stack.append(iter(neighbours(current)))

    return found


class GraphTraversalUtils:
    """
    Ancestor/descendant queries over an in-memory dependency graph.

    All methods are read-only and tolerate cycles, missing adjacency lists
    and ids that reference nodes absent from the graph. An unknown target
    never raises: callers check result.node (or an empty list) instead.

    The closure queries accept an optional prebuilt GraphIndex so that several
    queries against one snapshot share a single indexing pass.
    """

    @classmethod
    def find_all_parents_and_children(cls, node_id: str, graph: Sequence[GraphDependency],
                                      index: Optional[GraphIndex] = None) -> NodeTraversalResult:
        """
        Find every ancestor and descendant of a node.

        Args:
            node_id: Id of the node to start from
            graph: All nodes of the graph
            index: Prebuilt index over graph, built on the fly when omitted

        Returns:
            NodeTraversalResult with the full closures, each reachable node
            appearing exactly once
        """
        index = index or GraphIndex(graph)
        target = index.get(node_id)
        if target is None:
            return NodeTraversalResult()

        return NodeTraversalResult(
            node=target,
            parents=index.ancestors(target),
            children=index.descendants(target),
        )

    @classmethod
    def find_direct_parents_and_children(cls, node_id: str, graph: Sequence[GraphDependency]) -> NodeTraversalResult:
        """
        Find only the nodes one hop away from node_id. A self-loop is not
        reported, matching the full closure queries.
        """
        target = next((node for node in graph if node.id == node_id), None)
        if target is None:
            return NodeTraversalResult()

        by_id = {node.id: node for node in graph}
        parents = [
            by_id[parent_id] for parent_id in target.parentIds or []
            if parent_id in by_id and parent_id != node_id
        ]
        children = [node for node in graph if node.id != node_id and node_id in (node.parentIds or [])]

        return NodeTraversalResult(node=target, parents=parents, children=children)

    @classmethod
    def find_paths_containing(cls, node_id: str, graph: Sequence[GraphDependency],
                              index: Optional[GraphIndex] = None) -> List[GraphDependency]:
        """
        Find every node lying on a path through node_id: the node itself,
        all of its ancestors and all of its descendants.
        """
        index = index or GraphIndex(graph)
        target = index.get(node_id)
        if target is None:
            return []

        # In a cycle a node can be both ancestor and descendant
        nodes = {target.id: target}
        for node in index.ancestors(target) + index.descendants(target):
            nodes.setdefault(node.id, node)
        return list(nodes.values())

    @classmethod
    def find_minimal_paths_to_target(cls, node_id: str, graph: Sequence[GraphDependency],
                                     index: Optional[GraphIndex] = None) -> List[GraphDependency]:
        """
        Find the nodes needed to explain why node_id is present: the node
        itself and every node on some root-to-node path. Descendants are
        not included.
        """
        index = index or GraphIndex(graph)
        target = index.get(node_id)
        if target is None:
            return []

        return [target] + index.ancestors(target)
