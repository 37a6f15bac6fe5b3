from app.schemas.sbom import DependencyStats, WorkSpaceData


def compute_workspace_stats(workspace: WorkSpaceData) -> DependencyStats:
    """
    Count the dependencies of a workspace by kind.

    Start dependency counts come from the workspace manifest. Every other
    counter only considers versions flagged dev or prod, since versions with
    neither flag are not installed. A version flagged both direct and
    transitive is counted once, under both_direct_transitive.
    """
    stats = DependencyStats(
        number_of_non_dev_dependencies=len(workspace.start.dependencies or []),
        number_of_dev_dependencies=len(workspace.start.dev_dependencies or []),
    )

    for versions in workspace.dependencies.values():
        for dependency in versions.values():
            if not dependency.dev and not dependency.prod:
                continue

            if dependency.bundled:
                stats.number_of_bundled_dependencies += 1
            if dependency.optional:
                stats.number_of_optional_dependencies += 1

            if dependency.direct and dependency.transitive:
                stats.number_of_both_direct_transitive_dependencies += 1
            elif dependency.transitive:
                stats.number_of_transitive_dependencies += 1
            elif dependency.direct:
                stats.number_of_direct_dependencies += 1

            if not dependency.licenses:
                stats.number_of_unlicensed_dependencies += 1

            stats.number_of_dependencies += 1

    return stats
