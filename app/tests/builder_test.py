import pytest
from app.core.sbom.builder import VIRTUAL_ROOT_ID, build_complete_graph, split_node_id
from app.schemas.sbom import WorkSpaceData


@pytest.fixture
def workspace():
    return WorkSpaceData.model_validate({
        "dependencies": {
            "express": {
                "4.18.2": {
                    "Key": "express@4.18.2",
                    "Dependencies": {"body-parser": "1.20.1", "debug": "2.6.9"},
                    "Prod": True,
                    "Direct": True
                }
            },
            "body-parser": {
                "1.20.1": {"Dependencies": {"debug": "2.6.9"}, "Prod": True, "Transitive": True}
            },
            "debug": {
                "2.6.9": {"Dependencies": {"ms": "2.0.0"}, "Prod": True, "Transitive": True}
            },
            "ms": {
                "2.0.0": {"Prod": True, "Transitive": True}
            },
            "jest": {
                "29.0.0": {"Dev": True, "Direct": True}
            }
        },
        "start": {
            "dependencies": [{"name": "express", "version": "4.18.2"}],
            "dev_dependencies": [{"name": "jest", "version": "29.0.0"}]
        }
    })


def by_id(graph):
    return {node.id: node for node in graph}


def test_build_complete_graph_creates_one_node_per_version(workspace):
    graph = build_complete_graph(workspace)

    assert [node.id for node in graph] == [
        "express@4.18.2",
        "body-parser@1.20.1",
        "debug@2.6.9",
        "ms@2.0.0",
        "jest@29.0.0",
        VIRTUAL_ROOT_ID,
    ]


def test_build_complete_graph_links_parents_and_children(workspace):
    nodes = by_id(build_complete_graph(workspace))

    assert nodes["express@4.18.2"].childrenIds == ["body-parser@1.20.1", "debug@2.6.9"]
    assert nodes["debug@2.6.9"].parentIds == ["express@4.18.2", "body-parser@1.20.1"]
    assert nodes["ms@2.0.0"].parentIds == ["debug@2.6.9"]
    assert nodes["ms@2.0.0"].childrenIds == []


def test_build_complete_graph_attaches_roots_to_virtual_root(workspace):
    nodes = by_id(build_complete_graph(workspace))

    assert nodes["express@4.18.2"].parentIds == [VIRTUAL_ROOT_ID]
    assert nodes["jest@29.0.0"].parentIds == [VIRTUAL_ROOT_ID]
    assert nodes[VIRTUAL_ROOT_ID].parentIds == []
    assert nodes[VIRTUAL_ROOT_ID].childrenIds == ["express@4.18.2", "jest@29.0.0"]


def test_build_complete_graph_copies_flags(workspace):
    nodes = by_id(build_complete_graph(workspace))

    assert nodes["express@4.18.2"].prod is True
    assert nodes["express@4.18.2"].dev is False
    assert nodes["jest@29.0.0"].dev is True
    assert nodes[VIRTUAL_ROOT_ID].prod is False


def test_build_complete_graph_accepts_lowercase_flags():
    workspace = WorkSpaceData.model_validate({
        "dependencies": {"monolog/monolog": {"3.5.0": {"dev": True, "prod": False, "Dependencies": None}}}
    })

    node = by_id(build_complete_graph(workspace))["monolog/monolog@3.5.0"]

    assert node.dev is True
    assert node.prod is False
    assert node.childrenIds == []


def test_build_complete_graph_orphan_gets_virtual_root():
    workspace = WorkSpaceData.model_validate({
        "dependencies": {"left-pad": {"1.3.0": {"Prod": True}}},
        "start": {}
    })

    nodes = by_id(build_complete_graph(workspace))

    assert nodes["left-pad@1.3.0"].parentIds == [VIRTUAL_ROOT_ID]


def test_build_complete_graph_empty_workspace():
    graph = build_complete_graph(WorkSpaceData())

    assert [node.id for node in graph] == [VIRTUAL_ROOT_ID]


@pytest.mark.parametrize("dependency_id,expected", [
    ("lodash@4.17.21", ("lodash", "4.17.21")),
    ("@types/node@20.1.0", ("@types/node", "20.1.0")),
    ("lodash", (None, None)),
    ("@types/node", (None, None)),
    ("lodash@", ("lodash", None)),
    ("", (None, None)),
])
def test_split_node_id(dependency_id, expected):
    assert split_node_id(dependency_id) == expected
