"""Dependency graph builder over stored import/export records."""

import logging
from dataclasses import dataclass, field
from typing import Any

import networkx as nx
from networkx import DiGraph

from .store import CodeIndexStore

type FileGraph = DiGraph[str]


logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """Import sources and export names per file id.

    A file with no imports (or no exports) has no key in that mapping.
    """

    imports: dict[str, list[str]] = field(default_factory=dict)
    exports: dict[str, list[str]] = field(default_factory=dict)

    def to_networkx(self) -> FileGraph:
        """Directed graph with an edge from each file to every import source.

        Export names are stored on file nodes under the ``exports`` attribute.
        Import sources that are not file ids become plain nodes.
        """
        graph: FileGraph = DiGraph()

        for file_id, names in self.exports.items():
            graph.add_node(file_id, exports=list(names))

        for file_id, sources in self.imports.items():
            if file_id not in graph:
                graph.add_node(file_id, exports=[])
            for source in sources:
                graph.add_edge(file_id, source, relationship_type="import")

        logger.debug(
            f"Dependency graph: {graph.number_of_nodes()} nodes, "
            f"{graph.number_of_edges()} edges"
        )
        return graph

    def to_dict(self) -> dict[str, Any]:
        """Wire shape: lists of ``[file_id, values]`` pairs in insertion order."""
        return {
            "imports": [[file_id, list(v)] for file_id, v in self.imports.items()],
            "exports": [[file_id, list(v)] for file_id, v in self.exports.items()],
        }


@dataclass
class FileDependencies:
    dependencies: list[str] = field(default_factory=list)
    # Reverse lookups are not computed
    dependents: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "dependencies": list(self.dependencies),
            "dependents": list(self.dependents),
        }


def isolated_files(graph: FileGraph) -> list[str]:
    """File nodes with neither imports nor importers."""
    return list(nx.isolates(graph))


class DependencyGraphBuilder:
    """Builds project dependency graphs from a ``CodeIndexStore``."""

    def __init__(self, store: CodeIndexStore):
        self.store: CodeIndexStore = store

    async def build_graph(self, project_id: str, file_ids: list[str]) -> DependencyGraph:
        """Collect import sources and export names for ``file_ids``.

        Files are visited in the given order. A store failure for one file is
        logged and that file is left out of the graph.
        """
        graph = DependencyGraph()

        for file_id in file_ids:
            try:
                imports = await self.store.list_imports(file_id)
                exports = await self.store.list_exports(file_id)
            except Exception as e:
                logger.warning(
                    f"Skipping file {file_id} in project {project_id}: {e}"
                )
                continue

            if imports:
                graph.imports.setdefault(file_id, []).extend(i.source for i in imports)
            if exports:
                graph.exports.setdefault(file_id, []).extend(e.name for e in exports)

        logger.info(
            f"Built dependency graph for project {project_id}: "
            f"{len(graph.imports)} importing files, {len(graph.exports)} exporting files"
        )
        return graph

    async def find_dependencies(self, file_id: str) -> FileDependencies:
        """Import sources of one file. Store errors propagate."""
        imports = await self.store.list_imports(file_id)
        return FileDependencies(dependencies=[i.source for i in imports])
