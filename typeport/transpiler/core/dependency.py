"""Language-agnostic dependency ordering for type emission.

This module orders type items so that every type is emitted after the types it
references, independent of the target language.
"""

from collections.abc import Sequence

from loguru import logger

from typeport.transpiler.errors import UnresolvableCycleError
from typeport.transpiler.models import TypeItem


class DependencyResolver:
    """Resolves type item dependencies for correct emission ordering."""

    def __init__(self, items: Sequence[TypeItem]) -> None:
        """Initialize with the worklist of type items.

        Args:
            items: Structs, enums and aliases in declaration order
        """
        self.items = list(items)
        self.by_name: dict[str, TypeItem] = {}
        self.position: dict[str, int] = {}
        for i, item in enumerate(self.items):
            self.by_name.setdefault(item.id.original, item)
            self.position.setdefault(item.id.original, i)
        # name -> {dependency name: referenced without indirection}
        self.dependencies: dict[str, dict[str, bool]] = {}
        self._build_dependency_graph()

    def _build_dependency_graph(self) -> None:
        """Build the dependency graph for all type items."""
        for item in self.items:
            name = item.id.original
            edges = self.dependencies.setdefault(name, {})
            for ref, direct in item.dependencies():
                if ref == name or ref not in self.by_name:
                    continue
                edges[ref] = edges.get(ref, False) or direct

    def _ordered(self, names: set[str]) -> list[str]:
        return sorted(names, key=self.position.__getitem__)

    def _strongly_connected(self, direct_only: bool) -> list[list[str]]:
        """Compute strongly connected components with Tarjan's algorithm.

        Args:
            direct_only: Only follow edges that have no container indirection

        Returns:
            Components with at least two members, each in declaration order
        """
        counter = 0
        indices: dict[str, int] = {}
        lowlinks: dict[str, int] = {}
        stack: list[str] = []
        on_stack: set[str] = set()
        components: list[list[str]] = []

        def successors(name: str) -> list[str]:
            edges = self.dependencies.get(name, {})
            return self._ordered(
                {dep for dep, direct in edges.items() if direct or not direct_only}
            )

        def visit(name: str) -> None:
            nonlocal counter
            indices[name] = lowlinks[name] = counter
            counter += 1
            stack.append(name)
            on_stack.add(name)

            for dep in successors(name):
                if dep not in indices:
                    visit(dep)
                    lowlinks[name] = min(lowlinks[name], lowlinks[dep])
                elif dep in on_stack:
                    lowlinks[name] = min(lowlinks[name], indices[dep])

            if lowlinks[name] == indices[name]:
                component = set()
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.add(member)
                    if member == name:
                        break
                if len(component) > 1:
                    components.append(self._ordered(component))

        for name in self._ordered(set(self.dependencies)):
            if name not in indices:
                visit(name)

        return components

    def check_cycles(self) -> None:
        """Reject reference cycles that have no indirection to break them.

        Raises:
            UnresolvableCycleError: If items reference each other directly in a cycle
        """
        components = self._strongly_connected(direct_only=True)
        if components:
            first = min(components, key=lambda c: self.position[c[0]])
            raise UnresolvableCycleError(first)

    def get_ordered_items(self) -> list[TypeItem]:
        """Get type items ordered by dependencies.

        Indirect references (through optionals or containers) between members of
        the same cycle are dropped: the target resolves them as forward references.

        Returns:
            Type items in emission order

        Raises:
            UnresolvableCycleError: If items reference each other directly in a cycle
        """
        self.check_cycles()

        component_of: dict[str, int] = {}
        for i, component in enumerate(self._strongly_connected(direct_only=False)):
            for member in component:
                component_of[member] = i

        def effective_dependencies(name: str) -> list[str]:
            deps = set()
            for dep, direct in self.dependencies.get(name, {}).items():
                same_cycle = (
                    name in component_of
                    and component_of.get(dep) == component_of[name]
                )
                if same_cycle and not direct:
                    logger.debug(f"Treating {name} -> {dep} as a forward reference")
                    continue
                deps.add(dep)
            return self._ordered(deps)

        ordered: list[str] = []
        visited: set[str] = set()

        def visit(name: str) -> None:
            """Visit a type item and its dependencies."""
            if name in visited:
                return
            visited.add(name)

            # Visit dependencies first
            for dep in effective_dependencies(name):
                visit(dep)

            ordered.append(name)

        for item in self.items:
            visit(item.id.original)

        logger.debug(f"Emission order: {ordered}")
        return [self.by_name[name] for name in ordered]


def sort_items(items: Sequence[TypeItem]) -> list[TypeItem]:
    """Order type items so that referenced types come first.

    Args:
        items: Structs, enums and aliases in declaration order

    Returns:
        Type items in emission order, ties broken by declaration order

    Raises:
        UnresolvableCycleError: If items reference each other directly in a cycle
    """
    return DependencyResolver(items).get_ordered_items()
