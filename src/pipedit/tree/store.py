"""Tree store - sole owner and writer of the processor forest.

All structural edits go through selector-addressed operations. Selectors
handed in must have been derived from the current forest; a stale selector
raises SelectorNotFoundError instead of silently touching another node.
"""

from __future__ import annotations

from pipedit.core.logging import StructuredLogger, get_logger
from pipedit.tree.exceptions import InvalidSelectorError, SelectorNotFoundError
from pipedit.tree.move import MoveResult, execute_move
from pipedit.tree.node import Forest, ProcessorContent, ProcessorNode
from pipedit.tree.selector import ROOTS, Selector


class TreeStore:
    """Selector-addressed mutation API over a Forest."""

    def __init__(
        self,
        forest: Forest | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            forest: Initial forest (an empty one if omitted). The store takes
                ownership; callers must not mutate it directly afterwards.
            logger: Structured logger (the ``tree`` component logger if None)
        """
        self._forest = forest if forest is not None else Forest()
        self.logger = logger or get_logger("tree")

    @property
    def forest(self) -> Forest:
        """The current forest. Treat as read-only."""
        return self._forest

    def replace_forest(self, forest: Forest) -> None:
        """Swap in a whole new forest (e.g. after loading a document)."""
        self._forest = forest
        self.logger.log_tree_mutation("replace", "*")

    # Resolution

    def _lookup_sequence(
        self, selector: Selector
    ) -> tuple[list[ProcessorNode] | None, ProcessorNode | None]:
        """Resolve a sequence selector.

        Returns:
            (sequence, owner). ``sequence`` is None when the owner exists but
            has no failure branch yet; ``owner`` is None for root sequences.

        Raises:
            SelectorNotFoundError: If any node along the path is missing.
        """
        if not selector.is_sequence:
            raise InvalidSelectorError(f"Not a sequence selector: {selector}")

        sequence: list[ProcessorNode] | None = self._forest.root(selector.root_name)
        owner: ProcessorNode | None = None
        segments = selector.segments
        for position in range(1, len(segments), 2):
            index = int(segments[position])
            if sequence is None or index >= len(sequence):
                raise SelectorNotFoundError(selector)
            owner = sequence[index]
            sequence = owner.on_failure
        return sequence, owner

    def get_sequence(self, selector: Selector) -> list[ProcessorNode]:
        """Return the sequence at ``selector`` (empty list for an absent branch)."""
        sequence, _ = self._lookup_sequence(selector)
        return sequence if sequence is not None else []

    def get(self, selector: Selector) -> ProcessorNode:
        """Return the node addressed by ``selector``.

        Raises:
            SelectorNotFoundError: If the selector does not resolve.
        """
        if not selector.is_node:
            raise InvalidSelectorError(f"Not a node selector: {selector}")
        sequence, _ = self._lookup_sequence(selector.parent)
        index = selector.index
        if sequence is None or index >= len(sequence):
            raise SelectorNotFoundError(selector)
        return sequence[index]

    def contains(self, selector: Selector) -> bool:
        try:
            self.get(selector)
        except SelectorNotFoundError:
            return False
        return True

    def find(self, node_id: str) -> Selector | None:
        """Current selector of the node with identity ``node_id``, if any."""
        for name in ROOTS:
            found = self._find_in(Selector.root(name), self._forest.root(name), node_id)
            if found is not None:
                return found
        return None

    def _find_in(
        self, base: Selector, sequence: list[ProcessorNode], node_id: str
    ) -> Selector | None:
        for index, node in enumerate(sequence):
            selector = base.child(index)
            if node.id == node_id:
                return selector
            if node.on_failure:
                found = self._find_in(selector.on_failure(), node.on_failure, node_id)
                if found is not None:
                    return found
        return None

    def check_insertion_point(self, selector: Selector) -> None:
        """Raise unless ``selector`` is a valid position to insert at.

        The parent sequence must resolve and the index may be at most its
        length. An absent failure branch accepts index 0 only.
        """
        if not selector.is_node:
            raise InvalidSelectorError(f"Not a node selector: {selector}")
        sequence, _ = self._lookup_sequence(selector.parent)
        length = len(sequence) if sequence is not None else 0
        if selector.index > length:
            raise SelectorNotFoundError(
                selector, f"index beyond sequence length {length}"
            )

    # Mutation

    def insert(self, selector: Selector, node: ProcessorNode) -> None:
        """Insert ``node`` at ``selector``, shifting later siblings right.

        Raises:
            SelectorNotFoundError: If the parent sequence does not resolve or
                the index is past its end.
        """
        self.check_insertion_point(selector)
        sequence, owner = self._lookup_sequence(selector.parent)
        if sequence is not None:
            sequence.insert(selector.index, node)
        elif owner is not None:
            owner.on_failure = [node]
        else:
            raise SelectorNotFoundError(selector.parent)
        self.logger.log_tree_mutation("insert", selector, node_id=node.id)

    def remove(self, selector: Selector) -> ProcessorNode:
        """Remove and return the node at ``selector``, shifting siblings left.

        A failure branch left empty by the removal is dropped from its owner.

        Raises:
            SelectorNotFoundError: If the selector does not resolve.
        """
        self.get(selector)
        sequence, owner = self._lookup_sequence(selector.parent)
        if sequence is None:
            raise SelectorNotFoundError(selector)
        node = sequence.pop(selector.index)
        if owner is not None and not sequence:
            owner.on_failure = None
        self.logger.log_tree_mutation("remove", selector, node_id=node.id)
        return node

    def move(self, source: Selector, destination: Selector) -> MoveResult:
        """Atomically move the node at ``source`` to ``destination``.

        See pipedit.tree.move for the index compensation rule.
        """
        return execute_move(self, source, destination)

    def duplicate(self, source: Selector) -> Selector:
        """Insert a deep copy of ``source`` right after it.

        Returns:
            Selector of the copy.
        """
        original = self.get(source)
        clone = original.clone()
        target = source.with_index(source.index + 1)
        self.insert(target, clone)
        self.logger.log_tree_mutation(
            "duplicate", source, node_id=original.id, clone_id=clone.id
        )
        return target

    def update(self, selector: Selector, content: ProcessorContent) -> ProcessorNode:
        """Replace a node's content, keeping its identity and failure branch."""
        node = self.get(selector)
        node.content = content.copy()
        self.logger.log_tree_mutation("update", selector, node_id=node.id)
        return node

    def add_top_level(self, root: str, node: ProcessorNode) -> Selector:
        """Append ``node`` to one of the root sequences.

        Returns:
            Selector of the appended node.
        """
        sequence_selector = Selector.root(root)
        selector = sequence_selector.child(len(self._forest.root(root)))
        self.insert(selector, node)
        return selector

    def wrap_with_on_failure(self, selector: Selector, node: ProcessorNode) -> Selector:
        """Append ``node`` to the failure branch of the node at ``selector``.

        The branch is created if the target has none.

        Returns:
            Selector of the inserted node inside the branch.
        """
        target = self.get(selector)
        branch = selector.on_failure()
        child = branch.child(len(target.on_failure or []))
        self.insert(child, node)
        return child
