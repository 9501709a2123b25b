from typing import Optional


class InvalidArgumentError(ValueError):
    """
    Exception raised when a tree operation receives an argument it cannot work with.

    Examples include a non-positive chunk size, a search term that is not a string,
    or an export format that does not exist.

    Example:
        >>> error = InvalidArgumentError("max_nodes_per_chunk must be positive, got 0")
        >>> str(error)
        'max_nodes_per_chunk must be positive, got 0'
    """

    pass


class MalformedTreeError(ValueError):
    """
    Exception raised when a tree violates the structural invariants of the model.

    A tree is malformed when a file carries children, when a child's path is not
    its parent's path joined with its name, or when two nodes share a path.

    Attributes:
        path (Optional[str]): Path of the offending node, if known.

    Example:
        >>> error = MalformedTreeError("Duplicate path in tree", path="src/a.ts")
        >>> str(error)
        'Duplicate path in tree: src/a.ts'
        >>> error.path
        'src/a.ts'
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """
        Initialize the exception with a message and the offending path.

        Args:
            message (str): Description of the violated invariant.
            path (str, optional): Path of the node where the violation was detected.
        """
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
