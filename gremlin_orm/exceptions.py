"""Custom exceptions for gremlin-orm."""


class GremlinORMError(Exception):
    """Base exception for all gremlin-orm errors."""


class InvalidArgumentError(GremlinORMError, ValueError):
    """Raised when a required argument is missing or blank."""


class ImmutableIdError(GremlinORMError):
    """Raised when reassigning the id of a vertex loaded from the store."""


class PropertyDecodeError(GremlinORMError):
    """Raised when a property value cannot be coerced into its field type."""


class CommandBuildError(GremlinORMError):
    """Raised when a Gremlin command cannot be rendered for a vertex."""


class InvalidFeedStateError(GremlinORMError):
    """Raised when a result feed reports no pending results before the first fetch."""


class EntityNotFoundError(GremlinORMError):
    """Raised when a single-result script returns no results and null is not allowed."""


class MultipleResultsError(GremlinORMError):
    """Raised when a single-result script returns more than one result."""


class QueryExecutionError(GremlinORMError):
    """Raised when submitting or reading a single-result script fails."""


class GraphOperationError(GremlinORMError):
    """Raised when a public graph operation fails. The cause is chained."""
