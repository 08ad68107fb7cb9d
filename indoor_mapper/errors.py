"""Errors raised by the indoor routing graph engine.

All errors are local and recoverable: a failed mutation leaves the
BuildingMap unchanged, and a failed query leaves nothing behind.
"""


class IndoorMapperError(Exception):
    """Base class for all engine errors."""


class DuplicateId(IndoorMapperError, ValueError):
    """A node or connection with this ID already exists."""

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"ID '{entity_id}' already exists")
        self.entity_id = entity_id


class UnknownNode(IndoorMapperError, KeyError):
    """Referenced node ID is not present in the map."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Unknown node '{node_id}'")
        self.node_id = node_id

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownEndpoint(UnknownNode):
    """A connection endpoint references a node that is not in the map."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.args = (f"Unknown connection endpoint '{node_id}'",)


class UnknownConnection(IndoorMapperError, KeyError):
    """Referenced connection ID is not present in the map."""

    def __init__(self, connection_id: str) -> None:
        super().__init__(f"Unknown connection '{connection_id}'")
        self.connection_id = connection_id

    def __str__(self) -> str:
        return str(self.args[0])


class SelfLoop(IndoorMapperError, ValueError):
    """A connection may not start and end at the same node."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Connection from '{node_id}' to itself is not allowed")
        self.node_id = node_id


class DuplicateConnection(IndoorMapperError, ValueError):
    """The unordered endpoint pair is already connected."""

    def __init__(self, from_id: str, to_id: str, existing_id: str) -> None:
        super().__init__(f"'{from_id}' and '{to_id}' are already connected by '{existing_id}'")
        self.from_id = from_id
        self.to_id = to_id
        self.existing_id = existing_id


class NotFound(IndoorMapperError, LookupError):
    """No route exists between the two nodes."""

    def __init__(self, source_id: str, target_id: str) -> None:
        super().__init__(f"No route found from '{source_id}' to '{target_id}'")
        self.source_id = source_id
        self.target_id = target_id


class SameEndpoints(IndoorMapperError, ValueError):
    """Route source and target are the same node."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Start and end locations are the same ('{node_id}')")
        self.node_id = node_id


class MissingOrigin(IndoorMapperError, ValueError):
    """Projection attempted before an origin fix was established."""


class InvalidMapData(IndoorMapperError, ValueError):
    """Persisted or imported map data has an unusable shape."""


class UnknownMap(IndoorMapperError, KeyError):
    """No map is saved under this name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No saved map named '{name}'")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])
