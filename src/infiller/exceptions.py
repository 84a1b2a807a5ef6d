"""Exception hierarchy for infiller."""


class InfillerError(Exception):
    """Base exception for all infiller errors."""

    pass


class RegionError(InfillerError):
    """Errors related to loading or saving region files."""

    pass


class RegionLoadError(RegionError):
    """Error loading a region file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load region '{path}': {reason}")


class RegionWriteError(RegionError):
    """Error writing a result file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write result '{path}': {reason}")


class ParameterError(InfillerError):
    """Fill parameters that make no physical sense.

    Raised before any geometry work starts.
    """

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid parameter {name}={value!r}: {reason}")


class GeometryError(InfillerError):
    """Errors in geometric input or calculations."""

    pass


class TopologyError(InfillerError):
    """The segment graph broke an internal invariant.

    Always an algorithmic defect; the emitted toolpath would be corrupt,
    so the generation call is aborted.
    """

    pass


class DuplicateLinkError(TopologyError):
    """A segment end received a second link."""

    def __init__(self, segment_id: int, at_start: bool, existing: int, new: int) -> None:
        self.segment_id = segment_id
        self.at_start = at_start
        self.existing = existing
        self.new = new
        end = "start" if at_start else "end"
        super().__init__(
            f"Segment {segment_id} already linked to {existing} at its {end}; "
            f"refusing link to {new}"
        )


class BrokenChainError(TopologyError):
    """A link between two segments is not mirrored by the neighbour."""

    def __init__(self, segment_id: int, neighbour_id: int) -> None:
        self.segment_id = segment_id
        self.neighbour_id = neighbour_id
        super().__init__(
            f"Segment {segment_id} links to {neighbour_id}, "
            f"which has no link back"
        )


class ProviderError(InfillerError):
    """A pattern needs an external provider that was not supplied."""

    def __init__(self, pattern: str, provider: str) -> None:
        self.pattern = pattern
        self.provider = provider
        super().__init__(f"Pattern '{pattern}' requires a {provider}")


class ProcessingCancelledError(InfillerError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
