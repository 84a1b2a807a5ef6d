"""Zigzag connector processors.

During a scan-line sweep the processor is told about every boundary vertex,
every scan-line crossing and the end of every polygon, in boundary order.
From those events it collects the boundary pieces between consecutive
crossings and decides which of them become zag connectors.

A piece running from scan-line ``s`` to scan-line ``e``:
- ``s == e``: an end piece, added only when end pieces are enabled
- ``s != e``: added when ``s`` is even, unless zag skipping drops it

End pieces are held back until their polygon is finished. A scan-line end
carries at most one connector, so an end piece only joins the ends that no
zag (or earlier end piece) took:
- connected end pieces join every free end
- disconnected end pieces join at most one free end

All points arrive in the rotated sweep frame; emitted lines are rotated
back before they are stored.
"""

from infiller.config import InfillParameters, ZigzagEndPieces
from infiller.core.geometry import PointMatrix
from infiller.domain import Point, Polyline


class ZigzagConnectorProcessor:
    """Zigzag connectors without end pieces.

    Attributes:
        matrix: Rotation of the sweep frame
        result: Output list the connector lines are appended to
    """

    use_endpieces = False

    def __init__(
        self,
        matrix: PointMatrix,
        result: list[Polyline],
        skip_some_zags: bool = False,
        zag_skip_count: int = 0,
    ) -> None:
        self.matrix = matrix
        self.result = result
        self.skip_some_zags = skip_some_zags
        self.zag_skip_count = zag_skip_count
        self.reset()

    def reset(self) -> None:
        """Forget the current polygon."""
        self.is_first_connector = True
        self.first_connector_end_scanline_index = 0
        self.last_connector_index = 0
        self.first_connector: list[Point] = []
        self.current_connector: list[Point] = []
        self.end_pieces: list[list[Point]] = []
        # scan-line ends that already carry a connector
        self.joined_ends: set[Point] = set()

    def register_vertex(self, vertex: Point) -> None:
        if self.is_first_connector:
            self.first_connector.append(vertex)
        else:
            self.current_connector.append(vertex)

    def register_scanline_segment_intersection(self, intersection: Point, scanline_index: int) -> None:
        """Close the piece running up to this crossing and start the next."""
        if self.is_first_connector:
            # joined with the last piece once the polygon is finished
            self.first_connector.append(intersection)
            self.first_connector_end_scanline_index = scanline_index
            self.is_first_connector = False
        elif self.should_add_current_connector(self.last_connector_index, scanline_index):
            self.current_connector.append(intersection)
            is_endpiece = scanline_index == self.last_connector_index
            self.add_zag_connector(self.current_connector, is_endpiece)

        self.current_connector = [intersection]
        self.last_connector_index = scanline_index

    def register_poly_finished(self) -> None:
        """Handle the piece that wraps around the polygon's start."""
        start_index = self.last_connector_index
        end_index = self.first_connector_end_scanline_index
        is_endpiece = self.is_first_connector or start_index == end_index

        if (is_endpiece and self.use_endpieces) or (
            not is_endpiece and self.should_add_current_connector(start_index, end_index)
        ):
            points = list(self.current_connector)
            for point in self.first_connector:
                if not points or points[-1] != point:
                    points.append(point)
            self.add_zag_connector(points, is_endpiece)

        for piece in self.end_pieces:
            self._emit(self.trim_end_piece(piece))
        self.reset()

    def should_add_current_connector(self, start_scanline_index: int, end_scanline_index: int) -> bool:
        """Decide whether the piece between two scan-lines is printed."""
        is_endpiece = start_scanline_index == end_scanline_index
        if is_endpiece:
            return self.use_endpieces
        if start_scanline_index % 2 != 0:
            return False
        if self.skip_some_zags and self.zag_skip_count > 0:
            return (start_scanline_index // 2) % self.zag_skip_count != 0
        return True

    def add_zag_connector(self, points: list[Point], is_endpiece: bool) -> None:
        """Emit a zag connector, or hold back an end piece.

        End pieces are emitted by register_poly_finished, once every zag
        of the polygon is known.
        """
        if len(points) < 2:
            return
        if is_endpiece:
            self.end_pieces.append(points)
            return
        self.joined_ends.update((points[0], points[-1]))
        self._emit(points)

    def trim_end_piece(self, points: list[Point]) -> list[Point]:
        """Cut the lines of an end piece that would join a taken scan-line end."""
        return []

    def _detach(self, points: list[Point], keep_start: bool, keep_end: bool) -> list[Point]:
        """Drop the first and/or last line of a piece and record the joins kept."""
        start = 0 if keep_start else 1
        stop = len(points) if keep_end else len(points) - 1
        if keep_start:
            self.joined_ends.add(points[0])
        if keep_end:
            self.joined_ends.add(points[-1])
        return points[start:stop]

    def _emit(self, points: list[Point]) -> None:
        for a, b in zip(points, points[1:]):
            self._add_line(a, b)

    def _add_line(self, a: Point, b: Point) -> None:
        self.result.append(Polyline([self.matrix.unapply(a), self.matrix.unapply(b)]))


class ZigzagConnectorProcessorDisconnectedEndPieces(ZigzagConnectorProcessor):
    """End pieces are printed but joined to a scan-line at one end at most."""

    use_endpieces = True

    def trim_end_piece(self, points: list[Point]) -> list[Point]:
        start_free = points[0] not in self.joined_ends
        end_free = points[-1] not in self.joined_ends
        if start_free:
            return self._detach(points, keep_start=True, keep_end=False)
        return self._detach(points, keep_start=False, keep_end=end_free)


class ZigzagConnectorProcessorConnectedEndPieces(ZigzagConnectorProcessor):
    """End pieces are printed and joined at every free scan-line end."""

    use_endpieces = True

    def trim_end_piece(self, points: list[Point]) -> list[Point]:
        if points[0] == points[-1]:
            # outline of a polygon no scan-line crosses
            return points
        start_free = points[0] not in self.joined_ends
        end_free = points[-1] not in self.joined_ends
        return self._detach(points, keep_start=start_free, keep_end=end_free)


class NoZigzagConnectorProcessor(ZigzagConnectorProcessor):
    """Ignores every event; used by sweeps that only want scan-line segments."""

    def __init__(self) -> None:
        super().__init__(PointMatrix(), [])

    def register_vertex(self, vertex: Point) -> None:
        pass

    def register_scanline_segment_intersection(self, intersection: Point, scanline_index: int) -> None:
        pass

    def register_poly_finished(self) -> None:
        pass


_PROCESSORS: dict[ZigzagEndPieces, type[ZigzagConnectorProcessor]] = {
    ZigzagEndPieces.NONE: ZigzagConnectorProcessor,
    ZigzagEndPieces.DISCONNECTED: ZigzagConnectorProcessorDisconnectedEndPieces,
    ZigzagEndPieces.CONNECTED: ZigzagConnectorProcessorConnectedEndPieces,
}


def create_zigzag_processor(
    params: InfillParameters,
    matrix: PointMatrix,
    result: list[Polyline],
) -> ZigzagConnectorProcessor:
    """Pick the processor matching the zigzag end-piece option."""
    processor_class = _PROCESSORS[params.zigzag.end_pieces]
    return processor_class(
        matrix,
        result,
        skip_some_zags=params.zigzag.skip_some_zags,
        zag_skip_count=params.zigzag.zag_skip_count,
    )
