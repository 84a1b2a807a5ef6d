"""Tests for the settings models."""

import pytest
from pydantic import ValidationError

from infiller.config import (
    FillPattern,
    InfillerSettings,
    InfillParameters,
    ZigzagConfig,
    ZigzagEndPieces,
    get_default_settings,
)


class TestInfillParameters:
    """Tests for InfillParameters model."""

    def test_defaults(self) -> None:
        """Test the default fill."""
        params = InfillParameters()
        assert params.pattern == FillPattern.LINES
        assert params.line_width == 400
        assert params.line_distance == 4000
        assert params.multiplier == 1
        assert params.origin == (0, 0)
        assert not params.connect_lines
        assert not params.use_stitching

    def test_frozen(self) -> None:
        """Test that parameters cannot change after creation."""
        params = InfillParameters()
        with pytest.raises(ValidationError):
            params.line_width = 10  # type: ignore[misc]

    @pytest.mark.parametrize("field", ["line_width", "line_distance"])
    def test_lengths_must_be_positive(self, field: str) -> None:
        """Test the positive length constraints."""
        with pytest.raises(ValidationError):
            InfillParameters(**{field: 0})

    @pytest.mark.parametrize("multiplier", [0, 17])
    def test_multiplier_range(self, multiplier: int) -> None:
        """Test the multiplier bounds."""
        with pytest.raises(ValidationError):
            InfillParameters(multiplier=multiplier)

    def test_pattern_from_string(self) -> None:
        """Test that patterns parse from their names."""
        assert InfillParameters(pattern="gyroid").pattern == FillPattern.GYROID

    def test_connect_lines_only_for_line_patterns(self) -> None:
        """Test which patterns go through the line connector."""
        assert InfillParameters(pattern=FillPattern.GRID, zig_zaggify=True).connect_lines
        assert not InfillParameters(pattern=FillPattern.ZIG_ZAG, zig_zaggify=True).connect_lines
        assert not InfillParameters(pattern=FillPattern.CONCENTRIC, zig_zaggify=True).connect_lines

    def test_stitching(self) -> None:
        """Test which runs stitch their output."""
        assert InfillParameters(pattern=FillPattern.ZIG_ZAG).use_stitching
        assert InfillParameters(pattern=FillPattern.LINES, zig_zaggify=True).use_stitching
        assert not InfillParameters(pattern=FillPattern.LINES).use_stitching
        assert not InfillParameters(pattern=FillPattern.GYROID, skip_line_stitching=True).use_stitching

    def test_zigzag_options_need_zigzag_pattern(self) -> None:
        """Test that zigzag options on another pattern are rejected."""
        with pytest.raises(ValidationError, match="zigzag options"):
            InfillParameters(
                pattern=FillPattern.LINES,
                zigzag=ZigzagConfig(end_pieces=ZigzagEndPieces.CONNECTED),
            )

    def test_round_trip_through_dump(self) -> None:
        """Test rebuilding parameters from model_dump, as worker processes do."""
        params = InfillParameters(
            pattern=FillPattern.ZIG_ZAG,
            zigzag=ZigzagConfig(end_pieces=ZigzagEndPieces.DISCONNECTED),
            origin=(5, -5),
        )
        assert InfillParameters(**params.model_dump()) == params


class TestZigzagConfig:
    """Tests for ZigzagConfig model."""

    def test_end_piece_flags(self) -> None:
        """Test the derived end-piece flags."""
        assert not ZigzagConfig().use_endpieces
        assert ZigzagConfig(end_pieces=ZigzagEndPieces.DISCONNECTED).use_endpieces
        assert not ZigzagConfig(end_pieces=ZigzagEndPieces.DISCONNECTED).connected_endpieces
        assert ZigzagConfig(end_pieces=ZigzagEndPieces.CONNECTED).connected_endpieces

    def test_skip_needs_count(self) -> None:
        """Test that skipping zags needs a positive skip count."""
        with pytest.raises(ValidationError):
            ZigzagConfig(skip_some_zags=True)
        assert ZigzagConfig(skip_some_zags=True, zag_skip_count=2).zag_skip_count == 2


class TestInfillerSettings:
    """Tests for InfillerSettings model."""

    def test_default_settings(self) -> None:
        """Test the default application settings."""
        settings = get_default_settings()
        assert isinstance(settings, InfillerSettings)
        assert settings.processing.max_workers is None
        assert settings.processing.skip_empty_layers
        assert settings.logging.log_file is None
        assert settings.logging.log_level == "WARNING"
        assert settings.logging.file_log_level == "DEBUG"
        assert settings.logging.quiet is False
