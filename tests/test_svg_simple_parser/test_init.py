"""Test module for svg_simple_parser package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import svg_simple_parser

    # Assert
    assert svg_simple_parser is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import svg_simple_parser

    # Assert
    assert isinstance(svg_simple_parser.__version__, str)
    assert svg_simple_parser.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import svg_simple_parser

    # Assert
    assert svg_simple_parser.__author__ == "SVG Simple Parser Team"


def test_package_exports_resolve() -> None:
    """Every name in __all__ is importable from the package root."""
    # Arrange & Act
    import svg_simple_parser

    # Assert
    for name in svg_simple_parser.__all__:
        assert hasattr(svg_simple_parser, name), name


def test_top_level_round_trip() -> None:
    """Core functions exported at the top level work together."""
    # Arrange
    from svg_simple_parser import parse, stringify

    # Act
    remaining, root = parse('<svg><rect x="1"/></svg>')

    # Assert
    assert remaining == ""
    assert stringify(root) == '<svg><rect x="1"/></svg>'
