"""Tests for logger module."""

from helm_generator import logger


def test_log_info(capsys):
    """Test log_info outputs to stdout with correct format."""
    logger.log_info("Test message")
    captured = capsys.readouterr()
    assert "[INFO]" in captured.out
    assert "Test message" in captured.out


def test_log_success(capsys):
    """Test log_success outputs to stdout with correct format."""
    logger.log_success("Success message")
    captured = capsys.readouterr()
    assert "[SUCCESS]" in captured.out
    assert "Success message" in captured.out


def test_log_warning(capsys):
    """Test log_warning outputs to stdout with correct format."""
    logger.log_warning("Warning message")
    captured = capsys.readouterr()
    assert "[WARNING]" in captured.out
    assert "Warning message" in captured.out
    assert captured.err == ""


def test_log_error(capsys):
    """Test log_error outputs to stderr with correct format."""
    logger.log_error("Error message")
    captured = capsys.readouterr()
    assert "[ERROR]" in captured.err
    assert "Error message" in captured.err
    assert captured.out == ""


def test_colors_defined():
    """Test that color constants are defined."""
    for name in ('BLUE', 'GREEN', 'YELLOW', 'RED', 'RESET'):
        assert isinstance(getattr(logger.Colors, name), str)
