"""
Tests for logging configuration.
"""
from unittest.mock import patch, MagicMock
from ghaction_version_gen.logging_config import setup_logging


class TestLoggingConfig:
    """Test logging configuration."""

    @patch('ghaction_version_gen.logging_config.logger')
    def test_setup_logging_default(self, mock_logger):
        """Test setup logging with default level."""
        setup_logging()

        mock_logger.remove.assert_called_once()
        mock_logger.add.assert_called_once()
        assert mock_logger.add.call_args.kwargs['level'] == 'INFO'

    @patch('ghaction_version_gen.logging_config.logger')
    def test_setup_logging_debug(self, mock_logger):
        """Test setup logging with DEBUG level."""
        setup_logging('DEBUG')

        mock_logger.remove.assert_called_once()
        assert mock_logger.add.call_args.kwargs['level'] == 'DEBUG'

    @patch('ghaction_version_gen.logging_config.logger')
    def test_setup_logging_with_console(self, mock_logger):
        """Test log records are routed to the given console."""
        mock_console = MagicMock()

        setup_logging('INFO', console=mock_console)

        sink = mock_logger.add.call_args.args[0]
        sink('hello\n')
        mock_console.print.assert_called_once_with('hello\n', end='', markup=False, highlight=False)
