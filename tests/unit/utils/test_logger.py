"""Unit tests for logging setup."""

import logging
import logging.handlers
from unittest.mock import Mock

import pytest

from gitcms.utils import OperationLogger, setup_logging
from gitcms.utils.logger import ColoredFormatter


@pytest.fixture
def root_handlers():
    """Restore the root logger after setup_logging replaces its handlers."""
    root = logging.getLogger()
    saved = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in saved:
            handler.close()
    root.handlers[:] = saved
    root.setLevel(level)


class TestSetupLogging:
    """Test logging configuration."""

    def test_file_and_console_handlers(self, temp_dir, root_handlers):
        log_file = temp_dir / 'logs' / 'cms.log'

        setup_logging({'level': 'DEBUG', 'file': str(log_file)}, use_colors=False)
        logging.getLogger('gitcms.test').info('hello log')

        kinds = [type(h) for h in root_handlers.handlers]
        assert logging.StreamHandler in kinds
        assert logging.handlers.RotatingFileHandler in kinds
        for handler in root_handlers.handlers:
            handler.flush()
        assert 'hello log' in log_file.read_text()

    def test_empty_log_file_disables_file_handler(self, root_handlers):
        setup_logging({'level': 'INFO'}, log_file='')

        assert not any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in root_handlers.handlers
        )

    def test_console_level_override(self, root_handlers):
        setup_logging({'level': 'INFO'}, log_file='', console_level='WARNING')

        assert root_handlers.handlers[0].level == logging.WARNING

    def test_urllib3_quieted(self, root_handlers):
        setup_logging({}, log_file='')

        assert logging.getLogger('urllib3').level == logging.WARNING


class TestColoredFormatter:
    """Test console formatting."""

    def test_plain_when_disabled(self):
        formatter = ColoredFormatter('%(levelname)s %(message)s', use_colors=False)
        record = logging.makeLogRecord({'levelname': 'INFO', 'msg': 'plain'})

        assert formatter.format(record) == 'INFO plain'

    def test_record_not_mutated(self):
        formatter = ColoredFormatter('%(levelname)s %(message)s')
        formatter.use_colors = True
        record = logging.makeLogRecord({'levelname': 'ERROR', 'msg': 'boom', 'name': 'x'})

        output = formatter.format(record)

        assert '\033[' in output
        assert record.levelname == 'ERROR'


class TestOperationLogger:
    """Test timed operation logging."""

    def test_success(self):
        logger = Mock()

        with OperationLogger(logger, 'commit', path='a.md') as op:
            pass

        assert op.success is True
        assert 'Starting commit (path=a.md)' in logger.info.call_args_list[0][0][0]
        assert 'Completed commit' in logger.info.call_args_list[1][0][0]

    def test_failure_is_logged_and_raised(self):
        logger = Mock()
        op = OperationLogger(logger, 'commit')

        with pytest.raises(RuntimeError):
            with op:
                raise RuntimeError('conflict')

        assert op.success is False
        assert str(op.error) == 'conflict'
        assert 'Failed commit' in logger.error.call_args[0][0]
