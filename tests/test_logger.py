"""
Tests for the logging helpers.
"""

import logging

import pytest

from reinforce_nn.utils.logger import (
    ROOT_LOGGER_NAME,
    get_log_path,
    get_logger,
    log_model_event,
    log_training_metrics,
    setup_logging,
)


@pytest.fixture
def restore_logging():
    yield
    setup_logging(console_output=False, force=True)


class TestGetLogger:
    """Test logger naming."""

    def test_prefixes_bare_names(self):
        assert get_logger('training').name == f'{ROOT_LOGGER_NAME}.training'

    def test_keeps_package_module_names(self):
        name = 'reinforce_nn.ai.agent'
        assert get_logger(name).name == name


class TestLogHelpers:
    """Test the structured log lines."""

    def test_training_metrics_line(self, caplog):
        caplog.set_level(logging.INFO, logger=ROOT_LOGGER_NAME)
        log_training_metrics(
            episode=12, total_reward=3.5, exploration_rate=0.25,
            policy_loss=0.5, value_loss=0.125, steps=40
        )
        message = caplog.records[-1].getMessage()
        assert caplog.records[-1].name == f'{ROOT_LOGGER_NAME}.training'
        assert 'ep=12' in message
        assert 'reward=3.50' in message
        assert 'explore=0.2500' in message
        assert 'value_loss=0.125000' in message
        assert 'steps=40' in message

    def test_training_metrics_optional_fields(self, caplog):
        caplog.set_level(logging.INFO, logger=ROOT_LOGGER_NAME)
        log_training_metrics(episode=1, total_reward=0.0, exploration_rate=0.0)
        message = caplog.records[-1].getMessage()
        assert 'policy_loss' not in message
        assert 'steps' not in message

    def test_model_event_line(self, caplog):
        caplog.set_level(logging.INFO, logger=ROOT_LOGGER_NAME)
        log_model_event('save', 'models/x.npz', reason='best', episode=4)
        message = caplog.records[-1].getMessage()
        assert message == 'SAVE | models/x.npz | reason=best | episode=4'


class TestSetupLogging:
    """Test handler configuration."""

    def test_file_output(self, tmp_path, restore_logging):
        setup_logging(
            log_dir=str(tmp_path), level='WARNING', console_output=False,
            file_output=True, log_filename='run.log', force=True
        )
        assert get_log_path() == tmp_path / 'run.log'

        get_logger('test').debug('captured in file only')
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        assert 'captured in file only' in (tmp_path / 'run.log').read_text()

    def test_reconfigure_drops_file_handler(self, tmp_path, restore_logging):
        setup_logging(log_dir=str(tmp_path), console_output=False,
                      file_output=True, force=True)
        assert get_log_path() is not None

        setup_logging(console_output=False, force=True)
        assert get_log_path() is None
        assert logging.getLogger(ROOT_LOGGER_NAME).handlers == []

    def test_unknown_level(self, restore_logging):
        with pytest.raises(ValueError):
            setup_logging(level='LOUD', console_output=False, force=True)
