import logging

from tcPbnLib.config import CacheConfig, ExtractorConfig
from tcPbnLib.logging_config import setup_logger


def test_setup_logger_once():
    logger = setup_logger('tcpbn-test-once')
    assert len(logger.handlers) == 1
    assert not logger.propagate
    assert setup_logger('tcpbn-test-once') is logger
    assert len(logger.handlers) == 1


def test_level_from_env(monkeypatch):
    monkeypatch.setenv('TCPBN_LOG_LEVEL', 'debug')
    assert setup_logger('tcpbn-test-debug').level == logging.DEBUG
    monkeypatch.setenv('TCPBN_LOG_LEVEL', 'nonsense')
    assert setup_logger('tcpbn-test-nonsense').level == logging.INFO


def test_log_file(tmp_path):
    log_file = tmp_path / 'tcpbn.log'
    logger = setup_logger('tcpbn-test-file', log_file=str(log_file))
    logger.info('hello')
    for handler in logger.handlers:
        handler.flush()
    assert 'hello' in log_file.read_text()
    for handler in logger.handlers:
        handler.close()


def test_config_from_env(monkeypatch):
    monkeypatch.setenv('TCPBN_USER_AGENT', 'agent/2')
    monkeypatch.setenv('TCPBN_TIMEOUT', '2.5')
    monkeypatch.setenv('TCPBN_PACING_DELAY', '0')
    monkeypatch.setenv('TCPBN_REDIS_URL', 'redis://localhost:6379/0')
    monkeypatch.setenv('TCPBN_RESULT_TTL', '60')
    config = ExtractorConfig.from_env()
    assert config == ExtractorConfig(user_agent='agent/2', timeout=2.5, pacing_delay=0.0)
    cache_config = CacheConfig.from_env()
    assert cache_config.redis_url == 'redis://localhost:6379/0'
    assert cache_config.result_ttl == 60
    assert cache_config.processing_ttl == 300


def test_config_defaults(monkeypatch):
    for name in ('TCPBN_USER_AGENT', 'TCPBN_TIMEOUT', 'TCPBN_PACING_DELAY', 'TCPBN_GENERATOR', 'TCPBN_REDIS_URL'):
        monkeypatch.delenv(name, raising=False)
    assert ExtractorConfig.from_env() == ExtractorConfig()
    assert CacheConfig.from_env().redis_url == ''
