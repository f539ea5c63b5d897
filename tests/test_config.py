"""Tests for configuration loading."""
from unittest.mock import patch

import pytest

from gametime_resale_notify.config import (
    Settings,
    check_patterns,
    create_default_config,
    load_config,
    parse_interval,
    split_list,
)
from gametime_resale_notify.exceptions import ConfigurationError
from gametime_resale_notify.models import AppConfig

ENV_VARS = [
    'EVENT_ID', 'EVENT_NAME', 'PLATFORM_NAME', 'SEATS_TOGETHER', 'MAX_ALL_IN_PRICE_PER_SEAT',
    'SECTION_PATTERNS', 'SECTION_GROUP_PATTERNS', 'MAX_RETURN_LIST', 'MIN_ERROR_COUNT',
    'NOTIFY_INTERVAL_MINUTES', 'CHECK_INTERVAL_MIN', 'LISTINGS_URL', 'REQUEST_TIMEOUT',
    'NOTIFY_SERVICE', 'NTFY_TOPIC', 'PUSHOVER_TOKEN', 'PUSHOVER_USER', 'MAX_RETRIES',
    'RETRY_DELAY', 'LOG_LEVEL',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without settings in the environment or a .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch('gametime_resale_notify.config.load_dotenv') as mock_load_dotenv:
        yield mock_load_dotenv


def test_split_list():
    assert split_list("^PR, ^1 ,,") == ("^PR", "^1")
    assert split_list("") == ()


def test_parse_interval():
    assert parse_interval("5,10") == (5.0, 10.0)
    with pytest.raises(ValueError):
        parse_interval("5")
    with pytest.raises(ValueError):
        parse_interval("10,5")


def test_check_patterns():
    assert check_patterns(['^PR', 'a,b']) == ('^PR', 'a,b')
    with pytest.raises(ValueError, match="invalid regex"):
        check_patterns(['[unclosed'])


def test_create_default_config():
    """Test creation of default config."""
    config = create_default_config("evt")

    assert isinstance(config, AppConfig)
    assert config.watch.event_id == "evt"
    assert config.watch.platform_name == "Gametime"
    assert config.watch.seats_together == 2
    assert config.watch.max_all_in_price_per_seat == 350
    assert config.watch.section_patterns == ("^PR", "^1")
    assert config.watch.section_group_patterns == ("^Premier", "^Loge", "^Baseline")
    assert config.watch.max_return_list == 10
    assert config.watch.min_error_count == 4
    assert config.watch.notify_interval_minutes == 15
    assert config.log_level == "INFO"


class TestLoadConfig:
    """Tests for load_config."""

    def test_event_id_required(self):
        with pytest.raises(ConfigurationError, match="EVENT_ID"):
            load_config()

    def test_defaults(self, monkeypatch, clean_env):
        monkeypatch.setenv('EVENT_ID', 'evt')

        config = load_config()

        assert config == Settings(EVENT_ID='evt').to_app_config()
        assert config.watch.section_patterns == ("^PR", "^1")
        assert config.check_interval == (1.0, 2.0)
        assert config.notification.service == "ntfy"
        assert config.notification.topic is None
        clean_env.assert_called_once()

    def test_from_env(self, monkeypatch):
        """Test loading config from environment variables."""
        for name, value in {
            'EVENT_ID': '64de74ca2d4ca900013dffc6',
            'EVENT_NAME': 'Lakers vs. Suns',
            'SEATS_TOGETHER': '4',
            'MAX_ALL_IN_PRICE_PER_SEAT': '199.5',
            'SECTION_PATTERNS': '^PR,^1,^2',
            'SECTION_GROUP_PATTERNS': '^Lower',
            'MAX_RETURN_LIST': '5',
            'MIN_ERROR_COUNT': '2',
            'NOTIFY_INTERVAL_MINUTES': '30',
            'CHECK_INTERVAL_MIN': '5,10',
            'REQUEST_TIMEOUT': '12.5',
            'NOTIFY_SERVICE': 'Pushover',
            'PUSHOVER_TOKEN': 'app-token',
            'PUSHOVER_USER': 'user-key',
            'MAX_RETRIES': '5',
            'LOG_LEVEL': 'debug',
        }.items():
            monkeypatch.setenv(name, value)

        config = load_config()

        watch = config.watch
        assert watch.event_id == '64de74ca2d4ca900013dffc6'
        assert watch.event_name == 'Lakers vs. Suns'
        assert watch.seats_together == 4
        assert watch.max_all_in_price_per_seat == 199.5
        assert watch.section_patterns == ('^PR', '^1', '^2')
        assert watch.section_group_patterns == ('^Lower',)
        assert watch.max_return_list == 5
        assert watch.min_error_count == 2
        assert watch.notify_interval_minutes == 30
        assert config.check_interval == (5.0, 10.0)
        assert config.fetcher.timeout == 12.5
        assert config.notification.service == 'pushover'
        assert config.notification.pushover_token == 'app-token'
        assert config.notification.retry_attempts == 5
        assert config.log_level == 'DEBUG'

    def test_overrides_take_precedence(self, monkeypatch):
        monkeypatch.setenv('EVENT_ID', 'from-env')
        monkeypatch.setenv('SEATS_TOGETHER', '4')

        config = load_config(EVENT_ID='from-cli', SEATS_TOGETHER=None, NTFY_TOPIC='topic')

        assert config.watch.event_id == 'from-cli'
        assert config.watch.seats_together == 4
        assert config.notification.topic == 'topic'

    def test_pattern_lists_replace_env(self, monkeypatch):
        monkeypatch.setenv('EVENT_ID', 'evt')
        monkeypatch.setenv('SECTION_PATTERNS', '^PR')

        config = load_config(
            section_patterns=[r'^1[0-9]{1,2}$', '^PR'],
            section_group_patterns=['^Loge'],
        )

        assert config.watch.section_patterns == ('^1[0-9]{1,2}$', '^PR')
        assert config.watch.section_group_patterns == ('^Loge',)
        assert config.watch.event_id == 'evt'

    def test_empty_pattern_lists_keep_env(self, monkeypatch):
        monkeypatch.setenv('EVENT_ID', 'evt')

        config = load_config(section_patterns=None, section_group_patterns=[])

        assert config.watch.section_patterns == ("^PR", "^1")
        assert config.watch.section_group_patterns == ("^Premier", "^Loge", "^Baseline")

    def test_invalid_pattern_list(self, monkeypatch):
        monkeypatch.setenv('EVENT_ID', 'evt')

        with pytest.raises(ConfigurationError, match="section_group_patterns"):
            load_config(section_group_patterns=['(unclosed'])

    @pytest.mark.parametrize("name, value", [
        ('SEATS_TOGETHER', '0'),
        ('SEATS_TOGETHER', 'two'),
        ('MAX_ALL_IN_PRICE_PER_SEAT', '-1'),
        ('SECTION_PATTERNS', '^PR,(unclosed'),
        ('CHECK_INTERVAL_MIN', '10'),
        ('LISTINGS_URL', 'https://example.com/listings'),
        ('LISTINGS_URL', 'ftp://example.com/{event_id}'),
        ('NOTIFY_SERVICE', 'carrier-pigeon'),
        ('LOG_LEVEL', 'LOUD'),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        monkeypatch.setenv('EVENT_ID', 'evt')
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigurationError, match=name):
            load_config()
