# tests/output/test_console.py
import logging

from causelog.output.console import CONSOLE_LOGGER_NAME, to_console


class InfoConsole:
    def __init__(self):
        self.info_calls = []
        self.log_calls = []

    def info(self, message):
        self.info_calls.append(message)

    def log(self, message):
        self.log_calls.append(message)


class LogConsole:
    def __init__(self):
        self.calls = []

    def log(self, message):
        self.calls.append(message)


class TestToConsole:
    def test_prefers_info(self):
        console = InfoConsole()
        to_console(console)({"a": 1})
        assert console.info_calls == [{"a": 1}]
        assert console.log_calls == []

    def test_falls_back_to_log(self):
        console = LogConsole()
        to_console(console)({"a": 1})
        assert console.calls == [{"a": 1}]

    def test_no_suitable_method_does_nothing(self):
        assert to_console(object())({"a": 1}) is None

    def test_defaults_to_the_standard_logger(self, caplog):
        with caplog.at_level(logging.INFO, logger=CONSOLE_LOGGER_NAME):
            to_console()({"message_type": "app:hello"})
        assert "app:hello" in caplog.text
        assert caplog.records[0].name == CONSOLE_LOGGER_NAME

    def test_as_a_registered_destination(self, destinations):
        console = LogConsole()
        destinations.add(to_console(console))
        destinations.send({"a": 1})
        assert console.calls == [{"a": 1}]
