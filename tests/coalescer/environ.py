from unittest import TestCase
from coalescer import environ as mdl
from coalescer.validation import InvalidOptionValue


class TestGetLogLevel(TestCase):
    def test_all(self):
        assert mdl.get_log_level({}) is None
        assert mdl.get_log_level({mdl.LOG_LEVEL_VAR: ""}) is None
        assert mdl.get_log_level({mdl.LOG_LEVEL_VAR: "DEBUG"}) == "DEBUG"
        with self.assertRaises(InvalidOptionValue):
            mdl.get_log_level({mdl.LOG_LEVEL_VAR: "debug"})
