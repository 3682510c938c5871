# tests/validation/test_types.py
import pytest

from causelog.core.action import Action, with_action
from causelog.core.task_level import TaskLevel
from causelog.testing import assert_contains_fields
from causelog.validation.errors import ValidationError
from causelog.validation.fields import BoundField
from causelog.validation.types import ActionType, MessageType

KEY = BoundField.for_types("key", ["number"], "A key")
RESULT = BoundField.for_types("result", ["string"], "A result")

LOG_THING = MessageType("myapp:thing", [KEY], "A thing happened")
LOG_DO = ActionType("myapp:do", [KEY], [RESULT], "Do something")


class TestMessageType:
    def test_call_stamps_the_type(self):
        msg = LOG_THING(key=1)
        assert msg.contents() == {"key": 1, "message_type": "myapp:thing"}

    def test_call_accepts_a_dict(self):
        assert LOG_THING({"key": 2}).contents()["key"] == 2

    def test_written_messages_validate(self, memory_logger):
        LOG_THING(key=1).write(memory_logger)
        memory_logger.validate()

    def test_invalid_messages_fail_validation(self, memory_logger):
        LOG_THING(key="nope").write(memory_logger)
        with pytest.raises(ValidationError):
            memory_logger.validate()

    def test_description(self):
        assert LOG_THING.description == "A thing happened"
        assert LOG_THING.message_type == "myapp:thing"


class TestActionType:
    def test_call_starts_an_action(self, memory_logger):
        action = LOG_DO(key=1, logger=memory_logger)
        assert isinstance(action, Action)
        assert action.action_type == "myapp:do"
        assert_contains_fields(memory_logger.messages[0], {
            "action_type": "myapp:do",
            "action_status": "started",
            "key": 1,
        })

    def test_success_validates(self, memory_logger):
        with LOG_DO(key=1, logger=memory_logger) as action:
            action.add_success_fields(result="ok")
        memory_logger.validate()

    def test_missing_success_field_fails_validation(self, memory_logger):
        with LOG_DO(key=1, logger=memory_logger):
            pass
        with pytest.raises(ValidationError):
            memory_logger.validate()

    def test_failure_validates_with_extra_fields(self, memory_logger):
        with pytest.raises(ZeroDivisionError):
            with LOG_DO(key=1, logger=memory_logger):
                1 / 0
        memory_logger.validate()
        assert_contains_fields(memory_logger.messages[1], {
            "action_status": "failed",
            "exception": "ZeroDivisionError",
        })

    def test_call_is_a_child_of_the_current_action(self, memory_logger):
        parent = Action(memory_logger, "uuid", TaskLevel(()), "other")
        child = with_action(parent, lambda _: LOG_DO(key=1, logger=memory_logger))
        assert child.task_uuid == "uuid"
        assert child.task_level == TaskLevel((1,))

    def test_as_task_starts_a_new_task(self, memory_logger):
        parent = Action(memory_logger, "uuid", TaskLevel(()), "other")
        task = with_action(parent, lambda _: LOG_DO.as_task(key=1, logger=memory_logger))
        assert task.task_uuid != "uuid"
        assert task.task_level == TaskLevel(())
        assert task._serializers is LOG_DO._serializers


def test_action_type_end_to_end(memory_logger):
    """A schema-bound action logs exactly one start and one success entry."""
    do = ActionType(
        "app:do",
        [BoundField.for_types("key", ["number"])],
        [BoundField.for_types("result", ["string"])],
    )

    with_action(do({"key": 123}, logger=memory_logger),
                lambda action: action.add_success_fields({"result": "ok"}))

    memory_logger.validate()
    assert len(memory_logger.messages) == 2
    start, success = memory_logger.messages
    assert_contains_fields(start, {
        "action_type": "app:do",
        "action_status": "started",
        "key": 123,
        "task_level": [1],
    })
    assert_contains_fields(success, {
        "action_type": "app:do",
        "action_status": "succeeded",
        "result": "ok",
        "task_level": [2],
    })
    assert start["task_uuid"] == success["task_uuid"]
