import json

import pytest
from pydantic_core import PydanticSerializationError

from fcm_client.domain import Message, MessageValidationError, Notification, validate


class TestValidate:
    def test_registration_ids_are_a_target(self):
        validate(Message(registration_ids=["token-1"]))

    def test_to_is_a_target(self):
        validate(Message(to="/topics/news"))

    def test_condition_is_a_target(self):
        validate(Message(condition="'a' in topics && ('b' in topics || 'c' in topics)"))

    @pytest.mark.parametrize(
        "message",
        [
            Message(),
            Message(registration_ids=[]),
            Message(to="", condition=""),
            Message(notification=Notification(title="no target"), data={"k": "v"}),
        ],
    )
    def test_no_target_raises_error(self, message):
        with pytest.raises(MessageValidationError, match="no valid target"):
            validate(message)

    def test_missing_message_raises_error(self):
        with pytest.raises(MessageValidationError, match="invalid"):
            validate(None)

    def test_condition_with_too_many_operators_raises_error(self):
        condition = "'a' in topics && 'b' in topics && 'c' in topics && 'd' in topics"

        with pytest.raises(MessageValidationError, match="no valid target"):
            validate(Message(condition=condition))

    def test_too_many_registration_ids_raises_error(self):
        message = Message(registration_ids=[f"token-{i}" for i in range(1001)])

        with pytest.raises(MessageValidationError, match="more than 1000"):
            validate(message)

    def test_registration_ids_at_limit_are_valid(self):
        validate(Message(registration_ids=[f"token-{i}" for i in range(1000)]))

    def test_time_to_live_over_four_weeks_raises_error(self):
        with pytest.raises(MessageValidationError, match="time_to_live"):
            validate(Message(to="token", time_to_live=2419201))

    def test_time_to_live_at_four_weeks_is_valid(self):
        validate(Message(to="token", time_to_live=2419200))


class TestStringData:
    def test_strings_pass_through(self):
        message = Message(to="token", data={"a": "1", "b": "two"})

        assert message.string_data() == {"a": "1", "b": "two"}

    def test_scalars_are_stringified(self):
        message = Message(to="token", data={"count": 3, "ratio": 0.5, "flag": True})

        assert message.string_data() == {"count": "3", "ratio": "0.5", "flag": "true"}

    def test_nested_value_raises_error(self):
        message = Message(to="token", data={"nested": {"a": 1}})

        with pytest.raises(MessageValidationError, match="nested"):
            message.string_data()

    def test_no_data_is_empty(self):
        assert Message(to="token").string_data() == {}


class TestToJson:
    def test_unset_fields_are_omitted(self):
        message = Message(
            registration_ids=["token-1", "token-2"],
            notification=Notification(title="Hi"),
            data={"k": "v"},
        )

        body = json.loads(message.to_json())

        assert body == {
            "registration_ids": ["token-1", "token-2"],
            "notification": {"title": "Hi"},
            "data": {"k": "v"},
        }

    def test_empty_registration_ids_are_omitted(self):
        body = json.loads(Message(to="/topics/news", priority="high").to_json())

        assert body == {"to": "/topics/news", "priority": "high"}

    def test_unencodable_data_raises_validation_error(self):
        message = Message(to="token", data={"k": object()})

        with pytest.raises(MessageValidationError, match="cannot be encoded") as exc_info:
            message.to_json()

        assert isinstance(exc_info.value.__cause__, PydanticSerializationError)

    def test_recipient_count(self, multicast_message):
        assert multicast_message.recipient_count == 3
