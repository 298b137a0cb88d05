from __future__ import annotations

import pytest

from src.governance_system.governance_system.core.enums import NotificationType
from src.governance_system.governance_system.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def people(make_user):
    return {"me": make_user(name="Me"), "ana": make_user(name="Ana"), "ben": make_user(name="Ben")}


def test_send_notifies_receiver(container, people, sink):
    container.messaging_service.send_message(sender_id=people["me"], receiver_id=people["ana"], content="Hi!")

    assert sink.sent == [
        {
            "user_id": people["ana"],
            "title": "New Message",
            "message": "You have received a new message.",
            "type": NotificationType.MESSAGE,
            "related_id": people["me"],
        }
    ]


def test_empty_content_is_rejected(container, people):
    with pytest.raises(ValidationError):
        container.messaging_service.send_message(sender_id=people["me"], receiver_id=people["ana"], content="   ")


def test_unknown_receiver(container, people):
    with pytest.raises(NotFoundError):
        container.messaging_service.send_message(sender_id=people["me"], receiver_id=999, content="hello")


def test_conversations_grouped_by_partner_latest_first(container, people):
    service = container.messaging_service
    me, ana, ben = people["me"], people["ana"], people["ben"]

    service.send_message(sender_id=me, receiver_id=ana, content="hello ana")
    service.send_message(sender_id=ben, receiver_id=me, content="hi from ben")
    service.send_message(sender_id=ana, receiver_id=me, content="hey back")
    service.send_message(sender_id=me, receiver_id=ben, content="ok ben")

    previews = service.list_conversation_partners(me)

    assert [p.partner_id for p in previews] == [ben, ana]
    assert previews[0].last_message.content == "ok ben"
    assert previews[0].unread is False
    assert previews[1].last_message.content == "hey back"
    assert previews[1].unread is True


def test_reading_thread_marks_incoming_messages_read(container, people, repos):
    service = container.messaging_service
    me, ana = people["me"], people["ana"]
    service.send_message(sender_id=ana, receiver_id=me, content="one")
    service.send_message(sender_id=me, receiver_id=ana, content="two")
    service.send_message(sender_id=ana, receiver_id=me, content="three")

    thread = service.list_messages(user_id=me, partner_id=ana)

    assert [m.content for m in thread] == ["one", "two", "three"]
    assert [m.read for m in thread] == [True, False, True]
    assert len(repos.messages.mark_read_calls) == 1

    # Nothing left to mark on a second read.
    service.list_messages(user_id=me, partner_id=ana)
    assert len(repos.messages.mark_read_calls) == 1
    assert service.list_conversation_partners(me)[0].unread is False
