from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Sequence

from ..common.validators import require_non_empty
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..identity.repository import UserRepository
from ..notifications.sink import NotificationSink, emit_best_effort
from .model import ConversationPreview, Message
from .repository import MessageRepository

logger = logging.getLogger(__name__)


class MessagingService:
    def __init__(self, messages: MessageRepository, users: UserRepository, notifier: NotificationSink):
        self._messages = messages
        self._users = users
        self._notifier = notifier

    def send_message(self, *, sender_id: int, receiver_id: int, content: str) -> int:
        content = require_non_empty(content, "Message")
        if int(sender_id) == int(receiver_id):
            raise ValidationError("Cannot send a message to yourself")
        if not self._users.get_by_id(int(receiver_id)):
            raise NotFoundError("Recipient not found")

        message_id = self._messages.create(sender_id=int(sender_id), receiver_id=int(receiver_id), content=content)
        logger.debug("Message %s from %s to %s", message_id, sender_id, receiver_id)

        emit_best_effort(
            self._notifier,
            int(receiver_id),
            "New Message",
            "You have received a new message.",
            NotificationType.MESSAGE,
            int(sender_id),
        )
        return message_id

    def list_conversation_partners(self, user_id: int) -> Sequence[ConversationPreview]:
        """One preview per partner, most recent conversation first."""
        user_id = int(user_id)
        previews: Dict[int, ConversationPreview] = {}
        for msg in self._messages.list_for_user(user_id):
            partner_id = msg.partner_of(user_id)
            if partner_id in previews:
                continue
            previews[partner_id] = ConversationPreview(
                partner_id=partner_id,
                last_message=msg,
                unread=msg.receiver_id == user_id and not msg.read,
            )
        return list(previews.values())

    def list_messages(self, *, user_id: int, partner_id: int) -> Sequence[Message]:
        """Return the thread oldest first and mark the user's incoming messages read."""
        user_id = int(user_id)
        thread = list(self._messages.list_thread(user_id, int(partner_id)))

        unread_ids: List[int] = [m.message_id for m in thread if m.receiver_id == user_id and not m.read]
        if not unread_ids:
            return thread

        self._messages.mark_read(unread_ids)
        marked = set(unread_ids)
        return [replace(m, read=True) if m.message_id in marked else m for m in thread]
