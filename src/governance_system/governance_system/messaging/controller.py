from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, int_field, json_body, to_json
from ..container import Container
from ..core.policy import Operation


def register(app: Flask, container: Container) -> None:
    gateway = container.identity_gateway
    service = container.messaging_service

    @app.route("/api/messages", methods=["POST"], endpoint="messages_send")
    @auth_required(gateway, Operation.SEND_MESSAGE)
    def messages_send(principal):
        data = json_body()
        message_id = service.send_message(
            sender_id=principal.user_id,
            receiver_id=int_field(data, "receiver_id"),
            content=data.get("content", ""),
        )
        return jsonify({"message_id": message_id}), 201

    @app.route("/api/messages/conversations", methods=["GET"], endpoint="messages_conversations")
    @auth_required(gateway, Operation.READ_MESSAGES)
    def messages_conversations(principal):
        return jsonify(to_json(service.list_conversation_partners(principal.user_id)))

    @app.route("/api/messages/<int:partner_id>", methods=["GET"], endpoint="messages_thread")
    @auth_required(gateway, Operation.READ_MESSAGES)
    def messages_thread(partner_id: int, principal):
        return jsonify(to_json(service.list_messages(user_id=principal.user_id, partner_id=partner_id)))
