from typing import List, Optional, Dict

from database.core import DatabaseManager

MAX_MESSAGE_LENGTH = 300


class Message:
    def __init__(self, db: DatabaseManager):
        self.db = db
        self.fields = ["msg_id", "msg_text", "msg_timestamp", "sender_login"]

    def _validate_text(self, text: str) -> None:
        if not text.strip():
            raise ValueError("Message can't be empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"Message must be at most {MAX_MESSAGE_LENGTH} characters")

    def recent(self, chat_id: int, limit: int) -> List[Dict[str, str]]:
        """Newest messages of a chat, most recent first"""
        query = """
        SELECT msg_id, msg_text, msg_timestamp, sender_login
        FROM message
        WHERE chat_id = %s
        ORDER BY msg_timestamp DESC, msg_id DESC
        LIMIT %s
        """
        rows = self.db.query_rows(query, (chat_id, limit))
        return [
            {field: (value or "").strip() for field, value in zip(self.fields, row)}
            for row in rows
        ]

    def write(self, sender: str, chat_id: int, text: str) -> int:
        """Insert a message stamped with the server clock, returning its id"""
        self._validate_text(text)
        query = """
        INSERT INTO message (msg_text, msg_timestamp, sender_login, chat_id)
        VALUES (%s, LOCALTIMESTAMP(0), %s, %s)
        RETURNING msg_id
        """
        rows = self.db.query_rows(query, (text, sender, chat_id))
        return int(rows[0][0])

    def find_owned(self, msg_id: int, chat_id: int, sender: str) -> Optional[str]:
        """Text of the message if it is in this chat and was sent by sender"""
        query = """
        SELECT msg_text FROM message
        WHERE msg_id = %s AND chat_id = %s AND sender_login = %s
        """
        rows = self.db.query_rows(query, (msg_id, chat_id, sender))
        return rows[0][0].strip() if rows else None

    def delete(self, msg_id: int, chat_id: int, sender: str) -> bool:
        query = """
        DELETE FROM message
        WHERE msg_id = %s AND chat_id = %s AND sender_login = %s
        """
        return self.db.execute(query, (msg_id, chat_id, sender)) > 0

    def edit(self, msg_id: int, chat_id: int, sender: str, text: str) -> bool:
        self._validate_text(text)
        query = """
        UPDATE message SET msg_text = %s
        WHERE msg_id = %s AND chat_id = %s AND sender_login = %s
        """
        return self.db.execute(query, (text, msg_id, chat_id, sender)) > 0
