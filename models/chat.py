from database.core import DatabaseManager

CHATS_QUERY = """
SELECT c.chat_id, c.chat_type, c.init_sender
FROM chat c
JOIN chat_list cl ON c.chat_id = cl.chat_id
WHERE cl.member = %s
ORDER BY c.chat_id
"""


class Chat:
    def __init__(self, db: DatabaseManager):
        self.db = db

    def print_for(self, login: str) -> int:
        return self.db.query_and_print(CHATS_QUERY, (login,), title="Your Chats")

    def is_member(self, login: str, chat_id: int) -> bool:
        return bool(
            self.db.query_count(
                "SELECT 1 FROM chat_list WHERE member = %s AND chat_id = %s",
                (login, chat_id),
            )
        )
