from typing import Optional, Dict

from database.core import DatabaseManager, QueryError


class User:
    def __init__(self, db: DatabaseManager):
        self.db = db
        self.required_fields = ["login", "password"]
        # Column widths of the USR table
        self.max_lengths = {"login": 50, "password": 50, "phone": 16}

    def _validate_fields(self, data: Dict[str, str]) -> None:
        """Validate required fields and column widths"""
        missing_fields = [
            field for field in self.required_fields if not (data.get(field) or "").strip()
        ]
        if missing_fields:
            raise ValueError(f"Missing required fields: {', '.join(missing_fields)}")

        for field, max_length in self.max_lengths.items():
            if len(data.get(field) or "") > max_length:
                raise ValueError(f"{field} must be at most {max_length} characters")

    def create(self, login: str, password: str, phone: str) -> str:
        """Create a user together with its empty block and contact lists.

        The two lists and the user row are written in one transaction, so a
        failure part-way through leaves nothing behind.
        """
        self._validate_fields({"login": login, "password": password, "phone": phone})

        with self.db.transaction() as cursor:
            cursor.execute(
                "INSERT INTO user_list (list_type) VALUES ('block') RETURNING list_id"
            )
            block_id = cursor.fetchone()[0]
            cursor.execute(
                "INSERT INTO user_list (list_type) VALUES ('contact') RETURNING list_id"
            )
            contact_id = cursor.fetchone()[0]
            cursor.execute(
                """
                INSERT INTO usr (phoneNum, login, password, block_list, contact_list)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (phone or None, login, password, block_id, contact_id),
            )
        return login

    def authenticate(self, login: str, password: str) -> Optional[str]:
        """Return the login if the credentials match, None otherwise"""
        query = "SELECT 1 FROM usr WHERE login = %s AND password = %s"
        try:
            if self.db.query_count(query, (login, password)):
                return login
        except QueryError as e:
            self.db.logger.error("Login check failed for %s: %s", login, e)
        return None
