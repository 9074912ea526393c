from typing import List

from psycopg2 import sql

from database.core import DatabaseManager

CONTACT = "contact"
BLOCK = "block"

# USR column holding the id of each list kind
LIST_COLUMNS = {CONTACT: "contact_list", BLOCK: "block_list"}


class UnknownUserError(LookupError):
    """The login being added to a list is not registered."""


class UserList:
    """Per-user contact and block lists; a login sits in at most one of them."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    def _column(self, list_type: str) -> sql.Identifier:
        if list_type not in LIST_COLUMNS:
            raise ValueError(f"List type must be one of: {', '.join(LIST_COLUMNS)}")
        return sql.Identifier(LIST_COLUMNS[list_type])

    @staticmethod
    def opposite(list_type: str) -> str:
        return BLOCK if list_type == CONTACT else CONTACT

    def members(self, owner: str, list_type: str) -> List[str]:
        """Logins in the owner's list, in insertion order of the server"""
        query = sql.SQL(
            """
            SELECT ulc.list_member
            FROM user_list_contains ulc
            JOIN usr u ON u.{} = ulc.list_id
            WHERE u.login = %s
            """
        ).format(self._column(list_type))

        return [row[0].strip() for row in self.db.query_rows(query, (owner,))]

    def add(self, owner: str, member: str, list_type: str) -> None:
        """Put member in the owner's list, taking it out of the other one.

        Raises UnknownUserError if member isn't registered and
        DuplicateEntryError if it is already in the list.
        """
        column = self._column(list_type)
        other_column = self._column(self.opposite(list_type))

        if not self.db.query_count("SELECT 1 FROM usr WHERE login = %s", (member,)):
            raise UnknownUserError(member)

        with self.db.transaction() as cursor:
            cursor.execute(
                sql.SQL(
                    """
                    DELETE FROM user_list_contains
                    WHERE list_id = (SELECT {} FROM usr WHERE login = %s)
                    AND list_member = %s
                    """
                ).format(other_column),
                (owner, member),
            )
            cursor.execute(
                sql.SQL(
                    """
                    INSERT INTO user_list_contains (list_id, list_member)
                    VALUES ((SELECT {} FROM usr WHERE login = %s), %s)
                    """
                ).format(column),
                (owner, member),
            )
