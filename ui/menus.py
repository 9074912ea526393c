from typing import Any, Callable, Dict, Optional, Tuple

from rich.console import Console

from config import setup_logger
from database.core import DatabaseManager, DuplicateEntryError, QueryError
from models.chat import Chat
from models.message import Message
from models.session import ChatState, Session
from models.user import User
from models.user_list import BLOCK, CONTACT, UnknownUserError, UserList
from ui.bubbles import render_messages
from ui.console import (
    confirm,
    display_end_title,
    display_error,
    display_lines,
    display_logo,
    display_menu,
    display_panel,
    display_title,
    pause,
    read_choice,
    read_line,
)

console = Console()

EXIT = 9

# Chat and message ids are int4 columns
MAX_ID = 2**31 - 1

Options = Dict[int, Tuple[str, Optional[Callable[..., Any]]]]


def parse_id(answer: str) -> Optional[int]:
    """Positive id typed by the user, or None if it can't be one"""
    try:
        value = int(answer)
    except ValueError:
        return None
    return value if 0 < value <= MAX_ID else None


class MenuSystem:
    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager
        self.user_model = User(db_manager)
        self.list_model = UserList(db_manager)
        self.chat_model = Chat(db_manager)
        self.message_model = Message(db_manager)
        self.logger = setup_logger("MenuSystem")

    def _handle_choice(self, options: Options, choice: int, *args: Any) -> Any:
        """Run the selected action; failures are reported, never raised"""
        if choice not in options:
            display_error("Unrecognized choice!")
            return None

        _, action = options[choice]
        try:
            return action(*args)
        except QueryError as e:
            display_error(f"Operation failed: {e}")
        except ValueError as e:
            display_error(f"Validation error: {e}")
        except EOFError:
            raise
        except Exception as e:
            self.logger.exception("Unexpected error in menu action")
            display_error(f"Operation failed: {e}")
        return None

    # Unauthenticated

    def main_menu(self) -> None:
        """Top-level loop: login, create account, exit"""
        options: Options = {
            1: ("Login", self._login),
            2: ("Create a New Account", self._create_user),
            EXIT: ("< EXIT", None),
        }
        while True:
            console.clear()
            display_logo()
            display_menu("MAIN MENU", options)

            choice = read_choice()
            if choice == EXIT:
                return

            session = self._handle_choice(options, choice)
            if isinstance(session, Session):
                self._user_menu(session)
            else:
                pause()

    def _login(self) -> Optional[Session]:
        title = "Login"
        display_title(title)
        login = read_line("Enter user login:")
        password = read_line("Enter user password:", password=True)

        authorised = self.user_model.authenticate(login, password)
        if authorised is None:
            display_error("Username or Password Incorrect")
        display_end_title(title)
        return Session(authorised) if authorised is not None else None

    def _create_user(self) -> None:
        title = "Create a New Account"
        display_title(title)
        login = read_line("Enter user login:")
        password = read_line("Enter user password:", password=True)
        phone = read_line("Enter user phone:")

        try:
            self.user_model.create(login, password, phone)
            display_panel("✅ User successfully created!", "green")
        except DuplicateEntryError:
            display_error(f"Login '{login}' or that phone number is already taken")
        display_end_title(title)

    # Authenticated

    def _user_menu(self, session: Session) -> None:
        options: Options = {
            1: ("Show Contacts", self._list_contacts),
            2: ("Show Blocked List", self._list_blocks),
            3: ("Show Chat Interface", self._chat_interface),
            4: ("Add a New Contact", self._add_contact),
            5: ("Block a User", self._add_block),
            EXIT: ("Log out", None),
        }
        while True:
            console.clear()
            display_logo()
            display_menu(f"WELCOME, {session.login}", options)

            choice = read_choice()
            if choice == EXIT:
                return

            self._handle_choice(options, choice, session)
            if choice != 3:
                pause()

    def _show_list(self, session: Session, list_type: str, title: str, empty: str) -> None:
        display_title(title)
        members = self.list_model.members(session.login, list_type)
        if not members:
            console.print(f"\t{empty}", markup=False)
        for number, member in enumerate(members, 1):
            console.print(f"\t{number}. {member}", markup=False)
        display_end_title(title)

    def _list_contacts(self, session: Session) -> None:
        self._show_list(session, CONTACT, "Your Contacts", "You have no friends. :(")

    def _list_blocks(self, session: Session) -> None:
        self._show_list(
            session, BLOCK, "Blocked Users", "You haven't blocked anyone yet."
        )

    def _add_to_list(self, session: Session, list_type: str) -> None:
        title = "Add a New Contact" if list_type == CONTACT else "Block a User"
        display_title(title)
        member = read_line("Enter the user's login:")

        try:
            self.list_model.add(session.login, member, list_type)
            if list_type == CONTACT:
                display_panel(f"{member} has been added to your contacts.", "green")
            else:
                display_panel(f"{member} is now blocked.", "green")
        except UnknownUserError:
            display_error(f"{member} doesn't exist!")
        except DuplicateEntryError:
            if list_type == CONTACT:
                display_panel(f"{member} is already in your contact list!", "yellow")
            else:
                display_panel(f"{member} is already blocked!", "yellow")
        display_end_title(title)

    def _add_contact(self, session: Session) -> None:
        self._add_to_list(session, CONTACT)

    def _add_block(self, session: Session) -> None:
        self._add_to_list(session, BLOCK)

    # Chat list

    def _chat_interface(self, session: Session) -> None:
        options: Options = {
            1: ("Enter a Chat", self._enter_chat),
            2: ("List Your Chats", self._list_chats),
            EXIT: ("Leave Chat Interface", None),
        }
        while True:
            display_menu("CHAT INTERFACE", options)
            choice = read_choice()
            if choice == EXIT:
                return
            self._handle_choice(options, choice, session)

    def _list_chats(self, session: Session) -> int:
        title = "Your Chats"
        display_title(title)
        count = self.chat_model.print_for(session.login)
        if not count:
            console.print("\tYou have no chats. :(")
        display_end_title(title)
        return count

    def _pick_chat(self, session: Session) -> Optional[int]:
        """Ask for a chat id until the user picks one of theirs or gives up"""
        while True:
            answer = read_line("Please pick a chat ID (Enter to cancel):").strip()
            if not answer:
                return None
            chat_id = parse_id(answer)
            if chat_id is not None and self.chat_model.is_member(session.login, chat_id):
                return chat_id
            console.print("\tInvalid ID, please pick another!\n")

    def _enter_chat(self, session: Session) -> None:
        if not self._list_chats(session):
            return

        chat_id = self._pick_chat(session)
        if chat_id is not None:
            self._chat_room(session, ChatState(chat_id))

    # In a chat

    def _chat_room(self, session: Session, state: ChatState) -> None:
        options: Options = {
            1: ("Write a New Message", self._write_message),
            2: ("Delete a Message", self._delete_message),
            3: ("Edit a Message", self._edit_message),
            4: ("Load Messages", self._load_messages),
            EXIT: ("Exit Chat", None),
        }
        status: Optional[str] = None
        while True:
            self._show_messages(session, state)
            if state.loaded_more:
                console.print("\tPast messages have been loaded.")
                state.loaded_more = False
            if status:
                console.print(status, markup=False)

            display_menu(f"Chat #{state.chat_id} Options", options)
            choice = read_choice()
            if choice == EXIT:
                return
            status = self._handle_choice(options, choice, session, state)

    def _show_messages(self, session: Session, state: ChatState) -> None:
        title = f"Chat #{state.chat_id} Messages"
        display_title(title)
        try:
            messages = self.message_model.recent(state.chat_id, state.limit)
            if messages:
                display_lines(render_messages(messages, session.login))
            else:
                console.print("This chat has no messages.")
        except QueryError as e:
            display_error(f"Couldn't load messages: {e}")
        display_end_title(title)

    def _read_message_id(self, action: str) -> Optional[int]:
        answer = read_line(f"Select a message to {action}:").strip()
        msg_id = parse_id(answer)
        if msg_id is None:
            display_error(f"'{answer}' is not a message number")
            return None
        return msg_id

    def _write_message(self, session: Session, state: ChatState) -> str:
        title = "Write a New Message"
        display_title(title)
        text = read_line("Enter a message:")
        msg_id = self.message_model.write(session.login, state.chat_id, text)
        display_end_title(title)
        return f"\n\tMessage #{msg_id} was sent!"

    def _delete_message(self, session: Session, state: ChatState) -> Optional[str]:
        title = "Delete a Message"
        display_title(title)
        msg_id = self._read_message_id("delete")
        if msg_id is None:
            return None

        text = self.message_model.find_owned(msg_id, state.chat_id, session.login)
        if text is None:
            status = (
                "\tError: You have either entered an invalid message # "
                "or tried to delete another user's message."
            )
        else:
            console.print(f"\tMessage: {text}", markup=False)
            if confirm("\tAre you sure you want to delete this message?", default=False):
                self.message_model.delete(msg_id, state.chat_id, session.login)
                status = f"\tMessage #{msg_id} deleted."
            else:
                status = "\tMessage has not been deleted."
        display_end_title(title)
        return status

    def _edit_message(self, session: Session, state: ChatState) -> Optional[str]:
        title = "Edit a Message"
        display_title(title)
        msg_id = self._read_message_id("edit")
        if msg_id is None:
            return None

        text = self.message_model.find_owned(msg_id, state.chat_id, session.login)
        if text is None:
            status = (
                "\tError: You have either entered an invalid message # "
                "or tried to edit another user's message."
            )
        else:
            console.print(f"\tOld message: {text}", markup=False)
            new_text = read_line("Enter a new message:")
            self.message_model.edit(msg_id, state.chat_id, session.login, new_text)
            status = f"\tMessage #{msg_id} has been edited."
        display_end_title(title)
        return status

    def _load_messages(self, session: Session, state: ChatState) -> None:
        state.load_more()
