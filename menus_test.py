import pytest
from unittest.mock import patch, MagicMock

from database.core import DatabaseManager, QueryError, DuplicateEntryError
from models.session import ChatState, Session
from models.user_list import CONTACT, BLOCK, UnknownUserError
from ui.menus import MenuSystem, parse_id


@pytest.fixture
def menu():
    """MenuSystem with every model replaced by a mock."""
    system = MenuSystem(MagicMock(spec=DatabaseManager))
    system.user_model = MagicMock()
    system.list_model = MagicMock()
    system.chat_model = MagicMock()
    system.message_model = MagicMock()
    return system


@pytest.fixture
def ui():
    """Patch console input and the error/notice panels used by the menus."""
    with patch("ui.menus.read_choice") as read_choice, patch(
        "ui.menus.read_line"
    ) as read_line, patch("ui.menus.pause") as pause, patch(
        "ui.menus.confirm"
    ) as confirm, patch(
        "ui.menus.display_error"
    ) as display_error, patch(
        "ui.menus.display_panel"
    ) as display_panel:
        yield MagicMock(
            read_choice=read_choice,
            read_line=read_line,
            pause=pause,
            confirm=confirm,
            display_error=display_error,
            display_panel=display_panel,
        )


SESSION = Session("alice")


class TestMainMenu:
    def test_exit(self, menu, ui):
        ui.read_choice.side_effect = [9]

        menu.main_menu()

        ui.pause.assert_not_called()

    def test_unrecognized_choice_redisplays(self, menu, ui):
        ui.read_choice.side_effect = [7, 9]

        menu.main_menu()

        ui.display_error.assert_called_once_with("Unrecognized choice!")
        assert ui.read_choice.call_count == 2

    def test_login_enters_user_menu(self, menu, ui):
        ui.read_choice.side_effect = [1, 9]
        ui.read_line.side_effect = ["alice", "secret"]
        menu.user_model.authenticate.return_value = "alice"

        with patch.object(menu, "_user_menu") as user_menu:
            menu.main_menu()

        user_menu.assert_called_once_with(Session("alice"))

    def test_failed_login_stays_unauthenticated(self, menu, ui):
        ui.read_choice.side_effect = [1, 9]
        ui.read_line.side_effect = ["alice", "wrong"]
        menu.user_model.authenticate.return_value = None

        with patch.object(menu, "_user_menu") as user_menu:
            menu.main_menu()

        user_menu.assert_not_called()
        ui.display_error.assert_called_once_with("Username or Password Incorrect")

    def test_create_account_does_not_log_in(self, menu, ui):
        ui.read_choice.side_effect = [2, 9]
        ui.read_line.side_effect = ["bob", "pw", "555"]

        with patch.object(menu, "_user_menu") as user_menu:
            menu.main_menu()

        menu.user_model.create.assert_called_once_with("bob", "pw", "555")
        user_menu.assert_not_called()

    def test_create_account_taken_login(self, menu, ui):
        ui.read_choice.side_effect = [2, 9]
        ui.read_line.side_effect = ["bob", "pw", "555"]
        menu.user_model.create.side_effect = DuplicateEntryError("duplicate key")

        menu.main_menu()

        assert "already taken" in ui.display_error.call_args.args[0]

    def test_create_account_validation_error(self, menu, ui):
        ui.read_choice.side_effect = [2, 9]
        ui.read_line.side_effect = ["", "pw", ""]
        menu.user_model.create.side_effect = ValueError("Missing required fields: login")

        menu.main_menu()

        assert ui.display_error.call_args.args[0].startswith("Validation error")


class TestUserMenu:
    def test_logout(self, menu, ui):
        ui.read_choice.side_effect = [9]

        menu._user_menu(SESSION)

    def test_query_error_does_not_end_session(self, menu, ui):
        ui.read_choice.side_effect = [1, 2, 9]
        menu.list_model.members.side_effect = [QueryError("relation missing"), []]

        menu._user_menu(SESSION)

        assert "relation missing" in ui.display_error.call_args.args[0]
        assert menu.list_model.members.call_args.args == ("alice", BLOCK)

    def test_add_contact(self, menu, ui):
        ui.read_line.side_effect = ["bob"]

        menu._add_contact(SESSION)

        menu.list_model.add.assert_called_once_with("alice", "bob", CONTACT)
        ui.display_panel.assert_called_once_with(
            "bob has been added to your contacts.", "green"
        )

    def test_add_unknown_contact(self, menu, ui):
        ui.read_line.side_effect = ["ghost"]
        menu.list_model.add.side_effect = UnknownUserError("ghost")

        menu._add_contact(SESSION)

        ui.display_error.assert_called_once_with("ghost doesn't exist!")

    def test_add_duplicate_contact(self, menu, ui):
        ui.read_line.side_effect = ["bob"]
        menu.list_model.add.side_effect = DuplicateEntryError("duplicate key")

        menu._add_contact(SESSION)

        ui.display_panel.assert_called_once_with(
            "bob is already in your contact list!", "yellow"
        )

    def test_block_duplicate(self, menu, ui):
        ui.read_line.side_effect = ["bob"]
        menu.list_model.add.side_effect = DuplicateEntryError("duplicate key")

        menu._add_block(SESSION)

        menu.list_model.add.assert_called_once_with("alice", "bob", BLOCK)
        ui.display_panel.assert_called_once_with("bob is already blocked!", "yellow")


class TestChatInterface:
    def test_enter_chat_without_chats(self, menu, ui):
        menu.chat_model.print_for.return_value = 0

        menu._enter_chat(SESSION)

        ui.read_line.assert_not_called()

    def test_pick_chat_reprompts_until_member(self, menu, ui):
        ui.read_line.side_effect = ["abc", "7", "3"]
        menu.chat_model.is_member.side_effect = [False, True]

        assert menu._pick_chat(SESSION) == 3
        assert menu.chat_model.is_member.call_count == 2

    def test_pick_chat_cancel(self, menu, ui):
        ui.read_line.side_effect = [""]

        assert menu._pick_chat(SESSION) is None

    def test_enter_chat_opens_room(self, menu, ui):
        menu.chat_model.print_for.return_value = 1
        ui.read_line.side_effect = ["3"]
        menu.chat_model.is_member.return_value = True

        with patch.object(menu, "_chat_room") as chat_room:
            menu._enter_chat(SESSION)

        assert chat_room.call_args.args == (SESSION, ChatState(3))


class TestChatRoom:
    def test_load_more_raises_limit(self, menu, ui):
        ui.read_choice.side_effect = [4, 9]
        menu.message_model.recent.return_value = []

        menu._chat_room(SESSION, ChatState(3))

        limits = [c.args[1] for c in menu.message_model.recent.call_args_list]
        assert limits == [10, 20]

    def test_write_message(self, menu, ui):
        ui.read_line.side_effect = ["hello"]
        menu.message_model.write.return_value = 42

        status = menu._write_message(SESSION, ChatState(3))

        menu.message_model.write.assert_called_once_with("alice", 3, "hello")
        assert "#42" in status

    def test_delete_other_users_message(self, menu, ui):
        ui.read_line.side_effect = ["5"]
        menu.message_model.find_owned.return_value = None

        status = menu._delete_message(SESSION, ChatState(3))

        assert status.strip().startswith("Error:")
        menu.message_model.delete.assert_not_called()

    def test_delete_confirmed(self, menu, ui):
        ui.read_line.side_effect = ["5"]
        menu.message_model.find_owned.return_value = "hello"
        ui.confirm.return_value = True

        status = menu._delete_message(SESSION, ChatState(3))

        menu.message_model.delete.assert_called_once_with(5, 3, "alice")
        assert "deleted" in status

    def test_delete_declined(self, menu, ui):
        ui.read_line.side_effect = ["5"]
        menu.message_model.find_owned.return_value = "hello"
        ui.confirm.return_value = False

        status = menu._delete_message(SESSION, ChatState(3))

        menu.message_model.delete.assert_not_called()
        assert "not been deleted" in status

    def test_edit_message(self, menu, ui):
        ui.read_line.side_effect = ["5", "fixed"]
        menu.message_model.find_owned.return_value = "hello"

        status = menu._edit_message(SESSION, ChatState(3))

        menu.message_model.edit.assert_called_once_with(5, 3, "alice", "fixed")
        assert "edited" in status

    def test_edit_rejects_non_numeric_id(self, menu, ui):
        ui.read_line.side_effect = ["five"]

        assert menu._edit_message(SESSION, ChatState(3)) is None
        menu.message_model.find_owned.assert_not_called()
        ui.display_error.assert_called_once()


class TestParseId:
    @pytest.mark.parametrize("answer,expected", [("3", 3), (" 12 ", 12), ("2147483647", 2147483647)])
    def test_valid(self, answer, expected):
        assert parse_id(answer) == expected

    @pytest.mark.parametrize("answer", ["", "abc", "²", "0", "-4", "2147483648", "99999999999"])
    def test_rejected(self, answer):
        assert parse_id(answer) is None

    def test_pick_chat_ignores_unusable_ids(self, menu, ui):
        ui.read_line.side_effect = ["²", "99999999999", ""]

        assert menu._pick_chat(SESSION) is None
        menu.chat_model.is_member.assert_not_called()

    def test_delete_rejects_superscript_digit(self, menu, ui):
        ui.read_line.side_effect = ["²"]

        assert menu._delete_message(SESSION, ChatState(3)) is None
        menu.message_model.find_owned.assert_not_called()
        ui.display_error.assert_called_once_with("'²' is not a message number")
