"""Leaf-command handlers bound to a mail backend.

The backend itself (IMAP, Maildir, SMTP, ...) lives outside this package;
:class:`MailBackend` is the surface the handlers need from it.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import Callable, Protocol

from mailrepl.dispatch import CommandRegistry, CommandUsageError
from mailrepl.grammar import CommandGrammar
from mailrepl.render import format_table

UNSEEN_CHAR = "*"
REPLIED_CHAR = "R"
FLAGGED_CHAR = "!"
ATTACHMENT_CHAR = "@"


@dataclass
class Envelope:
    id: str
    subject: str
    sender: str
    date: str
    flags: frozenset[str] = field(default_factory=frozenset)
    has_attachment: bool = False

    def flag_chars(self) -> str:
        return "".join(
            [
                FLAGGED_CHAR if "flagged" in self.flags else " ",
                UNSEEN_CHAR if "seen" not in self.flags else " ",
                ATTACHMENT_CHAR if self.has_attachment else " ",
                REPLIED_CHAR if "answered" in self.flags else " ",
            ]
        )


class MailBackend(Protocol):
    def list_accounts(self) -> list[str]: ...

    def check_account(self, account: str | None) -> str: ...

    def list_folders(self) -> list[str]: ...

    def add_folder(self, folder: str) -> None: ...

    def expunge_folder(self, folder: str) -> None: ...

    def purge_folder(self, folder: str) -> None: ...

    def delete_folder(self, folder: str) -> None: ...

    def list_envelopes(self, folder: str, page: int, page_size: int) -> list[Envelope]: ...

    def thread_envelopes(self, folder: str) -> list[tuple[int, Envelope]]: ...

    def add_flags(self, folder: str, ids: list[str], flags: list[str]) -> None: ...

    def set_flags(self, folder: str, ids: list[str], flags: list[str]) -> None: ...

    def remove_flags(self, folder: str, ids: list[str], flags: list[str]) -> None: ...

    def read_messages(self, folder: str, ids: list[str]) -> list[str]: ...

    def thread_messages(self, folder: str, id: str) -> list[str]: ...

    def new_template(self) -> str: ...

    def reply_template(self, folder: str, id: str, reply_all: bool) -> str: ...

    def forward_template(self, folder: str, id: str) -> str: ...

    def send_message(self, template: str) -> None: ...

    def copy_messages(self, source: str, target: str, ids: list[str]) -> None: ...

    def move_messages(self, source: str, target: str, ids: list[str]) -> None: ...

    def delete_messages(self, folder: str, ids: list[str]) -> None: ...


# Opens a template for editing and returns the edited text, or None when
# the user abandoned the draft.
ComposeFn = Callable[[str], "str | None"]

DEFAULT_PAGE_SIZE = 10
MESSAGE_GLUE = "\n\n"


def split_arguments(arguments: str) -> list[str]:
    try:
        return shlex.split(arguments)
    except ValueError as e:
        raise CommandUsageError(f"cannot parse arguments: {e}") from e


def _expect(args: list[str], usage: str, minimum: int, maximum: int | None = None) -> None:
    if len(args) < minimum or (maximum is not None and len(args) > maximum):
        raise CommandUsageError(f"usage: {usage}")


def _parse_ids(value: str) -> list[str]:
    ids = [part for part in value.split(",") if part]
    if not ids:
        raise CommandUsageError(f"invalid envelope identifier: {value!r}")
    return ids


def format_envelopes(envelopes: list[Envelope], depths: list[int] | None = None) -> str:
    if not envelopes:
        return "No envelopes found"
    rows = []
    for i, envelope in enumerate(envelopes):
        indent = "  " * depths[i] if depths else ""
        rows.append(
            [
                envelope.id,
                envelope.flag_chars(),
                indent + envelope.subject,
                envelope.sender,
                envelope.date,
            ]
        )
    return "\n".join(format_table(["ID", "FLAGS", "SUBJECT", "FROM", "DATE"], rows))


def mail_commands(backend: MailBackend, compose: ComposeFn | None = None) -> CommandRegistry:
    """Build a registry with one handler per leaf of the mail grammar."""
    registry = CommandRegistry()

    # -- account -------------------------------------------------------------

    @registry.command("account", "list")
    def account_list(arguments: str) -> str:
        _expect(split_arguments(arguments), "account list", 0, 0)
        accounts = backend.list_accounts()
        return "\n".join(accounts) if accounts else "No accounts configured"

    @registry.command("account", "doctor")
    def account_doctor(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "account doctor [ACCOUNT]", 0, 1)
        return backend.check_account(args[0] if args else None)

    # -- folder --------------------------------------------------------------

    @registry.command("folder", "list")
    def folder_list(arguments: str) -> str:
        _expect(split_arguments(arguments), "folder list", 0, 0)
        folders = backend.list_folders()
        return "\n".join(folders) if folders else "No folders found"

    def folder_action(
        verb: str, action: Callable[[str], None], done: str
    ) -> Callable[[str], str]:
        def handler(arguments: str) -> str:
            args = split_arguments(arguments)
            _expect(args, f"folder {verb} FOLDER", 1, 1)
            action(args[0])
            return f"Folder {args[0]} successfully {done}"

        return handler

    registry.register(("folder", "add"), folder_action("add", backend.add_folder, "created"))
    registry.register(
        ("folder", "expunge"), folder_action("expunge", backend.expunge_folder, "expunged")
    )
    registry.register(("folder", "purge"), folder_action("purge", backend.purge_folder, "purged"))
    registry.register(
        ("folder", "delete"), folder_action("delete", backend.delete_folder, "deleted")
    )

    # -- envelope ------------------------------------------------------------

    @registry.command("envelope", "list")
    def envelope_list(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "envelope list FOLDER [PAGE]", 1, 2)
        page = 1
        if len(args) == 2:
            if not args[1].isdigit() or int(args[1]) < 1:
                raise CommandUsageError(f"invalid page number: {args[1]!r}")
            page = int(args[1])
        return format_envelopes(backend.list_envelopes(args[0], page, DEFAULT_PAGE_SIZE))

    @registry.command("envelope", "thread")
    def envelope_thread(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "envelope thread FOLDER", 1, 1)
        threaded = backend.thread_envelopes(args[0])
        return format_envelopes([e for _, e in threaded], [d for d, _ in threaded])

    # -- flag ----------------------------------------------------------------

    def flag_action(
        verb: str, action: Callable[[str, list[str], list[str]], None]
    ) -> Callable[[str], str]:
        def handler(arguments: str) -> str:
            args = split_arguments(arguments)
            _expect(args, f"flag {verb} FOLDER ID[,ID...] FLAG...", 3)
            ids = _parse_ids(args[1])
            flags = [flag.lower() for flag in args[2:]]
            action(args[0], ids, flags)
            return f"Flag(s) {', '.join(flags)} successfully updated"

        return handler

    registry.register(("flag", "add"), flag_action("add", backend.add_flags))
    registry.register(("flag", "set"), flag_action("set", backend.set_flags))
    registry.register(("flag", "remove"), flag_action("remove", backend.remove_flags))

    # -- message -------------------------------------------------------------

    @registry.command("message", "read")
    def message_read(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "message read FOLDER ID[,ID...]", 2, 2)
        return MESSAGE_GLUE.join(backend.read_messages(args[0], _parse_ids(args[1])))

    @registry.command("message", "thread")
    def message_thread(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "message thread FOLDER ID", 2, 2)
        return MESSAGE_GLUE.join(backend.thread_messages(args[0], args[1]))

    def send_edited(template: str) -> str:
        if compose is None:
            raise CommandUsageError("no editor available to compose messages")
        edited = compose(template)
        if edited is None:
            return "Message discarded"
        backend.send_message(edited)
        return "Message successfully sent"

    @registry.command("message", "write")
    def message_write(arguments: str) -> str:
        _expect(split_arguments(arguments), "message write", 0, 0)
        return send_edited(backend.new_template())

    @registry.command("message", "reply")
    def message_reply(arguments: str) -> str:
        args = split_arguments(arguments)
        reply_all = "--all" in args
        args = [arg for arg in args if arg != "--all"]
        _expect(args, "message reply FOLDER ID [--all]", 2, 2)
        return send_edited(backend.reply_template(args[0], args[1], reply_all))

    @registry.command("message", "forward")
    def message_forward(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "message forward FOLDER ID", 2, 2)
        return send_edited(backend.forward_template(args[0], args[1]))

    def transfer(verb: str, action: Callable[[str, str, list[str]], None], done: str):
        def handler(arguments: str) -> str:
            args = split_arguments(arguments)
            _expect(args, f"message {verb} SOURCE TARGET ID[,ID...]", 3, 3)
            source, target = args[0], args[1]
            if source == target:
                raise CommandUsageError("source and target folders must differ")
            action(source, target, _parse_ids(args[2]))
            return f"Message(s) successfully {done} from {source} to {target}"

        return handler

    registry.register(("message", "copy"), transfer("copy", backend.copy_messages, "copied"))
    registry.register(("message", "move"), transfer("move", backend.move_messages, "moved"))

    @registry.command("message", "delete")
    def message_delete(arguments: str) -> str:
        args = split_arguments(arguments)
        _expect(args, "message delete FOLDER ID[,ID...]", 2, 2)
        backend.delete_messages(args[0], _parse_ids(args[1]))
        return f"Message(s) successfully deleted from {args[0]}"

    return registry


def unavailable_commands(grammar: CommandGrammar) -> CommandRegistry:
    """Registry answering every leaf command with a 'no backend' notice."""
    registry = CommandRegistry()

    for path in grammar.leaf_paths():
        name = " ".join(path)
        registry.register(path, lambda _arguments, name=name: f"{name}: no mail backend configured")

    return registry
