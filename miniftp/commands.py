"""Command handling for one FTP session: QUIT, CWD, LIST, RETR and STOR."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

FTP_ROOT = "./ftp_root"
BUFFER_SIZE = 1024
MAX_COMMAND_LENGTH = BUFFER_SIZE - 1
EOF_MARKER = b"<EOF>"


class Connection(Protocol):
    """The part of a socket a session talks through."""

    def sendall(self, data: bytes) -> None: ...

    def recv(self, bufsize: int) -> bytes: ...


@dataclass
class Session:
    """State of one connected client: its connection and current directory."""

    connection: Connection
    root: str = FTP_ROOT
    directory: Optional[str] = None

    def __post_init__(self) -> None:
        if self.directory is None:
            self.directory = self.root

    def reply(self, message: str | bytes) -> None:
        """Send a message to the client."""
        data = message.encode("utf-8", "surrogateescape") if isinstance(message, str) else message
        self.connection.sendall(data)


def _split_command(command: str) -> tuple[Optional[str], Optional[str]]:
    """Split a command line into its verb and the rest of the line."""
    line = command[:MAX_COMMAND_LENGTH].lstrip(" ")
    if not line:
        return None, None
    verb, sep, rest = line.partition(" ")
    if not sep or not rest:
        return verb, None
    return verb, rest


def _change_directory(session: Session, command: str, argument: Optional[str]) -> None:
    if argument is None:
        session.reply("501 Utilizzo comando: CWD <directory> \n")
        return

    if argument == "..":
        if session.directory == session.root:
            session.reply("550 Non puoi uscire dalla directory principale FTP_root")
            return
        head, sep, _ = session.directory.rpartition("/")
        if sep:
            session.directory = head
        if session.directory == "":
            session.directory = session.root
        session.reply(f"250 Directory cambiata a {session.directory}\n")
        return

    relative = argument[1:] if argument.startswith("/") else argument
    new_path = f"{session.directory}/{relative}"
    if os.path.isdir(new_path):
        session.directory = new_path
        session.reply(f"250 Directory cambiata a : {session.directory}\n")
    else:
        logger.error("Errore  directory non trovata, Input: %s", command)
        session.reply("550 Directory non trovata\n")


def _list_directory(session: Session, command: str) -> None:
    try:
        names = os.listdir(session.directory)
    except OSError:
        logger.error("Errore: impossibile leggere la directory corrente. Input: '%s'", command)
        session.reply("550 Impossibile leggere la directory. \n")
        return

    session.reply("150 Inizio elenco-- \n")
    for name in names:
        session.reply(os.fsencode(name) + b"\n")
    session.reply("226 Fine elenco.\r\n")


def _retrieve(session: Session, argument: Optional[str]) -> None:
    if argument is None:
        session.reply("501 Uso: RETR <nome_file>\n")
        return

    path = f"{session.directory}/{argument}"
    try:
        stream = open(path, "rb")
    except OSError:
        session.reply("550 File non trovato.\n")
        return

    session.reply("150 Inizio download...\n")
    with stream:
        try:
            while chunk := stream.read(BUFFER_SIZE):
                session.reply(chunk)
        except OSError:
            pass
    session.reply("\n226 Download completato.\n")


def _store(session: Session, argument: Optional[str]) -> None:
    if argument is None:
        session.reply("501 Uso: STOR <nome_file>\n")
        return

    path = f"{session.directory}/{argument}"
    try:
        stream = open(path, "wb")
    except OSError:
        session.reply("550 Impossibile creare il file.\n")
        return

    session.reply("150 Inizio caricamento, invia dati e termina con <EOF> su una linea.\n")
    with stream:
        while True:
            try:
                chunk = session.connection.recv(BUFFER_SIZE - 1)
            except OSError:
                break
            if not chunk or chunk.startswith(EOF_MARKER):
                break
            stream.write(chunk)
    session.reply("226 caricamento completato.\n")


def handle_command(session: Session, command: str) -> None:
    """Carry out one command line and send the replies to the session's client."""
    verb, argument = _split_command(command)

    if verb is None:
        logger.error("Errore: nessun comando ricevuto, Input: '%s'", command)
        session.reply("500 Comando non riconosciuto.\n")
    elif verb == "QUIT":
        session.reply("221 Arrivederci. \n")
    elif verb == "CWD":
        _change_directory(session, command, argument)
    elif verb == "LIST":
        _list_directory(session, command)
    elif verb == "RETR":
        _retrieve(session, argument)
    elif verb == "STOR":
        _store(session, argument)
    else:
        session.reply("502 Comando non implementato.\n")