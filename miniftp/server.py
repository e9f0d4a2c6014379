"""Threaded TCP server that runs one FTP session per connected client."""

from __future__ import annotations

import argparse
import socket
import sys
import threading
from typing import Optional, Sequence

from miniftp.commands import BUFFER_SIZE, Session, handle_command

PORT = 2121
MAX_CONNECTIONS = 3
WELCOME = "220 Benvenuto nel server FTP\n"


def create_server(host: str = "", port: int = PORT) -> socket.socket:
    """Create a TCP socket bound to ``host``:``port`` and listening.

    Raises OSError when the socket cannot be created, bound or put to listen.
    """
    server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        server_socket.bind((host, port))
        server_socket.listen(MAX_CONNECTIONS)
    except OSError:
        server_socket.close()
        raise
    return server_socket


def accept_connections(server_socket: socket.socket) -> None:
    """Accept clients forever, serving each one in its own thread.

    Returns once the listening socket has been closed.
    """
    while True:
        try:
            client_socket, (address, port) = server_socket.accept()
        except OSError as exc:
            if server_socket.fileno() == -1:
                return
            print(f"errore accept: {exc}", file=sys.stderr)
            continue

        print(f"Nuova connessione da {address} : {port}")
        session = Session(connection=client_socket)
        worker = threading.Thread(target=handle_client, args=(session,), daemon=True)
        try:
            worker.start()
        except RuntimeError as exc:
            print(f"Errore creazione thread: {exc}", file=sys.stderr)
            client_socket.close()


def _command_line(data: bytes) -> str:
    """Turn received bytes into a command line, cut at the first newline or NUL."""
    text = data.decode("utf-8", "surrogateescape")
    text = text.partition("\0")[0]
    return text.partition("\n")[0]


def handle_client(session: Session) -> None:
    """Greet the client, then run its commands until it disconnects."""
    connection = session.connection
    try:
        session.reply(WELCOME)
        while True:
            try:
                data = connection.recv(BUFFER_SIZE - 1)
            except OSError:
                data = b""
            if not data:
                print(f"Disconnessione client : {_client_id(connection)}")
                break

            command = _command_line(data)
            print(f"Comando ricevuto  {_client_id(connection)}: {command}")
            handle_command(session, command)
    except OSError:
        pass
    finally:
        connection.close()


def _client_id(connection: object) -> object:
    fileno = getattr(connection, "fileno", None)
    return fileno() if callable(fileno) else connection


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the FTP server and serve clients until interrupted."""
    parser = argparse.ArgumentParser(description="Serve a small FTP-like protocol.")
    parser.add_argument("--host", default="", help="address to listen on (default: all)")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    try:
        server_socket = create_server(args.host, args.port)
    except OSError as exc:
        print(f"Errore avvio server: {exc}", file=sys.stderr)
        return 1

    print(f"server FTP in ascolto sulla porta : {args.port}")
    with server_socket:
        try:
            accept_connections(server_socket)
        except KeyboardInterrupt:
            pass
    print("chiusura del server")
    return 0


if __name__ == "__main__":
    sys.exit(main())