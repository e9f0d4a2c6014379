"""Interactive client for the FTP-like server."""

from __future__ import annotations

import argparse
import select
import socket
import sys
from typing import Optional, Sequence, TextIO

SERVER_IP = "127.0.0.1"
SERVER_PORT = 2121
BUFFER_SIZE = 1024
RESPONSE_TIMEOUT = 2.0

PROMPT = "Comandi disponibili: CWD,LIST,RETR,STOR,QUIT\n Inserisci comando: "
UPLOAD_PROMPT = "Inserisci i dati da caricare. Termina con <EOF> su una riga.\n"
EOF_MARKER = "<EOF>"
FINAL_CODES = frozenset({b"226", b"250", b"221", b"550"})


def connect_to_server(
    host: str = SERVER_IP, port: int = SERVER_PORT, output: Optional[TextIO] = None
) -> socket.socket:
    """Connect to the server and print its greeting.

    Raises OSError when the connection cannot be made.
    """
    out = output if output is not None else sys.stdout
    sock = socket.create_connection((host, port))
    out.write("Connessione al server FTP riuscita\n")
    out.flush()
    receive_response(sock, out)
    return sock


def _is_final_reply(chunk: bytes) -> bool:
    """Tell whether a received chunk starts with a reply code that ends a response."""
    return (
        len(chunk) >= 4
        and chunk[0] in b"1245"
        and chunk[1:3].isdigit()
        and chunk[3] in b" \r\n"
        and chunk[:3] in FINAL_CODES
    )


def receive_response(
    sock: socket.socket, output: Optional[TextIO] = None, timeout: float = RESPONSE_TIMEOUT
) -> str:
    """Print what the server sends until a final reply, a timeout or a closed connection.

    Returns the text received.
    """
    out = output if output is not None else sys.stdout
    received = []
    while True:
        try:
            ready, _, _ = select.select([sock], [], [], timeout)
        except (OSError, ValueError) as exc:
            print(f"select: {exc}", file=sys.stderr)
            break
        if not ready:
            break

        try:
            chunk = sock.recv(BUFFER_SIZE)
        except OSError:
            chunk = b""
        if not chunk:
            out.write("Connessione chiusa o errore nella ricezione\n")
            out.flush()
            break

        text = chunk.decode("utf-8", "replace")
        out.write(text)
        out.flush()
        received.append(text)
        if _is_final_reply(chunk):
            break
    return "".join(received)


def _send(sock: socket.socket, data: bytes) -> bool:
    if not data:
        return False
    try:
        sock.sendall(data)
    except OSError:
        return False
    return True


def interact(
    sock: socket.socket,
    input_stream: Optional[TextIO] = None,
    output: Optional[TextIO] = None,
) -> None:
    """Read commands from the user, send them and print the replies."""
    source = input_stream if input_stream is not None else sys.stdin
    out = output if output is not None else sys.stdout
    uploading = False

    while True:
        if not uploading:
            out.write(PROMPT)
            out.flush()
            line = source.readline(BUFFER_SIZE - 1)
            if not line:
                break
            command = line.partition("\n")[0]

            if not _send(sock, command.encode("utf-8")):
                out.write("Errore durante l'invio del comando\n")
                out.flush()
                break

            receive_response(sock, out)

            if command.startswith("QUIT"):
                _send(sock, f"Disconnessione client:{sock.fileno()}".encode("utf-8"))
                break

            if command.startswith("STOR "):
                uploading = True
                out.write(UPLOAD_PROMPT)
                out.flush()
        else:
            line = source.readline(BUFFER_SIZE - 1)
            if not line:
                break
            if line in (EOF_MARKER + "\n", EOF_MARKER):
                _send(sock, EOF_MARKER.encode("utf-8"))
                uploading = False
                receive_response(sock, out)
            else:
                _send(sock, line.encode("utf-8"))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Connect to the server and run an interactive session."""
    parser = argparse.ArgumentParser(description="Talk to the FTP-like server.")
    parser.add_argument("--host", default=SERVER_IP, help="server address")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="server port")
    args = parser.parse_args(argv)

    try:
        sock = connect_to_server(args.host, args.port)
    except OSError as exc:
        print(f"Errore connessione: {exc}", file=sys.stderr)
        print("Impossibile connettersi al server.", file=sys.stderr)
        return 1

    with sock:
        interact(sock)
    return 0


if __name__ == "__main__":
    sys.exit(main())