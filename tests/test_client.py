import io
import socket
import threading

import pytest

from miniftp.client import connect_to_server, receive_response, interact, main


def _free_port():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


def _scripted_peer(sock, script, received):
    buf = b""
    for marker, reply in script:
        while marker not in buf:
            chunk = sock.recv(4096)
            if not chunk:
                received.append(buf)
                return
            buf += chunk
        sock.sendall(reply)
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            break
        buf += chunk
    received.append(buf)


def _run_interact(script, user_input):
    client_end, peer_end = socket.socketpair()
    received = []
    peer = threading.Thread(target=_scripted_peer, args=(peer_end, script, received), daemon=True)
    peer.start()
    out = io.StringIO()
    interact(client_end, io.StringIO(user_input), out)
    client_end.close()
    peer.join(timeout=10)
    peer_end.close()
    return out.getvalue(), received[0]


def test_receive_response_stops_on_final_code():
    a, b = socket.socketpair()
    with a, b:
        b.sendall(b"250 Directory cambiata a ./ftp_root\n")
        out = io.StringIO()
        text = receive_response(a, out, timeout=5)
        assert text == "250 Directory cambiata a ./ftp_root\n"
        assert out.getvalue() == text


def test_receive_response_returns_after_timeout_on_non_final_code():
    a, b = socket.socketpair()
    with a, b:
        b.sendall(b"220 Benvenuto nel server FTP\n")
        out = io.StringIO()
        text = receive_response(a, out, timeout=0.1)
        assert text == "220 Benvenuto nel server FTP\n"


def test_receive_response_collects_several_chunks():
    a, b = socket.socketpair()
    with a, b:
        b.sendall(b"150 Inizio elenco-- \n")
        b.sendall(b"226 Fine elenco.\r\n")
        text = receive_response(a, io.StringIO(), timeout=0.2)
        assert "150 Inizio elenco-- \n" in text
        assert "226 Fine elenco.\r\n" in text


def test_receive_response_reports_closed_connection():
    a, b = socket.socketpair()
    b.close()
    with a:
        out = io.StringIO()
        text = receive_response(a, out, timeout=5)
        assert text == ""
        assert "Connessione chiusa o errore nella ricezione" in out.getvalue()


def test_connect_to_server_prints_greeting():
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]
    accepted = []

    def serve():
        conn, _ = listener.accept()
        conn.sendall(b"250 Directory cambiata a ./ftp_root\n")
        accepted.append(conn)

    worker = threading.Thread(target=serve, daemon=True)
    worker.start()
    out = io.StringIO()
    sock = connect_to_server("127.0.0.1", port, out)
    try:
        worker.join(timeout=5)
        assert out.getvalue().startswith("Connessione al server FTP riuscita\n")
        assert "250 Directory cambiata a ./ftp_root\n" in out.getvalue()
    finally:
        sock.close()
        for conn in accepted:
            conn.close()
        listener.close()


def test_connect_to_server_refused():
    with pytest.raises(OSError):
        connect_to_server("127.0.0.1", _free_port(), io.StringIO())


def test_main_reports_failed_connection(capsys):
    assert main(["--host", "127.0.0.1", "--port", str(_free_port())]) == 1
    assert "Impossibile connettersi al server." in capsys.readouterr().err


def test_interact_list_then_quit():
    script = [
        (b"LIST", b"226 Fine elenco.\r\n"),
        (b"QUIT", b"221 Arrivederci. \n"),
    ]
    output, received = _run_interact(script, "LIST\nQUIT\n")
    assert received.startswith(b"LISTQUIT")
    assert b"Disconnessione client:" in received
    assert "226 Fine elenco.\r\n" in output
    assert "221 Arrivederci. \n" in output
    assert output.count("Inserisci comando: ") == 2


def test_interact_upload_sends_data_and_marker():
    script = [
        (b"STOR a.txt", b"250 Directory cambiata a : ok\n"),
        (b"<EOF>", b"226 caricamento completato.\n"),
        (b"QUIT", b"221 Arrivederci. \n"),
    ]
    output, received = _run_interact(script, "STOR a.txt\nhello\nworld\n<EOF>\nQUIT\n")
    assert received.startswith(b"STOR a.txt")
    assert b"hello\nworld\n<EOF>" in received
    assert "Inserisci i dati da caricare. Termina con <EOF> su una riga.\n" in output
    assert "226 caricamento completato.\n" in output


def test_interact_empty_command_stops_with_error():
    a, b = socket.socketpair()
    out = io.StringIO()
    interact(a, io.StringIO("\nLIST\n"), out)
    a.close()
    with b:
        b.settimeout(5)
        assert b.recv(4096) == b""
    assert "Errore durante l'invio del comando\n" in out.getvalue()


def test_interact_end_of_input_sends_nothing():
    a, b = socket.socketpair()
    out = io.StringIO()
    interact(a, io.StringIO(""), out)
    a.close()
    with b:
        b.settimeout(5)
        assert b.recv(4096) == b""
    assert out.getvalue() == "Comandi disponibili: CWD,LIST,RETR,STOR,QUIT\n Inserisci comando: "