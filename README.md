# miniftp

A small FTP-like file server and an interactive command-line client that
talk over a single plain TCP connection. The server gives every connected
client its own session, starting in the `./ftp_root` directory of the
working directory the server was started from.

## Installation

```
pip install .
```

## Running the server

Create the root directory, then start the server:

```
mkdir ftp_root
miniftp-server
```

By default it listens on port 2121 on all interfaces and serves each client
in its own thread. Options:

- `--host ADDRESS` – address to listen on (default: all interfaces)
- `--port PORT` – port to listen on (default: 2121)

Stop it with Ctrl-C.

## Running the client

```
miniftp-client
```

The client connects to `127.0.0.1:2121`, prints the server's greeting and
prompts for commands. `--host` and `--port` choose another server.

After each command the client prints the server's reply until it sees a
closing reply code (`226`, `250`, `221` or `550`), the connection closes,
or two seconds pass without data.

After `STOR <file>` the client reads the lines to upload; a line holding
only `<EOF>` ends the upload.

## Commands

| Command           | Effect                                                         |
|-------------------|----------------------------------------------------------------|
| `CWD <directory>` | Change into a subdirectory; `CWD ..` goes up, never above root |
| `LIST`            | List the entry names of the current directory                  |
| `RETR <file>`     | Send a file's contents, which the client prints                |
| `STOR <file>`     | Upload a file; the client ends it with a line holding `<EOF>`  |
| `QUIT`            | Say goodbye; the client then disconnects                       |

Replies begin with a three-digit code in the style of FTP: `150` when a
transfer starts, `226` when it finishes, `250` after a directory change,
`221` on quitting, `500` for an empty command, `501` on missing arguments,
`502` for unknown commands and `550` when a file or directory cannot be
used.

## Using it as a library

- `miniftp.commands.Session` holds a client's connection and current
  directory; `miniftp.commands.handle_command(session, command)` runs one
  command line against it and sends the replies.
- `miniftp.server.create_server(host, port)` returns a listening socket,
  `miniftp.server.accept_connections(server_socket)` serves clients until
  that socket is closed, and `miniftp.server.handle_client(session)` runs
  one client's session.
- `miniftp.client.connect_to_server(host, port, output)` connects and
  prints the greeting, `miniftp.client.receive_response(sock, output,
  timeout)` prints and returns a reply, and
  `miniftp.client.interact(sock, input_stream, output)` drives a session
  from any text streams.

## What it does not do

This is not a standard FTP implementation. There is no login (`USER` /
`PASS`), no separate data connection (`PORT` / `PASV`): file data and
listings travel over the command connection itself. There are no commands
for deleting, renaming or creating files and directories.

## Tests

```
pip install .[test]
pytest
```