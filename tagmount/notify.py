"""User notifications passed from the mount process to listening clients.

A bound :class:`UDSNotifier` serves a Unix domain socket. Every client that
connects receives each note as one JSON document per line. A
:class:`UDSListener` connects to that socket and buffers what it receives so
that callers can wait for particular notes.
"""

from __future__ import annotations

import logging
import os
import queue
import socket
import threading
import time
import uuid
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from pathlib import Path

from .note import Note

_log = logging.getLogger(__name__)

# How many past notes a listener keeps and lets callers search through.
PEER_BUFFER = 10_000

_ACCEPT_POLL = 0.2
_WAIT_POLL = 0.1
_READ_RETRY = 0.1


class Listener(ABC):
    """Receives notes and lets callers wait for them."""

    @abstractmethod
    def marker(self) -> int:
        """Index of the newest note seen, or 0 when none has arrived."""

    @abstractmethod
    def wait_for_pred(
        self, pred: Callable[[Note], bool], timeout: float, idx: int
    ) -> tuple[Note, int] | None:
        """Wait up to ``timeout`` seconds for a note after ``idx`` matching ``pred``.

        Returns the note and its index, or None on timeout.
        """

    def wait_for(self, note: Note, timeout: float, idx: int) -> bool:
        """Wait up to ``timeout`` seconds for ``note`` to arrive after ``idx``."""
        _log.info("Waiting for note %r", note)
        return self.wait_for_pred(lambda cand: cand == note, timeout, idx) is not None

    @abstractmethod
    def note_count(self) -> int:
        """The number of notes currently held."""


class Notifier(ABC):
    """Sends user-facing notes about misuse of the filesystem."""

    def bad_copy(self) -> None:
        """A file was copied into a collection instead of symlinked."""
        _log.info("bad_copy")
        self._send_message(Note.bad_copy())

    def dragged_to_root(self) -> None:
        """A file was linked into the collection root rather than a tag directory."""
        _log.info("dragged_to_root")
        self._send_message(Note.dragged_to_root())

    def unlink(self, path: str | os.PathLike[str]) -> None:
        """A plain delete was attempted instead of renaming to the delete name."""
        _log.info("unlink")
        self._send_message(Note.unlink(path))

    def tag_to_tg(self, tag: str) -> None:
        """A non-empty tag was renamed into a tag group."""
        _log.info("tag_to_tg")
        self._send_message(Note.tag_to_tag_group(tag))

    @abstractmethod
    def listener(self) -> Listener:
        """A listener receiving this notifier's notes."""

    @abstractmethod
    def _send_message(self, note: Note) -> None:
        """Deliver ``note`` to whoever is listening."""


class _Peer:
    """One connected client and the queue of notes waiting to go to it."""

    def __init__(self, conn_id: uuid.UUID) -> None:
        self.name = f"uds-conn-{conn_id}"
        self._queue: queue.SimpleQueue[Note | None] = queue.SimpleQueue()
        self._alive = True

    def send(self, note: Note) -> bool:
        if not self._alive:
            return False
        self._queue.put(note)
        return True

    def stop(self) -> None:
        self._alive = False
        self._queue.put(None)

    def run(self, conn: socket.socket) -> None:
        with conn:
            while (note := self._queue.get()) is not None:
                _log.debug("%s: sending note %r to peer", self.name, note)
                try:
                    conn.sendall((note.to_json() + "\n").encode("utf-8"))
                except OSError as exc:
                    _log.error("%s: error writing note to peer: %r", self.name, exc)
                    self._alive = False
                    return
                _log.debug("%s: successfully sent %r to peer", self.name, note)
        _log.debug("%s: connection closed", self.name)


class UDSNotifier(Notifier):
    """Broadcasts notes to every client of a Unix domain socket.

    With ``bind`` false no socket is created and notes are dropped; such a
    notifier is only useful for :meth:`listener`, when another process
    already serves the socket.
    """

    def __init__(self, socket_file: str | os.PathLike[str], bind: bool = True) -> None:
        self.socket_file = Path(socket_file)
        self._bound = bind
        self._peers: list[_Peer] = []
        self._lock = threading.Lock()
        self._closed = threading.Event()
        self._server: socket.socket | None = None
        self._accept_thread: threading.Thread | None = None

        if not bind:
            return

        if self.socket_file.exists() or self.socket_file.is_symlink():
            _log.warning(
                "Notifier socket file %s exists, removing first", self.socket_file
            )
            self.socket_file.unlink()

        server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            server.bind(os.fspath(self.socket_file))
            server.listen()
        except OSError:
            server.close()
            raise
        server.settimeout(_ACCEPT_POLL)
        self._server = server
        self._accept_thread = threading.Thread(
            target=self._accept_loop, name="uds-conn-listener", daemon=True
        )
        self._accept_thread.start()

    @property
    def peer_count(self) -> int:
        """The number of connected clients still receiving notes."""
        with self._lock:
            return len(self._peers)

    def _accept_loop(self) -> None:
        assert self._server is not None
        _log.debug("Starting listener thread")
        while not self._closed.is_set():
            try:
                conn, _ = self._server.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                if self._closed.is_set():
                    break
                _log.error("Error getting peer connection: %r", exc)
                continue
            conn.settimeout(None)
            conn_id = uuid.uuid4()
            _log.debug("Got a new connection %s", conn_id)
            peer = _Peer(conn_id)
            with self._lock:
                if self._closed.is_set():
                    conn.close()
                    break
                self._peers.append(peer)
            threading.Thread(
                target=peer.run, args=(conn,), name=peer.name, daemon=True
            ).start()
        _log.debug("Exiting listener thread")

    def _send_message(self, note: Note) -> None:
        if not self._bound:
            _log.warning("Notifier isn't bound, skipping sending message")
            return
        with self._lock:
            kept = []
            for peer in self._peers:
                if peer.send(note):
                    _log.debug("Sent to peer")
                    kept.append(peer)
                else:
                    _log.error("Couldn't send note to peer %s, skipping", peer.name)
            self._peers = kept

    def listener(self) -> UDSListener:
        return UDSListener(self.socket_file)

    def close(self) -> None:
        """Stop serving, disconnect every client and remove the socket file."""
        if self._closed.is_set():
            return
        self._closed.set()
        if self._server is not None:
            self._server.close()
        if self._accept_thread is not None:
            self._accept_thread.join(timeout=2 * _ACCEPT_POLL + 1)
        with self._lock:
            peers, self._peers = self._peers, []
        for peer in peers:
            peer.stop()
        if self._bound:
            try:
                self.socket_file.unlink()
            except FileNotFoundError:
                pass

    def __enter__(self) -> UDSNotifier:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class UDSListener(Listener):
    """Collects the notes arriving on a notifier's Unix domain socket."""

    def __init__(self, socket_file: str | os.PathLike[str]) -> None:
        _log.debug("Attempting connection to %s", socket_file)
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(os.fspath(socket_file))
        except OSError:
            sock.close()
            raise
        _log.debug("Made connection to %s", socket_file)

        self._sock = sock
        self._buffer: deque[tuple[int, Note]] = deque()
        self._cond = threading.Condition()
        self._done = threading.Event()
        self._thread = threading.Thread(
            target=self._aggregate, name="uds-listener-thread", daemon=True
        )
        self._thread.start()

    def _aggregate(self) -> None:
        _log.debug("Starting aggregate thread")
        # Indices start at 1 so that marker() is 0 while nothing has arrived.
        counter = 1
        with self._sock.makefile("rb") as reader:
            while not self._done.is_set():
                try:
                    line = reader.readline()
                except OSError as exc:
                    if self._done.is_set():
                        break
                    _log.error("Problem reading line: %r", exc)
                    time.sleep(_READ_RETRY)
                    continue
                if not line:
                    _log.debug("Notifier closed the connection")
                    break

                _log.debug("Got: %s", line.strip())
                try:
                    note = Note.from_json(line)
                except (ValueError, TypeError) as exc:
                    _log.error("Problem deserializing note: %r", exc)
                    continue

                with self._cond:
                    self._buffer.append((counter, note))
                    counter += 1
                    if len(self._buffer) >= PEER_BUFFER:
                        self._buffer.popleft()
                    self._cond.notify_all()
        _log.debug("Done aggregating")

    def marker(self) -> int:
        with self._cond:
            return self._buffer[-1][0] if self._buffer else 0

    def wait_for_pred(
        self, pred: Callable[[Note], bool], timeout: float, idx: int
    ) -> tuple[Note, int] | None:
        _log.info("Waiting for note via predicate, from idx %d", idx)
        deadline = time.monotonic() + timeout
        with self._cond:
            while True:
                for cand_idx, cand in self._buffer:
                    if cand_idx <= idx:
                        continue
                    if pred(cand):
                        _log.info("Found note %r", cand)
                        return cand, cand_idx
                remaining = deadline - time.monotonic()
                if remaining < 0:
                    _log.warning("Timeout looking for note")
                    return None
                self._cond.wait(min(remaining, _WAIT_POLL))

    def note_count(self) -> int:
        with self._cond:
            return len(self._buffer)

    def close(self) -> None:
        """Stop receiving notes and disconnect."""
        if self._done.is_set():
            return
        self._done.set()
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()
        self._thread.join(timeout=2)

    def __enter__(self) -> UDSListener:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()