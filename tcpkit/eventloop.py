"""Waits for events on file descriptors and runs the matching callbacks."""

from __future__ import annotations

import enum
import errno
import os
import select
import socket
import sys
import weakref
from typing import Callable, Dict, List, Optional, Tuple, Union

from .errors import UnixError
from .file_descriptor import FileDescriptor

Callback = Callable[[], None]
Interest = Callable[[], bool]

MAX_CATEGORIES = 64
_MAX_ITERATIONS = 128


def _always() -> bool:
    return True


class Direction(enum.IntEnum):
    """Whether a rule waits for its descriptor to be readable or writable."""

    IN = select.POLLIN
    OUT = select.POLLOUT


class Result(enum.Enum):
    """Outcome of one call to ``EventLoop.wait_next_event``."""

    SUCCESS = "success"  # a rule was served
    TIMEOUT = "timeout"  # nothing happened before the timeout
    EXIT = "exit"  # nothing is left that is interested; stop calling


class _BasicRule:
    def __init__(self, category_id: int, interest: Interest, callback: Callback) -> None:
        self.category_id = category_id
        self.interest = interest
        self.callback = callback
        self.cancel_requested = False


class _FDRule(_BasicRule):
    def __init__(
        self,
        category_id: int,
        interest: Interest,
        callback: Callback,
        fd: FileDescriptor,
        direction: Direction,
        on_cancel: Optional[Callback],
        on_error: Optional[Callback],
    ) -> None:
        super().__init__(category_id, interest, callback)
        self.fd = fd
        self.direction = direction
        self.on_cancel = on_cancel
        self.on_error = on_error

    def service_count(self) -> int:
        """How often the descriptor has been read or written, as the direction requires."""
        return self.fd.read_count if self.direction is Direction.IN else self.fd.write_count

    def notify_cancel(self) -> None:
        if self.on_cancel is not None:
            self.on_cancel()

    def notify_error(self) -> None:
        if self.on_error is not None:
            self.on_error()


class RuleHandle:
    """A weak handle on a rule, used to cancel it later."""

    def __init__(self, rule: _BasicRule) -> None:
        self._rule = weakref.ref(rule)

    def cancel(self) -> None:
        """Ask the loop to drop the rule; its cancel callback is not called."""
        rule = self._rule()
        if rule is not None:
            rule.cancel_requested = True


class EventLoop:
    """Runs callbacks for rules whose interest holds and whose descriptors are ready."""

    def __init__(self) -> None:
        self._categories: List[str] = []
        self._fd_rules: List[_FDRule] = []
        self._non_fd_rules: List[_BasicRule] = []

    def add_category(self, name: str) -> int:
        """Register a category name for rules; return its id."""
        if len(self._categories) >= MAX_CATEGORIES:
            raise RuntimeError("maximum categories reached")
        self._categories.append(name)
        return len(self._categories) - 1

    def _category_id(self, category: Union[int, str]) -> int:
        if isinstance(category, str):
            return self.add_category(category)
        if not 0 <= category < len(self._categories):
            raise IndexError("bad category_id")
        return category

    def add_rule(
        self,
        category: Union[int, str],
        callback: Callback,
        interest: Optional[Interest] = None,
    ) -> RuleHandle:
        """Add a rule that runs ``callback`` while ``interest`` holds.

        ``category`` is an id from ``add_category``, or a name for a new category.
        """
        rule = _BasicRule(self._category_id(category), interest or _always, callback)
        self._non_fd_rules.append(rule)
        return RuleHandle(rule)

    def add_fd_rule(
        self,
        category: Union[int, str],
        fd: FileDescriptor,
        direction: Direction,
        callback: Callback,
        interest: Optional[Interest] = None,
        cancel: Optional[Callback] = None,
        error: Optional[Callback] = None,
    ) -> RuleHandle:
        """Add a rule that runs ``callback`` when ``fd`` is ready in ``direction``.

        ``cancel`` runs when the rule ends on its own (EOF, hangup, closed
        descriptor); ``error`` runs first when the descriptor reports an error.
        """
        rule = _FDRule(
            self._category_id(category),
            interest or _always,
            callback,
            fd.duplicate(),
            Direction(direction),
            cancel,
            error,
        )
        self._fd_rules.append(rule)
        return RuleHandle(rule)

    def _name(self, rule: _BasicRule) -> str:
        return self._categories[rule.category_id]

    def _serve_non_fd_rules(self) -> bool:
        for rule in list(self._non_fd_rules):
            if rule.cancel_requested:
                self._non_fd_rules.remove(rule)
                continue

            fired = False
            iterations = 0
            while rule.interest():
                if iterations >= _MAX_ITERATIONS:
                    raise RuntimeError(
                        f'EventLoop: busy wait detected: rule "{self._name(rule)}" '
                        f"is still interested after {iterations + 1} iterations"
                    )
                iterations += 1
                fired = True
                rule.callback()

            if fired:
                return True
        return False

    def _report_poll_error(self, rule: _FDRule) -> None:
        try:
            sock = socket.socket(fileno=rule.fd.fileno())
        except OSError as err:
            if err.errno == errno.ENOTSOCK:
                print(
                    f'error on polled file descriptor for rule "{self._name(rule)}"',
                    file=sys.stderr,
                )
                return
            raise UnixError("getsockopt", err.errno or 0) from err
        try:
            socket_error = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as err:
            raise UnixError("getsockopt", err.errno or 0) from err
        finally:
            sock.detach()
        if socket_error:
            print(
                f'error on polled socket for rule "{self._name(rule)}": {os.strerror(socket_error)}',
                file=sys.stderr,
            )

    def _drop(self, rule: _FDRule) -> None:
        rule.notify_cancel()
        self._fd_rules.remove(rule)

    def wait_next_event(self, timeout_ms: int) -> Result:
        """Serve at most one rule, waiting up to ``timeout_ms`` (negative: forever)."""
        if self._serve_non_fd_rules():
            return Result.SUCCESS

        polled: List[Tuple[_FDRule, int]] = []
        for rule in list(self._fd_rules):
            if rule.cancel_requested:
                # cancelled from outside: no cancel callback
                self._fd_rules.remove(rule)
                continue
            if rule.direction is Direction.IN and rule.fd.eof:
                self._drop(rule)
                continue
            if rule.fd.closed:
                self._drop(rule)
                continue
            # an uninterested rule is still polled, with no events, to see errors
            events = int(rule.direction) if rule.interest() else 0
            polled.append((rule, events))

        if not any(events for _rule, events in polled):
            return Result.EXIT

        masks: Dict[int, int] = {}
        for rule, events in polled:
            fd_num = rule.fd.fileno()
            masks[fd_num] = masks.get(fd_num, 0) | events
        poller = select.poll()
        for fd_num, mask in masks.items():
            poller.register(fd_num, mask)

        try:
            ready = poller.poll(timeout_ms)
        except OSError as err:
            raise UnixError("poll", err.errno or 0) from err
        if not ready:
            return Result.TIMEOUT
        revents_by_fd = dict(ready)

        for rule, events in polled:
            revents = revents_by_fd.get(rule.fd.fileno(), 0)

            if revents & (select.POLLERR | select.POLLNVAL):
                self._report_poll_error(rule)
                rule.notify_error()
                self._drop(rule)
                continue

            is_ready = bool(revents & events)
            hung_up = bool(revents & select.POLLHUP)
            if hung_up and ((events and not is_ready) or rule.direction is Direction.OUT):
                # the only condition was a hangup: this descriptor is defunct
                self._drop(rule)
                continue

            if is_ready:
                count_before = rule.service_count()
                rule.callback()
                if (
                    count_before == rule.service_count()
                    and not rule.fd.closed
                    and rule.interest()
                ):
                    raise RuntimeError(
                        f'EventLoop: busy wait detected: rule "{self._name(rule)}" '
                        "did not read/write fd and is still interested"
                    )
                return Result.SUCCESS

        return Result.SUCCESS