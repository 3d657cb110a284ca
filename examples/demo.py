#!/usr/bin/env python3
"""Demo: drawing the wiring of a small service.

Builds an application out of dataclasses, prints its component graph as
DOT, then prints a filtered view with the storage layer hidden.

Run with: python examples/demo.py | dot -Tsvg -o app.svg
"""

import logging
from dataclasses import dataclass

from refviz import Ref, RefList, as_dot_string


class SmtpClient:
    """A third-party style client: not a dataclass, declared with Ref."""

    def __init__(self, host: str) -> None:
        self.host = host


@dataclass
class ConnectionPool:
    dsn: str
    size: int = 10


@dataclass
class UserStore:
    pool: ConnectionPool


@dataclass
class OrderStore:
    pool: ConnectionPool


@dataclass
class Mailer:
    client: Ref[SmtpClient]


@dataclass
class Worker:
    orders: OrderStore
    mailer: Mailer


@dataclass
class Application:
    users: UserStore
    workers: RefList[Worker]


def build() -> Application:
    pool = ConnectionPool("postgres://localhost/shop")
    orders = OrderStore(pool)
    mailer = Mailer(SmtpClient("smtp.localhost"))
    return Application(
        users=UserStore(pool),
        workers=[Worker(orders, mailer) for _ in range(3)],
    )


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    app = build()

    print(as_dot_string(app))
    print()
    print(
        as_dot_string(
            app,
            filter=lambda c: not isinstance(c, (UserStore, OrderStore)),
            node_format="[shape=box, style=rounded]",
        )
    )


if __name__ == "__main__":
    main()
