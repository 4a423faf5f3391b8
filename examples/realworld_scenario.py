"""Producer/consumer walk-through against a local beanstalkd."""

from __future__ import annotations

import os

from beanstalk_client import (
    Connection,
    ConnectionError,
    RawCommand,
    ServerDrainingError,
    StatusResponseParser,
)
from beanstalk_client.protocol import (
    BURIED,
    DEADLINE_SOON,
    DELETED,
    EXPECTED_CRLF,
    INSERTED,
    JOB_TOO_BIG,
    NOT_FOUND,
    RESERVED,
    TIMED_OUT,
    USING,
    WATCHING,
)

BASE_URL = os.getenv("BEANSTALK_DEMO_URL", "beanstalk://localhost:11300")
TUBE = os.getenv("BEANSTALK_DEMO_TUBE", "demo")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def put(connection: Connection, body: bytes, *, priority: int = 1024, delay: int = 0, ttr: int = 60) -> int | None:
    command = RawCommand(
        f"put {priority} {delay} {ttr} {len(body)}",
        StatusResponseParser({INSERTED, BURIED, EXPECTED_CRLF, JOB_TOO_BIG}),
        data=body,
    )
    response = connection.dispatch(command)
    if response.status in {EXPECTED_CRLF, JOB_TOO_BIG}:
        print(f"job rejected: {response.status}")
        return None
    if response.status == BURIED:
        print(f"server ran out of memory growing its queue, job {response.args[0]} was buried")
    return int(response.args[0])


def reserve(connection: Connection, timeout: int = 0) -> tuple[int, bytes] | None:
    command = RawCommand(
        f"reserve-with-timeout {timeout}",
        StatusResponseParser({RESERVED, TIMED_OUT, DEADLINE_SOON}),
    )
    response = connection.dispatch(command)
    if response.status != RESERVED:
        return None
    return int(response.args[0]), response.data or b""


def delete(connection: Connection, job_id: int) -> bool:
    response = connection.dispatch(RawCommand(f"delete {job_id}", StatusResponseParser({DELETED, NOT_FOUND})))
    return response.status == DELETED


def main() -> None:
    connection = Connection.from_url(BASE_URL, log_level="debug")
    if not connection.is_service_listening():
        raise ConnectionError(f"Cannot reach {BASE_URL}")

    with connection:
        log_section(f"Using tube {TUBE}")
        connection.dispatch(RawCommand(f"use {TUBE}", StatusResponseParser({USING})))
        connection.dispatch(RawCommand(f"watch {TUBE}", StatusResponseParser({WATCHING})))

        log_section("Producing")
        for index in range(3):
            try:
                job_id = put(connection, f"job #{index}".encode())
            except ServerDrainingError:
                print("server is draining, stopping")
                return
            print(f"inserted job {job_id}")

        log_section("Consuming")
        while (job := reserve(connection)) is not None:
            job_id, body = job
            print(f"reserved job {job_id}: {body.decode()}")
            if not delete(connection, job_id):
                print(f"job {job_id} vanished before delete")


if __name__ == "__main__":
    main()
