import uuid

import pytest

LOGIN_UUID = "9a5e4f2c-6d1b-4c8e-9f3a-2b7d1e0c5a41"


def make_record(pattern, name="TEST", uid=None, **extra):
    record = {"name": name, "uuid": uid or str(uuid.uuid4()), "pattern": pattern}
    record.update(extra)
    return record


@pytest.fixture
def login_record():
    return make_record(
        "user @STRING:user@ logged in from @IPv4:ip@",
        name="LOGIN",
        uid=LOGIN_UUID,
        values={"program": "login"},
        tags=["auth"],
        test_messages=[
            {"message": "user alice logged in from 10.0.0.5", "values": {"user": "alice", "ip": "10.0.0.5"}}
        ],
    )
