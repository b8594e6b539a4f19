import pytest

from app.tests.admins.gen_admins import build_admin_env, gen_password
from app.utils.hashing import verify_password


def test_env_lines_match_settings_names():
    rows = [{"email": " Boss@Example.com ", "name": "Boss"}, {"email": "", "name": "skipped"}]

    env_lines, passwords = build_admin_env(rows, password_factory=lambda: "s3cret-pass")

    assert env_lines[0] == "ADMIN1_EMAIL=boss@example.com"
    assert env_lines[2] == "ADMIN1_NAME=Boss"
    stored_hash = env_lines[1].split("=", 1)[1].strip("'")
    assert verify_password("s3cret-pass", stored_hash)
    assert passwords == [{"email": "boss@example.com", "name": "Boss", "password": "s3cret-pass"}]


def test_more_than_three_admins_rejected():
    rows = [{"email": f"a{i}@example.com", "name": ""} for i in range(4)]
    with pytest.raises(ValueError):
        build_admin_env(rows, password_factory=lambda: "pw")


def test_generated_passwords_avoid_confusing_characters():
    password = gen_password(40)
    assert len(password) == 40
    assert not set(password) & set("0OoIl")
