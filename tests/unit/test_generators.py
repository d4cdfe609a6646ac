"""ID and session token generator tests."""

import pytest

from debtdesk.shared.utils.generators import generate_cuid, generate_session_token


def test_session_token_is_fixed_length_hex() -> None:
    token = generate_session_token()
    assert len(token) == 64
    int(token, 16)
    assert len(generate_session_token(16)) == 32


def test_session_tokens_do_not_repeat() -> None:
    assert len({generate_session_token() for _ in range(200)}) == 200


def test_short_session_tokens_are_refused() -> None:
    with pytest.raises(ValueError):
        generate_session_token(8)


def test_cuid_is_string_and_unique() -> None:
    ids = {generate_cuid() for _ in range(50)}
    assert len(ids) == 50
    assert all(isinstance(i, str) and i for i in ids)
