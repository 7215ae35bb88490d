from app.core.proposal_ids import (
    PROPOSAL_ID_ALPHABET,
    generate_proposal_id,
    is_proposal_id,
)


def test_proposal_id_shape():
    for _ in range(200):
        pid = generate_proposal_id()
        assert len(pid) == 10
        assert is_proposal_id(pid)
        assert set(pid) <= set(PROPOSAL_ID_ALPHABET)


def test_proposal_ids_do_not_repeat():
    ids = {generate_proposal_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_is_proposal_id_rejects_bad_tokens():
    assert not is_proposal_id("")
    assert not is_proposal_id("ABCDEFGHIJ")
    assert not is_proposal_id("abc")
    assert not is_proposal_id("abcdefghij1")
    assert not is_proposal_id("abcde-ghij")
