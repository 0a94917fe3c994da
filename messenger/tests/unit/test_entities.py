# messenger/tests/unit/test_entities.py
from messenger.domain.entities import pair_key


def test_pair_key_ignores_order():
    assert pair_key("alice", "bob") == pair_key("bob", "alice")


def test_pair_key_keeps_ids_with_separators_apart():
    assert pair_key("a:b", "c") != pair_key("a", "b:c")
    assert pair_key("a,b", "c") != pair_key("a", "b,c")
    assert pair_key('a"', "b") != pair_key("a", '"b')
