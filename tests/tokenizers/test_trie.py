import pytest

from lm_rank_tokenizer import TrieBuilder, VocabularyTable, Symbolizer, parse_rank_records
from lm_rank_tokenizer.rank_bpe import build_trie


def symbols(text):
    return [ord(c) for c in text]


@pytest.fixture
def go_trie():
    builder = TrieBuilder()
    builder.insert(symbols("g"), 0)
    builder.insert(symbols("go"), 1)
    builder.insert(symbols("good"), 2)
    builder.insert(symbols("o"), 3)
    return builder.build()


# =============================================================================
# Construction Tests
# =============================================================================

def test_root_has_no_token(go_trie):
    assert go_trie.token_id(go_trie.root) is None


def test_every_token_path_ends_at_its_id(go_trie):
    assert go_trie.find(symbols("g")) == 0
    assert go_trie.find(symbols("go")) == 1
    assert go_trie.find(symbols("good")) == 2
    assert go_trie.find(symbols("o")) == 3


def test_intermediate_prefix_is_not_a_token(go_trie):
    """Test that "goo" exists as a node but is not a token"""
    node = go_trie.root
    for s in symbols("goo"):
        node = go_trie.step(node, s)
    assert node >= 0
    assert go_trie.token_id(node) is None
    assert go_trie.find(symbols("goo")) is None


def test_missing_path(go_trie):
    assert go_trie.find(symbols("x")) is None
    assert go_trie.step(go_trie.root, ord("x")) == -1


def test_node_count(go_trie):
    # root, g, go, goo, good, o
    assert len(go_trie) == 6


def test_parent_links_lead_back_to_root(go_trie):
    node = go_trie.root
    path = []
    for s in symbols("good"):
        node = go_trie.step(node, s)
        path.append(node)

    for child, parent in zip(reversed(path), reversed([go_trie.root] + path[:-1])):
        assert go_trie.parent(child) == parent


def test_insertion_order_does_not_matter():
    entries = [("a", 0), ("ab", 1), ("abc", 2), ("b", 3)]

    forward = TrieBuilder()
    for text, rank in entries:
        forward.insert(symbols(text), rank)
    backward = TrieBuilder()
    for text, rank in reversed(entries):
        backward.insert(symbols(text), rank)

    forward_trie, backward_trie = forward.build(), backward.build()
    for text, rank in entries:
        assert forward_trie.find(symbols(text)) == backward_trie.find(symbols(text)) == rank


def test_reinserting_a_path_overwrites_the_id():
    builder = TrieBuilder()
    builder.insert(symbols("ab"), 1)
    builder.insert(symbols("ab"), 5)
    assert builder.build().find(symbols("ab")) == 5


def test_empty_token_rejected():
    builder = TrieBuilder()
    with pytest.raises(ValueError, match="empty token"):
        builder.insert([], 0)


def test_builder_is_consumed_by_build():
    builder = TrieBuilder()
    builder.insert(symbols("a"), 0)
    builder.build()

    with pytest.raises(RuntimeError):
        builder.insert(symbols("b"), 1)
    with pytest.raises(RuntimeError):
        builder.build()


def test_build_trie_from_table(ranks):
    table = VocabularyTable.from_ranks(ranks)
    symbolizer = Symbolizer("codepoint")
    trie = build_trie(table, symbolizer)

    for token, rank in ranks.items():
        assert trie.find(symbolizer.symbolize_token(token)) == rank


def test_codepoint_collision_of_invalid_utf8_tokens():
    """Test that invalid UTF-8 tokens share the U+FFFD path in the codepoint alphabet"""
    table = VocabularyTable.from_ranks({b"\xfe": 0, b"\xff": 1})

    codepoint_trie = build_trie(table, Symbolizer("codepoint"))
    assert codepoint_trie.find([0xFFFD]) == 1

    byte_trie = build_trie(table, Symbolizer("byte"))
    assert byte_trie.find([0xFE]) == 0
    assert byte_trie.find([0xFF]) == 1


def test_codepoint_collision_follows_last_assignment():
    """Test that the token whose last line comes latest owns the shared path"""
    # \xff at rank 0, \xfe at rank 1, then \xff re-assigned to rank 2
    table = VocabularyTable.from_records(parse_rank_records("/w== 0\n/g== 1\n/w== 2\n"))

    trie = build_trie(table, Symbolizer("codepoint"))
    assert trie.find([0xFFFD]) == 2


# =============================================================================
# longest_match Tests
# =============================================================================

def test_longest_match_backtracks_to_last_token(go_trie):
    """Test that "goo " matches "go" since the prefix "goo" is not a token"""
    assert go_trie.longest_match(symbols("goo "), 0) == (1, 2)


def test_longest_match_full_token(go_trie):
    assert go_trie.longest_match(symbols("goods"), 0) == (2, 4)


def test_longest_match_at_end_of_input(go_trie):
    """Test backtracking when the input runs out on a non-token node"""
    assert go_trie.longest_match(symbols("goo"), 0) == (1, 2)


def test_longest_match_from_offset(go_trie):
    assert go_trie.longest_match(symbols("xgo"), 1) == (1, 3)


def test_longest_match_no_token(go_trie):
    assert go_trie.longest_match(symbols("xyz"), 0) == (None, 0)
    assert go_trie.longest_match(symbols("go"), 2) == (None, 2)
