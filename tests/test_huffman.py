import random

import pytest

import huffman as huff


CLASSIC = {ord('a'): 5, ord('b'): 9, ord('c'): 12, ord('d'): 13, ord('e'): 16, ord('f'): 45}


def leaf_symbols(root):
    out = []
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        if node.is_leaf():
            out.append(node.symbol)
        else:
            stack.extend((node.left, node.right))
    return out


def test_classic_frequencies_give_expected_lengths():
    root = huff.build_huffman_tree(CLASSIC)
    codes = huff.generate_huffman_codes(root)

    assert len(codes[ord('f')]) == 1
    assert len(codes[ord('a')]) >= 4
    assert len(codes[ord('a')]) == max(len(c) for c in codes.values())

    avg = huff.average_code_length(codes, CLASSIC)
    assert avg == pytest.approx(2.24)
    assert avg < 3  # fixed-length code for six symbols
    assert avg >= huff.entropy(CLASSIC)


def test_classic_frequencies_exact_codes():
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(CLASSIC))
    assert codes == {
        ord('f'): "0",
        ord('c'): "100",
        ord('d'): "101",
        ord('a'): "1100",
        ord('b'): "1101",
        ord('e'): "111",
    }


def test_root_weight_is_total_frequency():
    root = huff.build_huffman_tree(CLASSIC)
    assert root.frequency == sum(CLASSIC.values())
    assert root.symbol is None


def test_equal_weights_break_ties_by_symbol_then_age():
    codes = huff.generate_huffman_codes(huff.build_huffman_tree([1, 1, 1, 1]))
    assert codes == {0: "00", 1: "01", 2: "10", 3: "11"}


def test_same_input_builds_same_codes():
    rng = random.Random(7)
    freqs = [rng.randrange(0, 4) for _ in range(256)]
    a = huff.generate_huffman_codes(huff.build_huffman_tree(freqs))
    b = huff.generate_huffman_codes(huff.build_huffman_tree(freqs))
    assert a == b


@pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
def test_node_counts(seed):
    rng = random.Random(seed)
    freqs = [rng.choice([0, 0, 1, 2, 5, 40, 1000]) for _ in range(256)]
    freqs[0] = 3
    freqs[255] = 1
    positive = sum(1 for f in freqs if f > 0)

    leaves, internal = huff.count_nodes(huff.build_huffman_tree(freqs))
    assert leaves == positive
    assert internal == positive - 1


def test_nonpositive_frequencies_are_excluded():
    freqs = [0] * 256
    freqs[10] = 4
    freqs[11] = -3
    freqs[12] = 0
    freqs[13] = 1
    freqs[14] = 2

    root = huff.build_huffman_tree(freqs)
    assert sorted(leaf_symbols(root)) == [10, 13, 14]
    assert set(huff.generate_huffman_codes(root)) == {10, 13, 14}


def test_single_symbol_is_a_lone_leaf():
    root = huff.build_huffman_tree({ord('x'): 7})
    assert root.is_leaf()
    assert root.symbol == ord('x')
    assert root.left is None and root.right is None
    assert huff.generate_huffman_codes(root) == {ord('x'): ""}
    assert huff.count_nodes(root) == (1, 0)


@pytest.mark.parametrize("freqs", [[], [0] * 256, {}, {65: 0, 66: -1}])
def test_no_positive_frequency_gives_empty_tree(freqs):
    root = huff.build_huffman_tree(freqs)
    assert root is None
    assert huff.generate_huffman_codes(root) == {}
    assert huff.count_nodes(root) == (0, 0)


def test_symbol_outside_byte_range_rejected():
    with pytest.raises(ValueError):
        huff.build_huffman_tree({300: 1})


def test_prefix_free():
    freqs = huff.count_frequencies(b"she sells sea shells by the sea shore")
    codes = list(huff.generate_huffman_codes(huff.build_huffman_tree(freqs)).values())
    for a in codes:
        for b in codes:
            if a is not b:
                assert not b.startswith(a)


def test_count_frequencies():
    table = huff.count_frequencies(b"abracadabra")
    assert len(table) == 256
    assert table[ord('a')] == 5
    assert table[ord('b')] == 2
    assert table[ord('r')] == 2
    assert table[ord('c')] == 1
    assert table[ord('d')] == 1
    assert sum(table) == 11


def test_entropy_and_average_for_uniform_alphabet():
    freqs = [10, 10, 10, 10]
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(freqs))
    assert huff.entropy(freqs) == pytest.approx(2.0)
    assert huff.average_code_length(codes, freqs) == pytest.approx(2.0)


def test_average_of_empty_table_is_zero():
    assert huff.average_code_length({}, [0] * 256) == 0.0
    assert huff.entropy([]) == 0.0
