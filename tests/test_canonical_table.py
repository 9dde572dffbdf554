import random

import pytest

from canonical_table import (
    CATEGORY_SIZES,
    DISTINCT_CLASSES,
    CanonicalTable,
    get_table,
    shard_indices,
    shard_keys,
)
from cards import parse_cards
from classifier import Category, HandClass, classify
from errors import ClassNotFound, TableIntegrityError


def index_of(table, text):
    return table.lookup(classify(parse_cards(text)))


def test_table_has_exactly_7462_classes(table):
    assert len(table) == DISTINCT_CLASSES
    assert len(table.classes) == 7462
    assert len(set(table.classes)) == 7462


def test_table_is_strictly_ordered_best_first(table):
    classes = table.classes
    for stronger, weaker in zip(classes, classes[1:]):
        assert stronger.beats(weaker)
        assert weaker < stronger
        assert not weaker.beats(stronger)
    assert not classes[0] < classes[0]


def test_extreme_hands(table):
    assert index_of(table, "As Ks Qs Js Ts") == 1
    assert index_of(table, "Ah Kh Qh Jh Th") == 1
    assert index_of(table, "7c 5d 4h 3s 2c") == 7462


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5d 4d 3d 2d Ad", 10),
        ("Ac Ad Ah As Kc", 11),
        ("Ac Ad Ah Kc Kd", 167),
        ("Ah Kh Qh Jh 9h", 323),
        ("Ac Kd Qh Js Tc", 1600),
        ("5c 4d 3h 2s Ac", 1609),
        ("Ac Ad Ah Kc Qd", 1610),
        ("Ac Ad Kh Kc Qd", 2468),
        ("Ac Ad Kh Qc Jd", 3326),
        ("Ac Kd Qh Js 9c", 6186),
    ],
)
def test_category_leaders(table, text, expected):
    assert index_of(table, text) == expected


def test_category_bounds(table):
    bounds = table.category_bounds()
    assert bounds == {
        Category.STRAIGHT_FLUSH: (1, 10),
        Category.FOUR_OF_A_KIND: (11, 166),
        Category.FULL_HOUSE: (167, 322),
        Category.FLUSH: (323, 1599),
        Category.STRAIGHT: (1600, 1609),
        Category.THREE_OF_A_KIND: (1610, 2467),
        Category.TWO_PAIR: (2468, 3325),
        Category.ONE_PAIR: (3326, 6185),
        Category.HIGH_CARD: (6186, 7462),
    }
    for category, (first, last) in bounds.items():
        assert last - first + 1 == CATEGORY_SIZES[category]


def test_every_four_of_a_kind_beats_every_full_house(table):
    quads = [hc for hc in table.classes if hc.category == Category.FOUR_OF_A_KIND]
    boats = [hc for hc in table.classes if hc.category == Category.FULL_HOUSE]
    weakest_quads = min(quads)
    strongest_boat = max(boats)
    assert weakest_quads == HandClass(Category.FOUR_OF_A_KIND, (2, 3))
    assert strongest_boat == HandClass(Category.FULL_HOUSE, (14, 13))
    assert weakest_quads.beats(strongest_boat)
    assert max(table.lookup(q) for q in quads) < min(table.lookup(b) for b in boats)


def test_wheel_sits_below_six_high_straight(table):
    assert index_of(table, "Ac 2d 3h 4s 5c") == index_of(table, "2c 3d 4h 5s 6c") + 1


def test_lookup_and_class_at_agree(table):
    for index in (1, 2, 500, 1609, 7462):
        assert table.lookup(table.class_at(index)) == index
    with pytest.raises(IndexError):
        table.class_at(0)
    with pytest.raises(IndexError):
        table.class_at(7463)


def test_lookup_unknown_class_raises(table):
    impossible = HandClass(Category.FLUSH, (6, 5, 4, 3, 2))  # that is a straight flush
    assert impossible not in table
    with pytest.raises(ClassNotFound):
        table.lookup(impossible)


def test_reordering_input_gives_identical_indices(table):
    shuffled = list(table.classes)
    random.Random(7).shuffle(shuffled)
    rebuilt = CanonicalTable.from_classes(shuffled + shuffled[:100])
    assert rebuilt.classes == table.classes
    for hc in table.classes[::97]:
        assert rebuilt.lookup(hc) == table.lookup(hc)


def test_shards_merge_by_union():
    # the last shard is the single hand Ts Js Qs Ks As
    assert shard_keys(47) == {(Category.STRAIGHT_FLUSH, (14,))}
    second_last = shard_keys(46)
    assert len(second_last) == 5
    assert (Category.STRAIGHT_FLUSH, (13,)) in second_last
    assert second_last | shard_keys(47) == shard_keys(47) | second_last


def test_parallel_build_matches_serial_table(table):
    rebuilt = CanonicalTable.build(workers=2)
    assert rebuilt is not table
    assert rebuilt.classes == table.classes


def test_merging_every_shard_in_reverse_order_gives_same_table(table):
    keys = set()
    for first_index in reversed(shard_indices()):
        keys |= shard_keys(first_index)
    assert len(keys) == DISTINCT_CLASSES
    rebuilt = CanonicalTable.from_classes(HandClass.from_key(key) for key in keys)
    rebuilt.verify()
    assert rebuilt.classes == table.classes
    for hc in table.classes[::251]:
        assert rebuilt.lookup(hc) == table.lookup(hc)


def test_verify_rejects_incomplete_table(table):
    partial = CanonicalTable.from_classes(table.classes[:100])
    with pytest.raises(TableIntegrityError):
        partial.verify()
    table.verify()


def test_get_table_returns_shared_instance(table):
    assert get_table() is table
