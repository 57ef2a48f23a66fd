# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import warnings
import numpy as np
import pytest
import siteseq


CONTAINER_CLASSES = [siteseq.VectorSiteContainer, siteseq.CompressedSiteContainer]


def _sites_as_strings(container):
    return [str(site) for site in container]


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_add_and_get(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET)
    assert len(container) == 0
    assert container.get_number_of_sequences() == 0
    for site in dna_sites:
        container.add_site(site)
    assert container.get_number_of_sites() == 4
    assert container.get_number_of_sequences() == 4
    assert _sites_as_strings(container) == ["ACGT", "AAGT", "ACGT", "-CGG"]
    for i, site in enumerate(dna_sites):
        assert container.get_site(i) == site
        assert container[i] == site


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_constructor_sites(container_class, dna_sites):
    container = container_class(
        siteseq.DNA_ALPHABET, dna_sites, names=["w", "x", "y", "z"]
    )
    assert len(container) == 4
    assert container.get_sequence_names() == ["w", "x", "y", "z"]


def test_duplicate_site():
    """
    Adding the same content twice stores it only once, but both logical
    sites are accessible.
    """
    container = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET)
    container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "ACG", position=10))
    container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "ACG", position=20))
    assert container.get_number_of_unique_sites() == 1
    assert container.get_number_of_sites() == 2
    assert container.get_site(0) == container.get_site(1)


def test_compression(dna_sites):
    container = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET, dna_sites)
    assert container.get_number_of_sites() == 4
    assert container.get_number_of_unique_sites() == 3


def test_compressed_positions(dna_sites):
    """
    The position of a site in a compressed container is given by its
    index, while an uncompressed container keeps the position of each
    site.
    """
    compressed = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET)
    vector = siteseq.VectorSiteContainer(siteseq.DNA_ALPHABET)
    for site in dna_sites[::-1]:
        compressed.add_site(site)
        vector.add_site(site)
    assert compressed.get_site_positions() == [1, 2, 3, 4]
    assert [site.position for site in compressed] == [1, 2, 3, 4]
    assert vector.get_site_positions() == [4, 3, 2, 1]


def test_remove_site_keeps_unique_sites(dna_sites):
    container = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET, dna_sites)
    for _ in range(len(dna_sites)):
        container.remove_site(0)
        assert container.get_number_of_unique_sites() == 3
    assert len(container) == 0


def test_reuse_orphaned_unique_site(dna_sites):
    """
    A unique site, that is not referenced anymore, is reused when the
    same content is added again.
    """
    container = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET, dna_sites)
    container.remove_site(1)
    container.add_site(dna_sites[1])
    assert container.get_number_of_unique_sites() == 3


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_remove_site(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    removed = container.remove_site(1)
    assert str(removed) == "AAGT"
    assert _sites_as_strings(container) == ["ACGT", "ACGT", "-CGG"]
    # The removed site is a copy
    removed.code[0] = 3
    assert _sites_as_strings(container) == ["ACGT", "ACGT", "-CGG"]


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_insert_site(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    container.insert_site(0, siteseq.Site(siteseq.DNA_ALPHABET, "TTTT"))
    container.insert_site(5, siteseq.Site(siteseq.DNA_ALPHABET, "GGGG"))
    container.insert_site(2, siteseq.Site(siteseq.DNA_ALPHABET, "ACGT"))
    assert _sites_as_strings(container) == [
        "TTTT",
        "ACGT",
        "ACGT",
        "AAGT",
        "ACGT",
        "-CGG",
        "GGGG",
    ]
    if isinstance(container, siteseq.CompressedSiteContainer):
        assert container.get_number_of_unique_sites() == 5


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_set_site(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    container.set_site(0, siteseq.Site(siteseq.DNA_ALPHABET, "CCCC"))
    assert _sites_as_strings(container) == ["CCCC", "AAGT", "ACGT", "-CGG"]
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.set_site(4, siteseq.Site(siteseq.DNA_ALPHABET, "CCCC"))


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_delete_sites(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    container.delete_sites(1, 2)
    assert _sites_as_strings(container) == ["ACGT", "-CGG"]
    container.delete_sites(2, 0)
    assert len(container) == 2
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.delete_sites(1, 2)
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.delete_sites(0, -1)
    assert len(container) == 2


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_stored_sites_are_copies(container_class):
    site = siteseq.Site(siteseq.DNA_ALPHABET, "AC")
    container = container_class(siteseq.DNA_ALPHABET, [site])
    site.code[0] = 3
    assert str(container.get_site(0)) == "AC"
    returned = container.get_site(0)
    returned.code[1] = 3
    assert str(container.get_site(0)) == "AC"


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
@pytest.mark.parametrize("index", [-1, 5, 100])
def test_index_out_of_range(container_class, dna_sites, index):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.get_site(index)
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.remove_site(index)
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.insert_site(index, dna_sites[0])
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.remove_sequence(index)
    assert len(container) == 4
    assert container.get_number_of_sequences() == 4


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_dimension_mismatch(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    with pytest.raises(siteseq.DimensionMismatchError):
        container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "ACG"))
    with pytest.raises(siteseq.DimensionMismatchError):
        container.insert_site(0, siteseq.Site(siteseq.DNA_ALPHABET, "ACGTA"))
    assert len(container) == 4
    if isinstance(container, siteseq.CompressedSiteContainer):
        assert container.get_number_of_unique_sites() == 3


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_alphabet_mismatch(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    with pytest.raises(siteseq.AlphabetMismatchError):
        container.add_site(siteseq.Site(siteseq.RNA_ALPHABET, "ACGU"))
    with pytest.raises(TypeError):
        container.add_site("ACGT")
    # An alphabet with the same symbols is accepted
    container.add_site(siteseq.Site(siteseq.Alphabet("ACGT"), "ACGT"))
    assert len(container) == 5


def test_names_fix_number_of_sequences():
    container = siteseq.CompressedSiteContainer(
        siteseq.DNA_ALPHABET, names=["a", "b"]
    )
    assert container.get_number_of_sequences() == 2
    with pytest.raises(siteseq.DimensionMismatchError):
        container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "ACG"))
    container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "AC"))


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_names(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites)
    assert container.get_sequence_names() is None
    with pytest.raises(KeyError):
        container.get_sequence_index("x")
    with pytest.raises(siteseq.DimensionMismatchError):
        container.set_sequence_names(["a", "b"])
    with pytest.raises(ValueError):
        container.set_sequence_names(["a", "b", "c", "a"])
    container.set_sequence_names(["a", "b", "c", "d"])
    assert container.get_sequence_index("c") == 2
    # The returned names are a copy
    container.get_sequence_names().append("e")
    assert container.get_sequence_names() == ["a", "b", "c", "d"]


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_get_sequence(container_class, dna_sites):
    container = container_class(
        siteseq.DNA_ALPHABET, dna_sites, names=["w", "x", "y", "z"]
    )
    assert container.get_sequence(0).tolist() == [0, 0, 0, -1]
    assert container.get_sequence("x").tolist() == [1, 0, 1, 1]
    assert container.get_sequence(3).tolist() == [3, 3, 3, 2]
    assert container.get_value("z", 3) == 2
    assert container.get_value(0, 3) == siteseq.GAP_CODE
    assert container.get_state_value(1, "x", 0) == 1.0
    assert container.get_state_value(1, "x", 1) == 0.0
    with pytest.raises(KeyError):
        container.get_sequence("v")
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.get_sequence(4)
    with pytest.raises(siteseq.IndexOutOfRangeError):
        container.get_value(0, 4)


@pytest.mark.parametrize("seed", range(5))
def test_equivalence_with_vector_container(seed):
    """
    A compressed container and an uncompressed container, that are
    filled with the same random sites, have the same content.
    """
    np.random.seed(seed)
    nb_sequences = 3
    # Few states and sequences lead to many duplicate sites
    sites = []
    for _ in range(200):
        site = siteseq.Site(siteseq.DNA_ALPHABET)
        site.code = np.random.randint(-1, 2, size=nb_sequences)
        sites.append(site)

    compressed = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET, sites)
    vector = siteseq.VectorSiteContainer(siteseq.DNA_ALPHABET, sites)
    assert compressed.get_number_of_unique_sites() <= 3**nb_sequences
    assert len(compressed) == len(vector) == 200
    for i in range(len(vector)):
        assert compressed.get_site(i) == vector.get_site(i)
    for row in range(nb_sequences):
        assert (
            compressed.get_sequence(row).tolist() == vector.get_sequence(row).tolist()
        )


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_remove_sequence(container_class, dna_sites):
    container = container_class(
        siteseq.DNA_ALPHABET, dna_sites[:3], names=["w", "x", "y", "z"]
    )
    container.remove_sequence("y")
    assert container.get_number_of_sequences() == 3
    assert container.get_sequence_names() == ["w", "x", "z"]
    assert _sites_as_strings(container) == ["ACT", "AAT", "ACT"]
    with pytest.raises(siteseq.DimensionMismatchError):
        container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "ACGT"))
    container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "ACT"))
    if isinstance(container, siteseq.CompressedSiteContainer):
        assert container.get_number_of_unique_sites() == 2


def test_stale_compression(dna_sites):
    """
    Unique sites, that become identical after removing a sequence, are
    not merged.
    """
    container = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET, dna_sites)
    with pytest.warns(siteseq.StaleCompressionWarning):
        container.remove_sequence(1)
    assert _sites_as_strings(container) == ["AGT", "AGT", "AGT", "-GG"]
    assert container.get_number_of_unique_sites() == 3
    # New sites are deduplicated against the first of the identical
    # unique sites
    container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "AGT"))
    assert container.get_number_of_unique_sites() == 3


def test_no_stale_compression_warning(dna_sites):
    container = siteseq.CompressedSiteContainer(siteseq.DNA_ALPHABET, dna_sites)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        container.remove_sequence(0)
    assert _sites_as_strings(container) == ["CGT", "AGT", "CGT", "CGG"]


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_clear(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites, names="abcd")
    container.clear()
    assert len(container) == 0
    assert container.get_number_of_sequences() == 0
    assert container.get_sequence_names() is None
    if isinstance(container, siteseq.CompressedSiteContainer):
        assert container.get_number_of_unique_sites() == 0
    # The number of sequences can be fixed again
    container.add_site(siteseq.Site(siteseq.DNA_ALPHABET, "AC"))
    assert container.get_number_of_sequences() == 2


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_copy(container_class, dna_sites):
    container = container_class(siteseq.DNA_ALPHABET, dna_sites, names="abcd")
    clone = container.copy()
    assert type(clone) is container_class
    assert _sites_as_strings(clone) == _sites_as_strings(container)
    assert clone.get_sequence_names() == container.get_sequence_names()
    assert clone.get_site_positions() == container.get_site_positions()
    clone.remove_site(0)
    clone.remove_sequence(0)
    assert len(container) == 4
    assert container.get_number_of_sequences() == 4
    assert _sites_as_strings(container) == ["ACGT", "AAGT", "ACGT", "-CGG"]


@pytest.mark.parametrize("container_class", CONTAINER_CLASSES)
def test_probabilistic_sites(container_class):
    site1 = siteseq.ProbabilisticSite(
        siteseq.DNA_ALPHABET, [[1, 0, 0, 0], [0.5, 0.5, 0, 0]]
    )
    site2 = siteseq.ProbabilisticSite(
        siteseq.DNA_ALPHABET, [[0, 0, 0, 1], [0.5, 0.5, 0, 0]]
    )
    container = container_class(siteseq.DNA_ALPHABET, [site1, site2, site1])
    assert container.get_sequence(1).shape == (3, 4)
    assert container.get_state_value(1, 0, 3) == 1.0
    assert container.get_value(1, 2).tolist() == [0.5, 0.5, 0, 0]
    if isinstance(container, siteseq.CompressedSiteContainer):
        assert container.get_number_of_unique_sites() == 2


def test_allelic_sites(allelic_alphabet):
    """
    Sites over an allelic alphabet are compressed like any other site.
    """
    container = siteseq.CompressedSiteContainer(allelic_alphabet)
    for labels in [
        ["A3C1", "A4A0"],
        ["A3C1", "A2A2"],
        ["A3C1", "?4?0"],
        ["A3C1", "-4-0"],
        ["A3C1", "-"],
    ]:
        container.add_site(siteseq.Site(allelic_alphabet, labels))
    assert container.get_number_of_sites() == 5
    assert container.get_number_of_unique_sites() == 3
    assert container.get_state_value(0, 0, 1) == 1.0
    assert container.get_state_value(2, 1, 3) == 1.0
    assert container.get_state_value(3, 1, 0) == 0.0
