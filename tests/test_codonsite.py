# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import itertools
import pytest
import siteseq
import siteseq.codonsite as codonsite


def _code(codon):
    return siteseq.CODON_ALPHABET.encode(codon)


def _site(*codons):
    return siteseq.Site(siteseq.CODON_ALPHABET, codons)


@pytest.mark.parametrize(
    "codon1, codon2, exp_diff",
    [("ATG", "ATG", 0), ("ATG", "ATC", 1), ("ATG", "ACC", 2), ("ATG", "TAC", 3)],
)
def test_number_of_differences(codon1, codon2, exp_diff):
    assert codonsite.number_of_differences(_code(codon1), _code(codon2)) == exp_diff
    assert codonsite.number_of_differences(_code(codon2), _code(codon1)) == exp_diff


@pytest.mark.parametrize(
    "codon1, codon2, exp_syn, exp_syn_minchange",
    [
        ("ATG", "ATG", 0, 0),
        # Single synonymous difference
        ("CTG", "CTA", 1, 1),
        # Single non-synonymous difference
        ("CTG", "ATG", 0, 0),
        # Two paths: CTT-TTT-TTG has no synonymous step,
        # CTT-CTG-TTG has two synonymous steps
        ("CTT", "TTG", 1, 2),
        # The path through the stop codon TGA is discarded:
        # CGA-CGG-TGG is the only valid path with one synonymous step
        ("CGA", "TGG", 1, 1),
    ],
)
def test_number_of_synonymous_differences(codon1, codon2, exp_syn, exp_syn_minchange):
    assert codonsite.number_of_synonymous_differences(
        _code(codon1), _code(codon2)
    ) == pytest.approx(exp_syn)
    assert codonsite.number_of_synonymous_differences(
        _code(codon1), _code(codon2), minchange=True
    ) == pytest.approx(exp_syn_minchange)


def test_number_of_synonymous_differences_symmetry():
    """
    The number of synonymous differences is symmetric and never exceeds
    the number of differences.
    """
    table = siteseq.CodonTable.default_table()
    for codon1, codon2 in itertools.combinations(range(0, 64, 5), 2):
        forward = codonsite.number_of_synonymous_differences(codon1, codon2, table)
        backward = codonsite.number_of_synonymous_differences(codon2, codon1, table)
        assert forward == pytest.approx(backward)
        assert 0 <= forward <= codonsite.number_of_differences(codon1, codon2)


@pytest.mark.parametrize(
    "codon, ratio, exp_positions",
    [
        ("CTG", 1.0, 4 / 3),
        ("ATG", 1.0, 0),
        ("TGG", 1.0, 0),
        ("TAA", 1.0, 0),
        ("GCT", 1.0, 1),
        # Fourfold degenerated third position:
        # one transition, two transversions
        ("GCT", 2.0, 2 / 4 + 2 * 1 / 4),
        # Leucine: CTG->TTG is a transition, CTA is a transition,
        # CTC and CTT are transversions
        ("CTG", 3.0, 3 / 5 + 3 / 5 + 2 * 1 / 5),
    ],
)
def test_number_of_synonymous_positions(codon, ratio, exp_positions):
    assert codonsite.number_of_synonymous_positions(
        _code(codon), ratio=ratio
    ) == pytest.approx(exp_positions)


def test_synonymous_positions_depend_on_table():
    """
    In the vertebrate mitochondrial code 'ATA' and 'ATG' both code for
    methionine.
    """
    vertebrate = siteseq.CodonTable.load("Vertebrate Mitochondrial")
    assert codonsite.number_of_synonymous_positions(_code("ATG")) == 0
    assert codonsite.number_of_synonymous_positions(
        _code("ATG"), vertebrate
    ) == pytest.approx(1 / 3)


def test_mean_number_of_synonymous_positions():
    site = _site("CTG", "ATG", "GCT", "CTG")
    assert codonsite.mean_number_of_synonymous_positions(site) == pytest.approx(
        (4 / 3 + 0 + 1 + 4 / 3) / 4
    )


def test_pi():
    site = _site("CTG", "CTA", "CTA", "ATG")
    # Frequencies: CTG 1/4, CTA 1/2, ATG 1/4
    freq = {"CTG": 0.25, "CTA": 0.5, "ATG": 0.25}
    exp_syn = 0
    exp_non_syn = 0
    for c1, c2 in itertools.permutations(freq, 2):
        syn = codonsite.number_of_synonymous_differences(_code(c1), _code(c2))
        diff = codonsite.number_of_differences(_code(c1), _code(c2))
        exp_syn += freq[c1] * freq[c2] * syn
        exp_non_syn += freq[c1] * freq[c2] * (diff - syn)
    assert codonsite.pi_synonymous(site) == pytest.approx(exp_syn * 4 / 3)
    assert codonsite.pi_non_synonymous(site) == pytest.approx(exp_non_syn * 4 / 3)


def test_pi_known_values():
    # Two sequences with a single synonymous difference
    site = _site("CTG", "CTA")
    # x_i = x_j = 1/2, both ordered pairs contribute 1/4
    assert codonsite.pi_synonymous(site) == pytest.approx(2 * 0.25 * 2)
    assert codonsite.pi_non_synonymous(site) == pytest.approx(0)
    # Constant site
    site = _site("CTG", "CTG", "CTG")
    assert codonsite.pi_synonymous(site) == 0
    assert codonsite.pi_non_synonymous(site) == 0


@pytest.mark.parametrize(
    "function",
    [
        codonsite.mean_number_of_synonymous_positions,
        codonsite.pi_synonymous,
        codonsite.pi_non_synonymous,
        codonsite.is_mono_site_polymorphic,
        codonsite.is_four_fold_degenerated,
    ],
)
def test_incomplete_sites(function):
    with pytest.raises(ValueError):
        function(_site("CTG", "-"))
    with pytest.raises(ValueError):
        function(_site())


def test_pi_requires_two_sequences():
    with pytest.raises(ValueError):
        codonsite.pi_synonymous(_site("CTG"))


def test_alphabet_check():
    with pytest.raises(siteseq.AlphabetMismatchError):
        codonsite.pi_synonymous(siteseq.Site(siteseq.DNA_ALPHABET, "ACGT"))
    with pytest.raises(TypeError):
        codonsite.has_stop("ATG")


def test_has_stop():
    assert codonsite.has_stop(_site("ATG", "TAA"))
    assert not codonsite.has_stop(_site("ATG", "-", "TGG"))
    assert codonsite.has_stop(_site("TGA"))
    assert not codonsite.has_stop(_site("TGA"), siteseq.CodonTable.load(2))
    assert not codonsite.has_stop(_site())


@pytest.mark.parametrize(
    "codons, exp_mono, exp_syn",
    [
        (("CTG", "CTA", "CTC"), True, True),
        (("CTG", "ATG"), True, False),
        (("CTG", "CTG"), False, False),
        (("CTG", "ATA"), False, False),
        (("CTG", "CTA", "TTG"), False, False),
    ],
)
def test_polymorphism(codons, exp_mono, exp_syn):
    site = _site(*codons)
    assert codonsite.is_mono_site_polymorphic(site) == exp_mono
    assert codonsite.is_synonymous_polymorphic(site) == exp_syn


def test_is_four_fold_degenerated():
    assert codonsite.is_four_fold_degenerated(_site("GCT", "GCA", "CTG"))
    assert not codonsite.is_four_fold_degenerated(_site("GCT", "ATG"))


def test_has_gap_or_stop():
    assert codonsite.has_gap_or_stop(_site("ATG", "-"))
    assert codonsite.has_gap_or_stop(_site("ATG", "TAG"))
    assert not codonsite.has_gap_or_stop(_site("ATG", "TGG"))
    assert not codonsite.has_gap_or_stop(
        _site("ATG", "TGA"), siteseq.CodonTable.load("Vertebrate Mitochondrial")
    )
    assert not codonsite.has_gap_or_stop(_site())


def test_remove_rare_variants():
    site = siteseq.Site(
        siteseq.CODON_ALPHABET, ["CTG", "CTA", "CTG", "ATG", "CTA", "CTG"], position=3
    )
    # 'ATG' (1/6) is rare, 'CTA' (1/3) is not
    new_site = codonsite.remove_rare_variants(site, 0.25)
    assert str(new_site) == "CTG CTA CTG CTG CTA CTG"
    assert new_site.position == 3
    # The input site is unchanged
    assert str(site) == "CTG CTA CTG ATG CTA CTG"
    # Without rare variants the site is retained
    assert codonsite.remove_rare_variants(site, 0) == site
    # Ties are resolved in favor of the lowest codon code
    new_site = codonsite.remove_rare_variants(_site("CTG", "ATG"), 1)
    assert str(new_site) == "ATG ATG"


def test_remove_rare_variants_errors():
    with pytest.raises(ValueError):
        codonsite.remove_rare_variants(_site("CTG", "TAA"), 0.5)
    with pytest.raises(ValueError):
        codonsite.remove_rare_variants(_site("CTG", "-"), 0.5)
    with pytest.raises(ValueError):
        codonsite.remove_rare_variants(_site(), 0.5)


@pytest.mark.parametrize(
    "codons, freqmin, exp_subst, exp_non_syn",
    [
        (("CTG", "CTG"), 0, 0, 0),
        # Synonymous substitutions only
        (("CTT", "CTC", "CTA", "CTG"), 0, 3, 0),
        # Isoleucine (ATT, ATC) and serine (AGT, AGC):
        # 3 substitutions without recombination, one of them between
        # the amino acids
        (("ATT", "ATT", "ATT", "ATC", "ATC", "AGT", "AGT", "AGC"), 0, 3, 1),
        # 'AGC' is rare and is treated as 'ATT'
        (("ATT", "ATT", "ATT", "ATC", "ATC", "AGT", "AGT", "AGC"), 0.2, 2, 1),
        # Complex codons: the path with the fewest non-synonymous
        # changes is chosen (CTT-CTG-TTG)
        (("CTT", "TTG"), 0, 2, 0),
        # Three differences
        (("ATG", "TAC"), 0, 3, 3),
    ],
)
def test_number_of_substitutions(codons, freqmin, exp_subst, exp_non_syn):
    site = _site(*codons)
    assert codonsite.number_of_substitutions(site, freqmin=freqmin) == exp_subst
    assert (
        codonsite.number_of_non_synonymous_substitutions(site, freqmin=freqmin)
        == exp_non_syn
    )


def test_substitutions_require_complete_sites():
    for function in (
        codonsite.number_of_substitutions,
        codonsite.number_of_non_synonymous_substitutions,
    ):
        with pytest.raises(ValueError):
            function(_site("CTG", "-"))
        with pytest.raises(ValueError):
            function(_site("CTG", "TGA"))
        with pytest.raises(ValueError):
            function(_site())


@pytest.mark.parametrize(
    "codons_in, codons_out, codon_in, codon_out, exp_diff",
    [
        # First position fixed and non-synonymous,
        # third position polymorphic in the ingroup
        (("ATT", "ATT", "ATC"), ("CTA", "CTA", "CTA"), "ATT", "CTA", (0, 1)),
        # Third position fixed and synonymous
        (("CTT", "CTT"), ("CTA", "CTA"), "CTT", "CTA", (1, 0)),
        # Polymorphic in the outgroup
        (("CTT", "CTT"), ("CTA", "CTG"), "CTT", "CTA", (0, 0)),
        # Equal codons
        (("CTT",), ("CTT",), "CTT", "CTT", (0, 0)),
        # Two fixed positions, the path via 'CTG' is fully synonymous
        (("CTT", "CTT"), ("TTG", "TTG"), "CTT", "TTG", (2, 0)),
    ],
)
def test_fixed_differences(codons_in, codons_out, codon_in, codon_out, exp_diff):
    assert (
        codonsite.fixed_differences(
            _site(*codons_in), _site(*codons_out), _code(codon_in), _code(codon_out)
        )
        == exp_diff
    )


def test_fixed_differences_errors():
    with pytest.raises(ValueError):
        codonsite.fixed_differences(
            _site("CTT", "-"), _site("CTT"), _code("CTT"), _code("CTT")
        )
    with pytest.raises(siteseq.AlphabetMismatchError):
        codonsite.fixed_differences(
            siteseq.Site(siteseq.DNA_ALPHABET, "A"), _site("CTT"), 0, 0
        )
