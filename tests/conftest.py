# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pytest
import siteseq


@pytest.fixture
def allelic_alphabet():
    """
    Four alleles over the unambiguous DNA alphabet.
    """
    return siteseq.AllelicAlphabet(siteseq.DNA_ALPHABET, 4)


@pytest.fixture
def dna_sites():
    """
    Sites of an alignment of four DNA sequences, where the first and the
    third site are identical.
    """
    return [
        siteseq.Site(siteseq.DNA_ALPHABET, "ACGT", position=1),
        siteseq.Site(siteseq.DNA_ALPHABET, "AAGT", position=2),
        siteseq.Site(siteseq.DNA_ALPHABET, "ACGT", position=3),
        siteseq.Site(siteseq.DNA_ALPHABET, "-CGG", position=4),
    ]
