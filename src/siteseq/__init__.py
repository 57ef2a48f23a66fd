# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This is the top-level package of *siteseq*, a package for aligned
biological sequence data.

The building block of the package is the :class:`Alphabet`, an ordered
set of symbols, where the index of a symbol is its *symbol code*.
Predefined alphabets exist for DNA (:data:`DNA_ALPHABET`),
RNA (:data:`RNA_ALPHABET`), proteins (:data:`PROTEIN_ALPHABET`) and
codons (:data:`CODON_ALPHABET`).
An :class:`AllelicAlphabet` is derived from such a base alphabet:
it encodes pairs of states together with their allele counts within a
sample of fixed size and converts observed allele counts into
likelihoods.

An alignment column, i.e. the symbols of all sequences at one position,
is called a *site* (:class:`Site`, or :class:`ProbabilisticSite` if each
sequence carries a vector of state probabilities instead of a single
state).
Sites are stored in site containers:
the :class:`VectorSiteContainer` stores every site,
the :class:`CompressedSiteContainer` stores each distinct site only
once and maps every logical site position to the stored instance.

Furthermore, the package provides genetic codes (:class:`CodonTable`)
and functions computing statistics on sites
(:mod:`siteseq.sitetools`) and codon sites (:mod:`siteseq.codonsite`).
"""

__version__ = "0.1.0"
__name__ = "siteseq"
__author__ = "The siteseq developers"

from .copyable import *
from .error import *
from .alphabet import *
from .allelic import *
from .site import *
from .container import *
from .codon import *
from . import sitetools
from . import codonsite
