# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage provides functions for the population genetic analysis
of codon sites, i.e. :class:`Site` objects over the
:data:`CODON_ALPHABET`.

Codons are handled as symbol codes of the :data:`CODON_ALPHABET`.
The genetic code is given by a :class:`CodonTable`; if omitted, the
:func:`CodonTable.default_table()` is used.

Most functions require complete sites: a :class:`ValueError` is raised
for sites containing gaps.
"""

__name__ = "siteseq.codonsite"
__author__ = "The siteseq developers"

from .differences import *
from .polymorphism import *
from .substitutions import *
