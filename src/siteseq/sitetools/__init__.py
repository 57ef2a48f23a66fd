# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

"""
This subpackage provides functions for the analysis of single sites
with discrete states, i.e. :class:`Site` objects.

The functions check sites for gaps, unknown states and constancy, count
the symbols in a site and compute measures of variability and the GC
content.
"""

__name__ = "siteseq.sitetools"
__author__ = "The siteseq developers"

from .checks import *
from .composition import *
