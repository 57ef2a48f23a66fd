# This source code is part of the siteseq package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

from importlib.metadata import version
import siteseq


def test_version():
    """
    Check if version given in the package is correct.
    """
    assert siteseq.__version__ == version("siteseq")
