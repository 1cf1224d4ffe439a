from typing import Final

RLIST_SEMVER: Final = "0.3.0"

COPYRIGHT_NOTICE: Final = """\
License: Apache-2.0 <https://www.apache.org/licenses/LICENSE-2.0>
\
"""
