# Importing the modules registers their commands with the command tree; the
# order here is the order shown in help output.
from ..readlist import readlist_cli
from . import config_cli

# Keep this at the bottom
from . import version_cli

del readlist_cli
del config_cli
del version_cli
