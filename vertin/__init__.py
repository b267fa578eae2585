__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'vertin'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .resolvers import *
from .arguments import *
from .options import *
from .context import *
from .parser import *
from .commands import *
from .matcher import *
from .runtime import *
from .faults import *
from .diagnostics import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the resolvers
__all__ += resolvers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parameter specs
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser configuration and context
__all__ += options.__all__  # type: ignore[attr-defined]
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser engine
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands and the matcher
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += matcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the runtime
__all__ += runtime.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults and diagnostics
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += diagnostics.__all__  # type: ignore[attr-defined]
