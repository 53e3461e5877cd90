__title__ = 'clikit'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .utils import Unset
from .faults import *
from .tokenizer import *
from .definition import *
from .parser import *
from .evaluation import *
from .opts import *
from .command import *
from .registry import *
from .resolver import *
from .executor import *
from .handler import *
from .logger import *
from .app import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    "Unset",
)

# Load the exposed API of every module
__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += tokenizer.__all__  # type: ignore[attr-defined]
__all__ += definition.__all__  # type: ignore[attr-defined]
__all__ += parser.__all__  # type: ignore[attr-defined]
__all__ += evaluation.__all__  # type: ignore[attr-defined]
__all__ += opts.__all__  # type: ignore[attr-defined]
__all__ += command.__all__  # type: ignore[attr-defined]
__all__ += registry.__all__  # type: ignore[attr-defined]
__all__ += resolver.__all__  # type: ignore[attr-defined]
__all__ += executor.__all__  # type: ignore[attr-defined]
__all__ += handler.__all__  # type: ignore[attr-defined]
__all__ += logger.__all__  # type: ignore[attr-defined]
__all__ += app.__all__  # type: ignore[attr-defined]
