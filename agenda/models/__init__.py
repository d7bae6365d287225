# agenda/models/__init__.py
from agenda.db.base import Base  # noqa: F401

from . import user            # noqa: F401
from . import musician        # noqa: F401
from . import unavailability  # noqa: F401
from . import instrument      # noqa: F401
from . import location        # noqa: F401
from . import schedule        # noqa: F401
from . import assignment      # noqa: F401
from . import invitation      # noqa: F401
from . import audit_log       # noqa: F401
