"""Pydantic schemas for request/response validation."""

from .auth import *  # noqa: F403
from .booking import *  # noqa: F403
from .city import *  # noqa: F403
from .common import *  # noqa: F403
from .health import *  # noqa: F403
from .hotel import *  # noqa: F403
from .payment import *  # noqa: F403
from .pricing import *  # noqa: F403
from .review import *  # noqa: F403
from .room_type import *  # noqa: F403
