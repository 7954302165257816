# dealbies/models/__init__.py
# Import all models here so SQLAlchemy registers them into Base.metadata.

from dealbies.models.user import User  # noqa: F401

from dealbies.models.deal import Deal  # noqa: F401
from dealbies.models.coupon import Coupon  # noqa: F401
from dealbies.models.image import Image  # noqa: F401

from dealbies.models.comment import Comment  # noqa: F401
from dealbies.models.vote import Vote  # noqa: F401

from dealbies.models.click_tracking import ClickTracking  # noqa: F401
