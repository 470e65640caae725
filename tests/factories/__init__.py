"""Test data factories using polyfactory."""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.profile import (
    DesignerProfileFactory,
    HomeownerProfileFactory,
    PropertyFactory,
)
from tests.factories.project import (
    ProjectFactory,
    ProjectRequestFactory,
    ProposalFactory,
)

__all__ = [
    "BaseFactory",
    "DesignerProfileFactory",
    "HomeownerProfileFactory",
    "ProjectFactory",
    "ProjectRequestFactory",
    "PropertyFactory",
    "ProposalFactory",
    "generate_uuid",
    "utc_now",
]
