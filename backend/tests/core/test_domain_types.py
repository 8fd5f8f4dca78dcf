"""Domain Types — verifies identity wrappers and persisted enum values.

Tests:
    - NewType wrappers exist and are callable
    - String enums serialize to the labels stored in the database
    - Integer statuses keep the numeric codes of the storefront tables
    - Service and principal signatures carry the identity types
"""

import json
from typing import get_type_hints
from uuid import uuid4

from app.core.domain_types import (
    AccountId, CreatorId, StoreId, PageId,
    AccountRole, SlugState, StoreStatus, SectionStatus, PageStatus,
    ProductStatus, EventType,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert AccountId(uid) == uid
    assert CreatorId(uid) == uid
    assert StoreId(uid) == uid
    assert PageId(uid) == uid


def test_slug_states_are_the_three_lifecycle_labels():
    assert [s.value for s in SlugState] == ["RESERVED", "ACTIVE", "RELEASED"]


def test_account_roles():
    assert {r.value for r in AccountRole} == {"USER", "CREATOR", "ADMIN"}


def test_status_codes_are_numeric():
    assert int(StoreStatus.ACTIVE) == 1
    assert int(SectionStatus.PUBLISHED) == 1
    assert int(SectionStatus.HIDDEN) == 2
    assert int(PageStatus.DRAFT) == 0
    assert int(PageStatus.ARCHIVED) == 2


def test_str_enums_serialize_to_json_without_encoder():
    payload = {"status": ProductStatus.PUBLISHED, "event": EventType.CREATOR_REGISTERED}
    assert json.loads(json.dumps(payload)) == {
        "status": "PUBLISHED", "event": "CREATOR_REGISTERED",
    }


def test_service_signatures_take_identity_types():
    from app.api.dependencies import Principal
    from app.services.store_builder import StoreBuilderService
    from app.services.user_directory import UserDirectory

    hints = get_type_hints(StoreBuilderService.create_page)
    assert hints["account_id"] is AccountId
    assert hints["store_id"] is StoreId
    assert get_type_hints(StoreBuilderService.list_blocks)["page_id"] is PageId
    assert get_type_hints(UserDirectory.delete_account)["account_id"] is AccountId
    assert get_type_hints(Principal)["account_id"] is AccountId
